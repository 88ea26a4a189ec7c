# tests/services/test_communities.py
"""Tests for community service operations."""

import pytest
from sqlalchemy import func, select

from threadline.core.errors import AlreadyMemberError, NotFoundError
from threadline.models import CommunityMember, Thread
from threadline.services import communities as community_service
from threadline.services import threads as thread_service
from threadline.services import users as user_service


async def _member_ids(community_id: str) -> list[str]:
    details = await community_service.fetch_community_details(community_id)
    assert details is not None
    return [member.id for member in details.members]


async def _community_ids(user_id: str) -> list[str]:
    profile = await user_service.fetch_user(user_id)
    return [community.id for community in profile.communities]


@pytest.mark.asyncio
async def test_create_community_enrols_creator(make_user) -> None:
    """The creator owns the community and is recorded as a member."""
    await make_user("user_alice", name="Alice")

    created = await community_service.create_community(
        id="org_1",
        name="Gardeners",
        username="gardeners",
        image="garden.png",
        bio="We grow things",
        created_by_id="user_alice",
    )

    assert created.id == "org_1"
    assert created.name == "Gardeners"
    details = await community_service.fetch_community_details("org_1")
    assert details is not None
    assert details.created_by.id == "user_alice"
    assert details.created_by.name == "Alice"
    assert await _member_ids("org_1") == ["user_alice"]
    assert await _community_ids("user_alice") == ["org_1"]


@pytest.mark.asyncio
async def test_create_community_unknown_creator(database) -> None:
    with pytest.raises(NotFoundError) as exc_info:
        await community_service.create_community(
            id="org_1",
            name="Nobody's",
            username="nobody",
            image=None,
            bio=None,
            created_by_id="missing",
        )

    assert str(exc_info.value) == "Failed creating community: User not found"
    assert await community_service.fetch_community_details("org_1") is None


@pytest.mark.asyncio
async def test_add_member_links_both_sides(make_user, make_community) -> None:
    """Membership is visible from the community and from the user."""
    await make_user("user_alice")
    await make_user("user_bob")
    community_id = await make_community("user_alice")

    await community_service.add_member_to_community(community_id, "user_bob")

    assert "user_bob" in await _member_ids(community_id)
    assert community_id in await _community_ids("user_bob")


@pytest.mark.asyncio
async def test_add_member_twice_raises_already_member(make_user, make_community) -> None:
    await make_user("user_alice")
    await make_user("user_bob")
    community_id = await make_community("user_alice")
    await community_service.add_member_to_community(community_id, "user_bob")

    with pytest.raises(AlreadyMemberError) as exc_info:
        await community_service.add_member_to_community(community_id, "user_bob")

    assert str(exc_info.value) == (
        "Failed add member to community: User is already a member of the community"
    )
    assert (await _member_ids(community_id)).count("user_bob") == 1


@pytest.mark.asyncio
@pytest.mark.parametrize(
    ("community_id", "member_id", "message"),
    [
        ("missing", "user_alice", "Community not found"),
        ("known", "missing", "User not found"),
    ],
)
async def test_add_member_missing_party(make_user, make_community, community_id, member_id, message) -> None:
    await make_user("user_alice")
    await make_community("user_alice", community_id="known")

    with pytest.raises(NotFoundError) as exc_info:
        await community_service.add_member_to_community(community_id, member_id)

    assert str(exc_info.value).endswith(message)


@pytest.mark.asyncio
async def test_remove_then_add_restores_membership(make_user, make_community) -> None:
    """Removal clears both sides before returning; re-adding restores them."""
    await make_user("user_alice")
    await make_user("user_bob")
    community_id = await make_community("user_alice")
    await community_service.add_member_to_community(community_id, "user_bob")

    result = await community_service.remove_user_from_community("user_bob", community_id)

    assert result == {"success": True}
    assert "user_bob" not in await _member_ids(community_id)
    assert await _community_ids("user_bob") == []

    await community_service.add_member_to_community(community_id, "user_bob")
    assert "user_bob" in await _member_ids(community_id)
    assert await _community_ids("user_bob") == [community_id]


@pytest.mark.asyncio
async def test_remove_user_missing_community(make_user) -> None:
    await make_user("user_alice")

    with pytest.raises(NotFoundError) as exc_info:
        await community_service.remove_user_from_community("user_alice", "missing")

    assert str(exc_info.value) == "Failed remove user from community: Community not found"


@pytest.mark.asyncio
async def test_update_community_info(make_user, make_community) -> None:
    await make_user("user_alice")
    community_id = await make_community("user_alice", bio="unchanged")

    updated = await community_service.update_community_info(
        community_id=community_id,
        name="Renamed",
        username="renamed",
        image="new.png",
    )

    assert updated.name == "Renamed"
    assert updated.username == "renamed"
    assert updated.image == "new.png"
    assert updated.bio == "unchanged"


@pytest.mark.asyncio
async def test_update_community_info_missing(database) -> None:
    with pytest.raises(NotFoundError) as exc_info:
        await community_service.update_community_info(
            community_id="missing", name="x", username="x", image=None
        )

    assert str(exc_info.value) == "Failed to update community info: Community not found"


@pytest.mark.asyncio
async def test_delete_community_cascades(database, make_user, make_community, make_thread) -> None:
    """Deleting a community removes its threads, their replies and all memberships."""
    await make_user("user_alice")
    await make_user("user_bob")
    community_id = await make_community("user_alice")
    other_community = await make_community("user_alice")
    await community_service.add_member_to_community(community_id, "user_bob")
    await community_service.add_member_to_community(other_community, "user_bob")

    doomed = await make_thread("user_alice", "community post", community_id=community_id)
    reply = await thread_service.add_comment_to_thread(
        thread_id=doomed, comment_text="a reply", user_id="user_bob", path="/"
    )
    survivor = await make_thread("user_bob", "personal post")

    deleted = await community_service.delete_community(community_id)

    assert deleted is not None
    assert deleted.id == community_id
    assert await community_service.fetch_community_details(community_id) is None
    assert await thread_service.fetch_thread_by_id(doomed) is None
    assert await thread_service.fetch_thread_by_id(reply) is None
    assert await thread_service.fetch_thread_by_id(survivor) is not None
    assert await _community_ids("user_alice") == [other_community]
    assert await _community_ids("user_bob") == [other_community]

    async with database.session() as session:
        memberships = await session.scalar(select(func.count()).select_from(CommunityMember))
        threads = await session.scalar(select(func.count()).select_from(Thread))
    assert memberships == 2
    assert threads == 1


@pytest.mark.asyncio
async def test_delete_community_missing_returns_none(database) -> None:
    assert await community_service.delete_community("missing") is None


@pytest.mark.asyncio
async def test_fetch_community_posts(make_user, make_community, make_thread) -> None:
    await make_user("user_alice", name="Alice")
    await make_user("user_bob", image="bob.png")
    community_id = await make_community("user_alice")
    thread_id = await make_thread("user_alice", "welcome everyone", community_id=community_id)
    await make_thread("user_alice", "not in the community")
    await thread_service.add_comment_to_thread(
        thread_id=thread_id, comment_text="hello!", user_id="user_bob", path="/"
    )

    posts = await community_service.fetch_community_posts(community_id)

    assert posts is not None
    assert [thread.id for thread in posts.threads] == [thread_id]
    thread = posts.threads[0]
    assert thread.author.name == "Alice"
    assert thread.community is not None and thread.community.id == community_id
    assert [child.author.id for child in thread.children] == ["user_bob"]
    assert thread.children[0].author.image == "bob.png"


@pytest.mark.asyncio
async def test_fetch_community_posts_missing(database) -> None:
    assert await community_service.fetch_community_posts("missing") is None


@pytest.mark.asyncio
async def test_fetch_communities_search_and_members(make_user, make_community) -> None:
    await make_user("user_alice")
    await make_user("user_bob")
    gardeners = await make_community("user_alice", name="Gardeners Guild", username="greenthumbs")
    await make_community("user_alice", name="Chess Club", username="chess")
    await community_service.add_member_to_community(gardeners, "user_bob")

    by_name = await community_service.fetch_communities(search_string="GUILD")
    by_handle = await community_service.fetch_communities(search_string="thumb")

    assert [community.id for community in by_name.communities] == [gardeners]
    assert [community.id for community in by_handle.communities] == [gardeners]
    members = {member.id for member in by_name.communities[0].members}
    assert members == {"user_alice", "user_bob"}


@pytest.mark.asyncio
async def test_fetch_communities_pagination(make_user, make_community) -> None:
    await make_user("user_alice")
    created = [await make_community("user_alice") for _ in range(5)]

    pages = [
        await community_service.fetch_communities(page_number=number, page_size=2)
        for number in (1, 2, 3)
    ]

    assert [page.is_next for page in pages] == [True, True, False]
    assert [len(page.communities) for page in pages] == [2, 2, 1]
    listed = [community.id for page in pages for community in page.communities]
    assert listed == list(reversed(created))

