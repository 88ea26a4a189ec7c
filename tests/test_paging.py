# tests/test_paging.py
import pytest

from threadline.core.errors import ValidationError
from threadline.models import User
from threadline.repositories.paging import _check_page, escape_like, search_filter


def test_escape_like_neutralises_wildcards() -> None:
    assert escape_like("50%_off\\") == "50\\%\\_off\\\\"
    assert escape_like("plain") == "plain"


@pytest.mark.parametrize("term", ["", "   "])
def test_blank_search_produces_no_filter(term: str) -> None:
    assert search_filter([User.username, User.name], term) is None


def test_search_filter_matches_any_column() -> None:
    clause = search_filter([User.username, User.name], " ali ")

    compiled = clause.compile()
    assert "users.username" in str(compiled)
    assert "users.name" in str(compiled)
    assert set(compiled.params.values()) == {"%ali%"}


def test_check_page_returns_skip() -> None:
    assert _check_page(1, 20, "desc") == 0
    assert _check_page(3, 10, "asc") == 20


@pytest.mark.parametrize(
    ("page_number", "page_size", "sort_by", "message"),
    [
        (0, 20, "desc", "page_number must be at least 1"),
        (1, 0, "desc", "page_size must be at least 1"),
        (1, 20, "sideways", "sort_by must be 'asc' or 'desc'"),
    ],
)
def test_check_page_rejects_bad_input(
    page_number: int, page_size: int, sort_by: str, message: str
) -> None:
    with pytest.raises(ValidationError, match=message):
        _check_page(page_number, page_size, sort_by)
