"""Search and pagination helpers shared by the list queries."""
from __future__ import annotations

from collections.abc import Sequence
from typing import Any, Literal, TypeVar

from sqlalchemy import ColumnElement, Select, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import InstrumentedAttribute
from sqlalchemy.sql.base import ExecutableOption

from threadline.core.errors import ValidationError

__all__ = ["SortOrder", "escape_like", "paginate", "search_filter"]

T = TypeVar("T")
SortOrder = Literal["asc", "desc"]


def escape_like(value: str, escape: str = "\\") -> str:
    """Escape LIKE wildcards so the value matches literally."""
    return (
        value.replace(escape, escape * 2)
        .replace("%", f"{escape}%")
        .replace("_", f"{escape}_")
    )


def search_filter(
    columns: Sequence[InstrumentedAttribute[Any]],
    search_string: str,
) -> ColumnElement[bool] | None:
    """Return a case-insensitive substring match over any of ``columns``.

    Blank search strings produce no filter.
    """
    term = search_string.strip()
    if not term:
        return None
    pattern = f"%{escape_like(term)}%"
    return or_(*(column.ilike(pattern, escape="\\") for column in columns))


def _check_page(page_number: int, page_size: int, sort_by: str) -> int:
    if page_number < 1:
        raise ValidationError("page_number must be at least 1")
    if page_size < 1:
        raise ValidationError("page_size must be at least 1")
    if sort_by not in ("asc", "desc"):
        raise ValidationError(f"sort_by must be 'asc' or 'desc', got {sort_by!r}")
    return (page_number - 1) * page_size


async def paginate(
    session: AsyncSession,
    stmt: Select[tuple[T]],
    *,
    sort_column: InstrumentedAttribute[Any],
    page_number: int,
    page_size: int,
    sort_by: SortOrder = "desc",
    options: Sequence[ExecutableOption] = (),
) -> tuple[list[T], bool]:
    """Run a skip/limit page of ``stmt`` and report whether more rows exist.

    Args:
        session: Active session.
        stmt: Filtered select without ordering or loader options.
        sort_column: Column used for ordering.
        page_number: 1-based page index.
        page_size: Rows per page.
        sort_by: ``"asc"`` or ``"desc"``.
        options: Loader options applied to the page query only.

    Returns:
        The page rows and ``is_next``, true when the total number of matching
        rows exceeds ``skip + len(rows)``.
    """
    skip = _check_page(page_number, page_size, sort_by)

    total = await session.scalar(select(func.count()).select_from(stmt.subquery()))

    # Primary key breaks ties between rows created in the same instant.
    tiebreak = sort_column.class_.id
    if sort_by == "asc":
        order = (sort_column.asc(), tiebreak.asc())
    else:
        order = (sort_column.desc(), tiebreak.desc())
    page_stmt = stmt.order_by(*order).offset(skip).limit(page_size).options(*options)
    rows = list((await session.scalars(page_stmt)).unique())

    is_next = (total or 0) > skip + len(rows)
    return rows, is_next
