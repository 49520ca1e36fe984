"""
Offset pagination over a fully sorted photo sequence.

The cursor is the decimal offset of the first item of a page. Nothing is
kept between requests: every page is cut from a fresh listing, which is
fine while events hold a handful of photos.
"""

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Generic, TypeVar

T = TypeVar("T")

DEFAULT_LIMIT = 20
MIN_LIMIT = 1
MAX_LIMIT = 100


@dataclass(frozen=True)
class Page(Generic[T]):
    items: list[T]
    next_cursor: str | None
    total: int


def _parse_int(raw: object) -> int | None:
    if raw is None:
        return None
    try:
        return int(str(raw).strip())
    except ValueError:
        return None


def clamp_limit(raw: object) -> int:
    value = _parse_int(raw)
    if value is None:
        return DEFAULT_LIMIT
    return max(MIN_LIMIT, min(MAX_LIMIT, value))


def resolve_offset(
    limit: int,
    cursor: object = None,
    offset: object = None,
    page: object = None,
) -> int:
    """
    Work out the start offset. A cursor wins over an explicit offset, which
    wins over a 1-based page number.
    """
    if cursor not in (None, ""):
        return max(0, _parse_int(cursor) or 0)
    if offset not in (None, ""):
        return max(0, _parse_int(offset) or 0)
    if page not in (None, ""):
        return (max(1, _parse_int(page) or 1) - 1) * limit
    return 0


def paginate(
    items: Sequence[T],
    limit: object = None,
    cursor: object = None,
    offset: object = None,
    page: object = None,
) -> Page[T]:
    size = clamp_limit(limit)
    start = resolve_offset(size, cursor=cursor, offset=offset, page=page)
    total = len(items)
    chunk = list(items[start : start + size])
    end = start + size
    next_cursor = str(end) if end < total else None
    return Page(items=chunk, next_cursor=next_cursor, total=total)
