from __future__ import annotations

from typing import Sequence, Tuple, TypeVar

from ..models.people import PagedResponse

T = TypeVar("T")


def normalize_page(page: int, page_size: int, *, max_page_size: int = 100) -> Tuple[int, int]:
    """Clamp to page >= 1 and 1 <= page_size <= max_page_size."""
    return max(1, int(page)), min(max(1, int(page_size)), max_page_size)


def build_page(items: Sequence[T], page: int, page_size: int, total_count: int) -> PagedResponse[T]:
    total_pages = (total_count + page_size - 1) // page_size if total_count else 0
    return PagedResponse(
        data=list(items),
        page=page,
        page_size=page_size,
        total_count=total_count,
        total_pages=total_pages,
        has_previous_page=page > 1,
        has_next_page=page < total_pages,
    )


def paginate(items: Sequence[T], page: int, page_size: int) -> PagedResponse[T]:
    """Slice an already ordered sequence into one page."""
    start = (page - 1) * page_size
    return build_page(items[start : start + page_size], page, page_size, len(items))


def empty_page(page: int, page_size: int) -> PagedResponse[T]:
    return build_page([], page, page_size, 0)


__all__ = ["build_page", "empty_page", "normalize_page", "paginate"]
