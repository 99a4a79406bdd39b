"""Page requests and paged results for list endpoints."""

import math
from dataclasses import dataclass
from typing import Any

from storefront.shared.errors import PaginationErrors

MAX_PAGE_SIZE = 100


def validate_paging(page_number: int, page_size: int) -> None:
    if page_number is None or page_number < 1:
        raise PaginationErrors.INVALID_PAGE_NUMBER.to_exception()
    if page_size is None or page_size < 1 or page_size > MAX_PAGE_SIZE:
        raise PaginationErrors.INVALID_PAGE_SIZE.to_exception()


@dataclass(frozen=True)
class Page:
    items: list[Any]
    total_count: int
    page_number: int
    page_size: int

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total_count / self.page_size) if self.total_count else 0

    @property
    def has_next(self) -> bool:
        return self.page_number < self.total_pages

    @property
    def has_previous(self) -> bool:
        return self.page_number > 1

    def to_dict(self) -> dict:
        return {
            "items": self.items,
            "total_count": self.total_count,
            "page_number": self.page_number,
            "page_size": self.page_size,
            "total_pages": self.total_pages,
            "has_next": self.has_next,
            "has_previous": self.has_previous,
        }


def paginate(query, page_number: int, page_size: int, serialize) -> Page:
    """Run ``query`` for one page and map each record through ``serialize``."""
    validate_paging(page_number, page_size)
    result = query.offset((page_number - 1) * page_size).limit(page_size).all()
    return Page(
        items=[serialize(item) for item in result.items],
        total_count=result.total,
        page_number=page_number,
        page_size=page_size,
    )
