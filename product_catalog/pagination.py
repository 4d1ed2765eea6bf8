"""
Pagination over resolved current-state lists.

Paging is applied after delete markers have been filtered out, so page sizes
and totals always count visible records only.
"""

from dataclasses import dataclass, field
from typing import Any, Callable, Generic, List, Optional, TypeVar
import math

from .config import get_config
from .errors import ValidationError


T = TypeVar('T')


@dataclass
class Page(Generic[T]):
    """One page of results"""
    items: List[T] = field(default_factory=list)
    page: int = 0
    size: int = 20
    total: int = 0

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total / self.size) if self.size else 0

    def map(self, func: Callable[[T], Any]) -> 'Page':
        return Page(items=[func(item) for item in self.items],
                    page=self.page, size=self.size, total=self.total)

    def to_dict(self, item_serializer: Callable[[T], Any] = lambda item: item) -> dict:
        return {
            "items": [item_serializer(item) for item in self.items],
            "page": self.page,
            "size": self.size,
            "total": self.total,
            "total_pages": self.total_pages,
        }


def paginate(items: List[T], page: int = 0, size: Optional[int] = None) -> Page[T]:
    """
    Slice a fully resolved list into a page.

    Args:
        items: Visible records, already filtered and ordered
        page: Zero-based page number
        size: Page size; defaults to the configured page size and is capped
            at the configured maximum
    """
    config = get_config()
    if size is None:
        size = config.default_page_size
    if page < 0:
        raise ValidationError("Page number must not be negative")
    if size < 1:
        raise ValidationError("Page size must be at least 1")
    size = min(size, config.max_page_size)

    start = page * size
    return Page(items=list(items[start:start + size]), page=page, size=size, total=len(items))
