from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Generic, Optional, Sequence, TypeVar

from ..core.constants import DEFAULT_PAGE, DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE

T = TypeVar("T")


@dataclass(frozen=True)
class PageRequest:
    page: int
    limit: int

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit

    @classmethod
    def from_args(cls, page: Optional[str], limit: Optional[str]) -> "PageRequest":
        def _as_int(value, default: int) -> int:
            try:
                parsed = int(value)
            except (TypeError, ValueError):
                return default
            return parsed if parsed > 0 else default

        return cls(
            page=_as_int(page, DEFAULT_PAGE),
            limit=min(_as_int(limit, DEFAULT_PAGE_SIZE), MAX_PAGE_SIZE),
        )


@dataclass(frozen=True)
class Page(Generic[T]):
    items: Sequence[T]
    total: int
    request: PageRequest

    def pagination(self) -> dict:
        total_pages = math.ceil(self.total / self.request.limit) if self.request.limit else 0
        return {
            "currentPage": self.request.page,
            "totalPages": total_pages,
            "total": self.total,
            "limit": self.request.limit,
            "hasNextPage": self.request.page < total_pages,
            "hasPrevPage": self.request.page > 1,
        }
