"""
Domain Entity: Paged search responses.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from .image import ImageResult


@dataclass(frozen=True)
class PageInfo:
    """Pagination metadata reported by the backend (1-based pages)."""

    page: int
    per_page: int
    total: int
    pages: int

    @property
    def has_next(self) -> bool:
        return self.page < self.pages


@dataclass
class SearchResponse:
    """One page of results plus its pagination metadata."""

    page: PageInfo
    items: list[ImageResult] = field(default_factory=list)
