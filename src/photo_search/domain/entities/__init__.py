"""
Domain Entities

Core business objects for photo search.
"""

from __future__ import annotations

from .image import ImageResult, ImageSize, ImageSource
from .page import PageInfo, SearchResponse
from .search_history import SearchHistoryEntry

__all__ = [
    # Image entities
    "ImageResult",
    "ImageSize",
    "ImageSource",
    # Pagination
    "PageInfo",
    "SearchResponse",
    # Search history
    "SearchHistoryEntry",
]
