"""
Domain Layer - Pure business objects, no I/O.
"""

from .entities import (
    ImageResult,
    ImageSize,
    ImageSource,
    PageInfo,
    SearchHistoryEntry,
    SearchResponse,
)

__all__ = [
    "ImageResult",
    "ImageSize",
    "ImageSource",
    "PageInfo",
    "SearchResponse",
    "SearchHistoryEntry",
]
