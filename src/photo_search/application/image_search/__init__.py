"""
Application Layer: Image Search

Public API for the image search module.
"""

from .events import (
    CacheHitEvent,
    HistoryFailEvent,
    SearchEvent,
    SearchExhaustedEvent,
    SearchFailEvent,
    SearchStartEvent,
    SearchSuccessEvent,
)
from .service import CacheEntry, ImageSearchManager

__all__ = [
    "ImageSearchManager",
    "CacheEntry",
    "SearchEvent",
    "SearchStartEvent",
    "SearchSuccessEvent",
    "SearchFailEvent",
    "CacheHitEvent",
    "SearchExhaustedEvent",
    "HistoryFailEvent",
]
