"""
Local persistence for search history.
"""

from .search_history import (
    InMemorySearchHistoryStore,
    JsonSearchHistoryStore,
    SearchHistoryStore,
)

__all__ = [
    "InMemorySearchHistoryStore",
    "JsonSearchHistoryStore",
    "SearchHistoryStore",
]
