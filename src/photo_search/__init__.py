"""
Photo Search - Keyword photo search with cached, deduplicated pagination.

Usage:
    from photo_search import FlickrClient, ImageSearchManager, LogManager
    from photo_search import InMemorySearchHistoryStore

    async with FlickrClient(api_key="...") as backend:
        manager = ImageSearchManager(backend, InMemorySearchHistoryStore(), LogManager())
        first_page = await manager.search("dog")
        next_page = await manager.search("dog", is_paginating=True)

Features:
    - Per-query result cache with next-page cursor
    - Deduplication of repeated backend ids within and across pages
    - Forced refresh of a query's first page
    - Persisted search history with the most recent search kept apart
    - MCP server exposing search, load-more and history tools
"""

from .application.image_search import ImageSearchManager
from .domain import ImageResult, ImageSize, ImageSource, PageInfo, SearchHistoryEntry, SearchResponse
from .infrastructure.logger import ConsoleLogService, LogManager, LogType
from .infrastructure.persistence import InMemorySearchHistoryStore, JsonSearchHistoryStore
from .infrastructure.sources import FlickrClient, ImageSearchBackend

__version__ = "0.1.0"

__all__ = [
    # Core
    "ImageSearchManager",
    # Entities
    "ImageResult",
    "ImageSize",
    "ImageSource",
    "PageInfo",
    "SearchResponse",
    "SearchHistoryEntry",
    # Collaborators
    "ImageSearchBackend",
    "FlickrClient",
    "InMemorySearchHistoryStore",
    "JsonSearchHistoryStore",
    "LogManager",
    "LogType",
    "ConsoleLogService",
]
