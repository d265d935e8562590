"""
Application Service: Image Search

Turns search submissions and "load more" requests into paginated,
deduplicated and cached backend fetches, and fronts the search history.

Usage:
    >>> manager = ImageSearchManager(backend, history_store, log_manager)
    >>> first = await manager.search("dog")                    # page 1
    >>> more = await manager.search("dog", is_paginating=True)  # page 2
    >>> again = await manager.search("dog")                     # cache, no request

Caching policy:
    One entry per query string (case-sensitive, verbatim). ``search`` returns
    only the items that were newly added by the call; callers append them to
    their own list. A cache hit returns the whole accumulated list instead.

Search history policy:
    ``get_search_history()`` excludes the most recent search, which
    ``recent_search()`` returns on its own.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field

from photo_search.domain.entities.image import ImageResult
from photo_search.domain.entities.search_history import SearchHistoryEntry
from photo_search.infrastructure.logger import LogManager
from photo_search.infrastructure.persistence import SearchHistoryStore
from photo_search.infrastructure.sources import ImageSearchBackend
from photo_search.shared.async_utils import KeyedLock
from photo_search.shared.exceptions import InvalidParameterError

from .events import (
    CacheHitEvent,
    HistoryFailEvent,
    SearchExhaustedEvent,
    SearchFailEvent,
    SearchStartEvent,
    SearchSuccessEvent,
)

logger = logging.getLogger(__name__)


@dataclass
class CacheEntry:
    """Accumulated state of one query."""

    items: list[ImageResult] = field(default_factory=list)
    next_page: int = 1
    has_next: bool = True

    @property
    def ids(self) -> set[str]:
        return {item.id for item in self.items}


class ImageSearchManager:
    """
    Query-scoped image cache and pagination coordinator.

    Calls for the same query are serialized by a per-query lock, so an
    overlapping "load more" waits for the in-flight fetch and then sees its
    result. Different queries proceed independently.

    Architecture:
        Presentation → Application (here) → Infrastructure (backend, history store, log sinks)
    """

    DEFAULT_PAGE_SIZE = 20

    def __init__(
        self,
        backend: ImageSearchBackend,
        history_store: SearchHistoryStore,
        log_manager: LogManager,
        page_size: int = DEFAULT_PAGE_SIZE,
    ) -> None:
        """
        Args:
            backend: Remote photo catalog
            history_store: Persistence for past searches
            log_manager: Event sink dispatcher
            page_size: Items requested per page

        Raises:
            InvalidParameterError: If page_size is not a positive integer
        """
        if isinstance(page_size, bool) or not isinstance(page_size, int) or page_size <= 0:
            raise InvalidParameterError("page_size", page_size, "a positive integer")
        self._backend = backend
        self._history_store = history_store
        self._log_manager = log_manager
        self._page_size = page_size
        self._cache: dict[str, CacheEntry] = {}
        self._locks = KeyedLock()

    @property
    def page_size(self) -> int:
        return self._page_size

    # ------------------------------------------------------------------
    # Search
    # ------------------------------------------------------------------

    async def search(
        self,
        query: str,
        is_paginating: bool = False,
        force_refresh: bool = False,
    ) -> list[ImageResult]:
        """
        Search images for ``query``.

        - Not paginating, not forced and cached: returns the accumulated
          items without a network call.
        - ``force_refresh``: ignores the cached entry and fetches page 1; the
          old entry is replaced once the fetch succeeds.
        - Exhausted query: returns ``[]`` without a network call.
        - Otherwise fetches the next page and returns only the new items.

        Args:
            query: Search text, used verbatim as cache key
            is_paginating: True to request the next page
            force_refresh: True to discard cached state before fetching

        Returns:
            Newly added images (or the cached list on a cache hit)

        Raises:
            Whatever the backend raises, unchanged, after logging it
        """
        async with self._locks.hold(query):
            return await self._search_locked(query, is_paginating, force_refresh)

    async def _search_locked(
        self,
        query: str,
        is_paginating: bool,
        force_refresh: bool,
    ) -> list[ImageResult]:
        cached = self._cache.get(query)

        if not is_paginating and not force_refresh and cached is not None:
            self._log_manager.track_event(CacheHitEvent(query=query))
            return list(cached.items)

        # Logical invalidation: the stored entry is only replaced after a
        # successful fetch, so a failed refresh keeps the last good state.
        entry = None if force_refresh else cached

        if entry is not None and not entry.has_next:
            self._log_manager.track_event(SearchExhaustedEvent(query=query, page=entry.next_page))
            return []

        page = entry.next_page if entry is not None else 1
        self._log_manager.track_event(SearchStartEvent(query=query, page=page))

        try:
            response = await self._backend.search_images(query, page, self._page_size)
        except Exception as e:
            self._log_manager.track_event(SearchFailEvent(query=query, page=page, error_text=repr(e)))
            raise

        known_ids = entry.ids if entry is not None else set()
        added = self._deduplicate(response.items, known_ids)

        has_next = response.page.has_next
        self._cache[query] = CacheEntry(
            items=(entry.items if entry is not None else []) + added,
            next_page=page + 1 if has_next else page,
            has_next=has_next,
        )

        if len(added) < len(response.items):
            logger.debug(
                f"Dropped {len(response.items) - len(added)} duplicate images "
                f"for {query!r} page {page}"
            )

        self._log_manager.track_event(SearchSuccessEvent(query=query, page=page))
        return added

    @staticmethod
    def _deduplicate(items: Iterable[ImageResult], known_ids: set[str]) -> list[ImageResult]:
        """
        Keep the first occurrence of each id not already in ``known_ids``.

        The backend repeats ids both within a page and across pages.
        """
        seen = set(known_ids)
        unique: list[ImageResult] = []
        for item in items:
            if item.id in seen:
                continue
            seen.add(item.id)
            unique.append(item)
        return unique

    # ------------------------------------------------------------------
    # Read-only cache views
    # ------------------------------------------------------------------

    def cached_items(self, query: str) -> list[ImageResult]:
        entry = self._cache.get(query)
        return list(entry.items) if entry is not None else []

    def has_more(self, query: str) -> bool:
        """Whether another page can be requested (True for unknown queries)."""
        entry = self._cache.get(query)
        return entry.has_next if entry is not None else True

    def find_image(self, image_id: str) -> ImageResult | None:
        for entry in self._cache.values():
            for item in entry.items:
                if item.id == image_id:
                    return item
        return None

    # ------------------------------------------------------------------
    # Search history
    # ------------------------------------------------------------------

    def add_recent_search(self, search: SearchHistoryEntry) -> None:
        """Persist a committed search. Store errors are logged and re-raised."""
        try:
            self._history_store.add_recent_search(search)
        except Exception as e:
            self._log_manager.track_event(HistoryFailEvent(operation="add_recent_search", error_text=repr(e)))
            raise

    def get_search_history(self) -> list[SearchHistoryEntry]:
        """Stored history without the most recent search."""
        try:
            history = self._history_store.get_search_history()
            recent = self._history_store.get_most_recent_search()
        except Exception as e:
            self._log_manager.track_event(HistoryFailEvent(operation="get_search_history", error_text=repr(e)))
            raise
        if recent is None:
            return history
        return [entry for entry in history if entry != recent]

    def recent_search(self) -> SearchHistoryEntry | None:
        """The most recent search, or None if nothing was searched yet."""
        try:
            return self._history_store.get_most_recent_search()
        except Exception as e:
            self._log_manager.track_event(HistoryFailEvent(operation="recent_search", error_text=repr(e)))
            raise
