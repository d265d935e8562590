"""
Tests for ImageSearchManager - caching, pagination, deduplication and history.
"""

import asyncio
import copy
from datetime import UTC, datetime, timedelta

import pytest

from photo_search.application.image_search import ImageSearchManager
from photo_search.application.image_search.events import (
    CacheHitEvent,
    HistoryFailEvent,
    SearchExhaustedEvent,
    SearchFailEvent,
    SearchStartEvent,
    SearchSuccessEvent,
)
from photo_search.domain.entities.search_history import SearchHistoryEntry
from photo_search.infrastructure.logger import LogManager, LogType
from photo_search.shared.exceptions import (
    InvalidParameterError,
    NetworkError,
    PersistenceError,
)


def ids(items):
    return [item.id for item in items]


# ============================================================
# Construction
# ============================================================


class TestConstruction:
    def test_default_page_size(self, backend, history_store, log_manager):
        manager = ImageSearchManager(backend, history_store, log_manager)
        assert manager.page_size == 20

    @pytest.mark.parametrize("page_size", [0, -1, "20", 2.5, True])
    def test_invalid_page_size(self, backend, history_store, log_manager, page_size):
        with pytest.raises(InvalidParameterError):
            ImageSearchManager(backend, history_store, log_manager, page_size=page_size)

    async def test_page_size_is_forwarded(self, manager, backend):
        await manager.search("cat")
        assert backend.calls == [("cat", 1, 3)]


# ============================================================
# Cache hits
# ============================================================


class TestCacheHit:
    async def test_second_search_served_from_cache(self, manager, backend):
        first = await manager.search("cat")
        second = await manager.search("cat")

        assert len(backend.calls) == 1
        assert ids(first) == ids(second)

    async def test_cache_hit_returns_all_accumulated_items(self, manager, backend):
        await manager.search("cat")
        await manager.search("cat", is_paginating=True)

        cached = await manager.search("cat")

        assert len(backend.calls) == 2
        assert ids(cached) == [f"cat-p1-{i}" for i in range(3)] + [f"cat-p2-{i}" for i in range(3)]

    async def test_cache_hit_emits_single_event(self, manager, spy_log):
        await manager.search("cat")
        spy_log.events.clear()

        await manager.search("cat")

        assert spy_log.events == [CacheHitEvent(query="cat")]

    async def test_cache_hit_on_exhausted_query(self, manager, backend):
        backend.pages = 1
        await manager.search("cat")

        cached = await manager.search("cat")

        assert len(cached) == 3
        assert len(backend.calls) == 1

    async def test_returned_list_is_a_copy(self, manager):
        await manager.search("cat")
        cached = await manager.search("cat")
        cached.clear()

        assert len(await manager.search("cat")) == 3

    async def test_queries_are_case_sensitive(self, manager, backend):
        await manager.search("Cat")
        await manager.search("cat")

        assert backend.pages_requested("Cat") == [1]
        assert backend.pages_requested("cat") == [1]


# ============================================================
# Pagination
# ============================================================


class TestPagination:
    async def test_dog_scenario(self, backend, history_store, log_manager):
        backend.pages = 3
        manager = ImageSearchManager(backend, history_store, log_manager, page_size=20)

        first = await manager.search("dog", False, False)
        assert ids(first) == [f"dog-p1-{i}" for i in range(20)]

        second = await manager.search("dog", True, False)
        assert ids(second) == [f"dog-p2-{i}" for i in range(20)]

        third = await manager.search("dog", True, False)
        assert ids(third) == [f"dog-p3-{i}" for i in range(20)]
        assert manager.has_more("dog") is False

        fourth = await manager.search("dog", True, False)
        assert fourth == []
        assert backend.pages_requested("dog") == [1, 2, 3]

    async def test_paginating_first_call_fetches_page_one(self, manager, backend):
        items = await manager.search("cat", is_paginating=True)

        assert backend.pages_requested("cat") == [1]
        assert len(items) == 3

    async def test_pages_accumulate_without_duplicates(self, manager, backend):
        collected = []
        for _ in range(backend.pages):
            collected += await manager.search("cat", is_paginating=True)

        assert len(collected) == backend.pages * manager.page_size
        assert len(set(ids(collected))) == len(collected)
        assert ids(manager.cached_items("cat")) == ids(collected)

    async def test_exhausted_query_makes_no_request(self, manager, backend, spy_log):
        backend.pages = 1
        await manager.search("cat")
        spy_log.events.clear()

        result = await manager.search("cat", is_paginating=True)

        assert result == []
        assert len(backend.calls) == 1
        assert spy_log.events == [SearchExhaustedEvent(query="cat", page=1)]
        assert spy_log.events[0].log_type == LogType.INFO

    async def test_cursor_stays_on_last_page(self, manager, backend):
        backend.pages = 2
        await manager.search("cat")
        await manager.search("cat", is_paginating=True)

        entry = manager._cache["cat"]
        assert entry.next_page == 2
        assert entry.has_next is False

    async def test_fetch_emits_start_and_success(self, manager, spy_log):
        await manager.search("cat")
        await manager.search("cat", is_paginating=True)

        assert spy_log.events == [
            SearchStartEvent(query="cat", page=1),
            SearchSuccessEvent(query="cat", page=1),
            SearchStartEvent(query="cat", page=2),
            SearchSuccessEvent(query="cat", page=2),
        ]

    async def test_has_more_unknown_query(self, manager):
        assert manager.has_more("never searched") is True


# ============================================================
# Force refresh
# ============================================================


class TestForceRefresh:
    async def test_refresh_always_hits_backend(self, manager, backend):
        await manager.search("cat")
        await manager.search("cat", force_refresh=True)
        await manager.search("cat", force_refresh=True)

        assert backend.pages_requested("cat") == [1, 1, 1]

    async def test_refresh_resets_accumulated_items(self, manager, backend):
        await manager.search("cat")
        await manager.search("cat", is_paginating=True)
        backend.page_ids[("cat", 1)] = ["fresh-1", "fresh-2"]

        refreshed = await manager.search("cat", force_refresh=True)

        assert ids(refreshed) == ["fresh-1", "fresh-2"]
        assert ids(manager.cached_items("cat")) == ["fresh-1", "fresh-2"]
        assert manager._cache["cat"].next_page == 2

    async def test_refresh_returns_items_already_cached_before(self, manager):
        before = await manager.search("cat")

        refreshed = await manager.search("cat", force_refresh=True)

        assert ids(refreshed) == ids(before)

    async def test_refresh_of_exhausted_query_fetches_again(self, manager, backend):
        backend.pages = 1
        await manager.search("cat")

        refreshed = await manager.search("cat", force_refresh=True)

        assert len(refreshed) == 3
        assert backend.pages_requested("cat") == [1, 1]

    async def test_refresh_while_paginating_restarts_at_page_one(self, manager, backend):
        await manager.search("cat")
        await manager.search("cat", is_paginating=True)

        await manager.search("cat", is_paginating=True, force_refresh=True)

        assert backend.pages_requested("cat") == [1, 2, 1]

    async def test_failed_refresh_keeps_previous_entry(self, manager, backend):
        await manager.search("cat")
        await manager.search("cat", is_paginating=True)
        before = copy.deepcopy(manager._cache["cat"])
        backend.failures[("cat", 1)] = NetworkError("offline")

        with pytest.raises(NetworkError):
            await manager.search("cat", force_refresh=True)

        assert manager._cache["cat"] == before
        assert len(await manager.search("cat")) == 6


# ============================================================
# Deduplication
# ============================================================


class TestDeduplication:
    async def test_duplicates_within_page_are_dropped(self, manager, backend):
        backend.page_ids[("cat", 1)] = ["a", "b", "a", "c", "b"]

        items = await manager.search("cat")

        assert ids(items) == ["a", "b", "c"]

    async def test_duplicates_across_pages_are_dropped(self, manager, backend):
        backend.page_ids[("cat", 1)] = ["a", "b", "c"]
        backend.page_ids[("cat", 2)] = ["c", "d", "a"]

        await manager.search("cat")
        added = await manager.search("cat", is_paginating=True)

        assert ids(added) == ["d"]
        assert ids(manager.cached_items("cat")) == ["a", "b", "c", "d"]

    async def test_page_of_only_duplicates_still_advances(self, manager, backend):
        backend.page_ids[("cat", 1)] = ["a", "b"]
        backend.page_ids[("cat", 2)] = ["a", "b"]

        await manager.search("cat")
        added = await manager.search("cat", is_paginating=True)
        await manager.search("cat", is_paginating=True)

        assert added == []
        assert backend.pages_requested("cat") == [1, 2, 3]

    async def test_first_occurrence_is_kept(self, manager, backend):
        backend.page_ids[("cat", 1)] = ["a", "a"]

        items = await manager.search("cat")

        assert items[0].id == "a"
        assert len(items) == 1

    def test_deduplicate_helper(self, image_factory):
        items = [image_factory("x"), image_factory("y"), image_factory("x"), image_factory("z")]
        unique = ImageSearchManager._deduplicate(items, {"z"})

        assert ids(unique) == ["x", "y"]


# ============================================================
# Failures
# ============================================================


class TestFailures:
    async def test_error_is_reraised_unchanged(self, manager, backend):
        error = NetworkError("connection reset")
        backend.failures[("cat", 1)] = error

        with pytest.raises(NetworkError) as exc_info:
            await manager.search("cat")

        assert exc_info.value is error

    async def test_non_library_errors_propagate(self, manager, backend):
        backend.failures[("cat", 1)] = ValueError("bad payload")

        with pytest.raises(ValueError, match="bad payload"):
            await manager.search("cat")

    async def test_failure_emits_severe_event(self, manager, backend, spy_log):
        error = NetworkError("offline")
        backend.failures[("cat", 1)] = error

        with pytest.raises(NetworkError):
            await manager.search("cat")

        assert spy_log.events == [
            SearchStartEvent(query="cat", page=1),
            SearchFailEvent(query="cat", page=1, error_text=repr(error)),
        ]
        fail = spy_log.events[-1]
        assert fail.log_type == LogType.SEVERE
        assert fail.parameters["error"] == repr(error)

    async def test_failed_first_fetch_creates_no_entry(self, manager, backend):
        backend.failures[("cat", 1)] = NetworkError("offline")

        with pytest.raises(NetworkError):
            await manager.search("cat")

        assert "cat" not in manager._cache
        assert manager.cached_items("cat") == []

    async def test_failed_page_leaves_entry_untouched(self, manager, backend):
        await manager.search("cat")
        before = copy.deepcopy(manager._cache["cat"])
        backend.failures[("cat", 2)] = NetworkError("offline")

        with pytest.raises(NetworkError):
            await manager.search("cat", is_paginating=True)

        assert manager._cache["cat"] == before

    async def test_failed_page_can_be_retried(self, manager, backend):
        await manager.search("cat")
        backend.failures[("cat", 2)] = NetworkError("offline")
        with pytest.raises(NetworkError):
            await manager.search("cat", is_paginating=True)
        del backend.failures[("cat", 2)]

        added = await manager.search("cat", is_paginating=True)

        assert ids(added) == [f"cat-p2-{i}" for i in range(3)]
        assert backend.pages_requested("cat") == [1, 2, 2]

    async def test_failing_log_sink_does_not_break_search(self, backend, history_store, spy_log):
        class BrokenSink:
            def track_event(self, event):
                raise RuntimeError("sink down")

            def track_screen_view(self, event):
                raise RuntimeError("sink down")

        manager = ImageSearchManager(backend, history_store, LogManager([BrokenSink(), spy_log]), page_size=3)

        items = await manager.search("cat")

        assert len(items) == 3
        assert spy_log.names() == ["ImageSearchManager.search.start", "ImageSearchManager.search.success"]


# ============================================================
# Concurrency
# ============================================================


class TestConcurrency:
    async def test_overlapping_first_page_calls_fetch_once(self, manager, backend):
        backend.delay = 0.01

        first, second = await asyncio.gather(manager.search("cat"), manager.search("cat"))

        assert backend.pages_requested("cat") == [1]
        assert ids(first) == ids(second)

    async def test_overlapping_load_more_fetches_consecutive_pages(self, manager, backend):
        backend.delay = 0.01
        await manager.search("cat")

        a, b = await asyncio.gather(
            manager.search("cat", is_paginating=True),
            manager.search("cat", is_paginating=True),
        )

        assert backend.pages_requested("cat") == [1, 2, 3]
        assert ids(a) == [f"cat-p2-{i}" for i in range(3)]
        assert ids(b) == [f"cat-p3-{i}" for i in range(3)]

    async def test_different_queries_run_concurrently(self, manager, backend):
        backend.delay = 0.05
        started = asyncio.get_running_loop().time()

        await asyncio.gather(manager.search("cat"), manager.search("dog"))

        assert asyncio.get_running_loop().time() - started < 0.09
        assert len(backend.calls) == 2

    async def test_cancellation_leaves_cache_untouched(self, manager, backend, spy_log):
        backend.delay = 1.0
        task = asyncio.create_task(manager.search("cat"))
        await asyncio.sleep(0.01)

        task.cancel()
        with pytest.raises(asyncio.CancelledError):
            await task

        assert "cat" not in manager._cache
        assert spy_log.of_type(SearchFailEvent) == []
        assert len(manager._locks) == 0


# ============================================================
# Read-only helpers
# ============================================================


class TestLookups:
    async def test_find_image_across_queries(self, manager):
        await manager.search("cat")
        await manager.search("dog")

        image = manager.find_image("dog-p1-2")

        assert image is not None
        assert image.id == "dog-p1-2"

    def test_find_image_missing(self, manager):
        assert manager.find_image("nope") is None

    async def test_cached_items_is_a_copy(self, manager):
        await manager.search("cat")
        manager.cached_items("cat").clear()

        assert len(manager.cached_items("cat")) == 3


# ============================================================
# Search history
# ============================================================


def _entry(title, minutes_ago):
    return SearchHistoryEntry(
        title=title,
        date_created=datetime(2024, 1, 1, 12, 0, tzinfo=UTC) - timedelta(minutes=minutes_ago),
    )


class TestSearchHistory:
    def test_history_excludes_most_recent(self, manager, history_store):
        for entry in [_entry("cat", 30), _entry("dog", 20), _entry("owl", 10)]:
            manager.add_recent_search(entry)

        recent = manager.recent_search()
        history = manager.get_search_history()

        assert recent.title == "owl"
        assert [e.title for e in history] == ["dog", "cat"]
        assert recent not in history

    def test_history_deduplicates_titles(self, manager):
        for entry in [_entry("cat", 30), _entry("dog", 20), _entry("cat", 10), _entry("owl", 5)]:
            manager.add_recent_search(entry)

        assert [e.title for e in manager.get_search_history()] == ["cat", "dog"]

    def test_empty_history(self, manager):
        assert manager.recent_search() is None
        assert manager.get_search_history() == []

    def test_history_with_empty_recent_title(self, manager):
        manager.add_recent_search(_entry("cat", 10))
        manager.add_recent_search(_entry("", 1))

        assert manager.recent_search() is None
        assert [e.title for e in manager.get_search_history()] == ["", "cat"]

    def test_store_errors_are_logged_and_reraised(self, backend, log_manager, spy_log):
        class BrokenStore:
            def add_recent_search(self, entry):
                raise PersistenceError("disk full", operation="save")

            def get_search_history(self):
                raise PersistenceError("unreadable", operation="load")

            def get_most_recent_search(self):
                raise PersistenceError("unreadable", operation="load")

        manager = ImageSearchManager(backend, BrokenStore(), log_manager)

        with pytest.raises(PersistenceError, match="disk full"):
            manager.add_recent_search(_entry("cat", 1))
        with pytest.raises(PersistenceError):
            manager.get_search_history()
        with pytest.raises(PersistenceError):
            manager.recent_search()

        failures = spy_log.of_type(HistoryFailEvent)
        assert [f.operation for f in failures] == ["add_recent_search", "get_search_history", "recent_search"]
        assert all(f.log_type == LogType.WARNING for f in failures)
