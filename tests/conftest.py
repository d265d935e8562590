"""
Pytest configuration and shared fixtures.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field

import pytest

from photo_search.application.image_search import ImageSearchManager
from photo_search.domain.entities.image import ImageResult, ImageSize, ImageSource
from photo_search.domain.entities.page import PageInfo, SearchResponse
from photo_search.infrastructure.logger import LogManager, LoggableEvent
from photo_search.infrastructure.persistence import InMemorySearchHistoryStore

# ============================================================
# Fakes
# ============================================================


def make_image(image_id: str, title: str | None = None) -> ImageResult:
    return ImageResult(
        id=image_id,
        title=title if title is not None else f"Photo {image_id}",
        thumbnail_url=f"https://img.example.com/{image_id}_q.jpg",
        original_url=f"https://img.example.com/{image_id}_b.jpg",
        size=ImageSize(width=1024, height=768),
        source=ImageSource.MOCK,
    )


@dataclass
class FakeBackend:
    """
    Paged backend serving ``pages`` pages per query.

    Page ``k`` of query ``q`` holds ids ``"{q}-p{k}-{i}"``. Individual pages
    can be overridden with explicit ids or made to raise.
    """

    pages: int = 3
    calls: list[tuple[str, int, int]] = field(default_factory=list)
    page_ids: dict[tuple[str, int], list[str]] = field(default_factory=dict)
    failures: dict[tuple[str, int], BaseException] = field(default_factory=dict)
    delay: float = 0.0

    async def search_images(self, query: str, page: int, per_page: int) -> SearchResponse:
        self.calls.append((query, page, per_page))
        if self.delay:
            await asyncio.sleep(self.delay)
        failure = self.failures.get((query, page))
        if failure is not None:
            raise failure
        ids = self.page_ids.get((query, page))
        if ids is None:
            ids = [f"{query}-p{page}-{i}" for i in range(per_page)]
        return SearchResponse(
            page=PageInfo(page=page, per_page=per_page, total=self.pages * per_page, pages=self.pages),
            items=[make_image(image_id) for image_id in ids],
        )

    def pages_requested(self, query: str) -> list[int]:
        return [page for q, page, _ in self.calls if q == query]


class SpyLogService:
    """Records every tracked event."""

    def __init__(self) -> None:
        self.events: list[LoggableEvent] = []
        self.screen_views: list[LoggableEvent] = []

    def track_event(self, event: LoggableEvent) -> None:
        self.events.append(event)

    def track_screen_view(self, event: LoggableEvent) -> None:
        self.screen_views.append(event)

    def names(self) -> list[str]:
        return [event.event_name for event in self.events]

    def of_type(self, event_type: type) -> list:
        return [event for event in self.events if isinstance(event, event_type)]


# ============================================================
# Fixtures
# ============================================================


@pytest.fixture
def backend():
    return FakeBackend()


@pytest.fixture
def spy_log():
    return SpyLogService()


@pytest.fixture
def log_manager(spy_log):
    return LogManager(services=[spy_log])


@pytest.fixture
def history_store():
    return InMemorySearchHistoryStore()


@pytest.fixture
def manager(backend, history_store, log_manager):
    """ImageSearchManager with small pages."""
    return ImageSearchManager(backend, history_store, log_manager, page_size=3)


@pytest.fixture
def image_factory():
    """Build a MOCK-source ImageResult from an id."""
    return make_image
