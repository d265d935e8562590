"""
Application DI Container (dependency-injector).

Centralizes service creation and lifecycle management.

Usage::

    from photo_search.container import ApplicationContainer

    container = ApplicationContainer()
    container.config.from_dict({
        "flickr_api_key": "...",
        "data_dir": "~/.photo-search-mcp",
        "page_size": 20,
        "timeout": 30.0,
    })

    manager = container.image_search_manager()

    # In tests, override any provider:
    container.image_backend.override(providers.Object(fake_backend))
"""

from __future__ import annotations

import logging

from dependency_injector import containers, providers

logger = logging.getLogger(__name__)


def _create_log_manager() -> object:
    """Lazy factory for the event LogManager with the console sink."""
    from photo_search.infrastructure.logger import ConsoleLogService, LogManager

    return LogManager(services=[ConsoleLogService()])


def _create_image_backend(api_key: str | None, timeout: float | None) -> object:
    """Lazy factory for the Flickr backend (raises ConfigurationError without a key)."""
    from photo_search.infrastructure.sources import FlickrClient

    return FlickrClient(api_key=api_key or "", timeout=timeout or 30.0)


def _create_history_store(data_dir: str | None) -> object:
    """JSON store under data_dir, or an in-memory store when no directory is configured."""
    from photo_search.infrastructure.persistence import (
        InMemorySearchHistoryStore,
        JsonSearchHistoryStore,
    )

    if not data_dir:
        logger.info("No data directory configured, search history is kept in memory")
        return InMemorySearchHistoryStore()
    return JsonSearchHistoryStore(data_dir)


def _create_image_search_manager(
    backend: object,
    history_store: object,
    log_manager: object,
    page_size: int | None,
) -> object:
    """Lazy factory for ImageSearchManager."""
    from photo_search.application.image_search import ImageSearchManager

    return ImageSearchManager(
        backend=backend,  # type: ignore[arg-type]
        history_store=history_store,  # type: ignore[arg-type]
        log_manager=log_manager,  # type: ignore[arg-type]
        page_size=page_size if page_size is not None else ImageSearchManager.DEFAULT_PAGE_SIZE,
    )


class ApplicationContainer(containers.DeclarativeContainer):
    """Central DI container for Photo Search MCP.

    Manages creation and lifecycle of all core services:
    - ``log_manager``: event dispatcher (console sink)
    - ``image_backend``: Flickr search client
    - ``history_store``: search history persistence
    - ``image_search_manager``: cache and pagination coordinator
    """

    config = providers.Configuration()

    log_manager = providers.Singleton(_create_log_manager)

    image_backend = providers.Singleton(
        _create_image_backend,
        api_key=config.flickr_api_key,
        timeout=config.timeout,
    )

    history_store = providers.Singleton(
        _create_history_store,
        data_dir=config.data_dir,
    )

    image_search_manager = providers.Singleton(
        _create_image_search_manager,
        backend=image_backend,
        history_store=history_store,
        log_manager=log_manager,
        page_size=config.page_size,
    )


__all__ = ["ApplicationContainer"]
