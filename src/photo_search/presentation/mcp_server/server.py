"""
Photo Search MCP Server

A standalone Model Context Protocol server for keyword photo search.

Features:
- Keyword search against Flickr
- Per-query result caching with incremental pagination
- Persistent search history

Architecture:
- instructions.py: SERVER_INSTRUCTIONS for AI agents
- tool_registry.py: Centralized tool registration
- tools/: Individual tool implementations by category
- container: DI container (dependency-injector) for service lifecycle
"""

from __future__ import annotations

import logging
import os
import sys
from contextlib import AbstractAsyncContextManager, asynccontextmanager
from pathlib import Path
from typing import TYPE_CHECKING, Any, cast

from mcp.server.fastmcp import FastMCP
from mcp.server.transport_security import TransportSecuritySettings

from photo_search.container import ApplicationContainer
from photo_search.shared.exceptions import ConfigurationError, ValidationError

from .instructions import SERVER_INSTRUCTIONS
from .tool_registry import register_all_mcp_tools

if TYPE_CHECKING:
    from collections.abc import AsyncIterator, Callable

    from photo_search.application.image_search import ImageSearchManager

logger = logging.getLogger(__name__)

DEFAULT_DATA_DIR = str(Path.home() / ".photo-search-mcp")
DEFAULT_PAGE_SIZE = 20
DEFAULT_TIMEOUT = 30.0

# ── Module-level DI container ──────────────────────────────────────────────
_container: ApplicationContainer | None = None


def get_container() -> ApplicationContainer:
    """Get the application DI container.

    Raises:
        RuntimeError: If ``create_server()`` has not been called yet.
    """
    if _container is None:
        msg = "Container not initialized. Call create_server() first."
        raise RuntimeError(msg)
    return _container


def _make_lifespan(
    container: ApplicationContainer,
) -> Callable[[FastMCP[Any]], AbstractAsyncContextManager[ApplicationContainer]]:
    """Create a FastMCP lifespan handler bound to *container*."""

    @asynccontextmanager
    async def _lifespan(server: FastMCP[Any]) -> AsyncIterator[ApplicationContainer]:
        logger.info("Lifecycle: startup, resources ready")
        try:
            yield container
        finally:
            backend = container.image_backend()
            close = getattr(backend, "close", None)
            if close is not None:
                await close()
            logger.info("Lifecycle: shutdown, backend HTTP client closed")

    return _lifespan


def create_server(
    api_key: str | None = None,
    data_dir: str | None = None,
    page_size: int = DEFAULT_PAGE_SIZE,
    timeout: float = DEFAULT_TIMEOUT,
    name: str = "photo-search",
    disable_security: bool = False,
    json_response: bool = False,
    stateless_http: bool = False,
) -> FastMCP:
    """
    Create and configure the Photo Search MCP server.

    Args:
        api_key: Flickr API key (required).
        data_dir: Directory for search history. Default: ~/.photo-search-mcp
        page_size: Images requested per page.
        timeout: HTTP timeout in seconds for Flickr requests.
        name: Server name.
        disable_security: Disable DNS rebinding protection (needed for remote access).
        json_response: Use JSON responses instead of SSE.
        stateless_http: Use stateless HTTP mode.

    Returns:
        Configured FastMCP server instance.

    Raises:
        ConfigurationError: If no API key is given.
        InvalidParameterError: If page_size is not a positive integer.
    """
    global _container
    logger.info("Initializing Photo Search MCP Server...")

    # ── DI container ────────────────────────────────────────────────────
    _container = ApplicationContainer()
    _container.config.from_dict(
        {
            "flickr_api_key": api_key,
            "data_dir": data_dir or DEFAULT_DATA_DIR,
            "page_size": page_size,
            "timeout": timeout,
        }
    )

    manager = cast("ImageSearchManager", _container.image_search_manager())
    logger.info("Search history directory: %s", data_dir or DEFAULT_DATA_DIR)
    logger.info("Page size: %d", manager.page_size)

    # ── Transport security ──────────────────────────────────────────────
    if disable_security:
        transport_security = TransportSecuritySettings(enable_dns_rebinding_protection=False)
        logger.info("DNS rebinding protection disabled for remote access")
    else:
        transport_security = None

    mcp = FastMCP(
        name,
        instructions=SERVER_INSTRUCTIONS,
        transport_security=transport_security,
        json_response=json_response,
        stateless_http=stateless_http,
        lifespan=_make_lifespan(_container),
    )

    stats = register_all_mcp_tools(mcp=mcp, manager=manager)
    logger.info("Tool registration complete: %s", stats)

    logger.info("Photo Search MCP Server initialized successfully")
    return mcp


def _env_int(name: str, default: int) -> int:
    raw = os.environ.get(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError as e:
        raise ConfigurationError(f"{name} must be an integer, got {raw!r}") from e


def _env_float(name: str, default: float) -> float:
    raw = os.environ.get(name, "").strip()
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError as e:
        raise ConfigurationError(f"{name} must be a number, got {raw!r}") from e


def load_settings_from_env() -> dict[str, Any]:
    """Read server settings from environment variables."""
    return {
        "api_key": os.environ.get("FLICKR_API_KEY", "").strip() or None,
        "data_dir": os.environ.get("PHOTO_SEARCH_DATA_DIR", "").strip() or DEFAULT_DATA_DIR,
        "page_size": _env_int("PHOTO_SEARCH_PAGE_SIZE", DEFAULT_PAGE_SIZE),
        "timeout": _env_float("PHOTO_SEARCH_TIMEOUT", DEFAULT_TIMEOUT),
    }


def main():
    """Run the MCP server over stdio."""

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    try:
        settings = load_settings_from_env()
        if len(sys.argv) > 1:
            settings["api_key"] = sys.argv[1]
        server = create_server(**settings)
    except (ConfigurationError, ValidationError) as e:
        logger.error(f"Cannot start server: {e}")
        sys.exit(1)

    server.run()


if __name__ == "__main__":
    main()
