"""
Image Search Tools - Keyword photo search with cached pagination.

Tools:
- search_images: First page of results for a query (cached)
- load_more_images: Next page of results for a query
- get_image_details: Details of an image returned earlier
"""

from __future__ import annotations

import logging
from typing import Union

from mcp.server.fastmcp import FastMCP

from photo_search.application.image_search import ImageSearchManager
from photo_search.domain.entities.search_history import SearchHistoryEntry
from photo_search.shared.exceptions import PhotoSearchError

from ._common import InputNormalizer, ResponseFormatter

logger = logging.getLogger(__name__)


def register_image_search_tools(mcp: FastMCP, manager: ImageSearchManager):
    """Register photo search MCP tools bound to ``manager``."""

    @mcp.tool()
    async def search_images(query: str, force_refresh: Union[bool, str] = False) -> str:
        """
        🖼️ Search photos by keyword.

        Returns the first page of results. Repeating the same query returns
        the cached results (including pages loaded with load_more_images)
        without contacting the photo service.

        Args:
            query: Keywords to search for (e.g., "golden retriever")
            force_refresh: Discard cached results and fetch page 1 again

        Returns:
            Formatted list of images with ids, thumbnail and full-size URLs
        """
        query = InputNormalizer.normalize_query(query)
        if not query:
            return ResponseFormatter.error(
                "Missing search query",
                suggestion="Provide keywords describing the photos you want",
                example='search_images("golden retriever")',
                tool_name="search_images",
            )
        force = InputNormalizer.normalize_bool(force_refresh, default=False)

        try:
            images = await manager.search(query, is_paginating=False, force_refresh=force)
        except PhotoSearchError as e:
            logger.warning(f"search_images failed for {query!r}: {e}")
            return e.to_agent_message()

        notes: list[str] = []
        try:
            manager.add_recent_search(SearchHistoryEntry(title=query))
        except PhotoSearchError as e:
            notes.append(f"⚠️ Search history not updated: {e}")

        if not images:
            body = f'No images found for "{query}".'
        else:
            body = ResponseFormatter.images(
                f'## 🖼️ Image Search Results: "{query}" ({len(images)} images)',
                images,
            )
            if manager.has_more(query):
                body += f'\n\n➡️ More results available: load_more_images("{query}")'

        return "\n\n".join([body, *notes])

    @mcp.tool()
    async def load_more_images(query: str) -> str:
        """
        ➡️ Load the next page of photos for a query.

        Only the newly loaded images are returned; earlier pages stay
        available through search_images.

        Args:
            query: The same keywords used with search_images

        Returns:
            Formatted list of the additional images, or a notice when all
            pages have been loaded
        """
        query = InputNormalizer.normalize_query(query)
        if not query:
            return ResponseFormatter.error(
                "Missing search query",
                suggestion="Use the query you passed to search_images",
                example='load_more_images("golden retriever")',
                tool_name="load_more_images",
            )

        already_loaded = len(manager.cached_items(query))
        try:
            images = await manager.search(query, is_paginating=True, force_refresh=False)
        except PhotoSearchError as e:
            logger.warning(f"load_more_images failed for {query!r}: {e}")
            return e.to_agent_message()

        if not images:
            return f'No more images for "{query}".'

        return ResponseFormatter.images(
            f'## ➡️ More Results: "{query}" (+{len(images)} images)',
            images,
            start=already_loaded + 1,
        )

    @mcp.tool()
    def get_image_details(image_id: str) -> str:
        """
        🔍 Show details of a photo returned by search_images or load_more_images.

        Args:
            image_id: The image ID shown in the search results

        Returns:
            Title, dimensions, thumbnail and full-size URLs
        """
        image_id = (image_id or "").strip()
        image = manager.find_image(image_id) if image_id else None
        if image is None:
            return ResponseFormatter.error(
                f"Image not found: {image_id!r}",
                suggestion="Search first, then use an ID from the results",
                example='get_image_details("53012345678")',
                tool_name="get_image_details",
            )

        lines = [
            f"## 🔍 {image.title or '(untitled)'}",
            "",
            f"- **ID**: `{image.id}`",
            f"- **Source**: {getattr(image.source, 'value', image.source)}",
            f"- **Size**: {ResponseFormatter.size(image.size)}",
        ]
        ratio = image.size.aspect_ratio if image.size else None
        if ratio:
            lines.append(f"- **Aspect ratio**: {ratio:.2f}")
        lines.append(f"- **Thumbnail**: {image.thumbnail_url}")
        lines.append(f"- **Full size**: {image.best_url}")
        return "\n".join(lines)
