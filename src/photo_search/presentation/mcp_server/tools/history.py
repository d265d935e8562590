"""
Search History Tools.

Tools:
- get_search_history: Most recent search plus earlier searches
"""

from __future__ import annotations

import logging
from typing import Union

from mcp.server.fastmcp import FastMCP

from photo_search.application.image_search import ImageSearchManager
from photo_search.shared.exceptions import PhotoSearchError

from ._common import InputNormalizer, ResponseFormatter

logger = logging.getLogger(__name__)


def register_history_tools(mcp: FastMCP, manager: ImageSearchManager):
    """Register search history MCP tools bound to ``manager``."""

    @mcp.tool()
    def get_search_history(limit: Union[int, str] = 10) -> str:
        """
        🕘 List previous photo searches.

        The most recent search is shown on its own, followed by older
        searches (newest first, each keyword once).

        Args:
            limit: Maximum number of older searches to list (default 10)

        Returns:
            Formatted search history
        """
        limit = InputNormalizer.normalize_limit(limit, default=10, max_val=100)
        try:
            recent = manager.recent_search()
            history = manager.get_search_history()
        except PhotoSearchError as e:
            logger.warning(f"get_search_history failed: {e}")
            return e.to_agent_message()

        if recent is None and not history:
            return "No searches yet."

        parts = ["## 🕘 Search History", ""]
        if recent is not None:
            parts.append(f"**Most recent**: {recent.title}")
            parts.append("")
        if history:
            parts.append("**Earlier searches**:")
            parts.extend(ResponseFormatter.history_entry(entry) for entry in history[:limit])
            if len(history) > limit:
                parts.append(f"- … {len(history) - limit} more")
        return "\n".join(parts).rstrip()
