"""
Photo Search MCP Tools

🎯 Tools:
- search_images: keyword search (first page, cached)
- load_more_images: next page for a query
- get_image_details: details of a returned image
- get_search_history: most recent and earlier searches

Usage:
    from .tools import register_all_tools
    register_all_tools(mcp, manager)
"""

from mcp.server.fastmcp import FastMCP

from photo_search.application.image_search import ImageSearchManager

from .history import register_history_tools
from .image_search import register_image_search_tools


def register_all_tools(mcp: FastMCP, manager: ImageSearchManager):
    """Register every photo search tool on ``mcp``."""
    register_image_search_tools(mcp, manager)
    register_history_tools(mcp, manager)


__all__ = [
    "register_all_tools",
    "register_history_tools",
    "register_image_search_tools",
]
