"""
Tool Registry - central place for MCP tool registration.

Usage:
    from .tool_registry import register_all_mcp_tools, list_registered_tools

    # Register every tool
    register_all_mcp_tools(mcp, manager)

    # Inspect defined tools
    tools = list_registered_tools()
"""

import logging
from typing import Dict, List, Optional

from mcp.server.fastmcp import FastMCP

from photo_search.application.image_search import ImageSearchManager

logger = logging.getLogger(__name__)


# ============================================================================
# Tool Categories
# ============================================================================

TOOL_CATEGORIES = {
    "image_search": {
        "name": "Image Search",
        "description": "Keyword photo search with cached pagination",
        "tools": ["search_images", "load_more_images", "get_image_details"],
    },
    "history": {
        "name": "Search History",
        "description": "Previous searches, newest first",
        "tools": ["get_search_history"],
    },
}


# ============================================================================
# Registration Functions
# ============================================================================


def register_all_mcp_tools(mcp: FastMCP, manager: ImageSearchManager) -> Dict[str, int]:
    """
    Register all MCP tools.

    Args:
        mcp: FastMCP server instance
        manager: ImageSearchManager shared by every tool

    Returns:
        Dict with category names and tool counts
    """
    from .tools import register_history_tools, register_image_search_tools

    stats = {}

    logger.info("Registering image search tools...")
    register_image_search_tools(mcp, manager)
    stats["image_search"] = len(TOOL_CATEGORIES["image_search"]["tools"])

    logger.info("Registering history tools...")
    register_history_tools(mcp, manager)
    stats["history"] = len(TOOL_CATEGORIES["history"]["tools"])

    logger.info(f"Total registered: {sum(stats.values())} tools")
    return stats


def list_registered_tools() -> Dict[str, List[str]]:
    """List defined tools grouped by category."""
    return {cat_id: cat_info["tools"] for cat_id, cat_info in TOOL_CATEGORIES.items()}


def get_tool_info(tool_name: str) -> Optional[Dict[str, str]]:
    for cat_id, cat_info in TOOL_CATEGORIES.items():
        if tool_name in cat_info["tools"]:
            return {
                "name": tool_name,
                "category": cat_info["name"],
                "category_id": cat_id,
                "category_description": cat_info["description"],
            }
    return None


def validate_tool_registry(mcp: FastMCP) -> Dict[str, object]:
    """
    Check that TOOL_CATEGORIES and the tools actually registered agree.

    Returns:
        Dict with defined, registered, missing, extra and valid keys
    """
    defined_tools = set()
    for cat_info in TOOL_CATEGORIES.values():
        defined_tools.update(cat_info["tools"])

    registered_tools = set(mcp._tool_manager._tools.keys())
    missing = defined_tools - registered_tools
    extra = registered_tools - defined_tools

    if missing:
        logger.warning(f"Tools defined but not registered: {missing}")
    if extra:
        logger.info(f"Tools registered but not in TOOL_CATEGORIES: {extra}")

    return {
        "defined": sorted(defined_tools),
        "registered": sorted(registered_tools),
        "missing": sorted(missing),
        "extra": sorted(extra),
        "valid": not missing and not extra,
    }


__all__ = [
    "TOOL_CATEGORIES",
    "get_tool_info",
    "list_registered_tools",
    "register_all_mcp_tools",
    "validate_tool_registry",
]
