"""
Photo Search MCP Server

Usage as standalone server:
    python -m photo_search.presentation.mcp_server

Or in mcp.json:
    {
        "servers": {
            "photo-search": {
                "type": "stdio",
                "command": "photo-search-mcp",
                "env": {"FLICKR_API_KEY": "..."}
            }
        }
    }

Usage for integration:
    from photo_search.presentation.mcp_server import create_server, register_all_tools

    # Option 1: Create standalone server
    server = create_server(api_key="...")
    server.run()

    # Option 2: Register tools to existing server
    register_all_tools(your_mcp_server, manager)
"""

from __future__ import annotations

from .server import create_server, main
from .tools import register_all_tools

__all__ = ["create_server", "main", "register_all_tools"]
