#!/usr/bin/env python3
"""
Photo Search MCP Server - HTTP Mode

This script runs the Photo Search MCP server in HTTP mode (SSE or streamable-http),
allowing remote clients from other machines to connect.

Usage:
    # Run with SSE transport (default, more compatible)
    python run_server.py --transport sse --port 8765

    # Run with streamable-http transport
    python run_server.py --transport streamable-http --port 8765

    # Run with explicit API key
    python run_server.py --api-key YOUR_FLICKR_KEY

Environment Variables:
    FLICKR_API_KEY: Flickr API key (required)
    PHOTO_SEARCH_DATA_DIR: Search history directory (default: ~/.photo-search-mcp)
    PHOTO_SEARCH_PAGE_SIZE: Images per page (default: 20)
    PHOTO_SEARCH_TIMEOUT: HTTP timeout in seconds (default: 30)
    MCP_PORT: Server port (default: 8765)
    MCP_HOST: Server host (default: 0.0.0.0)
"""

import argparse
import logging
import os
import sys

from photo_search import __version__
from photo_search.presentation.mcp_server.server import (
    create_server,
    get_container,
    load_settings_from_env,
)
from photo_search.shared.exceptions import ConfigurationError, ValidationError

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


def main():
    parser = argparse.ArgumentParser(description="Run Photo Search MCP Server in HTTP mode")
    parser.add_argument(
        "--api-key",
        default=None,
        help="Flickr API key (default: FLICKR_API_KEY)",
    )
    parser.add_argument(
        "--transport",
        choices=["sse", "streamable-http"],
        default="sse",
        help="Transport protocol (default: sse)",
    )
    parser.add_argument(
        "--host",
        default=os.environ.get("MCP_HOST", "0.0.0.0"),
        help="Server host (default: 0.0.0.0)",
    )
    parser.add_argument(
        "--port",
        type=int,
        default=int(os.environ.get("MCP_PORT", "8765")),
        help="Server port (default: 8765)",
    )
    parser.add_argument(
        "--no-security",
        action="store_true",
        default=True,
        help="Disable DNS rebinding protection (default: True for remote access)",
    )

    args = parser.parse_args()

    try:
        settings = load_settings_from_env()
        if args.api_key:
            settings["api_key"] = args.api_key

        logger.info("Creating Photo Search MCP Server...")
        logger.info(f"  API Key: {'Set' if settings['api_key'] else 'Not set'}")
        logger.info(f"  Data dir: {settings['data_dir']}")
        logger.info(f"  Transport: {args.transport}")
        logger.info(f"  Host: {args.host}")
        logger.info(f"  Port: {args.port}")
        logger.info(f"  DNS Rebinding Protection: {'Disabled' if args.no_security else 'Enabled'}")

        server = create_server(**settings, disable_security=args.no_security)
    except (ConfigurationError, ValidationError) as e:
        logger.error(f"Cannot start server: {e}")
        sys.exit(1)

    logger.info(f"Starting server at http://{args.host}:{args.port}")
    if args.transport == "sse":
        logger.info("SSE endpoint: /sse")
        logger.info("Message endpoint: /messages")
        mcp_app = server.sse_app()
    else:
        logger.info("Streamable HTTP endpoint: /mcp")
        mcp_app = server.streamable_http_app()

    import uvicorn
    from starlette.applications import Starlette
    from starlette.responses import JSONResponse
    from starlette.routing import Mount, Route

    manager = get_container().image_search_manager()

    async def health(request):
        return JSONResponse({"status": "ok", "service": "photo-search-mcp"})

    async def info(request):
        return JSONResponse(
            {
                "service": "Photo Search MCP Server",
                "version": __version__,
                "transport": args.transport,
                "page_size": manager.page_size,
                "endpoints": {
                    "mcp": {"sse": "/sse", "messages": "/messages"}
                    if args.transport == "sse"
                    else {"streamable_http": "/mcp"},
                    "utility": {"health": "/health", "history": "/api/history"},
                },
            }
        )

    async def api_history(request):
        recent = manager.recent_search()
        return JSONResponse(
            {
                "most_recent": recent.to_dict() if recent else None,
                "history": [entry.to_dict() for entry in manager.get_search_history()],
            }
        )

    routes = [
        Route("/", info),
        Route("/health", health),
        Route("/api/history", api_history),
        Mount("/", app=mcp_app),
    ]
    app = Starlette(routes=routes, lifespan=mcp_app.router.lifespan_context)

    uvicorn.run(
        app,
        host=args.host,
        port=args.port,
        proxy_headers=True,
        forwarded_allow_ips="*",
        server_header=False,
    )


if __name__ == "__main__":
    main()
