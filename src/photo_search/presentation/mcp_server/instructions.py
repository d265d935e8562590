"""
MCP Server Instructions - usage guide for AI agents.
"""

from __future__ import annotations

SERVER_INSTRUCTIONS = """
Photo Search MCP Server - keyword photo search for AI agents

═══════════════════════════════════════════════════════════════════════════════
🎯 Workflow
═══════════════════════════════════════════════════════════════════════════════

1. search_images(query="golden retriever")
   → first page of photos (ids, thumbnails, full-size URLs)
   Repeating the same query returns everything loaded so far from cache.

2. load_more_images(query="golden retriever")
   → only the next page; call again until it reports no more images.

3. get_image_details(image_id="...")
   → dimensions, aspect ratio and URLs of a photo returned earlier.

4. get_search_history()
   → most recent search plus earlier searches, newest first.

═══════════════════════════════════════════════════════════════════════════════
⚠️ Notes
═══════════════════════════════════════════════════════════════════════════════

- Queries are matched exactly after whitespace normalization: "Dog" and "dog"
  are cached separately.
- Use force_refresh=True on search_images to discard cached pages and start
  over from page 1. If the refresh fails, the cached results are kept.
- Errors are returned as text with a suggestion; rate limits and temporary
  outages can be retried after a short wait.
"""
