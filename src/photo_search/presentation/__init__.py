"""Presentation layer: MCP server and tools."""
