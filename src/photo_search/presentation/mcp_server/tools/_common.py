"""
Shared helpers for MCP tools: input normalization and response formatting.
"""

from __future__ import annotations

from typing import Union

from photo_search.domain.entities.image import ImageResult, ImageSize
from photo_search.domain.entities.search_history import SearchHistoryEntry


class InputNormalizer:
    """Lenient coercion of tool arguments sent by agents."""

    @staticmethod
    def normalize_query(query: Union[str, None]) -> str:
        if query is None:
            return ""
        return " ".join(str(query).split())

    @staticmethod
    def normalize_bool(value: Union[bool, str, int, None], default: bool = False) -> bool:
        if value is None:
            return default
        if isinstance(value, bool):
            return value
        if isinstance(value, int):
            return value != 0
        text = str(value).strip().lower()
        if text in {"true", "yes", "1", "y", "on"}:
            return True
        if text in {"false", "no", "0", "n", "off"}:
            return False
        return default

    @staticmethod
    def normalize_limit(value: Union[int, str, None], default: int = 10, max_val: int = 50) -> int:
        try:
            limit = int(value) if value is not None else default
        except (TypeError, ValueError):
            limit = default
        return max(1, min(limit, max_val))


class ResponseFormatter:
    """Markdown rendering of tool results."""

    @staticmethod
    def error(
        message: str,
        suggestion: str | None = None,
        example: str | None = None,
        tool_name: str | None = None,
    ) -> str:
        parts = [f"❌ **Error**: {message}"]
        if suggestion:
            parts.append(f"💡 **Suggestion**: {suggestion}")
        if example:
            parts.append(f"📝 **Example**: `{example}`")
        if tool_name:
            parts.append(f"🔧 Tool: {tool_name}")
        return "\n".join(parts)

    @staticmethod
    def size(size: ImageSize | None) -> str:
        if size is None or (size.width is None and size.height is None):
            return "unknown"
        width = size.width if size.width is not None else "?"
        height = size.height if size.height is not None else "?"
        return f"{width}×{height}"

    @classmethod
    def image_line(cls, index: int, image: ImageResult) -> str:
        title = image.title or "(untitled)"
        lines = [
            f"### {index}. {title}",
            f"- **ID**: `{image.id}`",
            f"- **Thumbnail**: {image.thumbnail_url}",
        ]
        if image.original_url:
            lines.append(f"- **Full size**: {image.original_url}")
        lines.append(f"- **Size**: {cls.size(image.size)}")
        return "\n".join(lines)

    @classmethod
    def images(cls, heading: str, images: list[ImageResult], start: int = 1) -> str:
        parts = [heading, ""]
        for offset, image in enumerate(images):
            parts.append(cls.image_line(start + offset, image))
            parts.append("")
        return "\n".join(parts).rstrip()

    @staticmethod
    def history_entry(entry: SearchHistoryEntry) -> str:
        return f"- {entry.title} ({entry.date_created:%Y-%m-%d %H:%M})"
