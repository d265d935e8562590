"""
Console log sink backed by the standard logging module.
"""

from __future__ import annotations

import logging

from .events import LoggableEvent


class ConsoleLogService:
    """Writes every event as one log record at the level of its LogType."""

    def __init__(self, logger_name: str = "photo_search.events", show_emoji: bool = False) -> None:
        self._logger = logging.getLogger(logger_name)
        self._show_emoji = show_emoji

    def _format(self, event: LoggableEvent) -> str:
        parts = [event.event_name]
        for key, value in sorted((event.parameters or {}).items()):
            parts.append(f"{key}={value}")
        line = " ".join(parts)
        if self._show_emoji:
            line = f"{event.log_type.emoji} {line}"
        return line

    def track_event(self, event: LoggableEvent) -> None:
        self._logger.log(event.log_type.logging_level, self._format(event))

    def track_screen_view(self, event: LoggableEvent) -> None:
        self._logger.log(event.log_type.logging_level, "screen_view %s", self._format(event))
