"""
Loggable events and their severity channel.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import IntEnum
from typing import Protocol, runtime_checkable


class LogType(IntEnum):
    """Severity / channel of a tracked event."""

    INFO = 0  # informative tracking, never an issue
    ANALYTIC = 1  # analytics events
    WARNING = 2  # should not happen, user experience unaffected
    SEVERE = 3  # failing scenario the user can see

    @property
    def logging_level(self) -> int:
        return _LOGGING_LEVELS[self]

    @property
    def emoji(self) -> str:
        return _EMOJI[self]


_LOGGING_LEVELS = {
    LogType.INFO: logging.INFO,
    LogType.ANALYTIC: logging.INFO,
    LogType.WARNING: logging.WARNING,
    LogType.SEVERE: logging.ERROR,
}

_EMOJI = {
    LogType.INFO: "👋",
    LogType.ANALYTIC: "📈",
    LogType.WARNING: "⚠️",
    LogType.SEVERE: "🚨",
}


@runtime_checkable
class LoggableEvent(Protocol):
    """Anything a LogService can record."""

    @property
    def event_name(self) -> str: ...

    @property
    def parameters(self) -> dict[str, str] | None: ...

    @property
    def log_type(self) -> LogType: ...


@dataclass(frozen=True)
class AnyLoggableEvent:
    """Ad-hoc event for callers that have no dedicated event type."""

    event_name: str
    parameters: dict[str, str] | None = None
    log_type: LogType = LogType.ANALYTIC
