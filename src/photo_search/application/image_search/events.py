"""
Events emitted by ImageSearchManager.

A closed set of event types, one per decision branch, each with explicit
fields instead of a free-form parameter map.
"""

from __future__ import annotations

from dataclasses import dataclass

from photo_search.infrastructure.logger import LogType

_PREFIX = "ImageSearchManager"


@dataclass(frozen=True)
class SearchStartEvent:
    query: str
    page: int

    @property
    def event_name(self) -> str:
        return f"{_PREFIX}.search.start"

    @property
    def parameters(self) -> dict[str, str]:
        return {"query": self.query, "page": str(self.page)}

    @property
    def log_type(self) -> LogType:
        return LogType.ANALYTIC


@dataclass(frozen=True)
class SearchSuccessEvent:
    query: str
    page: int

    @property
    def event_name(self) -> str:
        return f"{_PREFIX}.search.success"

    @property
    def parameters(self) -> dict[str, str]:
        return {"query": self.query, "page": str(self.page)}

    @property
    def log_type(self) -> LogType:
        return LogType.ANALYTIC


@dataclass(frozen=True)
class SearchFailEvent:
    query: str
    page: int
    error_text: str

    @property
    def event_name(self) -> str:
        return f"{_PREFIX}.search.fail"

    @property
    def parameters(self) -> dict[str, str]:
        return {"query": self.query, "page": str(self.page), "error": self.error_text}

    @property
    def log_type(self) -> LogType:
        return LogType.SEVERE


@dataclass(frozen=True)
class CacheHitEvent:
    query: str

    @property
    def event_name(self) -> str:
        return f"{_PREFIX}.search.returnCached"

    @property
    def parameters(self) -> dict[str, str]:
        return {"query": self.query}

    @property
    def log_type(self) -> LogType:
        return LogType.ANALYTIC


@dataclass(frozen=True)
class SearchExhaustedEvent:
    """No further pages: the request was answered without a network call."""

    query: str
    page: int

    @property
    def event_name(self) -> str:
        return f"{_PREFIX}.search.exhausted"

    @property
    def parameters(self) -> dict[str, str]:
        return {"query": self.query, "page": str(self.page)}

    @property
    def log_type(self) -> LogType:
        return LogType.INFO


@dataclass(frozen=True)
class HistoryFailEvent:
    operation: str
    error_text: str

    @property
    def event_name(self) -> str:
        return f"{_PREFIX}.history.fail"

    @property
    def parameters(self) -> dict[str, str]:
        return {"operation": self.operation, "error": self.error_text}

    @property
    def log_type(self) -> LogType:
        return LogType.WARNING


SearchEvent = (
    SearchStartEvent
    | SearchSuccessEvent
    | SearchFailEvent
    | CacheHitEvent
    | SearchExhaustedEvent
    | HistoryFailEvent
)
