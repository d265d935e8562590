"""
LogManager - fans tracked events out to every registered LogService.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import Protocol

from .events import AnyLoggableEvent, LoggableEvent, LogType

logger = logging.getLogger(__name__)


class LogService(Protocol):
    """A sink for tracked events (console, analytics, crash reporting...)."""

    def track_event(self, event: LoggableEvent) -> None: ...

    def track_screen_view(self, event: LoggableEvent) -> None: ...


class LogManager:
    """
    Multi-sink event dispatcher.

    Tracking is fire-and-forget: a sink that raises is reported through
    the module logger and the remaining sinks still receive the event.
    """

    def __init__(self, services: Iterable[LogService] = ()) -> None:
        self._services = list(services)

    @property
    def services(self) -> list[LogService]:
        return list(self._services)

    def add_service(self, service: LogService) -> None:
        self._services.append(service)

    def track_event(self, event: LoggableEvent) -> None:
        for service in self._services:
            try:
                service.track_event(event)
            except Exception:
                logger.exception(f"Log service {type(service).__name__} failed on {event.event_name}")

    def track(
        self,
        event_name: str,
        parameters: dict[str, str] | None = None,
        log_type: LogType = LogType.ANALYTIC,
    ) -> None:
        self.track_event(AnyLoggableEvent(event_name, parameters, log_type))

    def track_screen_view(self, event: LoggableEvent) -> None:
        for service in self._services:
            try:
                service.track_screen_view(event)
            except Exception:
                logger.exception(f"Log service {type(service).__name__} failed on {event.event_name}")
