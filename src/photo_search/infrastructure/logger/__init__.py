"""
Event logging: loggable events, sinks and the multi-sink LogManager.
"""

from .console import ConsoleLogService
from .events import AnyLoggableEvent, LoggableEvent, LogType
from .manager import LogManager, LogService

__all__ = [
    "AnyLoggableEvent",
    "ConsoleLogService",
    "LogManager",
    "LogService",
    "LogType",
    "LoggableEvent",
]
