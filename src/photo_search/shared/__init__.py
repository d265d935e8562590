"""
Shared module for Photo Search MCP.

Provides:
- Unified exception hierarchy
- Async utilities (circuit breaker, keyed locks)
"""

from .async_utils import CircuitBreaker, KeyedLock
from .exceptions import (
    # Base
    PhotoSearchError,
    ErrorContext,
    ErrorSeverity,
    ErrorCategory,
    # API errors
    APIError,
    NetworkError,
    RateLimitError,
    ServiceUnavailableError,
    FlickrAPIError,
    # Validation errors
    ValidationError,
    InvalidQueryError,
    InvalidParameterError,
    # Data errors
    DataError,
    ParseError,
    InvalidResponseError,
    # Persistence / configuration errors
    PersistenceError,
    ConfigurationError,
)

__all__ = [
    "PhotoSearchError",
    "ErrorContext",
    "ErrorSeverity",
    "ErrorCategory",
    "APIError",
    "NetworkError",
    "RateLimitError",
    "ServiceUnavailableError",
    "FlickrAPIError",
    "ValidationError",
    "InvalidQueryError",
    "InvalidParameterError",
    "DataError",
    "ParseError",
    "InvalidResponseError",
    "PersistenceError",
    "ConfigurationError",
    "CircuitBreaker",
    "KeyedLock",
]
