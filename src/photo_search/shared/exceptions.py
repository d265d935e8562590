"""
Unified Exception Hierarchy for Photo Search MCP.

Exception Hierarchy:
    PhotoSearchError (base)
    ├── APIError
    │   ├── NetworkError
    │   ├── RateLimitError
    │   ├── ServiceUnavailableError
    │   └── FlickrAPIError
    ├── ValidationError
    │   ├── InvalidQueryError
    │   └── InvalidParameterError
    ├── DataError
    │   ├── ParseError
    │   └── InvalidResponseError
    ├── PersistenceError
    └── ConfigurationError
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum, auto
from typing import Any


class ErrorSeverity(Enum):
    """Severity levels for errors."""
    WARNING = auto()      # Recoverable, can continue
    ERROR = auto()        # Failed but the caller may try again
    CRITICAL = auto()     # Cannot continue
    TRANSIENT = auto()    # Temporary condition on the remote side


class ErrorCategory(Enum):
    """Categories for error classification."""
    API = "api"
    VALIDATION = "validation"
    DATA = "data"
    PERSISTENCE = "persistence"
    CONFIGURATION = "config"


@dataclass(frozen=True, slots=True)
class ErrorContext:
    """Rich context for error messages."""
    tool_name: str | None = None
    operation: str | None = None
    input_value: Any = None
    suggestion: str | None = None
    example: str | None = None
    retry_after: float | None = None
    metadata: dict[str, Any] = field(default_factory=dict)


class PhotoSearchError(Exception):
    """
    Base exception for all Photo Search errors.

    Provides:
    - Structured error context
    - Severity classification
    - Agent-friendly formatting
    """

    __slots__ = ('context', 'severity', 'category', 'retryable')

    def __init__(
        self,
        message: str,
        *,
        context: ErrorContext | None = None,
        severity: ErrorSeverity = ErrorSeverity.ERROR,
        category: ErrorCategory = ErrorCategory.API,
        retryable: bool = False,
    ) -> None:
        super().__init__(message)
        self.context = context or ErrorContext()
        self.severity = severity
        self.category = category
        self.retryable = retryable

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        result: dict[str, Any] = {
            "error": str(self),
            "category": self.category.value,
            "severity": self.severity.name.lower(),
            "retryable": self.retryable,
        }
        if self.context.tool_name:
            result["tool"] = self.context.tool_name
        if self.context.suggestion:
            result["suggestion"] = self.context.suggestion
        if self.context.example:
            result["example"] = self.context.example
        if self.context.retry_after:
            result["retry_after_seconds"] = self.context.retry_after
        return result

    def to_agent_message(self) -> str:
        """Format for Agent consumption (Markdown)."""
        parts = [f"❌ **Error**: {self}"]

        if self.context.suggestion:
            parts.append(f"💡 **Suggestion**: {self.context.suggestion}")
        if self.context.example:
            parts.append(f"📝 **Example**: `{self.context.example}`")
        if self.retryable:
            if self.context.retry_after:
                parts.append(f"🔄 Retry after {self.context.retry_after:.1f} seconds")
            else:
                parts.append("🔄 This error is retryable")

        return "\n".join(parts)


# =============================================================================
# API Errors
# =============================================================================

class APIError(PhotoSearchError):
    """Base class for errors talking to the image search backend."""

    def __init__(
        self,
        message: str,
        *,
        context: ErrorContext | None = None,
        retryable: bool = True,
    ) -> None:
        super().__init__(
            message,
            context=context,
            severity=ErrorSeverity.ERROR,
            category=ErrorCategory.API,
            retryable=retryable,
        )


class NetworkError(APIError):
    """Raised for network connectivity issues."""

    def __init__(
        self,
        message: str = "Network connection failed",
        *,
        context: ErrorContext | None = None,
    ) -> None:
        super().__init__(message, context=context, retryable=True)


class RateLimitError(APIError):
    """Raised when the API rate limit is exceeded."""

    def __init__(
        self,
        message: str = "API rate limit exceeded",
        *,
        retry_after: float = 1.0,
        context: ErrorContext | None = None,
    ) -> None:
        ctx = context or ErrorContext()
        ctx = replace(
            ctx,
            suggestion=ctx.suggestion or "Wait and retry the request",
            retry_after=retry_after,
        )
        super().__init__(message, context=ctx, retryable=True)
        self.severity = ErrorSeverity.TRANSIENT


class ServiceUnavailableError(APIError):
    """Raised when the external service is temporarily unavailable."""

    def __init__(
        self,
        message: str = "Service temporarily unavailable",
        *,
        service: str = "Flickr",
        context: ErrorContext | None = None,
    ) -> None:
        super().__init__(f"{service}: {message}", context=context, retryable=True)
        self.severity = ErrorSeverity.TRANSIENT


# Flickr error codes for flickr.photos.search
# https://www.flickr.com/services/api/flickr.photos.search.html
FLICKR_ERROR_DESCRIPTIONS: dict[int, str] = {
    1: "Too many tags in ALL query (max 20).",
    2: "Unknown user.",
    3: "Parameterless searches disabled. Use getRecent instead.",
    4: "You don't have permission to view this pool.",
    5: "User deleted or not found.",
    10: "Flickr search API is currently unavailable.",
    11: "No valid machine tags.",
    12: "Exceeded maximum allowable machine tags.",
    17: "You can only search within your own contacts.",
    18: "Illogical or contradictory arguments.",
    100: "Invalid or expired API key.",
    105: "Service currently unavailable.",
    106: "Write operation failed due to a temporary issue.",
    111: "Requested response format not found.",
    112: "Requested method not found.",
    114: "Invalid SOAP envelope.",
    115: "Invalid XML-RPC method call.",
    116: "Bad URL found in arguments (blocked for abuse).",
}

# Codes that describe a temporary condition on Flickr's side
_FLICKR_TRANSIENT_CODES = frozenset({10, 105, 106})


class FlickrAPIError(APIError):
    """Raised when Flickr answers with ``stat != "ok"``."""

    def __init__(
        self,
        code: int,
        message: str | None = None,
        *,
        context: ErrorContext | None = None,
    ) -> None:
        self.code = code
        self.server_message = message
        description = FLICKR_ERROR_DESCRIPTIONS.get(code) or message or f"Flickr error (code: {code})."
        super().__init__(
            f"Flickr API error {code}: {description}",
            context=context,
            retryable=code in _FLICKR_TRANSIENT_CODES,
        )

    @property
    def description(self) -> str:
        """Human readable description of the Flickr error code."""
        return FLICKR_ERROR_DESCRIPTIONS.get(self.code) or self.server_message or f"Flickr error (code: {self.code})."


# =============================================================================
# Validation Errors
# =============================================================================

class ValidationError(PhotoSearchError):
    """Base class for validation errors."""

    def __init__(
        self,
        message: str,
        *,
        context: ErrorContext | None = None,
    ) -> None:
        super().__init__(
            message,
            context=context,
            severity=ErrorSeverity.WARNING,
            category=ErrorCategory.VALIDATION,
            retryable=False,
        )


class InvalidQueryError(ValidationError):
    """Raised when a search query is invalid."""

    def __init__(
        self,
        query: str | None,
        reason: str = "Query cannot be empty",
        *,
        context: ErrorContext | None = None,
    ) -> None:
        ctx = context or ErrorContext()
        ctx = replace(
            ctx,
            input_value=query,
            suggestion=ctx.suggestion or "Provide a keyword to search photos for",
            example=ctx.example or 'search_images(query="golden retriever")',
        )
        super().__init__(f"Invalid query: {reason}", context=ctx)


class InvalidParameterError(ValidationError):
    """Raised when a parameter value is invalid."""

    def __init__(
        self,
        param_name: str,
        value: Any,
        expected: str,
        *,
        context: ErrorContext | None = None,
    ) -> None:
        ctx = context or ErrorContext()
        ctx = replace(ctx, input_value=value, suggestion=f"Expected {expected}")
        super().__init__(
            f"Invalid parameter '{param_name}': {value!r} (expected {expected})",
            context=ctx,
        )


# =============================================================================
# Data Errors
# =============================================================================

class DataError(PhotoSearchError):
    """Base class for payload decoding and validation errors."""

    def __init__(
        self,
        message: str,
        *,
        context: ErrorContext | None = None,
    ) -> None:
        super().__init__(
            message,
            context=context,
            severity=ErrorSeverity.ERROR,
            category=ErrorCategory.DATA,
            retryable=False,
        )


class ParseError(DataError):
    """Raised when data parsing fails."""

    def __init__(
        self,
        message: str,
        *,
        source: str | None = None,
        context: ErrorContext | None = None,
    ) -> None:
        full_msg = f"Parse error: {message}"
        if source:
            full_msg = f"Parse error ({source}): {message}"
        super().__init__(full_msg, context=context)


class InvalidResponseError(DataError):
    """Raised when a response envelope is valid but its payload is missing."""

    def __init__(
        self,
        message: str = "Response did not contain a result payload",
        *,
        source: str | None = None,
        context: ErrorContext | None = None,
    ) -> None:
        full_msg = f"Invalid response ({source}): {message}" if source else f"Invalid response: {message}"
        super().__init__(full_msg, context=context)


# =============================================================================
# Persistence Errors
# =============================================================================

class PersistenceError(PhotoSearchError):
    """Raised when the local search history cannot be read or written."""

    def __init__(
        self,
        message: str,
        *,
        operation: str | None = None,
        context: ErrorContext | None = None,
    ) -> None:
        ctx = context or ErrorContext()
        if operation:
            ctx = replace(ctx, operation=operation)
        super().__init__(
            message,
            context=ctx,
            severity=ErrorSeverity.ERROR,
            category=ErrorCategory.PERSISTENCE,
            retryable=False,
        )


# =============================================================================
# Configuration Errors
# =============================================================================

class ConfigurationError(PhotoSearchError):
    """Raised for configuration-related errors."""

    def __init__(
        self,
        message: str,
        *,
        context: ErrorContext | None = None,
    ) -> None:
        super().__init__(
            message,
            context=context,
            severity=ErrorSeverity.CRITICAL,
            category=ErrorCategory.CONFIGURATION,
            retryable=False,
        )
