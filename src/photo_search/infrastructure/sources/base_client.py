"""
Base API Client - Common HTTP request pattern with rate limiting and circuit breaker.

Provides a reusable base class for remote image search backends with:
- Rate limiting (configurable interval between requests)
- Circuit breaker for fault tolerance
- Consistent mapping of HTTP failures onto the exception hierarchy

Failures are raised, never swallowed. There is no automatic retry: callers
decide what to do with a failed page.
"""

from __future__ import annotations

import asyncio
import json
import logging
import time
from typing import Any

import httpx
from typing_extensions import Self

from photo_search.shared.async_utils import CircuitBreaker
from photo_search.shared.exceptions import (
    NetworkError,
    ParseError,
    RateLimitError,
    ServiceUnavailableError,
)

logger = logging.getLogger(__name__)


class BaseAPIClient:
    """
    Base class for external API clients.

    Provides common infrastructure:
    - httpx.AsyncClient management
    - Rate limiting with configurable interval
    - Circuit breaker for fault tolerance
    - Typed errors for every failure mode

    Subclasses should set `_service_name`.

    Example:
        class MyClient(BaseAPIClient):
            _service_name = "MyAPI"

            def __init__(self):
                super().__init__(base_url="https://api.example.com", min_interval=0.1)

            async def get_item(self, item_id: str) -> dict:
                return await self._make_request(f"/items/{item_id}")
    """

    _service_name: str = "API"

    def __init__(
        self,
        base_url: str = "",
        timeout: float = 30.0,
        min_interval: float = 0.1,
        headers: dict[str, str] | None = None,
        circuit_breaker: CircuitBreaker | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """
        Initialize base client.

        Args:
            base_url: Base URL for the API (optional, can pass full URLs)
            timeout: Request timeout in seconds
            min_interval: Minimum seconds between requests (rate limiting)
            headers: Default headers for all requests
            circuit_breaker: Optional circuit breaker for fault tolerance.
                             If None, a default one is created (threshold=10, recovery=60s).
            transport: Optional httpx transport (tests pass ``httpx.MockTransport``)
        """
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._min_interval = min_interval
        self._last_request_time = 0.0
        self._client = httpx.AsyncClient(
            timeout=self._timeout,
            headers=headers or {},
            transport=transport,
            limits=httpx.Limits(
                max_connections=20,
                max_keepalive_connections=10,
                keepalive_expiry=30.0,
            ),
        )
        self._circuit_breaker = circuit_breaker or CircuitBreaker(failure_threshold=10, recovery_timeout=60.0)

    async def _rate_limit(self) -> None:
        """Enforce minimum interval between requests."""
        elapsed = time.time() - self._last_request_time
        if elapsed < self._min_interval:
            await asyncio.sleep(self._min_interval - elapsed)
        self._last_request_time = time.time()

    def _build_url(self, url: str) -> str:
        """Build full URL from path or full URL."""
        if url.startswith(("http://", "https://")):
            return url
        return f"{self._base_url}{url}"

    async def _make_request(
        self,
        url: str,
        *,
        params: dict[str, str] | None = None,
        headers: dict[str, str] | None = None,
    ) -> Any:
        """
        Make an HTTP GET request and decode the JSON body.

        Args:
            url: Full URL or path (appended to base_url)
            params: Query string parameters
            headers: Additional headers for this request

        Returns:
            Decoded JSON value

        Raises:
            RateLimitError: HTTP 429, or the circuit breaker is open
            ServiceUnavailableError: HTTP 5xx
            NetworkError: Other HTTP errors, timeouts and transport failures
            ParseError: Body is not valid JSON
        """
        full_url = self._build_url(url)
        await self._rate_limit()

        async with self._circuit_breaker:
            try:
                response = await self._client.get(full_url, params=params, headers=headers or {})
            except httpx.TimeoutException as e:
                logger.warning(f"{self._service_name} request timed out: {full_url}")
                raise NetworkError(f"{self._service_name}: request timeout after {self._timeout}s") from e
            except httpx.RequestError as e:
                logger.warning(f"{self._service_name} request error: {e}")
                raise NetworkError(f"{self._service_name}: connection failed: {e}") from e

            self._raise_for_status(response)

        try:
            return response.json()
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            logger.warning(f"{self._service_name} returned invalid JSON")
            raise ParseError("Invalid JSON response", source=self._service_name) from e

    def _raise_for_status(self, response: httpx.Response) -> None:
        """Map non-2xx responses onto the exception hierarchy."""
        status = response.status_code
        if response.is_success:
            return
        if status == 429:
            raise RateLimitError(
                f"Rate limited by {self._service_name}",
                retry_after=self._get_retry_after(response),
            )
        if status >= 500:
            raise ServiceUnavailableError(
                f"HTTP {status}: {response.reason_phrase}",
                service=self._service_name,
            )
        raise NetworkError(f"{self._service_name}: HTTP {status}: {response.reason_phrase}")

    @staticmethod
    def _get_retry_after(response: httpx.Response) -> float:
        """Extract Retry-After from response headers (seconds)."""
        try:
            return float(response.headers.get("Retry-After", 1.0))
        except (ValueError, TypeError):
            return 1.0

    async def close(self) -> None:
        """Close the underlying HTTP client."""
        await self._client.aclose()

    async def __aenter__(self) -> Self:
        return self

    async def __aexit__(self, *args: object) -> None:
        await self.close()
