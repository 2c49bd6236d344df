# clients/base_client.py
"""
Base client for the external data sources.

This module provides the shared request machinery for every source client:
an httpx.AsyncClient, a per-source rate limiter, and a tenacity retry policy
that classifies failures by status code.
"""
import asyncio
import time
from typing import Any, Awaitable, Callable, Dict, Optional

import httpx
from tenacity import AsyncRetrying, RetryCallState, retry_if_exception_type, stop_after_attempt

from startup_graph.config.config import SourceSettings, settings
from startup_graph.config.logs import get_logger
from startup_graph.exceptions import (
    NotFoundError,
    RateLimitedError,
    SourceRequestError,
    TransientError,
)

logger = get_logger(__name__)

SleepFunc = Callable[[float], Awaitable[None]]


class RateLimiter:
    """
    Enforces a minimum delay between consecutive requests to one source.

    All callers share one lock, so concurrent requests are admitted one at a
    time in arrival order.
    """

    def __init__(
        self,
        delay_ms: int,
        clock: Callable[[], float] = time.monotonic,
        sleep: SleepFunc = asyncio.sleep
    ):
        self.delay_ms = delay_ms
        self._clock = clock
        self._sleep = sleep
        self._last_request_time: Optional[float] = None
        self._lock = asyncio.Lock()

    async def wait(self) -> None:
        """Wait until ``delay_ms`` has passed since the previous call, then record this one."""
        async with self._lock:
            if self._last_request_time is not None:
                elapsed_ms = (self._clock() - self._last_request_time) * 1000
                if elapsed_ms < self.delay_ms:
                    await self._sleep((self.delay_ms - elapsed_ms) / 1000)
            self._last_request_time = self._clock()


class BaseSourceClient:
    """
    Base client class with common functionality for all data sources.

    Provides the HTTP client setup, rate limiting, and the retry policy:
    404 is never retried, 403/429 wait for the Retry-After hint, 5xx backs
    off exponentially, anything else propagates.
    """

    source_name = "source"
    rate_limit_statuses = (403, 429)

    def __init__(
        self,
        source_settings: SourceSettings,
        rate_limiter: Optional[RateLimiter] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        sleep: SleepFunc = asyncio.sleep
    ):
        """
        Initialize the client.

        Args:
            source_settings: Connection and retry settings for this source
            rate_limiter: Shared limiter for this source (one is created if omitted)
            timeout: Request timeout in seconds (defaults to settings.HTTP_TIMEOUT)
            transport: Optional httpx transport, used by tests
            sleep: Coroutine used for backoff sleeps
        """
        self.settings = source_settings
        self.max_retries = source_settings.max_retries
        self.rate_limiter = rate_limiter or RateLimiter(source_settings.rate_limit_delay)
        self._sleep = sleep

        self.client = httpx.AsyncClient(
            base_url=source_settings.base_url,
            headers=self._build_headers(),
            timeout=timeout or settings.HTTP_TIMEOUT,
            transport=transport,
        )

    def _build_headers(self) -> Dict[str, str]:
        """Headers sent with every request. Subclasses add credentials."""
        return {}

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc, tb):
        await self.aclose()

    async def aclose(self) -> None:
        """Close the underlying HTTP client."""
        await self.client.aclose()

    async def request(
        self,
        path: str,
        params: Optional[Dict[str, Any]] = None,
        expect: Optional[type] = None
    ) -> Any:
        """
        Issue a rate-limited GET request with retries.

        Args:
            path: Path relative to the source base URL
            params: Query parameters
            expect: JSON container type (dict or list) the body must decode to

        Returns:
            Decoded JSON body, or None for an empty response

        Raises:
            NotFoundError: On 404
            RateLimitedError: When throttled and the retry budget is spent
            TransientError: On 5xx when the retry budget is spent
            SourceRequestError: On a malformed body or any other failure
        """
        retrying = AsyncRetrying(
            stop=stop_after_attempt(self.max_retries + 1),
            retry=retry_if_exception_type((RateLimitedError, TransientError)),
            wait=self._retry_wait,
            sleep=self._sleep,
            before_sleep=self._log_retry,
            reraise=True,
        )

        async for attempt in retrying:
            with attempt:
                await self.rate_limiter.wait()
                result = await self._send(path, params)

        if expect is not None and result is not None and not isinstance(result, expect):
            raise SourceRequestError(
                f"{self.source_name} request to {path} returned "
                f"{type(result).__name__}, expected {expect.__name__}",
                source=self.source_name
            )
        return result

    async def _send(self, path: str, params: Optional[Dict[str, Any]]) -> Any:
        try:
            response = await self.client.get(path, params=params)
        except httpx.HTTPError as e:
            raise SourceRequestError(
                f"{self.source_name} request to {path} failed: {e}",
                source=self.source_name
            ) from e

        self._raise_for_status(response, path)

        if response.status_code == 204 or not response.content:
            return None
        try:
            return response.json()
        except ValueError as e:
            raise SourceRequestError(
                f"{self.source_name} request to {path} returned invalid JSON: {e}",
                source=self.source_name,
                status_code=response.status_code
            ) from e

    def _raise_for_status(self, response: httpx.Response, path: str) -> None:
        status = response.status_code
        if status < 400:
            return

        message = f"{self.source_name} request to {path} failed with status {status}"
        if status == 404:
            raise NotFoundError(message, source=self.source_name, status_code=status)
        if status in self.rate_limit_statuses:
            raise RateLimitedError(
                message,
                source=self.source_name,
                status_code=status,
                retry_after=self._parse_retry_after(response)
            )
        if status >= 500:
            raise TransientError(message, source=self.source_name, status_code=status)
        raise SourceRequestError(message, source=self.source_name, status_code=status)

    def _parse_retry_after(self, response: httpx.Response) -> float:
        """Seconds to wait from the Retry-After header, or the source default."""
        value = response.headers.get("retry-after")
        try:
            seconds = float(value)
        except (TypeError, ValueError):
            return float(self.settings.retry_after_default)
        return seconds if seconds >= 0 else float(self.settings.retry_after_default)

    def _retry_wait(self, retry_state: RetryCallState) -> float:
        exc = retry_state.outcome.exception()
        if isinstance(exc, RateLimitedError):
            return exc.retry_after
        # 1s, 2s, 4s, ...
        return float(2 ** (retry_state.attempt_number - 1))

    def _log_retry(self, retry_state: RetryCallState) -> None:
        exc = retry_state.outcome.exception()
        delay = retry_state.next_action.sleep if retry_state.next_action else 0
        logger.warning(
            f"{exc}; retrying in {delay:.1f}s "
            f"(retry {retry_state.attempt_number}/{self.max_retries})"
        )
