"""Request pipeline for the Deel REST API.

Every upstream call made by the tool handlers funnels through
`DeelApiClient.request`, which builds the URL, consults the TTL cache,
acquires a rate-limiter slot, performs the GET with bounded retries, and
translates failures into the `DeelError` taxonomy.
"""

import asyncio
import copy
import logging
import time
from typing import Any, Awaitable, Callable, NoReturn, Optional

import httpx

from deelmcp.domain.errors import (
    DeelDecodeError,
    DeelError,
    DeelRetriesExhaustedError,
)
from deelmcp.domain.events.api_events import (
    DomainEvent,
    RequestFailed,
    RequestServedFromCache,
    RequestSucceeded,
    RequestThrottled,
    RetryScheduled,
)
from deelmcp.domain.interfaces.cache import CacheService
from deelmcp.domain.models.common import (
    CacheKey,
    Envelope,
    ParamValue,
    QueryParams,
    RequestDescriptor,
)
from deelmcp.infrastructure.resilience.rate_limiter import RateLimiter
from deelmcp.infrastructure.resilience.retry_policy import (
    Fail,
    Retry,
    evaluate_response,
    evaluate_transport_error,
)

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://api.letsdeel.com/rest/v2"
DEFAULT_MAX_ATTEMPTS = 3
DEFAULT_TIMEOUT_SECONDS = 30.0

_MISS = object()

def _format_param(value: ParamValue) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)

class DeelApiClient:
    """Rate-limited, retrying, caching GET client for the Deel API.

    A single instance is shared by all tool handlers in a process; it owns its
    cache and rate limiter rather than relying on module-level state.
    """

    def __init__(
        self,
        api_token: str,
        base_url: str = DEFAULT_BASE_URL,
        cache: Optional[CacheService] = None,
        rate_limiter: Optional[RateLimiter] = None,
        max_attempts: int = DEFAULT_MAX_ATTEMPTS,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        http_client: Optional[httpx.AsyncClient] = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
        event_listener: Optional[Callable[[DomainEvent], None]] = None,
    ):
        """Initializes the client.

        Args:
            api_token: Static bearer token.
            base_url: API root; override to target a sandbox.
            cache: Optional response cache; caching is skipped when None.
            rate_limiter: Shared limiter; a default 5 req/s limiter if None.
            max_attempts: Total attempts per request, including the first.
            timeout: Per-attempt HTTP timeout in seconds.
            http_client: Preconfigured client (tests pass a MockTransport).
            sleep: Coroutine used for backoff waits.
            event_listener: Optional callback receiving pipeline events.
        """
        if not api_token:
            raise ValueError("api_token must not be empty")
        if max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        self.base_url = base_url.rstrip("/")
        self.cache = cache
        self.rate_limiter = rate_limiter or RateLimiter()
        self.max_attempts = max_attempts
        self._sleep = sleep
        self._event_listener = event_listener
        self._headers = {
            "Authorization": f"Bearer {api_token}",
            "Accept": "application/json",
        }
        self._owns_http_client = http_client is None
        self._http = http_client or httpx.AsyncClient(timeout=timeout)
        logger.info(
            f"DeelApiClient initialized: base_url={self.base_url}, "
            f"max_attempts={max_attempts}, cache={'on' if cache is not None else 'off'}"
        )

    async def __aenter__(self) -> "DeelApiClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Closes the underlying HTTP client if this instance created it."""
        if self._owns_http_client:
            await self._http.aclose()

    def _dispatch_event(self, event: DomainEvent) -> None:
        logger.debug(f"EVENT: {event}")
        if self._event_listener is not None:
            self._event_listener(event)

    def build_url(self, path: str, params: Optional[QueryParams] = None) -> httpx.URL:
        """Resolves base URL + path and appends the defined query parameters."""
        descriptor = RequestDescriptor.build(path, params)
        query = {key: _format_param(value) for key, value in descriptor.params.items()}
        return httpx.URL(f"{self.base_url}{descriptor.path}", params=query)

    async def request(self, path: str, params: Optional[QueryParams] = None) -> Envelope:
        """Performs a GET against `path` and returns the parsed JSON envelope.

        Raises:
            DeelApiError: Non-2xx response (immediately for 4xx other than 429,
                after the last attempt for 429/5xx).
            DeelTransportError: No response after the last attempt.
            DeelDecodeError: 2xx response whose body is not JSON.
        """
        url = self.build_url(path, params)
        cache_key = CacheKey(str(url))

        if self.cache is not None:
            cached = self.cache.get(cache_key, _MISS)
            if cached is not _MISS:
                self._dispatch_event(RequestServedFromCache(url=cache_key))
                return copy.deepcopy(cached)

        wait_time = await self.rate_limiter.get_wait_time()
        if wait_time > 0:
            self._dispatch_event(RequestThrottled(url=cache_key, wait_time_seconds=wait_time))
        await self.rate_limiter.acquire()

        last_error: Optional[DeelError] = None
        for attempt in range(self.max_attempts):
            start_time = time.perf_counter()
            try:
                response = await self._http.get(url, headers=self._headers)
            except httpx.TransportError as e:
                outcome = evaluate_transport_error(e, attempt)
            else:
                outcome = evaluate_response(response, attempt)
                if not isinstance(outcome, (Retry, Fail)):
                    result = self._decode(response, cache_key)
                    latency_ms = (time.perf_counter() - start_time) * 1000
                    self._dispatch_event(RequestSucceeded(
                        url=cache_key, status_code=response.status_code,
                        attempts=attempt + 1, latency_ms=latency_ms,
                    ))
                    if self.cache is not None:
                        self.cache.set(cache_key, copy.deepcopy(result))
                    return result

            if isinstance(outcome, Fail):
                self._fail(cache_key, outcome.error)

            last_error = outcome.error
            if attempt + 1 < self.max_attempts:
                logger.warning(
                    f"Deel API {outcome.reason} on attempt {attempt + 1}/{self.max_attempts}, "
                    f"retrying in {outcome.delay:.1f}s: {cache_key}"
                )
                self._dispatch_event(RetryScheduled(
                    url=cache_key, attempt_number=attempt + 1,
                    delay_seconds=outcome.delay, reason=outcome.reason,
                ))
                await self._sleep(outcome.delay)

        logger.error(f"Max attempts ({self.max_attempts}) reached for {cache_key}. Last error: {last_error}")
        self._fail(cache_key, last_error or DeelRetriesExhaustedError(self.max_attempts))

    def _decode(self, response: httpx.Response, cache_key: CacheKey) -> Envelope:
        try:
            return response.json()
        except ValueError as e:
            error = DeelDecodeError(cache_key, str(e))
            self._fail(cache_key, error)

    def _fail(self, cache_key: CacheKey, error: DeelError) -> NoReturn:
        self._dispatch_event(RequestFailed(
            url=cache_key,
            error_type=type(error).__name__,
            error_message=str(error),
            status_code=getattr(error, "status_code", None),
        ))
        raise error
