"""Retry policy for upstream Deel API calls.

Each attempt is classified into one of three tagged outcomes: `Succeed`,
`Retry` (sleep, then try again) or `Fail` (surface the error now). The request
pipeline loops over attempts and acts on the outcome; no exceptions are used
for control flow.

Backoff rules:
    429         -> Retry-After seconds if present, else 2s * (attempt + 1)
    >= 500      -> 1s * (attempt + 1)
    transport   -> 1s * (attempt + 1)
    other 4xx   -> fail immediately (403 gets a token-scope hint)
"""

import json
from dataclasses import dataclass
from typing import Optional, Union

import httpx

from deelmcp.domain.errors import DeelApiError, DeelError, DeelTransportError


RATE_LIMIT_BACKOFF_SECONDS = 2.0
SERVER_ERROR_BACKOFF_SECONDS = 1.0
TRANSPORT_BACKOFF_SECONDS = 1.0
MAX_RETRY_AFTER_SECONDS = 60.0
MAX_BODY_EXCERPT = 200
SCOPE_HINT = ". Check that your API token has the required read scope for this resource."

@dataclass(frozen=True)
class Succeed:
    """The response is a 2xx and can be decoded."""

@dataclass(frozen=True)
class Retry:
    """Sleep for `delay` seconds and try again; raise `error` if no attempts remain."""
    delay: float
    error: DeelError
    reason: str

@dataclass(frozen=True)
class Fail:
    """Surface `error` immediately without further attempts."""
    error: DeelError

Outcome = Union[Succeed, Retry, Fail]

def parse_retry_after(value: Optional[str]) -> Optional[float]:
    """Parses a Retry-After header given in whole seconds.

    Returns None when the header is absent or not a non-negative integer
    (HTTP-date values are not used by the Deel API). Values above
    MAX_RETRY_AFTER_SECONDS are clamped to it.
    """
    if value is None:
        return None
    try:
        seconds = int(value.strip())
    except ValueError:
        return None
    if seconds < 0:
        return None
    return min(float(seconds), MAX_RETRY_AFTER_SECONDS)

def build_error_message(status_code: int, body: str) -> str:
    """Builds `Deel API error <status>[: message][ - errors]` from a response body."""
    message = f"Deel API error {status_code}"
    try:
        parsed = json.loads(body)
    except ValueError:
        if body:
            message += f": {body[:MAX_BODY_EXCERPT]}"
    else:
        if isinstance(parsed, dict):
            if parsed.get("message"):
                message += f": {parsed['message']}"
            if parsed.get("errors"):
                message += f" - {json.dumps(parsed['errors'], separators=(',', ':'))}"
    if status_code == 403:
        message += SCOPE_HINT
    return message

def evaluate_response(response: httpx.Response, attempt: int) -> Outcome:
    """Classifies an HTTP response for the zero-based `attempt`."""
    status = response.status_code

    if status == 429:
        retry_after = parse_retry_after(response.headers.get("retry-after"))
        delay = retry_after if retry_after is not None else RATE_LIMIT_BACKOFF_SECONDS * (attempt + 1)
        error = DeelApiError(status, build_error_message(status, response.text), response.text)
        return Retry(delay=delay, error=error, reason="rate limited")

    if status >= 500:
        error = DeelApiError(status, build_error_message(status, response.text), response.text)
        return Retry(delay=SERVER_ERROR_BACKOFF_SECONDS * (attempt + 1), error=error,
                     reason=f"server error {status}")

    if not response.is_success:
        body = response.text
        return Fail(DeelApiError(status, build_error_message(status, body), body))

    return Succeed()

def evaluate_transport_error(exc: Exception, attempt: int) -> Outcome:
    """Classifies a transport-level failure (no response received)."""
    return Retry(
        delay=TRANSPORT_BACKOFF_SECONDS * (attempt + 1),
        error=DeelTransportError(exc, attempt + 1),
        reason=f"request failed: {str(exc) or type(exc).__name__}",
    )
