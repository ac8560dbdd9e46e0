"""Error taxonomy for the Deel request pipeline.

Every failure surfaces as a `DeelError` subclass carrying a human-readable
message. Tool handlers catch `DeelError` and turn it into an error result;
only `ConfigurationError` is fatal to the process.
"""

from typing import Optional


class DeelError(Exception):
    """Base class for all errors raised by this package."""


class ConfigurationError(DeelError):
    """Raised when required configuration (the API token) is missing."""


class DeelApiError(DeelError):
    """The upstream API answered with a non-2xx status."""

    def __init__(self, status_code: int, message: str, body: Optional[str] = None):
        self.status_code = status_code
        self.body = body
        super().__init__(message)

    @property
    def retryable(self) -> bool:
        return self.status_code == 429 or self.status_code >= 500


class DeelTransportError(DeelError):
    """No HTTP response was received (DNS failure, timeout, connection reset)."""

    def __init__(self, original_exception: Exception, attempts: int):
        self.original_exception = original_exception
        self.attempts = attempts
        detail = str(original_exception) or type(original_exception).__name__
        super().__init__(f"Request failed after {attempts} attempt(s): {detail}")


class DeelDecodeError(DeelError):
    """A 2xx response whose body is not valid JSON."""

    def __init__(self, url: str, detail: str):
        self.url = url
        super().__init__(f"Invalid JSON in response from {url}: {detail}")


class DeelRetriesExhaustedError(DeelError):
    """All attempts were used without any error being recorded."""

    def __init__(self, attempts: int):
        self.attempts = attempts
        super().__init__(f"Request failed after {attempts} attempts")
