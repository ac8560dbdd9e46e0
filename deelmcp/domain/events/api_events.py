"""Domain Events related to upstream API calls and resilience.

Examples include events for when calls are served from cache, throttled,
retried, fail, or succeed.
"""

from dataclasses import dataclass, field
import time
from typing import Optional

@dataclass
class DomainEvent:
    """Base class for domain events."""
    pass

# --- Specific API Events ---

@dataclass
class RequestServedFromCache(DomainEvent):
    """Event triggered when a request is answered from the TTL cache."""
    url: str
    timestamp: float = field(default_factory=time.time)

@dataclass
class RequestThrottled(DomainEvent):
    """Event triggered when the rate limiter reports a non-zero wait."""
    url: str
    wait_time_seconds: float
    timestamp: float = field(default_factory=time.time)

@dataclass
class RetryScheduled(DomainEvent):
    """Event triggered when a retry is scheduled for a failed attempt."""
    url: str
    attempt_number: int
    delay_seconds: float
    reason: str
    timestamp: float = field(default_factory=time.time)

@dataclass
class RequestSucceeded(DomainEvent):
    """Event triggered when an upstream call returns a 2xx response."""
    url: str
    status_code: int
    attempts: int
    latency_ms: float
    timestamp: float = field(default_factory=time.time)

@dataclass
class RequestFailed(DomainEvent):
    """Event triggered when a request fails definitively."""
    url: str
    error_type: str
    error_message: str
    status_code: Optional[int] = None
    timestamp: float = field(default_factory=time.time)
