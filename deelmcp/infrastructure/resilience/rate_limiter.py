"""Implementation of a rate limiter.

Controls the frequency of outgoing requests to stay under the Deel API rate
limit. Uses a sliding window over the start times of recent requests.
"""

import asyncio
import logging
import time
from collections import deque
from typing import Awaitable, Callable, Deque

logger = logging.getLogger(__name__)

DEFAULT_MAX_REQUESTS = 5           # Max 5 request starts...
DEFAULT_TIME_WINDOW_SECONDS = 1.0  # ...per trailing second
DEFAULT_MARGIN_SECONDS = 0.01      # Added to every computed wait

class RateLimiter:
    """Simple sliding window rate limiter.

    One instance is shared by every caller of the request pipeline, so the
    cap applies system-wide rather than per endpoint.
    """

    def __init__(
        self,
        max_requests: int = DEFAULT_MAX_REQUESTS,
        time_window: float = DEFAULT_TIME_WINDOW_SECONDS,
        margin: float = DEFAULT_MARGIN_SECONDS,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        """Initializes the rate limiter.

        Args:
            max_requests: Maximum number of request starts allowed in the window.
            time_window: The trailing window in seconds.
            margin: Fixed extra delay added to each computed wait.
            clock: Monotonic time source, in seconds.
            sleep: Coroutine used to suspend the caller.
        """
        if max_requests < 1:
            raise ValueError("max_requests must be at least 1")
        self.max_requests = max_requests
        self.time_window = time_window
        self.margin = margin
        self._clock = clock
        self._sleep = sleep
        self.timestamps: Deque[float] = deque()
        self._lock = asyncio.Lock()
        logger.info(f"RateLimiter initialized: {max_requests} requests / {time_window} seconds")

    def _cleanup_timestamps(self, now: float) -> None:
        """Removes timestamps that have left the window."""
        while self.timestamps and now - self.timestamps[0] >= self.time_window:
            self.timestamps.popleft()

    async def acquire(self) -> None:
        """Waits until a request is permitted, then records its start.

        Never fails; it always eventually grants a slot.
        """
        while True:
            async with self._lock:
                now = self._clock()
                self._cleanup_timestamps(now)
                if len(self.timestamps) < self.max_requests:
                    self.timestamps.append(now)
                    logger.debug("Rate limit permission granted.")
                    return
                oldest_timestamp = self.timestamps[0]
                wait_time = self.time_window - (now - oldest_timestamp) + self.margin

            logger.debug(f"Rate limit reached. Waiting for {wait_time:.3f} seconds.")
            await self._sleep(wait_time)
            # Loop again: another caller may have taken the freed slot

    async def get_wait_time(self) -> float:
        """Estimates the time needed before the next request can be made."""
        async with self._lock:
            now = self._clock()
            self._cleanup_timestamps(now)
            if len(self.timestamps) < self.max_requests:
                return 0.0
            oldest_timestamp = self.timestamps[0]
            return max(0.0, self.time_window - (now - oldest_timestamp) + self.margin)
