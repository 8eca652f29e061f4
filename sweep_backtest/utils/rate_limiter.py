"""
Sliding-window rate limiter for outbound API calls.
"""

import asyncio
import logging
import math
import time
from collections import deque
from typing import Callable, Deque


class RateLimiter:
    """
    Allow at most `max_calls` acquisitions per `window_seconds`.

    One limiter per client instance; callers await `acquire()` before each
    request.

    Example:
        limiter = RateLimiter(max_calls=5, window_seconds=60)
        await limiter.acquire()
    """

    def __init__(
        self,
        max_calls: int,
        window_seconds: float,
        clock: Callable[[], float] = time.monotonic,
    ):
        if max_calls < 1:
            raise ValueError(f"max_calls must be at least 1, got {max_calls}")
        self.max_calls = max_calls
        self.window_seconds = window_seconds
        self._clock = clock
        self._calls: Deque[float] = deque()
        self._lock = asyncio.Lock()
        self.logger = logging.getLogger(__name__)

    def _evict(self, now: float):
        while self._calls and self._calls[0] <= now - self.window_seconds:
            self._calls.popleft()

    async def acquire(self):
        """Wait until a call slot is free, then record the call."""
        async with self._lock:
            now = self._clock()
            self._evict(now)

            if len(self._calls) >= self.max_calls:
                sleep_time = self._calls[0] + self.window_seconds - now
                if sleep_time > 0:
                    self.logger.info(f"Rate limit reached, waiting {sleep_time:.1f}s")
                    await asyncio.sleep(sleep_time)
                now = self._clock()
                self._evict(now)

            self._calls.append(now)

    def capacity_within(self, seconds: float) -> int:
        """Calls that can be made within `seconds`, starting from an empty window."""
        windows = math.floor(seconds / self.window_seconds)
        return self.max_calls * max(1, windows)

    @property
    def calls_in_window(self) -> int:
        self._evict(self._clock())
        return len(self._calls)
