"""
Sliding-window rate limiter for external capability clients.

Embedding and text-generation clients call ``acquire()`` before every
request, so pacing lives with the clients and the clustering engine never
sleeps on its own.
"""

import logging
import threading
import time
from typing import Callable, List

logger = logging.getLogger(__name__)


class RateLimiter:
    """
    Allow at most ``max_calls`` requests per ``period`` seconds.

    Args:
        max_calls: Requests permitted inside one window
        period: Window length in seconds (default: 60)
        clock: Monotonic time source (injectable for tests)
        sleep: Sleep function (injectable for tests)
    """

    def __init__(
        self,
        max_calls: int,
        period: float = 60.0,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep,
    ):
        if max_calls < 1:
            raise ValueError(f"max_calls must be >= 1, got {max_calls}")
        if period <= 0:
            raise ValueError(f"period must be > 0, got {period}")

        self.max_calls = max_calls
        self.period = period
        self._clock = clock
        self._sleep = sleep
        self._lock = threading.Lock()

        # Timestamps of requests inside the current window
        self._request_times: List[float] = []

    @classmethod
    def per_minute(cls, requests_per_minute: int) -> "RateLimiter":
        return cls(max_calls=requests_per_minute, period=60.0)

    def _prune(self, now: float) -> None:
        cutoff = now - self.period
        self._request_times[:] = [t for t in self._request_times if t > cutoff]

    def acquire(self) -> float:
        """
        Block until a request slot is free, then record the request.

        Returns:
            Seconds spent waiting (0.0 when a slot was free)
        """
        with self._lock:
            now = self._clock()
            self._prune(now)

            waited = 0.0
            if len(self._request_times) >= self.max_calls:
                oldest = self._request_times[0]
                wait_time = self.period - (now - oldest)
                if wait_time > 0:
                    logger.info(
                        f"Rate limit reached ({self.max_calls}/{self.period:g}s). "
                        f"Waiting {wait_time:.1f}s..."
                    )
                    self._sleep(wait_time)
                    waited = wait_time
                now = self._clock()
                self._prune(now)

            self._request_times.append(now)
            return waited

    def __repr__(self) -> str:
        return f"RateLimiter(max_calls={self.max_calls}, period={self.period:g})"
