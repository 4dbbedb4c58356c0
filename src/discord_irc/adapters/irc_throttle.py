"""IRC flood protection: token bucket gating outbound lines."""

from __future__ import annotations

import asyncio
import time
from collections.abc import Callable


class TokenBucket:
    """Allow bursts of ``limit`` lines, then ``rate`` lines per second."""

    def __init__(self, limit: int, rate: float = 2.0, *, clock: Callable[[], float] = time.monotonic) -> None:
        if limit < 1 or rate <= 0:
            raise ValueError("limit must be >= 1 and rate > 0")
        self._limit = limit
        self._rate = rate
        self._clock = clock
        self._tokens = float(limit)
        self._stamp = clock()

    @property
    def tokens(self) -> float:
        self._refill()
        return self._tokens

    def delay(self) -> float:
        """Seconds until one token is available; 0 if one is available now."""
        self._refill()
        if self._tokens >= 1:
            return 0.0
        return (1 - self._tokens) / self._rate

    async def take(self) -> None:
        """Wait for a token and consume it."""
        wait = self.delay()
        if wait > 0:
            await asyncio.sleep(wait)
            self._refill()
        self._tokens = max(0.0, self._tokens - 1)

    def _refill(self) -> None:
        now = self._clock()
        self._tokens = min(float(self._limit), self._tokens + (now - self._stamp) * self._rate)
        self._stamp = now
