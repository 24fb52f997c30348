"""Pacing policies used to rate-limit calls to the lexical service."""

from __future__ import annotations

import asyncio
import logging
import time
from typing import Callable, Protocol, Union

logger = logging.getLogger(__name__)


class Pacer(Protocol):
    """Anything that can be awaited between two outbound calls."""

    async def wait(self) -> None:
        ...


class FixedDelayPacer:
    """Sleep for the same delay every time."""

    def __init__(self, delay: float) -> None:
        if delay < 0:
            raise ValueError("Delay must not be negative")
        self.delay = delay

    async def wait(self) -> None:
        if self.delay:
            logger.debug("Waiting %.0fms before next request...", self.delay * 1000)
        await asyncio.sleep(self.delay)

    def __repr__(self) -> str:
        return f"FixedDelayPacer(delay={self.delay})"


class TokenBucketPacer:
    """Allow bursts of up to ``capacity`` calls, refilled at ``rate`` tokens per second.

    ``wait`` consumes one token and only sleeps when the bucket is empty.
    """

    def __init__(
        self,
        rate: float,
        capacity: float = 1.0,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if rate <= 0:
            raise ValueError("Rate must be positive")
        if capacity < 1:
            raise ValueError("Capacity must be at least 1")
        self.rate = rate
        self.capacity = capacity
        self._clock = clock
        self._tokens = capacity
        self._updated_at = clock()

    def _refill(self) -> None:
        now = self._clock()
        elapsed = now - self._updated_at
        self._updated_at = now
        self._tokens = min(self.capacity, self._tokens + elapsed * self.rate)

    async def wait(self) -> None:
        self._refill()
        if self._tokens < 1:
            shortfall = (1 - self._tokens) / self.rate
            logger.debug("Token bucket empty, waiting %.0fms", shortfall * 1000)
            await asyncio.sleep(shortfall)
            self._refill()
        self._tokens = max(0.0, self._tokens - 1)

    def __repr__(self) -> str:
        return f"TokenBucketPacer(rate={self.rate}, capacity={self.capacity})"


def as_pacer(policy: Union[Pacer, float, int]) -> Pacer:
    """Accept either a pacer or a plain delay in seconds."""
    if isinstance(policy, (int, float)):
        return FixedDelayPacer(float(policy))
    return policy
