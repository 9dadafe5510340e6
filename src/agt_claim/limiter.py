"""Sliding-window rate limiter keyed by client identity."""

from __future__ import annotations

import asyncio
import time
from collections import deque
from typing import Callable


class SlidingWindowRateLimiter:
    """Allows ``points`` requests per key within any ``duration``-second window.

    ``consume`` only trims the caller's own window. Idle clients are
    forgotten by a full pass that runs at most once per ``duration``.
    """

    def __init__(
        self,
        points: int = 10,
        duration: float = 60,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.points = points
        self.duration = duration
        self._clock = clock
        self._windows: dict[str, deque[float]] = {}
        self._last_prune = clock()
        self._lock = asyncio.Lock()

    async def consume(self, key: str) -> bool:
        async with self._lock:
            now = self._clock()
            cutoff = now - self.duration
            if now - self._last_prune >= self.duration:
                self._prune(cutoff)
                self._last_prune = now

            window = self._windows.setdefault(key, deque())
            _trim(window, cutoff)
            if len(window) >= self.points:
                return False
            window.append(now)
            return True

    def _prune(self, cutoff: float) -> None:
        """Forget clients with no requests left inside the window."""
        for key in list(self._windows):
            window = self._windows[key]
            _trim(window, cutoff)
            if not window:
                del self._windows[key]

    def tracked_clients(self) -> int:
        return len(self._windows)


def _trim(window: deque[float], cutoff: float) -> None:
    while window and window[0] <= cutoff:
        window.popleft()
