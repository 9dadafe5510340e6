"""RateLimiter protocol - per-client request budgets."""

from __future__ import annotations

from typing import Protocol


class RateLimiter(Protocol):
    """Consumes one unit of a client's budget or rejects."""

    async def consume(self, key: str) -> bool:
        """Return True if the request is allowed, False if the budget is spent."""
        ...
