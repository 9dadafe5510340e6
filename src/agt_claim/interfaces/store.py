"""ClaimStore protocol - persists claim records and their used flag."""

from __future__ import annotations

from typing import Protocol

from agt_claim.models.records import ClaimRecord


class ClaimStore(Protocol):
    """Maps claim codes to claim records."""

    # ── Lifecycle ──────────────────────────────────────────

    async def initialize(self) -> None:
        """Prepare the backing storage."""
        ...

    async def close(self) -> None:
        """Release the backing storage."""
        ...

    # ── Records ────────────────────────────────────────────

    async def insert(self, record: ClaimRecord) -> None:
        """Store a record, replacing any existing record with the same code."""
        ...

    async def get(self, code: str) -> ClaimRecord | None:
        ...

    async def mark_used(self, code: str, used_at: int) -> bool:
        """Set used=True only if it is currently False.

        Returns True if this call performed the transition.
        """
        ...

    # ── Maintenance ────────────────────────────────────────

    async def purge_expired(self, now_ms: int) -> int:
        """Delete records whose expiry has passed. Returns the number removed."""
        ...

    async def count(self) -> int:
        ...
