"""In-memory implementation of the ClaimStore protocol."""

from __future__ import annotations

import asyncio
from dataclasses import replace

from agt_claim.models.records import ClaimRecord


class MemoryClaimStore:
    """Process-local claim store.

    Records live for the lifetime of the process. All mutations take a
    single lock so mark_used() is a true compare-and-set under concurrent
    redemptions.
    """

    def __init__(self) -> None:
        self._records: dict[str, ClaimRecord] = {}
        self._lock = asyncio.Lock()

    async def initialize(self) -> None:
        pass

    async def close(self) -> None:
        pass

    async def insert(self, record: ClaimRecord) -> None:
        async with self._lock:
            self._records[record.code] = replace(record)

    async def get(self, code: str) -> ClaimRecord | None:
        record = self._records.get(code)
        # Hand out copies so callers cannot flip the used flag in place.
        return replace(record) if record else None

    async def mark_used(self, code: str, used_at: int) -> bool:
        async with self._lock:
            record = self._records.get(code)
            if record is None or record.used:
                return False
            record.used = True
            record.used_at = used_at
            return True

    async def purge_expired(self, now_ms: int) -> int:
        async with self._lock:
            expired = [c for c, r in self._records.items() if r.is_expired(now_ms)]
            for code in expired:
                del self._records[code]
            return len(expired)

    async def count(self) -> int:
        return len(self._records)
