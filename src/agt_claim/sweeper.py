"""Expiry sweeper - periodically removes expired claim records."""

from __future__ import annotations

import asyncio
import logging
import time
from typing import Callable

from agt_claim.interfaces.store import ClaimStore

log = logging.getLogger(__name__)


class ExpirySweeper:
    """Background task that purges expired records every ``interval`` seconds."""

    def __init__(
        self,
        store: ClaimStore,
        interval: int = 300,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._store = store
        self._interval = interval
        self._clock = clock
        self._running = False
        self._task: asyncio.Task | None = None

    async def sweep(self) -> int:
        """Run one purge pass. Returns the number of records removed."""
        removed = await self._store.purge_expired(int(self._clock() * 1000))
        if removed:
            log.info("Purged %d expired claim(s)", removed)
        return removed

    # ── Lifecycle ─────────────────────────────────────────

    async def start(self) -> None:
        if self._interval <= 0:
            log.info("Expiry sweeper is disabled")
            return
        self._running = True
        self._task = asyncio.create_task(self._loop())
        log.info("Expiry sweeper started (interval=%ds)", self._interval)

    async def stop(self) -> None:
        self._running = False
        if self._task:
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
            self._task = None

    async def _loop(self) -> None:
        while self._running:
            try:
                await asyncio.sleep(self._interval)
                await self.sweep()
            except asyncio.CancelledError:
                break
            except Exception as exc:
                log.error("Expiry sweep error: %s", exc, exc_info=True)
