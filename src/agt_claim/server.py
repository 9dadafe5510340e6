"""Server wiring - builds components and runs the HTTP listener."""

from __future__ import annotations

import asyncio
import logging
import signal

from aiohttp import web

from agt_claim.api.routes import build_app
from agt_claim.chain.balance import Web3BalanceOracle
from agt_claim.limiter import SlidingWindowRateLimiter
from agt_claim.models.config import AppConfig
from agt_claim.service import ClaimService
from agt_claim.storage import build_store
from agt_claim.sweeper import ExpirySweeper

log = logging.getLogger(__name__)


class ClaimServer:
    """Balance-gated claim code server.

    Owns the claim store, balance oracle, rate limiter and expiry sweeper,
    and serves the ClaimService over HTTP until stopped.
    """

    def __init__(self, cfg: AppConfig) -> None:
        self._cfg = cfg
        self._stopped = asyncio.Event()

        # Core components
        self.store = build_store(cfg.storage)
        self.oracle = Web3BalanceOracle(
            cfg.chain.rpc_url, cfg.chain.token_address, timeout=cfg.chain.rpc_timeout,
        )
        self.limiter = SlidingWindowRateLimiter(
            points=cfg.rate_limit.points, duration=cfg.rate_limit.duration,
        )
        self.service = ClaimService(
            store=self.store,
            oracle=self.oracle,
            limiter=self.limiter,
            secret=cfg.claims.secret,
            min_balance=cfg.chain.min_balance,
            code_prefix=cfg.claims.code_prefix,
        )
        self.sweeper = ExpirySweeper(self.store, cfg.storage.prune_interval)
        self.app = build_app(self.service, trust_proxy=cfg.server.trust_proxy)

    async def start(self) -> None:
        """Initialize components and serve until stop() is called."""
        log.info("Starting claim server")
        log.info("  Listen: %s:%d", self._cfg.server.host, self._cfg.server.port)
        log.info("  RPC: %s", self._cfg.chain.rpc_url)
        log.info("  Token: %s", self._cfg.chain.token_address)
        log.info("  Min balance: %s", self._cfg.chain.min_balance)
        log.info("  Storage: %s", self._cfg.storage.backend.value)

        runner = web.AppRunner(self.app)
        try:
            await self.store.initialize()
            await self.sweeper.start()
            await runner.setup()
            site = web.TCPSite(runner, self._cfg.server.host, self._cfg.server.port)
            await site.start()
            log.info("Claim server running on %s", site.name)
            await self._stopped.wait()
        finally:
            if runner.server is not None:
                await runner.cleanup()
            await self.sweeper.stop()
            await self.oracle.close()
            await self.store.close()
            log.info("Claim server shut down cleanly")

    async def stop(self) -> None:
        """Signal the server to stop gracefully."""
        log.info("Stop requested")
        self._stopped.set()


async def run_server(cfg: AppConfig) -> None:
    """Entry point for running the server."""
    server = ClaimServer(cfg)

    loop = asyncio.get_running_loop()

    def _signal_handler():
        asyncio.ensure_future(server.stop())

    for sig in (signal.SIGINT, signal.SIGTERM):
        try:
            loop.add_signal_handler(sig, _signal_handler)
        except NotImplementedError:
            # Windows doesn't support add_signal_handler
            pass

    await server.start()
