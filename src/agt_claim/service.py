"""Claim service - eligibility check, code issuance and one-time redemption."""

from __future__ import annotations

import logging
import time
from typing import Callable

from agt_claim.codes import CODE_PREFIX, generate_claim_code
from agt_claim.errors import (
    AlreadyUsed,
    Expired,
    InsufficientBalance,
    InvalidRequest,
    NotFound,
    RateLimited,
)
from agt_claim.interfaces.limiter import RateLimiter
from agt_claim.interfaces.oracle import BalanceOracle
from agt_claim.interfaces.store import ClaimStore
from agt_claim.models.records import CLAIM_TTL_MS, ClaimRecord, IssuedClaim, Redemption

log = logging.getLogger(__name__)


class ClaimService:
    """Issues claim codes to token holders and redeems them exactly once.

    Issuance: rate limit → address check → balance check → code → store.
    Redemption: lookup → used/expiry checks → atomic mark-used.
    """

    def __init__(
        self,
        store: ClaimStore,
        oracle: BalanceOracle,
        limiter: RateLimiter,
        secret: str,
        min_balance: float = 500,
        code_prefix: str = CODE_PREFIX,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._store = store
        self._oracle = oracle
        self._limiter = limiter
        self._secret = secret
        self._min_balance = min_balance
        self._code_prefix = code_prefix
        self._clock = clock

    @property
    def min_balance(self) -> float:
        return self._min_balance

    def _now_ms(self) -> int:
        return int(self._clock() * 1000)

    # ── Issuance ───────────────────────────────────────────

    async def request_claim(self, address: str | None, client_id: str) -> IssuedClaim:
        """Issue a one-hour claim code if ``address`` holds enough tokens."""
        if not await self._limiter.consume(client_id):
            log.warning("Rate limit exceeded for client %s", client_id)
            raise RateLimited(f"rate limit exceeded for {client_id}")

        if not address or not isinstance(address, str):
            raise InvalidRequest("address is required", code="missing_address")

        balance = await self._oracle.get_balance(address)
        if balance < self._min_balance:
            log.info(
                "Claim rejected: %s holds %s (< %s)",
                address[:10], balance, self._min_balance,
            )
            raise InsufficientBalance(balance, self._min_balance)

        now = self._now_ms()
        code = generate_claim_code(address, self._secret, now, prefix=self._code_prefix)
        record = ClaimRecord(
            code=code,
            address=address,
            expires_at=now + CLAIM_TTL_MS,
            issued_at=now,
        )
        await self._store.insert(record)
        log.info("Issued claim %s to %s (balance %s)", code, address[:10], balance)
        return IssuedClaim(code=code, expires_at=record.expires_at)

    # ── Redemption ─────────────────────────────────────────

    async def redeem(self, code: str | None) -> Redemption:
        """Mark ``code`` used and return the address it was issued for."""
        if not code:
            raise InvalidRequest("code is required", code="missing_code")
        if not isinstance(code, str):
            # JSON arrays/objects can never name a stored code
            raise NotFound(f"malformed claim code {code!r}")

        record = await self._store.get(code)
        if record is None:
            raise NotFound(f"unknown claim code {code}")
        if record.used:
            raise AlreadyUsed(f"claim code {code} already redeemed")

        now = self._now_ms()
        if record.is_expired(now):
            raise Expired(f"claim code {code} expired")

        # A concurrent redemption may have won between get() and here.
        if not await self._store.mark_used(code, now):
            raise AlreadyUsed(f"claim code {code} already redeemed")

        log.info("Redeemed claim %s for %s", code, record.address[:10])
        return Redemption(code=code, address=record.address)
