"""Claim record types and operation results."""

from __future__ import annotations

from dataclasses import dataclass

# Claim codes are valid for one hour after issuance.
CLAIM_TTL_MS = 60 * 60 * 1000


@dataclass
class ClaimRecord:
    """A claim code as persisted in the claim store."""

    code: str
    address: str
    expires_at: int  # epoch millis
    used: bool = False
    issued_at: int = 0  # epoch millis
    used_at: int | None = None  # epoch millis, set on redemption

    def is_expired(self, now_ms: int) -> bool:
        return now_ms >= self.expires_at


@dataclass
class IssuedClaim:
    """Result of a successful claim request."""

    code: str
    expires_at: int  # epoch millis

    def to_json(self) -> dict:
        return {"claimCode": self.code, "expires": self.expires_at}


@dataclass
class Redemption:
    """Result of a successful redemption."""

    code: str
    address: str

    def to_json(self) -> dict:
        return {"ok": True, "address": self.address}
