"""Error taxonomy for claim issuance and redemption.

Every error carries the machine-readable code returned to HTTP clients
and the status it maps to.
"""

from __future__ import annotations


class ClaimError(Exception):
    """Base class for all claim flow failures."""

    code = "internal_error"
    status = 500

    def __init__(self, message: str = "", code: str | None = None) -> None:
        if code is not None:
            self.code = code
        super().__init__(message or self.code)

    def to_json(self) -> dict:
        return {"error": self.code}


class InvalidRequest(ClaimError):
    """A required field is missing or malformed."""

    code = "invalid_request"
    status = 400


class RateLimited(ClaimError):
    """The client exhausted its request budget."""

    code = "too_many_requests"
    status = 429


class InsufficientBalance(ClaimError):
    """The address holds less than the minimum token balance."""

    code = "insufficient_balance"
    status = 403

    def __init__(self, balance: float, minimum: float) -> None:
        super().__init__(f"balance {balance} below minimum {minimum}")
        self.balance = balance
        self.minimum = minimum

    def to_json(self) -> dict:
        return {"error": self.code, "balance": self.balance}


class UpstreamFailure(ClaimError):
    """The balance lookup failed (network, contract or timeout)."""

    code = "internal_error"
    status = 500


class NotFound(ClaimError):
    """No claim record exists for the code."""

    code = "invalid_code"
    status = 404


class AlreadyUsed(ClaimError):
    """The code was already redeemed."""

    code = "already_used"
    status = 400


class Expired(ClaimError):
    """The code passed its expiry time unredeemed."""

    code = "expired"
    status = 400
