"""Claim code generation."""

from __future__ import annotations

import hashlib
import hmac
import secrets

CODE_PREFIX = "AGT-"
CODE_HEX_LENGTH = 12
NONCE_BYTES = 8


def generate_claim_code(
    address: str,
    secret: str,
    now_ms: int,
    nonce: str | None = None,
    prefix: str = CODE_PREFIX,
) -> str:
    """Derive a short, unguessable claim code.

    The code is HMAC-SHA256(secret, "address:now_ms:nonce") truncated to
    12 hex chars and uppercased. It is only a lookup key: redemption reads
    the stored record and never recomputes the MAC.
    """
    if nonce is None:
        nonce = secrets.token_hex(NONCE_BYTES)
    message = f"{address}:{now_ms}:{nonce}"
    digest = hmac.new(
        secret.encode("utf-8"), message.encode("utf-8"), hashlib.sha256,
    ).hexdigest()
    return f"{prefix}{digest[:CODE_HEX_LENGTH].upper()}"
