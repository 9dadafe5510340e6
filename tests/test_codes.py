"""Claim code generation."""

from __future__ import annotations

import hashlib
import hmac
import re

from agt_claim.codes import generate_claim_code
from tests.factories import HOLDER, NOW_MS


def test_code_format():
    code = generate_claim_code(HOLDER, "s3cret", NOW_MS)
    assert re.fullmatch(r"AGT-[0-9A-F]{12}", code)


def test_code_is_truncated_hmac():
    nonce = "00112233aabbccdd"
    message = f"{HOLDER}:{NOW_MS}:{nonce}".encode("utf-8")
    expected = hmac.new(b"s3cret", message, hashlib.sha256).hexdigest()[:12].upper()

    assert generate_claim_code(HOLDER, "s3cret", NOW_MS, nonce=nonce) == f"AGT-{expected}"


def test_secret_changes_code():
    nonce = "00112233aabbccdd"
    a = generate_claim_code(HOLDER, "one", NOW_MS, nonce=nonce)
    b = generate_claim_code(HOLDER, "two", NOW_MS, nonce=nonce)
    assert a != b


def test_random_nonce_by_default():
    codes = {generate_claim_code(HOLDER, "s3cret", NOW_MS) for _ in range(50)}
    assert len(codes) == 50


def test_custom_prefix():
    assert generate_claim_code(HOLDER, "s3cret", NOW_MS, prefix="GTPS-").startswith("GTPS-")
