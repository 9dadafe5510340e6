"""Data models for the claim server."""

from agt_claim.models.config import (
    AppConfig,
    ChainConfig,
    ClaimsConfig,
    RateLimitConfig,
    ServerConfig,
    StorageBackend,
    StorageConfig,
)
from agt_claim.models.records import CLAIM_TTL_MS, ClaimRecord, IssuedClaim, Redemption

__all__ = [
    "AppConfig", "ChainConfig", "ClaimsConfig", "RateLimitConfig",
    "ServerConfig", "StorageBackend", "StorageConfig",
    "CLAIM_TTL_MS", "ClaimRecord", "IssuedClaim", "Redemption",
]
