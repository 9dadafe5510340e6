"""Configuration models for the claim server."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class StorageBackend(str, Enum):
    """Where claim records live."""

    MEMORY = "memory"  # Process-local, lost on restart
    SQLITE = "sqlite"  # Durable, survives restarts


@dataclass
class ServerConfig:
    """HTTP listener configuration."""

    host: str = "0.0.0.0"
    port: int = 4000
    log_level: str = "info"
    trust_proxy: bool = False  # take client identity from X-Forwarded-For


@dataclass
class ChainConfig:
    """Token balance lookup configuration."""

    rpc_url: str = "https://mainnet.optimism.io"
    token_address: str = "0x9427A2a738AffBc5880F0646b5251069c022e525"
    min_balance: float = 500
    rpc_timeout: float = 10.0  # seconds per balance query


@dataclass
class ClaimsConfig:
    """Claim code issuance configuration."""

    secret: str = "dev_secret"
    code_prefix: str = "AGT-"


@dataclass
class RateLimitConfig:
    """Per-client claim request budget."""

    points: int = 10  # requests allowed...
    duration: int = 60  # ...per this many seconds


@dataclass
class StorageConfig:
    """Claim store configuration."""

    backend: StorageBackend = StorageBackend.MEMORY
    db_path: str = "~/.agt_claim/claims.db"
    prune_interval: int = 300  # seconds between expiry sweeps, 0 disables


@dataclass
class AppConfig:
    """Complete server configuration."""

    server: ServerConfig = field(default_factory=ServerConfig)
    chain: ChainConfig = field(default_factory=ChainConfig)
    claims: ClaimsConfig = field(default_factory=ClaimsConfig)
    rate_limit: RateLimitConfig = field(default_factory=RateLimitConfig)
    storage: StorageConfig = field(default_factory=StorageConfig)
