"""Configuration loading: TOML file + environment variables."""

from __future__ import annotations

import logging
import os
from pathlib import Path

try:
    import tomllib  # Python 3.11+
except ModuleNotFoundError:
    import tomli as tomllib  # type: ignore[no-redef]

from agt_claim.models.config import AppConfig, StorageBackend

log = logging.getLogger(__name__)

DEV_SECRET = "dev_secret"

_TRUTHY = {"1", "true", "yes", "on"}


def _env(*names: str) -> str | None:
    """First non-empty environment variable among ``names``."""
    for name in names:
        if value := os.environ.get(name, "").strip():
            return value
    return None


def load_config(
    config_path: str | Path | None = None,
    env_prefix: str = "AGT_CLAIM_",
) -> AppConfig:
    """Load server configuration from a TOML file and env vars.

    Priority (highest wins):
        1. Prefixed environment variables (AGT_CLAIM_SECRET, etc.)
        2. Legacy environment variables (CLAIM_CODE_SECRET, OPTIMISM_RPC, ...)
        3. TOML config file
        4. Defaults from AppConfig
    """
    raw: dict = {}
    if config_path is not None:
        p = Path(config_path).expanduser()
        if p.exists():
            with open(p, "rb") as f:
                raw = tomllib.load(f)

    cfg = AppConfig()

    # ── Server section ─────────────────────────────────────
    server = raw.get("server", {})
    if v := server.get("host"):
        cfg.server.host = str(v)
    if v := server.get("port"):
        cfg.server.port = int(v)
    if v := server.get("log_level"):
        cfg.server.log_level = str(v)
    if "trust_proxy" in server:
        cfg.server.trust_proxy = bool(server["trust_proxy"])

    # ── Chain section ──────────────────────────────────────
    chain = raw.get("chain", {})
    if v := chain.get("rpc_url"):
        cfg.chain.rpc_url = str(v)
    if v := chain.get("token_address"):
        cfg.chain.token_address = str(v)
    if (v := chain.get("min_balance")) is not None:
        cfg.chain.min_balance = float(v)
    if v := chain.get("rpc_timeout"):
        cfg.chain.rpc_timeout = float(v)

    # ── Claims section ─────────────────────────────────────
    claims = raw.get("claims", {})
    if v := claims.get("secret"):
        cfg.claims.secret = str(v)
    if v := claims.get("code_prefix"):
        cfg.claims.code_prefix = str(v)

    # ── Rate limit section ─────────────────────────────────
    rate_limit = raw.get("rate_limit", {})
    if v := rate_limit.get("points"):
        cfg.rate_limit.points = int(v)
    if v := rate_limit.get("duration"):
        cfg.rate_limit.duration = int(v)

    # ── Storage section ────────────────────────────────────
    storage = raw.get("storage", {})
    if v := storage.get("backend"):
        cfg.storage.backend = StorageBackend(v)
    if v := storage.get("db_path"):
        cfg.storage.db_path = str(v)
    if (v := storage.get("prune_interval")) is not None:
        cfg.storage.prune_interval = int(v)

    # ── Environment variable overrides (highest priority) ──
    p = env_prefix
    if v := _env(f"{p}HOST"):
        cfg.server.host = v
    if v := _env(f"{p}PORT", "PORT"):
        cfg.server.port = int(v)
    if v := _env(f"{p}LOG_LEVEL"):
        cfg.server.log_level = v
    if v := _env(f"{p}TRUST_PROXY"):
        cfg.server.trust_proxy = v.lower() in _TRUTHY
    if v := _env(f"{p}RPC_URL", "OPTIMISM_RPC"):
        cfg.chain.rpc_url = v
    if v := _env(f"{p}TOKEN_ADDRESS", "GTPS_TOKEN"):
        cfg.chain.token_address = v
    if v := _env(f"{p}MIN_BALANCE", "MIN_GTPS"):
        cfg.chain.min_balance = float(v)
    if v := _env(f"{p}RPC_TIMEOUT"):
        cfg.chain.rpc_timeout = float(v)
    if v := _env(f"{p}SECRET", "CLAIM_CODE_SECRET"):
        cfg.claims.secret = v
    if v := _env(f"{p}STORAGE"):
        cfg.storage.backend = StorageBackend(v)
    if v := _env(f"{p}DB_PATH"):
        cfg.storage.db_path = v

    # Expand ~ in paths
    cfg.storage.db_path = str(Path(cfg.storage.db_path).expanduser())

    if cfg.claims.secret == DEV_SECRET:
        log.warning("Using the built-in development secret; set AGT_CLAIM_SECRET in production")

    return cfg
