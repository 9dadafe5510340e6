"""Claim store backends."""

from __future__ import annotations

from agt_claim.interfaces.store import ClaimStore
from agt_claim.models.config import StorageBackend, StorageConfig
from agt_claim.storage.memory import MemoryClaimStore
from agt_claim.storage.sqlite import SQLiteClaimStore

__all__ = ["MemoryClaimStore", "SQLiteClaimStore", "build_store"]


def build_store(cfg: StorageConfig) -> ClaimStore:
    """Construct the configured store backend (not yet initialized)."""
    if cfg.backend == StorageBackend.SQLITE:
        return SQLiteClaimStore(cfg.db_path)
    return MemoryClaimStore()
