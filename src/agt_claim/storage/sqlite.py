"""SQLite implementation of the ClaimStore protocol."""

from __future__ import annotations

from pathlib import Path

import aiosqlite

from agt_claim.models.records import ClaimRecord

SCHEMA = """
-- Issued claim codes
CREATE TABLE IF NOT EXISTS claims (
    code TEXT PRIMARY KEY,
    address TEXT NOT NULL,
    expires_at INTEGER NOT NULL,
    used INTEGER NOT NULL DEFAULT 0,
    issued_at INTEGER NOT NULL,
    used_at INTEGER
);
CREATE INDEX IF NOT EXISTS idx_claims_expires_at ON claims(expires_at);
CREATE INDEX IF NOT EXISTS idx_claims_address ON claims(address);
"""


def _row_to_record(row: aiosqlite.Row) -> ClaimRecord:
    return ClaimRecord(
        code=row["code"],
        address=row["address"],
        expires_at=row["expires_at"],
        used=bool(row["used"]),
        issued_at=row["issued_at"],
        used_at=row["used_at"],
    )


class SQLiteClaimStore:
    """SQLite-backed implementation of the ClaimStore protocol."""

    def __init__(self, db_path: str) -> None:
        self._db_path = db_path
        self._db: aiosqlite.Connection | None = None

    async def initialize(self) -> None:
        if self._db_path != ":memory:":
            Path(self._db_path).parent.mkdir(parents=True, exist_ok=True)
        self._db = await aiosqlite.connect(self._db_path)
        self._db.row_factory = aiosqlite.Row
        await self._db.executescript(SCHEMA)
        await self._db.commit()

    async def close(self) -> None:
        if self._db:
            await self._db.close()
            self._db = None

    @property
    def db(self) -> aiosqlite.Connection:
        assert self._db is not None, "Store not initialized. Call initialize() first."
        return self._db

    # ── Records ────────────────────────────────────────────

    async def insert(self, record: ClaimRecord) -> None:
        await self.db.execute(
            "INSERT OR REPLACE INTO claims"
            " (code, address, expires_at, used, issued_at, used_at)"
            " VALUES (?, ?, ?, ?, ?, ?)",
            (
                record.code, record.address, record.expires_at,
                int(record.used), record.issued_at, record.used_at,
            ),
        )
        await self.db.commit()

    async def get(self, code: str) -> ClaimRecord | None:
        async with self.db.execute(
            "SELECT * FROM claims WHERE code=?", (code,)
        ) as cur:
            row = await cur.fetchone()
            return _row_to_record(row) if row else None

    async def mark_used(self, code: str, used_at: int) -> bool:
        # Single conditional UPDATE: only one caller can see rowcount == 1.
        cur = await self.db.execute(
            "UPDATE claims SET used=1, used_at=? WHERE code=? AND used=0",
            (used_at, code),
        )
        await self.db.commit()
        return cur.rowcount == 1

    # ── Maintenance ────────────────────────────────────────

    async def purge_expired(self, now_ms: int) -> int:
        cur = await self.db.execute(
            "DELETE FROM claims WHERE expires_at <= ?", (now_ms,)
        )
        await self.db.commit()
        return cur.rowcount

    async def count(self) -> int:
        async with self.db.execute("SELECT COUNT(*) as c FROM claims") as cur:
            row = await cur.fetchone()
            return row["c"] if row else 0
