"""BalanceOracle protocol - read-only token balance lookups."""

from __future__ import annotations

from typing import Protocol


class BalanceOracle(Protocol):
    """Reports an address's human-readable balance of the configured token."""

    async def get_balance(self, address: str) -> float:
        """Return the balance scaled by the token's decimals.

        Raises UpstreamFailure for malformed addresses and when the RPC
        or contract call fails.
        """
        ...

    async def close(self) -> None:
        ...
