"""ERC-20 balance oracle using web3.py."""

from __future__ import annotations

import asyncio
import logging
from decimal import Decimal

from aiohttp import ClientTimeout
from web3 import AsyncHTTPProvider, AsyncWeb3, Web3

from agt_claim.errors import UpstreamFailure

log = logging.getLogger(__name__)

DEFAULT_DECIMALS = 18

# Only the two read-only views we need.
ERC20_ABI = [
    {
        "constant": True,
        "inputs": [{"name": "owner", "type": "address"}],
        "name": "balanceOf",
        "outputs": [{"name": "", "type": "uint256"}],
        "stateMutability": "view",
        "type": "function",
    },
    {
        "constant": True,
        "inputs": [],
        "name": "decimals",
        "outputs": [{"name": "", "type": "uint8"}],
        "stateMutability": "view",
        "type": "function",
    },
]


def format_units(raw: int, decimals: int) -> float:
    """Scale a raw integer token amount to a human-readable number."""
    return float(Decimal(raw).scaleb(-decimals))


class Web3BalanceOracle:
    """Reads an address's balance of one ERC-20 token over JSON-RPC.

    Each lookup is bounded by ``timeout`` seconds; a hung RPC endpoint is
    reported as an upstream failure rather than waited on forever.
    """

    def __init__(
        self,
        rpc_url: str,
        token_address: str,
        timeout: float = 10.0,
        w3: AsyncWeb3 | None = None,
    ) -> None:
        self._timeout = timeout
        self._w3 = w3 or AsyncWeb3(
            AsyncHTTPProvider(
                rpc_url, request_kwargs={"timeout": ClientTimeout(total=timeout)},
            )
        )
        self._token = self._w3.eth.contract(
            address=Web3.to_checksum_address(token_address), abi=ERC20_ABI,
        )

    async def close(self) -> None:
        """Close the provider's HTTP session."""
        disconnect = getattr(self._w3.provider, "disconnect", None)
        if disconnect is not None:
            await disconnect()

    async def get_balance(self, address: str) -> float:
        if not Web3.is_address(address):
            log.error("Balance query rejected, not an address: %r", address)
            raise UpstreamFailure(f"not an address: {address!r}")
        owner = Web3.to_checksum_address(address)

        try:
            raw, decimals = await asyncio.wait_for(
                self._read(owner), timeout=self._timeout,
            )
        except asyncio.TimeoutError as exc:
            log.error("Balance query for %s timed out after %ss", owner[:10], self._timeout)
            raise UpstreamFailure(f"balance query timed out after {self._timeout}s") from exc
        except Exception as exc:
            log.error("Balance query for %s failed: %s", owner[:10], exc, exc_info=True)
            raise UpstreamFailure(str(exc)) from exc

        balance = format_units(raw, decimals)
        log.debug("Balance of %s: %s (raw=%d, decimals=%d)", owner[:10], balance, raw, decimals)
        return balance

    async def _read(self, owner: str) -> tuple[int, int]:
        raw = await self._token.functions.balanceOf(owner).call()
        return int(raw), await self._decimals()

    async def _decimals(self) -> int:
        """Token decimals, or 18 when the contract does not expose them."""
        try:
            return int(await self._token.functions.decimals().call())
        except Exception as exc:
            log.debug("decimals() unavailable, assuming %d: %s", DEFAULT_DECIMALS, exc)
            return DEFAULT_DECIMALS
