"""Mock implementations of external-facing components."""

from __future__ import annotations

import asyncio

from agt_claim.errors import UpstreamFailure


class FakeClock:
    """Controllable wall clock (seconds since epoch)."""

    def __init__(self, start: float = 1_700_000_000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class MockBalanceOracle:
    """Implements BalanceOracle protocol. Returns a fixed balance."""

    def __init__(self, balance: float = 750, error: Exception | None = None) -> None:
        self.balance = balance
        self.error = error
        self.calls: list[str] = []
        self.closed = False

    async def get_balance(self, address: str) -> float:
        self.calls.append(address)
        if self.error is not None:
            raise self.error
        return self.balance

    async def close(self) -> None:
        self.closed = True


# ── web3 stand-ins for Web3BalanceOracle tests ──────────────────


class _FakeCall:
    def __init__(self, value=None, error: Exception | None = None, delay: float = 0) -> None:
        self._value = value
        self._error = error
        self._delay = delay

    async def call(self):
        if self._delay:
            await asyncio.sleep(self._delay)
        if self._error is not None:
            raise self._error
        return self._value


class _FakeFunctions:
    def __init__(self, contract: "FakeTokenContract") -> None:
        self._contract = contract

    def balanceOf(self, owner: str) -> _FakeCall:
        self._contract.balance_queries.append(owner)
        return _FakeCall(
            self._contract.raw_balance,
            error=self._contract.balance_error,
            delay=self._contract.delay,
        )

    def decimals(self) -> _FakeCall:
        return _FakeCall(self._contract.decimals, error=self._contract.decimals_error)


class FakeTokenContract:
    """Mimics web3's async contract for balanceOf()/decimals()."""

    def __init__(
        self,
        raw_balance: int = 0,
        decimals: int = 18,
        balance_error: Exception | None = None,
        decimals_error: Exception | None = None,
        delay: float = 0,
    ) -> None:
        self.raw_balance = raw_balance
        self.decimals = decimals
        self.balance_error = balance_error
        self.decimals_error = decimals_error
        self.delay = delay
        self.balance_queries: list[str] = []
        self.functions = _FakeFunctions(self)


class _FakeEth:
    def __init__(self, contract: FakeTokenContract) -> None:
        self._contract = contract
        self.contract_address: str | None = None

    def contract(self, address: str, abi: list):
        self.contract_address = address
        return self._contract


class FakeWeb3:
    """Minimal AsyncWeb3 stand-in exposing eth.contract() and provider."""

    def __init__(self, contract: FakeTokenContract) -> None:
        self.eth = _FakeEth(contract)
        self.provider = object()


def failing_oracle(message: str = "rpc unreachable") -> MockBalanceOracle:
    return MockBalanceOracle(error=UpstreamFailure(message))
