"""Web3BalanceOracle against a stand-in web3 contract."""

from __future__ import annotations

import pytest
from web3 import Web3

from agt_claim.chain.balance import Web3BalanceOracle, format_units
from agt_claim.errors import UpstreamFailure
from tests.factories import HOLDER, TOKEN
from tests.mocks import FakeTokenContract, FakeWeb3


def _oracle(contract: FakeTokenContract, timeout: float = 1.0) -> Web3BalanceOracle:
    return Web3BalanceOracle(
        "http://rpc.invalid", TOKEN, timeout=timeout, w3=FakeWeb3(contract),
    )


def test_format_units():
    assert format_units(750 * 10**18, 18) == 750.0
    assert format_units(1_500_000, 6) == 1.5
    assert format_units(0, 18) == 0.0


async def test_scales_by_decimals():
    contract = FakeTokenContract(raw_balance=750 * 10**6, decimals=6)
    oracle = _oracle(contract)

    assert await oracle.get_balance(HOLDER) == 750.0
    assert contract.balance_queries == [Web3.to_checksum_address(HOLDER)]


async def test_token_address_is_checksummed():
    w3 = FakeWeb3(FakeTokenContract())
    Web3BalanceOracle("http://rpc.invalid", TOKEN, w3=w3)
    assert w3.eth.contract_address == Web3.to_checksum_address(TOKEN)


async def test_missing_decimals_defaults_to_18():
    contract = FakeTokenContract(
        raw_balance=12 * 10**18, decimals_error=RuntimeError("execution reverted"),
    )
    assert await _oracle(contract).get_balance(HOLDER) == 12.0


async def test_invalid_address_rejected_before_query():
    contract = FakeTokenContract()

    with pytest.raises(UpstreamFailure, match="not an address") as excinfo:
        await _oracle(contract).get_balance("not-an-address")

    assert excinfo.value.code == "internal_error"
    assert contract.balance_queries == []


async def test_rpc_error_becomes_upstream_failure():
    contract = FakeTokenContract(balance_error=ConnectionError("connection refused"))

    with pytest.raises(UpstreamFailure, match="connection refused"):
        await _oracle(contract).get_balance(HOLDER)


async def test_hung_rpc_times_out():
    contract = FakeTokenContract(raw_balance=10**21, delay=5)

    with pytest.raises(UpstreamFailure, match="timed out"):
        await _oracle(contract, timeout=0.05).get_balance(HOLDER)


async def test_close_without_disconnect_support():
    await _oracle(FakeTokenContract()).close()
