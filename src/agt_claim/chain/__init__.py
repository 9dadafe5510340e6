"""On-chain read helpers."""

from agt_claim.chain.balance import Web3BalanceOracle, format_units

__all__ = ["Web3BalanceOracle", "format_units"]
