"""agt_claim - balance-gated, single-use claim code server."""

__version__ = "0.1.0"
