"""Protocol interfaces for swappable agt_claim components."""

from agt_claim.interfaces.store import ClaimStore
from agt_claim.interfaces.oracle import BalanceOracle
from agt_claim.interfaces.limiter import RateLimiter

__all__ = ["ClaimStore", "BalanceOracle", "RateLimiter"]
