"""Shared fixtures for agt_claim tests."""

from __future__ import annotations

import httpx
import pytest
from aiohttp.test_utils import TestServer
from pytest_metadata.plugin import metadata_key

from agt_claim.api.routes import build_app
from agt_claim.limiter import SlidingWindowRateLimiter
from agt_claim.models.config import AppConfig, StorageBackend
from agt_claim.service import ClaimService
from agt_claim.storage.memory import MemoryClaimStore
from agt_claim.storage.sqlite import SQLiteClaimStore

from tests.factories import TOKEN
from tests.mocks import FakeClock, MockBalanceOracle

TEST_SECRET = "test-claim-secret"
MIN_BALANCE = 500
RATE_POINTS = 3
RATE_DURATION = 60


def pytest_configure(config):
    """Add token info to the HTML report Environment table."""
    meta = config.stash.setdefault(metadata_key, {})
    meta["Token"] = TOKEN
    meta["Min balance"] = str(MIN_BALANCE)


def make_test_config(**overrides) -> AppConfig:
    """Build an AppConfig suitable for testing."""
    cfg = AppConfig()
    cfg.claims.secret = TEST_SECRET
    cfg.chain.min_balance = MIN_BALANCE
    cfg.chain.token_address = TOKEN
    cfg.rate_limit.points = RATE_POINTS
    cfg.rate_limit.duration = RATE_DURATION
    cfg.storage.backend = StorageBackend.MEMORY
    cfg.storage.prune_interval = 0
    for key, value in overrides.items():
        section, _, name = key.partition("__")
        setattr(getattr(cfg, section), name, value)
    return cfg


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
async def store():
    """Initialized in-memory claim store."""
    s = MemoryClaimStore()
    await s.initialize()
    yield s
    await s.close()


@pytest.fixture
async def sqlite_store():
    """Initialized in-memory SQLiteClaimStore."""
    s = SQLiteClaimStore(":memory:")
    await s.initialize()
    yield s
    await s.close()


@pytest.fixture
def mock_oracle():
    return MockBalanceOracle(balance=750)


@pytest.fixture
def limiter(clock):
    return SlidingWindowRateLimiter(points=RATE_POINTS, duration=RATE_DURATION, clock=clock)


@pytest.fixture
def service(store, mock_oracle, limiter, clock):
    """ClaimService wired to mocked oracle and fake clock."""
    return ClaimService(
        store=store,
        oracle=mock_oracle,
        limiter=limiter,
        secret=TEST_SECRET,
        min_balance=MIN_BALANCE,
        clock=clock,
    )


@pytest.fixture
async def api_client(service):
    """httpx client talking to the aiohttp app on a local test server."""
    server = TestServer(build_app(service))
    await server.start_server()
    async with httpx.AsyncClient(base_url=f"http://{server.host}:{server.port}") as client:
        yield client
    await server.close()


CONFIG_ENV_VARS = [
    "AGT_CLAIM_HOST", "AGT_CLAIM_PORT", "PORT", "AGT_CLAIM_LOG_LEVEL",
    "AGT_CLAIM_TRUST_PROXY", "AGT_CLAIM_RPC_URL", "OPTIMISM_RPC",
    "AGT_CLAIM_TOKEN_ADDRESS", "GTPS_TOKEN", "AGT_CLAIM_MIN_BALANCE", "MIN_GTPS",
    "AGT_CLAIM_RPC_TIMEOUT", "AGT_CLAIM_SECRET", "CLAIM_CODE_SECRET",
    "AGT_CLAIM_STORAGE", "AGT_CLAIM_DB_PATH",
]


@pytest.fixture
def clean_env(monkeypatch):
    """Strip config env vars so load_config() sees only what a test sets."""
    for name in CONFIG_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
