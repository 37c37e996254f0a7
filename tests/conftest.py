from __future__ import annotations

from collections.abc import Iterator

import pytest
from fastapi.testclient import TestClient

from app.api.dependencies import get_block_clock, get_ledger
from app.main import app
from app.models.call_context import CallContext
from app.services import token_service
from app.services.block_clock import BlockClock
from app.services.ledger import LedgerState

OWNER = "owner-principal"
LEARNER = "learner-principal"

VALID_UPDATE = {
    "module_id": 1,
    "score": 85,
    "status": "completed",
    "attempts": 2,
    "duration": 3600,
    "platform_id": "platform-xyz",
}


@pytest.fixture
def ledger_state() -> LedgerState:
    """Fresh ledger per test: OWNER owns it, default capacity."""
    return LedgerState(owner=OWNER, max_progress_entries=10000)


@pytest.fixture
def clock() -> BlockClock:
    return BlockClock()


@pytest.fixture(autouse=True)
def override_ledger(ledger_state: LedgerState, clock: BlockClock) -> Iterator[None]:
    """Point every endpoint at this test's ledger and clock."""
    app.dependency_overrides[get_ledger] = lambda: ledger_state
    app.dependency_overrides[get_block_clock] = lambda: clock
    yield
    app.dependency_overrides.clear()


@pytest.fixture
def client() -> TestClient:
    return TestClient(app)


def mint_token(sub: str = LEARNER) -> str:
    """Create a valid ES256 JWT for testing."""
    return token_service.create_access_token(sub=sub)


def auth_headers(sub: str = LEARNER, height: int | None = None) -> dict[str, str]:
    headers = {"Authorization": f"Bearer {mint_token(sub)}"}
    if height is not None:
        headers["X-Block-Height"] = str(height)
    return headers


def ctx(caller: str = OWNER, height: int = 0) -> CallContext:
    return CallContext(caller=caller, block_height=height)
