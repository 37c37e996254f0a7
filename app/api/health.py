"""Liveness and readiness probes.

/health answers "is the process alive?" and reports a snapshot of the
ledger; an orchestrator restarts the container when it fails.
/ready answers "can this instance take traffic?"; failing it only removes
the instance from rotation.  The ledger is in-process, so once the app has
started it is always ready.
"""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, Response

from app.api.dependencies import get_block_clock, get_ledger, ledger_lock
from app.services.block_clock import BlockClock
from app.services.ledger import LedgerState

router = APIRouter(tags=["health"])


@router.get("/health")
def health(
    state: Annotated[LedgerState, Depends(get_ledger)],
    clock: Annotated[BlockClock, Depends(get_block_clock)],
) -> dict:
    with ledger_lock:
        counter = state.progress_counter
    return {
        "status": "ok",
        "checks": {"ledger": "ok"},
        "progress_counter": counter,
        "block_height": clock.height,
    }


@router.get("/ready")
def ready() -> Response:
    return Response(status_code=200)
