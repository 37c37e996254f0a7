from __future__ import annotations

import logging
from typing import Annotated

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from app.api.dependencies import (
    get_ledger,
    ledger_lock,
    raise_for_result,
    require_call_context,
)
from app.api.progress import OkOut
from app.models.call_context import CallContext
from app.services import ledger
from app.services.ledger import LedgerState

logger = logging.getLogger(__name__)

# Owner checks happen inside the ledger (code 100), not as a route guard,
# so a non-owner gets the same error code over HTTP as in-process.
router = APIRouter(prefix="/admin", tags=["admin"])


class MaxEntriesIn(BaseModel):
    max_progress_entries: int


class TransferOwnershipIn(BaseModel):
    new_owner: str


class LedgerInfoOut(BaseModel):
    owner: str
    max_progress_entries: int
    progress_counter: int


@router.get("/ledger", response_model=LedgerInfoOut)
def read_ledger_info(
    state: Annotated[LedgerState, Depends(get_ledger)],
) -> LedgerInfoOut:
    with ledger_lock:
        info = ledger.get_ledger_info(state)
    return LedgerInfoOut(
        owner=info.owner,
        max_progress_entries=info.max_progress_entries,
        progress_counter=info.progress_counter,
    )


@router.put("/max-progress-entries", response_model=OkOut)
def put_max_progress_entries(
    payload: MaxEntriesIn,
    ctx: Annotated[CallContext, Depends(require_call_context)],
    state: Annotated[LedgerState, Depends(get_ledger)],
) -> OkOut:
    logger.info(
        "Capacity change to %d requested by caller=%s",
        payload.max_progress_entries,
        ctx.caller,
    )
    with ledger_lock:
        result = ledger.set_max_progress_entries(
            state, ctx, payload.max_progress_entries
        )
    raise_for_result(result)
    return OkOut()


@router.post("/transfer-ownership", response_model=OkOut)
def post_transfer_ownership(
    payload: TransferOwnershipIn,
    ctx: Annotated[CallContext, Depends(require_call_context)],
    state: Annotated[LedgerState, Depends(get_ledger)],
) -> OkOut:
    with ledger_lock:
        result = ledger.transfer_ownership(state, ctx, payload.new_owner)
    raise_for_result(result)
    return OkOut()
