"""Progress endpoints: public reads and caller-scoped writes.

Reads are keyed by any user identity and never fail; an absent record is
returned as null.  Writes always act on the caller's own keys, since the
caller identity is the user half of every ProgressKey.
"""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from app.api.dependencies import (
    get_ledger,
    ledger_lock,
    raise_for_result,
    require_call_context,
)
from app.models.call_context import CallContext
from app.models.progress import AuditRecord, ProgressRecord
from app.services import ledger
from app.services.ledger import LedgerState

router = APIRouter(tags=["progress"])


class ProgressIn(BaseModel):
    score: int
    # Plain str so unknown tags reach the ledger and come back as code 106.
    status: str
    attempts: int
    duration: int
    platform_id: str


class ProgressOut(BaseModel):
    score: int
    timestamp: int
    status: str
    attempts: int
    duration: int
    platform_id: str

    @classmethod
    def from_record(cls, record: ProgressRecord) -> ProgressOut:
        return cls(
            score=record.score,
            timestamp=record.timestamp,
            status=record.status.value,
            attempts=record.attempts,
            duration=record.duration,
            platform_id=record.platform_id,
        )


class AuditOut(BaseModel):
    last_updated: int
    updater: str
    previous_score: int
    previous_status: str

    @classmethod
    def from_record(cls, audit: AuditRecord) -> AuditOut:
        return cls(
            last_updated=audit.last_updated,
            updater=audit.updater,
            previous_score=audit.previous_score,
            previous_status=audit.previous_status,
        )


class CountOut(BaseModel):
    user: str
    count: int


class OkOut(BaseModel):
    ok: bool = True
    value: bool = True


# ---------------------------------------------------------------------------
# Reads
# ---------------------------------------------------------------------------


@router.get("/v1/users/{user}/progress/{module_id}", response_model=ProgressOut | None)
def read_progress(
    user: str,
    module_id: int,
    state: Annotated[LedgerState, Depends(get_ledger)],
) -> ProgressOut | None:
    with ledger_lock:
        record = ledger.get_progress(state, user, module_id)
    return ProgressOut.from_record(record) if record else None


@router.get(
    "/v1/users/{user}/progress/{module_id}/audit", response_model=AuditOut | None
)
def read_progress_audit(
    user: str,
    module_id: int,
    state: Annotated[LedgerState, Depends(get_ledger)],
) -> AuditOut | None:
    with ledger_lock:
        audit = ledger.get_progress_audit(state, user, module_id)
    return AuditOut.from_record(audit) if audit else None


@router.get("/v1/users/{user}/progress-count", response_model=CountOut)
def read_progress_count(
    user: str,
    state: Annotated[LedgerState, Depends(get_ledger)],
) -> CountOut:
    with ledger_lock:
        count = ledger.get_progress_count(state, user)
    return CountOut(user=user, count=count)


# ---------------------------------------------------------------------------
# Writes
# ---------------------------------------------------------------------------


@router.put("/v1/progress/{module_id}", response_model=OkOut)
def put_progress(
    module_id: int,
    payload: ProgressIn,
    ctx: Annotated[CallContext, Depends(require_call_context)],
    state: Annotated[LedgerState, Depends(get_ledger)],
) -> OkOut:
    with ledger_lock:
        result = ledger.update_progress(
            state,
            ctx,
            module_id=module_id,
            score=payload.score,
            status=payload.status,
            attempts=payload.attempts,
            duration=payload.duration,
            platform_id=payload.platform_id,
        )
    raise_for_result(result)
    return OkOut()


@router.delete("/v1/progress/{module_id}", response_model=OkOut)
def remove_progress(
    module_id: int,
    ctx: Annotated[CallContext, Depends(require_call_context)],
    state: Annotated[LedgerState, Depends(get_ledger)],
) -> OkOut:
    with ledger_lock:
        result = ledger.delete_progress(state, ctx, module_id)
    raise_for_result(result)
    return OkOut()
