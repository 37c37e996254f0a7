"""Progress ledger: the validated state-transition core.

Every operation takes the LedgerState explicitly.  Nothing here locks,
blocks or does I/O; the invocation layer is responsible for running one
call at a time (see app.api.dependencies.ledger_lock) and for supplying
the caller identity and block height through a CallContext.

Rejections are returned as Result values, never raised, and every check
runs before the first write so a rejected call leaves state untouched.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from app.core.metrics import LEDGER_OPERATIONS, PROGRESS_RECORDS
from app.models.call_context import CallContext
from app.models.progress import (
    MAX_ATTEMPTS,
    MAX_PLATFORM_ID_LENGTH,
    MAX_SCORE,
    NO_STATUS,
    AuditRecord,
    ProgressKey,
    ProgressRecord,
    ProgressStatus,
)
from app.models.result import ErrorCode, Result, failure, success
from app.repos.progress_repo import InMemoryProgressRepo, ProgressRepo

logger = logging.getLogger(__name__)


@dataclass
class LedgerState:
    owner: str
    max_progress_entries: int
    progress_counter: int = 0
    # True: every accepted update bumps the per-user count, overwrite or not.
    count_overwrites: bool = True
    repo: ProgressRepo = field(default_factory=InMemoryProgressRepo)


@dataclass(frozen=True, slots=True)
class LedgerInfo:
    owner: str
    max_progress_entries: int
    progress_counter: int


def _reject(operation: str, ctx: CallContext, code: ErrorCode) -> Result:
    logger.warning(
        "Rejected %s caller=%s height=%d error=%s",
        operation,
        ctx.caller,
        ctx.block_height,
        code.name,
    )
    LEDGER_OPERATIONS.labels(operation=operation, outcome=code.name).inc()
    return failure(code)


def _accept(operation: str) -> Result[bool]:
    LEDGER_OPERATIONS.labels(operation=operation, outcome="ok").inc()
    return success(True)


# ---------------------------------------------------------------------------
# Reads
# ---------------------------------------------------------------------------


def get_progress(state: LedgerState, user: str, module_id: int) -> ProgressRecord | None:
    return state.repo.get(ProgressKey(user, module_id))


def get_progress_count(state: LedgerState, user: str) -> int:
    return state.repo.get_count(user)


def get_progress_audit(
    state: LedgerState, user: str, module_id: int
) -> AuditRecord | None:
    return state.repo.get_audit(ProgressKey(user, module_id))


def get_ledger_info(state: LedgerState) -> LedgerInfo:
    return LedgerInfo(
        owner=state.owner,
        max_progress_entries=state.max_progress_entries,
        progress_counter=state.progress_counter,
    )


# ---------------------------------------------------------------------------
# Owner-gated administration
# ---------------------------------------------------------------------------


def set_max_progress_entries(
    state: LedgerState, ctx: CallContext, new_max: int
) -> Result[bool]:
    op = "set_max_progress_entries"
    if ctx.caller != state.owner:
        return _reject(op, ctx, ErrorCode.NOT_AUTHORIZED)
    if new_max <= 0:
        return _reject(op, ctx, ErrorCode.INVALID_MODULE_ID)

    state.max_progress_entries = new_max
    logger.info("Max progress entries set to %d by owner=%s", new_max, ctx.caller)
    return _accept(op)


def transfer_ownership(
    state: LedgerState, ctx: CallContext, new_owner: str
) -> Result[bool]:
    op = "transfer_ownership"
    if ctx.caller != state.owner:
        return _reject(op, ctx, ErrorCode.NOT_AUTHORIZED)

    state.owner = new_owner
    logger.info("Ownership transferred from=%s to=%s", ctx.caller, new_owner)
    return _accept(op)


# ---------------------------------------------------------------------------
# Progress mutations
# ---------------------------------------------------------------------------


def _validate_update(
    state: LedgerState,
    ctx: CallContext,
    *,
    module_id: int,
    score: int,
    status: str,
    attempts: int,
    duration: int,
    platform_id: str,
) -> ErrorCode | None:
    """Return the first failing check, in the fixed order clients rely on.

    Only upper bounds apply to score and attempts.
    """
    if state.repo.get_count(ctx.caller) >= state.max_progress_entries:
        return ErrorCode.INVALID_MODULE_ID
    if module_id <= 0:
        return ErrorCode.INVALID_MODULE_ID
    if score > MAX_SCORE:
        return ErrorCode.INVALID_SCORE
    if ProgressStatus.parse(status) is None:
        return ErrorCode.INVALID_STATUS
    if attempts > MAX_ATTEMPTS:
        return ErrorCode.INVALID_ATTEMPTS
    if duration <= 0:
        return ErrorCode.INVALID_DURATION
    if not platform_id or len(platform_id) > MAX_PLATFORM_ID_LENGTH:
        return ErrorCode.INVALID_PLATFORM
    return None


def update_progress(
    state: LedgerState,
    ctx: CallContext,
    *,
    module_id: int,
    score: int,
    status: str,
    attempts: int,
    duration: int,
    platform_id: str,
) -> Result[bool]:
    op = "update_progress"
    error = _validate_update(
        state,
        ctx,
        module_id=module_id,
        score=score,
        status=status,
        attempts=attempts,
        duration=duration,
        platform_id=platform_id,
    )
    if error is not None:
        return _reject(op, ctx, error)

    key = ProgressKey(ctx.caller, module_id)
    current = state.repo.get(key)

    state.repo.put(
        key,
        ProgressRecord(
            score=score,
            timestamp=ctx.block_height,
            status=ProgressStatus(status),
            attempts=attempts,
            duration=duration,
            platform_id=platform_id,
        ),
    )
    state.repo.put_audit(
        key,
        AuditRecord(
            last_updated=ctx.block_height,
            updater=ctx.caller,
            previous_score=current.score if current else 0,
            previous_status=current.status.value if current else NO_STATUS,
        ),
    )

    if current is None or state.count_overwrites:
        state.repo.set_count(ctx.caller, state.repo.get_count(ctx.caller) + 1)
        state.progress_counter += 1
        PROGRESS_RECORDS.set(state.progress_counter)

    logger.info(
        "Progress %s user=%s module=%d score=%d status=%s height=%d",
        "overwritten" if current else "created",
        ctx.caller,
        module_id,
        score,
        status,
        ctx.block_height,
    )
    return _accept(op)


def delete_progress(state: LedgerState, ctx: CallContext, module_id: int) -> Result[bool]:
    op = "delete_progress"
    key = ProgressKey(ctx.caller, module_id)
    current = state.repo.get(key)
    if current is None:
        return _reject(op, ctx, ErrorCode.PROGRESS_NOT_FOUND)

    state.repo.put_audit(
        key,
        AuditRecord(
            last_updated=ctx.block_height,
            updater=ctx.caller,
            previous_score=current.score,
            previous_status=current.status.value,
        ),
    )
    state.repo.remove(key)

    count = state.repo.get_count(ctx.caller)
    if count <= 0 or state.progress_counter <= 0:
        # Only reachable if the substrate was seeded with inconsistent counts.
        logger.error(
            "Counter underflow on delete user=%s count=%d global=%d",
            ctx.caller,
            count,
            state.progress_counter,
        )
    state.repo.set_count(ctx.caller, max(count - 1, 0))
    state.progress_counter = max(state.progress_counter - 1, 0)
    PROGRESS_RECORDS.set(state.progress_counter)

    logger.info(
        "Progress deleted user=%s module=%d height=%d",
        ctx.caller,
        module_id,
        ctx.block_height,
    )
    return _accept(op)
