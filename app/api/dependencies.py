from __future__ import annotations

import logging
import threading
from typing import Annotated

import jwt
from fastapi import Depends, Header, HTTPException, status
from fastapi.security import OAuth2PasswordBearer

from app.core.config import SETTINGS
from app.models.call_context import CallContext
from app.models.result import ErrorCode, Result
from app.services import token_service
from app.services.block_clock import BlockClock
from app.services.ledger import LedgerState

logger = logging.getLogger(__name__)

# Tokens are issued by the holder of JWT_PRIVATE_KEY_PEM, not by this API.
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="token")

# ---------------------------------------------------------------------------
# Process-wide ledger
# ---------------------------------------------------------------------------
# Sync endpoints run on a threadpool; every ledger call, reads included,
# goes through ledger_lock so each one sees and leaves a consistent state.

ledger_state = LedgerState(
    owner=SETTINGS.ledger_owner,
    max_progress_entries=SETTINGS.max_progress_entries,
    count_overwrites=SETTINGS.count_overwrites,
)
ledger_lock = threading.Lock()
block_clock = BlockClock()


def get_ledger() -> LedgerState:
    """Dependency returning the ledger state. Tests override this."""
    return ledger_state


def get_block_clock() -> BlockClock:
    return block_clock


def require_caller(
    raw_token: Annotated[str, Depends(oauth2_scheme)],
) -> str:
    """Validate the bearer token and return the caller identity (`sub`)."""
    try:
        claims = token_service.decode_access_token(raw_token)
    except jwt.ExpiredSignatureError:
        logger.warning("Expired token rejected")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Token expired",
            headers={"WWW-Authenticate": "Bearer"},
        ) from None
    except jwt.InvalidTokenError as e:
        logger.warning("Invalid token rejected: %s", e)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token",
            headers={"WWW-Authenticate": "Bearer"},
        ) from None

    caller = claims["sub"]
    logger.debug("Token validated for caller=%s", caller, extra={"caller": caller})
    return caller


def require_call_context(
    caller: Annotated[str, Depends(require_caller)],
    clock: Annotated[BlockClock, Depends(get_block_clock)],
    x_block_height: Annotated[int | None, Header(ge=0)] = None,
) -> CallContext:
    """Caller identity plus the logical clock value for this call."""
    return CallContext(caller=caller, block_height=clock.resolve(x_block_height))


# ---------------------------------------------------------------------------
# Result -> HTTP
# ---------------------------------------------------------------------------

_STATUS_BY_CODE = {
    ErrorCode.NOT_AUTHORIZED: status.HTTP_403_FORBIDDEN,
    ErrorCode.PROGRESS_NOT_FOUND: status.HTTP_404_NOT_FOUND,
}


def raise_for_result(result: Result) -> None:
    """Raise an HTTPException carrying the error code of a rejected call."""
    code = result.error
    if code is None:
        return
    raise HTTPException(
        status_code=_STATUS_BY_CODE.get(
            code, status.HTTP_422_UNPROCESSABLE_CONTENT
        ),
        detail={"ok": False, "value": int(code), "error": code.name},
    )
