from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from typing import Generic, TypeVar

T = TypeVar("T")


class ErrorCode(IntEnum):
    """Stable rejection codes. Clients match on the numeric value."""

    NOT_AUTHORIZED = 100
    INVALID_MODULE_ID = 101  # also returned when capacity is exhausted
    INVALID_SCORE = 102
    PROGRESS_NOT_FOUND = 105
    INVALID_STATUS = 106
    INVALID_ATTEMPTS = 107
    INVALID_DURATION = 108
    INVALID_PLATFORM = 109


@dataclass(frozen=True, slots=True)
class Result(Generic[T]):
    """Tagged outcome: ok=True carries a payload, ok=False an ErrorCode."""

    ok: bool
    value: T | ErrorCode

    @property
    def error(self) -> ErrorCode | None:
        return None if self.ok else self.value  # type: ignore[return-value]


def success(value: T) -> Result[T]:
    return Result(ok=True, value=value)


def failure(code: ErrorCode) -> Result:
    return Result(ok=False, value=code)
