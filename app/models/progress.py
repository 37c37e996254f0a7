from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import NamedTuple

# Recorded as previous_status when a key had no live record before a write.
NO_STATUS = "none"

MAX_SCORE = 100
MAX_ATTEMPTS = 10
MAX_PLATFORM_ID_LENGTH = 50


class ProgressStatus(str, Enum):
    COMPLETED = "completed"
    IN_PROGRESS = "in-progress"
    FAILED = "failed"

    @classmethod
    def parse(cls, raw: str) -> ProgressStatus | None:
        """Return the matching status, or None for an unknown tag."""
        try:
            return cls(raw)
        except ValueError:
            return None


class ProgressKey(NamedTuple):
    """Composite key for progress and audit entries.

    A real tuple rather than a "user-module" string, so identities that
    contain separator characters can never collide.
    """

    user: str
    module_id: int


@dataclass(frozen=True, slots=True)
class ProgressRecord:
    """Live progress for one (user, module) pair. Overwritten wholesale."""

    score: int
    timestamp: int
    status: ProgressStatus
    attempts: int
    duration: int
    platform_id: str


@dataclass(frozen=True, slots=True)
class AuditRecord:
    """State immediately before the most recent mutation of a key.

    Never purged: it outlives the ProgressRecord after a delete.
    """

    last_updated: int
    updater: str
    previous_score: int
    previous_status: str  # a ProgressStatus value or NO_STATUS
