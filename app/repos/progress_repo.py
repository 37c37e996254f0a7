from __future__ import annotations

from typing import Protocol

from app.models.progress import AuditRecord, ProgressKey, ProgressRecord


class ProgressRepo(Protocol):
    def get(self, key: ProgressKey) -> ProgressRecord | None: ...
    def put(self, key: ProgressKey, record: ProgressRecord) -> None: ...
    def remove(self, key: ProgressKey) -> bool: ...
    def get_audit(self, key: ProgressKey) -> AuditRecord | None: ...
    def put_audit(self, key: ProgressKey, audit: AuditRecord) -> None: ...
    def get_count(self, user: str) -> int: ...
    def set_count(self, user: str, count: int) -> None: ...


class InMemoryProgressRepo:
    """Key-value substrate for the ledger: records, audits, per-user counts."""

    def __init__(self) -> None:
        self._records: dict[ProgressKey, ProgressRecord] = {}
        self._audits: dict[ProgressKey, AuditRecord] = {}
        self._counts: dict[str, int] = {}

    def get(self, key: ProgressKey) -> ProgressRecord | None:
        return self._records.get(key)

    def put(self, key: ProgressKey, record: ProgressRecord) -> None:
        self._records[key] = record

    def remove(self, key: ProgressKey) -> bool:
        return self._records.pop(key, None) is not None

    def get_audit(self, key: ProgressKey) -> AuditRecord | None:
        return self._audits.get(key)

    def put_audit(self, key: ProgressKey, audit: AuditRecord) -> None:
        self._audits[key] = audit

    def get_count(self, user: str) -> int:
        return self._counts.get(user, 0)

    def set_count(self, user: str, count: int) -> None:
        self._counts[user] = count
