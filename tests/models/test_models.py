from __future__ import annotations

import pytest

from app.models.progress import ProgressKey, ProgressRecord, ProgressStatus
from app.models.result import ErrorCode, failure, success


@pytest.mark.parametrize(
    "raw,expected",
    [
        ("completed", ProgressStatus.COMPLETED),
        ("in-progress", ProgressStatus.IN_PROGRESS),
        ("failed", ProgressStatus.FAILED),
        ("in_progress", None),
        ("none", None),
        ("", None),
    ],
)
def test_status_parse(raw: str, expected: ProgressStatus | None) -> None:
    assert ProgressStatus.parse(raw) is expected


def test_error_codes_are_stable() -> None:
    assert {c.name: int(c) for c in ErrorCode} == {
        "NOT_AUTHORIZED": 100,
        "INVALID_MODULE_ID": 101,
        "INVALID_SCORE": 102,
        "PROGRESS_NOT_FOUND": 105,
        "INVALID_STATUS": 106,
        "INVALID_ATTEMPTS": 107,
        "INVALID_DURATION": 108,
        "INVALID_PLATFORM": 109,
    }


def test_result_helpers() -> None:
    ok = success(True)
    assert (ok.ok, ok.value, ok.error) == (True, True, None)

    bad = failure(ErrorCode.INVALID_SCORE)
    assert bad.ok is False
    assert bad.value == 102
    assert bad.error is ErrorCode.INVALID_SCORE


def test_progress_key_is_a_plain_tuple() -> None:
    assert ProgressKey("u", 1) == ("u", 1)
    assert ProgressKey("u-1", 2) != ProgressKey("u", 12)


def test_progress_record_is_frozen() -> None:
    record = ProgressRecord(
        score=1,
        timestamp=0,
        status=ProgressStatus.FAILED,
        attempts=0,
        duration=1,
        platform_id="p",
    )
    with pytest.raises(AttributeError):
        record.score = 99  # type: ignore[misc]
