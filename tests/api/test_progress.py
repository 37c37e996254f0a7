"""Tests for the progress endpoints (reads, upsert, delete)."""

from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from app.services.ledger import LedgerState
from tests.conftest import LEARNER, OWNER, auth_headers

_PAYLOAD = {
    "score": 85,
    "status": "completed",
    "attempts": 2,
    "duration": 3600,
    "platform_id": "platform-xyz",
}


def _put(client: TestClient, module_id: int = 1, sub: str = OWNER, height=0, **over):
    return client.put(
        f"/v1/progress/{module_id}",
        json={**_PAYLOAD, **over},
        headers=auth_headers(sub, height),
    )


# ---- 401: unauthenticated ----


def test_put_progress_rejects_missing_token(client: TestClient) -> None:
    resp = client.put("/v1/progress/1", json=_PAYLOAD)
    assert resp.status_code == 401


def test_put_progress_rejects_garbage_token(client: TestClient) -> None:
    resp = client.put(
        "/v1/progress/1",
        json=_PAYLOAD,
        headers={"Authorization": "Bearer not-a-jwt"},
    )
    assert resp.status_code == 401
    assert resp.headers["www-authenticate"] == "Bearer"


def test_delete_progress_rejects_missing_token(client: TestClient) -> None:
    resp = client.delete("/v1/progress/1")
    assert resp.status_code == 401


# ---- create / read ----


def test_owner_scenario_create_then_delete(
    client: TestClient, ledger_state: LedgerState
) -> None:
    resp = _put(client)
    assert resp.status_code == 200
    assert resp.json() == {"ok": True, "value": True}

    resp = client.get(f"/v1/users/{OWNER}/progress/1")
    assert resp.status_code == 200
    assert resp.json() == {
        "score": 85,
        "timestamp": 0,
        "status": "completed",
        "attempts": 2,
        "duration": 3600,
        "platform_id": "platform-xyz",
    }
    assert client.get(f"/v1/users/{OWNER}/progress-count").json() == {
        "user": OWNER,
        "count": 1,
    }
    assert ledger_state.progress_counter == 1

    resp = client.delete("/v1/progress/1", headers=auth_headers(OWNER, 0))
    assert resp.status_code == 200
    assert resp.json() == {"ok": True, "value": True}

    assert client.get(f"/v1/users/{OWNER}/progress/1").json() is None
    audit = client.get(f"/v1/users/{OWNER}/progress/1/audit").json()
    assert audit["previous_score"] == 85
    assert audit["previous_status"] == "completed"
    assert client.get(f"/v1/users/{OWNER}/progress-count").json()["count"] == 0
    assert ledger_state.progress_counter == 0


def test_first_write_audit_uses_sentinels(client: TestClient) -> None:
    _put(client, sub=LEARNER, height=12)
    audit = client.get(f"/v1/users/{LEARNER}/progress/1/audit").json()
    assert audit == {
        "last_updated": 12,
        "updater": LEARNER,
        "previous_score": 0,
        "previous_status": "none",
    }


def test_overwrite_audit_reflects_previous_write(client: TestClient) -> None:
    _put(client, sub=LEARNER, height=1)
    _put(client, sub=LEARNER, height=2, score=60, status="in-progress")

    progress = client.get(f"/v1/users/{LEARNER}/progress/1").json()
    assert progress["score"] == 60
    assert progress["status"] == "in-progress"
    assert progress["timestamp"] == 2

    audit = client.get(f"/v1/users/{LEARNER}/progress/1/audit").json()
    assert audit["previous_score"] == 85
    assert audit["previous_status"] == "completed"


def test_reads_for_unknown_keys(client: TestClient) -> None:
    assert client.get("/v1/users/ghost/progress/9").json() is None
    assert client.get("/v1/users/ghost/progress/9/audit").json() is None
    assert client.get("/v1/users/ghost/progress-count").json()["count"] == 0


def test_writes_are_scoped_to_caller(client: TestClient) -> None:
    _put(client, sub=LEARNER)
    resp = client.delete("/v1/progress/1", headers=auth_headers(OWNER))
    assert resp.status_code == 404
    assert client.get(f"/v1/users/{LEARNER}/progress/1").json() is not None


# ---- block height ----


def test_missing_block_height_reuses_last_seen(client: TestClient) -> None:
    _put(client, module_id=1, height=30)
    _put(client, module_id=2, height=None)
    assert client.get(f"/v1/users/{OWNER}/progress/2").json()["timestamp"] == 30


def test_negative_block_height_is_rejected(client: TestClient) -> None:
    resp = _put(client, height=-1)
    assert resp.status_code == 422


# ---- validation errors carry ledger codes ----


_REJECTIONS = [
    (0, {}, 101),
    (1, {"score": 101}, 102),
    (1, {"status": "bogus"}, 106),
    (1, {"attempts": 11}, 107),
    (1, {"duration": 0}, 108),
    (1, {"platform_id": ""}, 109),
    (1, {"platform_id": "x" * 51}, 109),
]


@pytest.mark.parametrize(
    "module_id,overrides,code",
    _REJECTIONS,
    ids=[f"{m}-{o}-{c}" for m, o, c in _REJECTIONS],
)
def test_put_progress_rejections(
    client: TestClient,
    ledger_state: LedgerState,
    module_id: int,
    overrides: dict,
    code: int,
) -> None:
    resp = _put(client, module_id=module_id, **overrides)
    assert resp.status_code == 422
    detail = resp.json()["detail"]
    assert detail["ok"] is False
    assert detail["value"] == code

    assert client.get(f"/v1/users/{OWNER}/progress/{module_id}").json() is None
    assert client.get(f"/v1/users/{OWNER}/progress/{module_id}/audit").json() is None
    assert ledger_state.progress_counter == 0


def test_capacity_exhausted_returns_101(
    client: TestClient, ledger_state: LedgerState
) -> None:
    ledger_state.max_progress_entries = 1
    assert _put(client, module_id=1).status_code == 200

    resp = _put(client, module_id=2)
    assert resp.status_code == 422
    assert resp.json()["detail"] == {
        "ok": False,
        "value": 101,
        "error": "INVALID_MODULE_ID",
    }


def test_delete_missing_returns_105(client: TestClient) -> None:
    resp = client.delete("/v1/progress/1", headers=auth_headers(OWNER))
    assert resp.status_code == 404
    assert resp.json()["detail"] == {
        "ok": False,
        "value": 105,
        "error": "PROGRESS_NOT_FOUND",
    }


def test_malformed_body_is_rejected_by_schema(client: TestClient) -> None:
    resp = client.put(
        "/v1/progress/1",
        json={"score": "lots"},
        headers=auth_headers(OWNER),
    )
    assert resp.status_code == 422
    assert isinstance(resp.json()["detail"], list)
