"""Demo: walk the create → overwrite → delete ledger flow using TestClient.

Run with:
    python scripts/demo_progress_flow.py
"""

from __future__ import annotations

from fastapi.testclient import TestClient

from app.core.config import SETTINGS
from app.main import app
from app.services import token_service

LEARNER = "demo-learner"


def _auth(sub: str, height: int) -> dict[str, str]:
    token = token_service.create_access_token(sub=sub)
    return {"Authorization": f"Bearer {token}", "X-Block-Height": str(height)}


def main() -> None:
    client = TestClient(app)
    learner = _auth(LEARNER, 0)
    payload = {
        "score": 85,
        "status": "completed",
        "attempts": 2,
        "duration": 3600,
        "platform_id": "platform-xyz",
    }

    # ── Step 1: first write creates the record ──────────────────────
    r = client.put("/v1/progress/1", json=payload, headers=learner)
    print(f"1. PUT    /v1/progress/1        → {r.status_code}  {r.json()}")

    r = client.get(f"/v1/users/{LEARNER}/progress/1/audit")
    print(f"   audit                         → {r.json()}")

    # ── Step 2: overwrite at a later height ─────────────────────────
    r = client.put(
        "/v1/progress/1",
        json={**payload, "score": 92, "attempts": 3},
        headers=_auth(LEARNER, 5),
    )
    print(f"2. PUT    /v1/progress/1        → {r.status_code}  {r.json()}")

    r = client.get(f"/v1/users/{LEARNER}/progress/1/audit")
    print(f"   audit                         → {r.json()}")

    # ── Step 3: a rejected write ────────────────────────────────────
    r = client.put(
        "/v1/progress/2", json={**payload, "score": 101}, headers=learner
    )
    print(f"3. PUT    /v1/progress/2 (101)  → {r.status_code}  {r.json()}")

    # ── Step 4: delete leaves the audit trail behind ────────────────
    r = client.delete("/v1/progress/1", headers=_auth(LEARNER, 9))
    print(f"4. DELETE /v1/progress/1        → {r.status_code}  {r.json()}")

    r = client.get(f"/v1/users/{LEARNER}/progress/1")
    print(f"   progress                      → {r.json()}")
    r = client.get(f"/v1/users/{LEARNER}/progress/1/audit")
    print(f"   audit                         → {r.json()}")

    # ── Step 5: non-owner admin call ────────────────────────────────
    r = client.put(
        "/admin/max-progress-entries",
        json={"max_progress_entries": 5},
        headers=learner,
    )
    print(f"5. PUT    /admin/max-entries    → {r.status_code}  {r.json()}")

    r = client.put(
        "/admin/max-progress-entries",
        json={"max_progress_entries": 5},
        headers=_auth(SETTINGS.ledger_owner, 9),
    )
    print(f"   as owner                      → {r.status_code}  {r.json()}")

    r = client.get("/admin/ledger")
    print(f"   ledger                        → {r.json()}")


if __name__ == "__main__":
    main()
