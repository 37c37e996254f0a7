"""Prometheus scrape endpoint.

Returns every registered metric in the text exposition format, e.g.:

  # TYPE ledger_operations_total counter
  ledger_operations_total{operation="update_progress",outcome="ok"} 12.0
  ledger_operations_total{operation="update_progress",outcome="INVALID_SCORE"} 1.0

Restrict access to this path in production; per-identity rejection rates
are visible here.
"""

from __future__ import annotations

from fastapi import APIRouter
from fastapi.responses import Response
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest

router = APIRouter(tags=["observability"])


@router.get("/metrics", include_in_schema=False)
async def metrics() -> Response:
    return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)
