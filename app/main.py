from __future__ import annotations

import logging

from fastapi import FastAPI

from app.api.admin import router as admin_router
from app.api.health import router as health_router
from app.api.metrics_endpoint import router as metrics_router
from app.api.progress import router as progress_router
from app.core.config import SETTINGS
from app.core.logging import setup_logging
from app.middleware.metrics import MetricsMiddleware
from app.middleware.request_context import RequestContextMiddleware

# Configure logging before anything else runs.
setup_logging(SETTINGS.log_level, json_format=SETTINGS.log_json)

logger = logging.getLogger(__name__)

app = FastAPI(
    title="progress-ledger",
    docs_url="/docs" if SETTINGS.is_dev else None,
    redoc_url="/redoc" if SETTINGS.is_dev else None,
)

# Last-added runs first: RequestContext (outermost) → Metrics → route handler
app.add_middleware(MetricsMiddleware)
app.add_middleware(RequestContextMiddleware)

app.include_router(metrics_router)
app.include_router(health_router)
app.include_router(admin_router)
app.include_router(progress_router)

logger.info(
    "progress-ledger started  env=%s port=%d owner=%s max_entries=%d "
    "count_overwrites=%s",
    SETTINGS.app_env,
    SETTINGS.port,
    SETTINGS.ledger_owner,
    SETTINGS.max_progress_entries,
    SETTINGS.count_overwrites,
)
