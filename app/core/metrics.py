"""Application metrics using the Prometheus client library.

All metrics are defined here so there is one inventory of everything the
service measures.  Other modules import the metric they own and
increment/observe it at the point of action.

Counters only go up and are read as rates (rate(x[5m]) in PromQL).
Gauges go up and down and are read as a snapshot.  Histograms bucket
observations so Prometheus can compute percentiles.
"""

from __future__ import annotations

from prometheus_client import Counter, Gauge, Histogram

# ---------------------------------------------------------------------------
# HTTP metrics (populated by the MetricsMiddleware)
# ---------------------------------------------------------------------------

REQUEST_COUNT = Counter(
    "http_requests_total",
    "Total HTTP requests by method, endpoint, and status code",
    ["method", "endpoint", "status_code"],
)

REQUEST_DURATION = Histogram(
    "http_request_duration_seconds",
    "HTTP request duration in seconds",
    ["method", "endpoint"],
    buckets=[0.001, 0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0],
)

ACTIVE_REQUESTS = Gauge(
    "http_active_requests",
    "Number of HTTP requests currently being processed",
)

# ---------------------------------------------------------------------------
# Ledger metrics (populated by app.services.ledger)
# ---------------------------------------------------------------------------

LEDGER_OPERATIONS = Counter(
    "ledger_operations_total",
    "Mutating ledger calls by operation and outcome",
    ["operation", "outcome"],  # outcome: "ok" or the ErrorCode name
)

PROGRESS_RECORDS = Gauge(
    "ledger_progress_records",
    "Global progress counter across all users",
)
