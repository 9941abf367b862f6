# routes_metrics.py

"""Prometheus metrics and /metrics endpoint."""

from __future__ import annotations

from fastapi import APIRouter, Response
from prometheus_client import CONTENT_TYPE_LATEST, Counter, generate_latest

# Counters
http_requests_total = Counter(
    "http_requests_total", "Total HTTP requests", ["path", "method", "status"]
)

http_errors_total = Counter("http_errors_total", "Total HTTP errors", ["status"])
http_errors_total.labels(status="0").inc(0)

analytics_queries_total = Counter(
    "analytics_queries_total", "Analytics views computed", ["view"]
)
for _view in ("overview", "trends", "survey"):
    analytics_queries_total.labels(view=_view).inc(0)

feedback_submissions_total = Counter(
    "feedback_submissions_total", "Feedback responses recorded", ["source"]
)

router = APIRouter()


@router.get("/metrics")
async def metrics() -> Response:
    """Expose Prometheus metrics in text format."""
    return Response(generate_latest(), media_type=CONTENT_TYPE_LATEST)
