"""Tenant analytics endpoints.

The organization always comes from the tenant dependency; the ``days``
query parameter falls back to the endpoint default when it is missing,
non-numeric or outside ``[1, 365]``.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException

from .db.store import FeedbackStore
from .deps.tenant import get_org_id, get_store
from .domain.errors import SurveyNotFoundError
from .routes_metrics import analytics_queries_total
from .services.feedback_analytics import (
    overview_analytics,
    survey_analytics,
    trends_analytics,
)
from .utils.responses import ok

router = APIRouter(prefix="/api/analytics")


@router.get("/overview")
async def get_overview(
    days: str | None = None,
    org_id: str = Depends(get_org_id),
    store: FeedbackStore = Depends(get_store),
) -> dict:
    """Return totals and windowed breakdowns (default window 7 days)."""
    analytics_queries_total.labels(view="overview").inc()
    return ok(await overview_analytics(store, org_id, days))


@router.get("/trends")
async def get_trends(
    days: str | None = None,
    org_id: str = Depends(get_org_id),
    store: FeedbackStore = Depends(get_store),
) -> dict:
    """Return the per-day series (default window 14 days)."""
    analytics_queries_total.labels(view="trends").inc()
    return ok(await trends_analytics(store, org_id, days))


@router.get("/surveys/{survey_id}")
async def get_survey_analytics(
    survey_id: str,
    days: str | None = None,
    org_id: str = Depends(get_org_id),
    store: FeedbackStore = Depends(get_store),
) -> dict:
    """Return per-question summaries for one survey (default window 7 days)."""
    analytics_queries_total.labels(view="survey").inc()
    try:
        data = await survey_analytics(store, org_id, survey_id.strip(), days)
    except SurveyNotFoundError as exc:
        raise HTTPException(status_code=404, detail=exc.message) from exc
    return ok(data)
