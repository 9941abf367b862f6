"""Read-only survey catalog for the caller's organization."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException

from .db.store import FeedbackStore
from .deps.tenant import get_org_id, get_store
from .domain.errors import SurveyNotFoundError
from .services.survey_catalog import get_survey_detail, list_surveys
from .utils.responses import ok

router = APIRouter(prefix="/api/surveys")


@router.get("")
async def get_surveys(
    org_id: str = Depends(get_org_id),
    store: FeedbackStore = Depends(get_store),
) -> dict:
    """List the organization's surveys, newest first."""
    return ok(await list_surveys(store, org_id))


@router.get("/{survey_id}")
async def get_survey(
    survey_id: str,
    org_id: str = Depends(get_org_id),
    store: FeedbackStore = Depends(get_store),
) -> dict:
    try:
        return ok(await get_survey_detail(store, org_id, survey_id.strip()))
    except SurveyNotFoundError as exc:
        raise HTTPException(status_code=404, detail=exc.message) from exc
