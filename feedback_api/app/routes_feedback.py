"""Routes for collecting feedback via public QR links and staff entry."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field

from .db.store import FeedbackStore
from .deps.tenant import get_org_id, get_store
from .domain.enums import SOURCES, Source, normalize_enum
from .domain.errors import (
    InvalidSubmissionError,
    QrTokenExpiredError,
    SurveyNotFoundError,
)
from .routes_metrics import feedback_submissions_total
from .services.submissions import (
    get_public_survey,
    submit_public_response,
    submit_response,
)
from .utils.responses import ok


class AnswerIn(BaseModel):
    """One answer; ``value`` is kept as the raw submitted string."""

    questionId: str | None = None
    value: str | int | float | None = None


class PublicSubmissionIn(BaseModel):
    """Payload posted from the public QR survey page."""

    items: list[AnswerIn] = Field(default_factory=list)
    visitFrequency: str | None = None
    timeSpentMin: float | str | None = None
    fastExitReason: str | None = None
    peakHourBucket: str | None = None

    def context(self) -> dict:
        return {
            "visit_frequency": self.visitFrequency,
            "time_spent_min": self.timeSpentMin,
            "fast_exit_reason": self.fastExitReason,
            "peak_hour_bucket": self.peakHourBucket,
        }

    def item_pairs(self) -> list[tuple[object, object]]:
        return [(it.questionId, it.value) for it in self.items]


class StaffSubmissionIn(PublicSubmissionIn):
    """Staff-assisted submission for a survey of the caller's organization."""

    surveyId: str
    source: str | None = None


router = APIRouter()


_STATUS_CODES = {
    SurveyNotFoundError: 404,
    QrTokenExpiredError: 410,
    InvalidSubmissionError: 400,
}


def _http_error(
    exc: SurveyNotFoundError | QrTokenExpiredError | InvalidSubmissionError,
) -> HTTPException:
    return HTTPException(status_code=_STATUS_CODES[type(exc)], detail=exc.message)


@router.get("/api/public/q/{token}")
async def public_survey(
    token: str, store: FeedbackStore = Depends(get_store)
) -> dict:
    """Return the active survey and questions behind a QR token."""
    try:
        return ok(await get_public_survey(store, token))
    except (SurveyNotFoundError, QrTokenExpiredError) as exc:
        raise _http_error(exc) from exc


@router.post("/api/public/q/{token}/submit")
async def public_submit(
    token: str,
    body: PublicSubmissionIn,
    store: FeedbackStore = Depends(get_store),
) -> dict:
    """Record a response submitted through a QR link."""
    try:
        data = await submit_public_response(
            store, token, body.item_pairs(), **body.context()
        )
    except (SurveyNotFoundError, QrTokenExpiredError, InvalidSubmissionError) as exc:
        raise _http_error(exc) from exc
    feedback_submissions_total.labels(source="QR").inc()
    return ok(data)


@router.post("/api/staff/feedback")
async def staff_submit(
    body: StaffSubmissionIn,
    org_id: str = Depends(get_org_id),
    store: FeedbackStore = Depends(get_store),
) -> dict:
    """Record a staff-assisted response for the caller's organization."""
    try:
        data = await submit_response(
            store,
            org_id,
            body.surveyId.strip(),
            body.item_pairs(),
            source=body.source,
            **body.context(),
        )
    except (SurveyNotFoundError, InvalidSubmissionError) as exc:
        raise _http_error(exc) from exc
    feedback_submissions_total.labels(
        source=normalize_enum(SOURCES, body.source) or Source.STAFF.value
    ).inc()
    return ok(data)
