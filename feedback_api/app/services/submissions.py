"""Feedback submission for staff-assisted entry and public QR links.

Context fields are normalized against their closed vocabularies; an
unrecognized value is stored as ``NULL`` rather than rejected. Answers may
only reference active questions of the target survey.
"""

from __future__ import annotations

import logging
import math
from datetime import datetime
from typing import Iterable

from ..db.store import FeedbackStore
from ..domain.enums import (
    FAST_EXIT_REASONS,
    SOURCES,
    VISIT_FREQUENCY,
    Source,
    normalize_enum,
)
from ..domain.errors import (
    InvalidSubmissionError,
    QrTokenExpiredError,
    SurveyNotFoundError,
)
from ..domain.records import NewResponse, QrTokenRecord
from ..utils.dates import as_utc, isoformat_utc, utcnow
from .survey_catalog import survey_payload

logger = logging.getLogger("feedback_api.submissions")


def coerce_minutes(value: object) -> int | None:
    """Floor ``value`` to a non-negative whole number of minutes."""
    if value is None or isinstance(value, bool):
        return None
    try:
        number = float(value)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return None
    if not math.isfinite(number):
        return None
    return max(0, math.floor(number))


def _clean_items(items: Iterable[tuple[object, object]]) -> list[tuple[str, str]]:
    cleaned = []
    for question_id, value in items:
        qid = "" if question_id is None else str(question_id).strip()
        if not qid:
            raise InvalidSubmissionError("Each item needs questionId")
        text = "" if value is None else str(value).strip()
        if not text:
            raise InvalidSubmissionError("Each item needs value")
        cleaned.append((qid, text))
    if not cleaned:
        raise InvalidSubmissionError("items[] is required")
    return cleaned


async def submit_response(
    store: FeedbackStore,
    org_id: str,
    survey_id: str,
    items: Iterable[tuple[object, object]],
    source: str | None = None,
    *,
    default_source: Source = Source.STAFF,
    visit_frequency: object = None,
    time_spent_min: object = None,
    fast_exit_reason: object = None,
    peak_hour_bucket: object = None,
) -> dict:
    """Validate and store one response with its answers."""

    cleaned = _clean_items(items)

    survey = await store.get_survey(org_id, survey_id)
    if survey is None or not survey.is_active:
        raise SurveyNotFoundError("Survey not found for this organization")

    allowed = {q.id for q in survey.questions}
    if any(qid not in allowed for qid, _ in cleaned):
        raise InvalidSubmissionError("Invalid questionId for this survey")

    bucket = "" if peak_hour_bucket is None else str(peak_hour_bucket).strip()
    new = NewResponse(
        org_id=org_id,
        survey_id=survey.id,
        source=normalize_enum(SOURCES, source) or default_source.value,
        items=cleaned,
        visit_frequency=normalize_enum(VISIT_FREQUENCY, visit_frequency),
        time_spent_min=coerce_minutes(time_spent_min),
        fast_exit_reason=normalize_enum(FAST_EXIT_REASONS, fast_exit_reason),
        peak_hour_bucket=bucket or None,
    )
    response_id, submitted_at = await store.insert_response(new)
    logger.info(
        "response recorded org=%s survey=%s source=%s items=%d",
        org_id,
        survey.id,
        new.source,
        len(cleaned),
    )
    return {"responseId": response_id, "submittedAt": isoformat_utc(submitted_at)}


async def resolve_qr_token(
    store: FeedbackStore, token: str, now: datetime | None = None
) -> QrTokenRecord:
    """Map a public token to its organization and survey."""

    token = (token or "").strip()
    record = await store.get_qr_token(token) if token else None
    if record is None or not record.is_active:
        raise SurveyNotFoundError()
    current = as_utc(now) if now is not None else utcnow()
    if record.expires_at is not None and as_utc(record.expires_at) <= current:
        raise QrTokenExpiredError()
    return record


async def get_public_survey(
    store: FeedbackStore, token: str, now: datetime | None = None
) -> dict:
    """Return the survey and its active questions behind ``token``."""

    record = await resolve_qr_token(store, token, now)
    survey = await store.get_survey(record.org_id, record.survey_id)
    if survey is None or not survey.is_active:
        raise SurveyNotFoundError()
    return {"orgId": record.org_id, "survey": survey_payload(survey)}


async def submit_public_response(
    store: FeedbackStore,
    token: str,
    items: Iterable[tuple[object, object]],
    now: datetime | None = None,
    **context: object,
) -> dict:
    """Record a QR-channel response for the survey behind ``token``."""

    cleaned = _clean_items(items)
    record = await resolve_qr_token(store, token, now)
    return await submit_response(
        store,
        record.org_id,
        record.survey_id,
        cleaned,
        source=Source.QR.value,
        default_source=Source.QR,
        **context,
    )


__all__ = [
    "coerce_minutes",
    "submit_response",
    "resolve_qr_token",
    "get_public_survey",
    "submit_public_response",
]
