"""Read-only survey listing and lookup for one organization."""

from __future__ import annotations

from ..db.store import FeedbackStore
from ..domain.answers import parse_choices
from ..domain.errors import SurveyNotFoundError
from ..domain.records import QuestionSchema, SurveySchema
from ..utils.dates import isoformat_utc


def question_payload(question: QuestionSchema) -> dict:
    return {
        "id": question.id,
        "order": question.order,
        "prompt": question.prompt,
        "type": question.type,
        "choices": [
            {"key": opt.key, "label": opt.label}
            for opt in parse_choices(question.choices)
        ],
    }


def survey_payload(survey: SurveySchema) -> dict:
    """Survey identity plus its active questions with parsed choices."""
    return {
        "id": survey.id,
        "title": survey.title,
        "description": survey.description,
        "isActive": survey.is_active,
        "questions": [question_payload(q) for q in survey.questions],
    }


async def list_surveys(store: FeedbackStore, org_id: str) -> list[dict]:
    rows = await store.list_surveys(org_id)
    return [
        {
            "id": s.id,
            "title": s.title,
            "description": s.description,
            "isActive": s.is_active,
            "createdAt": isoformat_utc(s.created_at),
        }
        for s in rows
    ]


async def get_survey_detail(store: FeedbackStore, org_id: str, survey_id: str) -> dict:
    """Return one survey of ``org_id``; inactive surveys are still visible here.

    Raises :class:`SurveyNotFoundError` when the survey belongs to another
    organization or does not exist.
    """
    survey = await store.get_survey(org_id, survey_id)
    if survey is None:
        raise SurveyNotFoundError()
    return survey_payload(survey)


__all__ = ["question_payload", "survey_payload", "list_surveys", "get_survey_detail"]
