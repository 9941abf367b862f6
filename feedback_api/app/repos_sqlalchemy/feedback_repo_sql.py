"""SQLAlchemy-backed query primitives for feedback data.

Every read helper takes ``org_id`` and filters on it; there is no helper
that can aggregate across organizations. Helpers operate on an
``AsyncSession`` supplied by the caller and never commit except
:func:`insert_response`.
"""

from __future__ import annotations

from datetime import datetime
from typing import Iterable

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from ..domain.records import (
    AnswerRow,
    NewResponse,
    OrgRecord,
    QrTokenRecord,
    QuestionSchema,
    SurveySchema,
    SurveySummary,
    TrendRow,
)
from ..models_tenant import (
    Organization,
    QrToken,
    Question,
    Response,
    ResponseItem,
    Survey,
)

GROUPABLE_FIELDS = {
    "source": Response.source,
    "fast_exit_reason": Response.fast_exit_reason,
    "peak_hour_bucket": Response.peak_hour_bucket,
    "survey_id": Response.survey_id,
    "visit_frequency": Response.visit_frequency,
}


def _response_scope(
    org_id: str,
    since: datetime | None = None,
    until: datetime | None = None,
    survey_id: str | None = None,
) -> list:
    if not org_id:
        raise ValueError("org_id required")
    clauses = [Response.org_id == org_id]
    if since is not None:
        clauses.append(Response.submitted_at >= since)
    if until is not None:
        clauses.append(Response.submitted_at < until)
    if survey_id is not None:
        clauses.append(Response.survey_id == survey_id)
    return clauses


async def get_organization(session: AsyncSession, key: str) -> OrgRecord | None:
    """Return the organization whose id equals ``key``, else the one whose code does.

    An id match takes precedence over a code match.
    """
    columns = (
        Organization.id, Organization.code, Organization.name, Organization.is_active
    )
    row = None
    for column in (Organization.id, Organization.code):
        result = await session.execute(select(*columns).where(column == key))
        row = result.first()
        if row is not None:
            break
    if row is None:
        return None
    return OrgRecord(id=row[0], code=row[1], name=row[2], is_active=bool(row[3]))


async def count_responses(
    session: AsyncSession,
    org_id: str,
    since: datetime | None = None,
    until: datetime | None = None,
    survey_id: str | None = None,
) -> int:
    count = await session.scalar(
        select(func.count())
        .select_from(Response)
        .where(*_response_scope(org_id, since, until, survey_id))
    )
    return int(count or 0)


async def avg_time_spent(
    session: AsyncSession, org_id: str, since: datetime, until: datetime
) -> float | None:
    """Average ``time_spent_min`` over responses that recorded one."""
    avg = await session.scalar(
        select(func.avg(Response.time_spent_min)).where(
            *_response_scope(org_id, since, until),
            Response.time_spent_min.is_not(None),
        )
    )
    return float(avg) if avg is not None else None


async def group_responses(
    session: AsyncSession,
    org_id: str,
    field: str,
    since: datetime,
    until: datetime,
) -> list[tuple[str, int]]:
    """Return ``(value, count)`` pairs for ``field``; NULL values are excluded."""
    column = GROUPABLE_FIELDS.get(field)
    if column is None:
        raise ValueError(f"cannot group responses by {field!r}")
    result = await session.execute(
        select(column, func.count())
        .where(*_response_scope(org_id, since, until), column.is_not(None))
        .group_by(column)
    )
    return [(value, int(count)) for value, count in result.all()]


async def survey_titles(
    session: AsyncSession, org_id: str, survey_ids: Iterable[str]
) -> dict[str, str]:
    ids = [sid for sid in survey_ids if sid]
    if not ids:
        return {}
    result = await session.execute(
        select(Survey.id, Survey.title).where(
            Survey.org_id == org_id, Survey.id.in_(ids)
        )
    )
    return {sid: title for sid, title in result.all()}


async def trend_rows(
    session: AsyncSession, org_id: str, since: datetime, until: datetime
) -> list[TrendRow]:
    result = await session.execute(
        select(Response.submitted_at, Response.time_spent_min, Response.source)
        .where(*_response_scope(org_id, since, until))
        .order_by(Response.submitted_at)
    )
    return [TrendRow(ts, spent, source) for ts, spent, source in result.all()]


async def list_surveys(session: AsyncSession, org_id: str) -> list[SurveySummary]:
    """Return the organization's surveys, newest first."""
    if not org_id:
        raise ValueError("org_id required")
    result = await session.execute(
        select(
            Survey.id,
            Survey.title,
            Survey.description,
            Survey.is_active,
            Survey.created_at,
        )
        .where(Survey.org_id == org_id)
        .order_by(Survey.created_at.desc(), Survey.id)
    )
    return [
        SurveySummary(sid, title, description, bool(active), created)
        for sid, title, description, active, created in result.all()
    ]


async def get_survey(
    session: AsyncSession, org_id: str, survey_id: str
) -> SurveySchema | None:
    """Return the survey with its active questions, scoped to ``org_id``."""
    survey = await session.scalar(
        select(Survey).where(Survey.id == survey_id, Survey.org_id == org_id)
    )
    if survey is None:
        return None
    result = await session.execute(
        select(
            Question.id, Question.order, Question.prompt, Question.type, Question.choices
        )
        .where(Question.survey_id == survey.id, Question.is_active.is_(True))
        .order_by(Question.order)
    )
    questions = [QuestionSchema(*row) for row in result.all()]
    return SurveySchema(
        id=survey.id,
        org_id=survey.org_id,
        title=survey.title,
        description=survey.description,
        is_active=bool(survey.is_active),
        questions=questions,
    )


async def answer_rows(
    session: AsyncSession,
    org_id: str,
    survey_id: str,
    since: datetime,
    until: datetime,
) -> list[AnswerRow]:
    """Return answers for ``survey_id`` submitted inside the window."""
    result = await session.execute(
        select(
            ResponseItem.question_id,
            ResponseItem.value,
            Response.submitted_at,
            Response.source,
        )
        .join(Response, Response.id == ResponseItem.response_id)
        .join(Question, Question.id == ResponseItem.question_id)
        .where(
            *_response_scope(org_id, since, until, survey_id),
            Question.survey_id == survey_id,
        )
    )
    return [AnswerRow(*row) for row in result.all()]


async def get_qr_token(session: AsyncSession, token: str) -> QrTokenRecord | None:
    result = await session.execute(
        select(QrToken.org_id, QrToken.survey_id, QrToken.expires_at, QrToken.is_active)
        .where(QrToken.token == token)
    )
    row = result.first()
    if row is None:
        return None
    return QrTokenRecord(
        org_id=row[0], survey_id=row[1], expires_at=row[2], is_active=bool(row[3])
    )


async def insert_response(
    session: AsyncSession, new: NewResponse
) -> tuple[str, datetime]:
    """Persist ``new`` and its items atomically; return id and timestamp."""
    async with session.begin():
        response = Response(
            org_id=new.org_id,
            survey_id=new.survey_id,
            source=new.source,
            visit_frequency=new.visit_frequency,
            time_spent_min=new.time_spent_min,
            fast_exit_reason=new.fast_exit_reason,
            peak_hour_bucket=new.peak_hour_bucket,
        )
        session.add(response)
        await session.flush()
        session.add_all(
            ResponseItem(response_id=response.id, question_id=qid, value=value)
            for qid, value in new.items
        )
    return response.id, response.submitted_at


__all__ = [
    "GROUPABLE_FIELDS",
    "get_organization",
    "count_responses",
    "avg_time_spent",
    "group_responses",
    "survey_titles",
    "trend_rows",
    "list_surveys",
    "get_survey",
    "answer_rows",
    "get_qr_token",
    "insert_response",
]
