"""Tenant store used by the analytics engine and the submission path.

Each method opens its own session so that independent reads can be awaited
concurrently (``asyncio.gather``); the engine's connection pool bounds the
actual parallelism. Store failures are propagated unchanged.
"""

from __future__ import annotations

from datetime import datetime
from typing import Iterable

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from ..domain.records import (
    AnswerRow,
    NewResponse,
    OrgRecord,
    QrTokenRecord,
    SurveySchema,
    SurveySummary,
    TrendRow,
)
from ..repos_sqlalchemy import feedback_repo_sql as repo
from .session import session_scope


class FeedbackStore:
    """Async, tenant-scoped facade over :mod:`feedback_repo_sql`."""

    def __init__(self, sessionmaker: async_sessionmaker[AsyncSession]) -> None:
        self._sessionmaker = sessionmaker

    def _session(self):
        return session_scope(self._sessionmaker)

    async def get_organization(self, key: str) -> OrgRecord | None:
        async with self._session() as session:
            return await repo.get_organization(session, key)

    async def count_responses(
        self,
        org_id: str,
        since: datetime | None = None,
        until: datetime | None = None,
        survey_id: str | None = None,
    ) -> int:
        async with self._session() as session:
            return await repo.count_responses(session, org_id, since, until, survey_id)

    async def avg_time_spent(
        self, org_id: str, since: datetime, until: datetime
    ) -> float | None:
        async with self._session() as session:
            return await repo.avg_time_spent(session, org_id, since, until)

    async def group_responses(
        self, org_id: str, field: str, since: datetime, until: datetime
    ) -> list[tuple[str, int]]:
        async with self._session() as session:
            return await repo.group_responses(session, org_id, field, since, until)

    async def survey_titles(
        self, org_id: str, survey_ids: Iterable[str]
    ) -> dict[str, str]:
        async with self._session() as session:
            return await repo.survey_titles(session, org_id, survey_ids)

    async def trend_rows(
        self, org_id: str, since: datetime, until: datetime
    ) -> list[TrendRow]:
        async with self._session() as session:
            return await repo.trend_rows(session, org_id, since, until)

    async def list_surveys(self, org_id: str) -> list[SurveySummary]:
        async with self._session() as session:
            return await repo.list_surveys(session, org_id)

    async def get_survey(self, org_id: str, survey_id: str) -> SurveySchema | None:
        async with self._session() as session:
            return await repo.get_survey(session, org_id, survey_id)

    async def answer_rows(
        self, org_id: str, survey_id: str, since: datetime, until: datetime
    ) -> list[AnswerRow]:
        async with self._session() as session:
            return await repo.answer_rows(session, org_id, survey_id, since, until)

    async def get_qr_token(self, token: str) -> QrTokenRecord | None:
        async with self._session() as session:
            return await repo.get_qr_token(session, token)

    async def insert_response(self, new: NewResponse) -> tuple[str, datetime]:
        async with self._session() as session:
            return await repo.insert_response(session, new)


__all__ = ["FeedbackStore"]
