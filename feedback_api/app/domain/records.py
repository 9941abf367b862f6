"""Plain records exchanged between the tenant store and the services."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any


@dataclass(frozen=True)
class OrgRecord:
    id: str
    code: str
    name: str
    is_active: bool


@dataclass(frozen=True)
class QuestionSchema:
    id: str
    order: int
    prompt: str
    type: str
    choices: Any = None


@dataclass(frozen=True)
class SurveySchema:
    """A survey with its active questions sorted by ``order``."""

    id: str
    org_id: str
    title: str
    description: str | None
    is_active: bool
    questions: list[QuestionSchema] = field(default_factory=list)


@dataclass(frozen=True)
class SurveySummary:
    id: str
    title: str
    description: str | None
    is_active: bool
    created_at: datetime | None


@dataclass(frozen=True)
class TrendRow:
    submitted_at: datetime
    time_spent_min: Any
    source: str | None


@dataclass(frozen=True)
class AnswerRow:
    """A response item joined with its parent response metadata."""

    question_id: str
    value: str | None
    submitted_at: datetime | None
    source: str | None


@dataclass(frozen=True)
class QrTokenRecord:
    org_id: str
    survey_id: str
    expires_at: datetime | None
    is_active: bool


@dataclass(frozen=True)
class NewResponse:
    """Validated submission ready to be persisted."""

    org_id: str
    survey_id: str
    source: str
    items: list[tuple[str, str]]
    visit_frequency: str | None = None
    time_spent_min: int | None = None
    fast_exit_reason: str | None = None
    peak_hour_bucket: str | None = None


__all__ = [
    "OrgRecord",
    "QuestionSchema",
    "SurveySchema",
    "SurveySummary",
    "TrendRow",
    "AnswerRow",
    "QrTokenRecord",
    "NewResponse",
]
