"""Tenant-scoped database models.

Every tenant-owned row carries ``org_id`` (directly or through its parent)
so that queries can always be scoped to a single organization. The models
are kept free of application wiring so they can be used by migrations,
scripts and tests independently."""

from __future__ import annotations

import uuid
from datetime import datetime, timezone

from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
)
from sqlalchemy.orm import declarative_base, relationship

Base = declarative_base()


def _uuid() -> str:
    return str(uuid.uuid4())


def _now() -> datetime:
    return datetime.now(timezone.utc)


class Organization(Base):
    """Tenant boundary."""

    __tablename__ = "organizations"

    id = Column(String(36), primary_key=True, default=_uuid)
    code = Column(String(64), nullable=False, unique=True)
    name = Column(String, nullable=False)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=_now)


class Survey(Base):
    __tablename__ = "surveys"

    id = Column(String(36), primary_key=True, default=_uuid)
    org_id = Column(String(36), ForeignKey("organizations.id"), nullable=False)
    title = Column(String, nullable=False)
    description = Column(Text, nullable=True)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=_now)

    questions = relationship(
        "Question", back_populates="survey", order_by="Question.order"
    )

    __table_args__ = (Index("ix_surveys_org_id", "org_id"),)


class Question(Base):
    """A question within a survey.

    ``choices`` holds the JSON-serialized option list for ``CHOICE_SINGLE``
    questions; malformed payloads read back as an empty option list.
    """

    __tablename__ = "questions"

    id = Column(String(36), primary_key=True, default=_uuid)
    survey_id = Column(String(36), ForeignKey("surveys.id"), nullable=False)
    order = Column(Integer, nullable=False, default=0)
    prompt = Column(Text, nullable=False)
    type = Column(String(32), nullable=False)
    choices = Column(Text, nullable=True)
    is_active = Column(Boolean, nullable=False, default=True)

    survey = relationship("Survey", back_populates="questions")

    __table_args__ = (Index("ix_questions_survey_id", "survey_id"),)


class Response(Base):
    """One feedback submission. Immutable once written."""

    __tablename__ = "responses"

    id = Column(String(36), primary_key=True, default=_uuid)
    org_id = Column(String(36), ForeignKey("organizations.id"), nullable=False)
    survey_id = Column(String(36), ForeignKey("surveys.id"), nullable=False)
    source = Column(String(16), nullable=False)
    submitted_at = Column(DateTime(timezone=True), nullable=False, default=_now)
    visit_frequency = Column(String(32), nullable=True)
    time_spent_min = Column(Integer, nullable=True)
    fast_exit_reason = Column(String(32), nullable=True)
    peak_hour_bucket = Column(String(32), nullable=True)

    items = relationship("ResponseItem", back_populates="response")

    __table_args__ = (
        Index("ix_responses_org_submitted", "org_id", "submitted_at"),
        Index("ix_responses_org_survey_submitted", "org_id", "survey_id", "submitted_at"),
    )


class ResponseItem(Base):
    """One answer within a response."""

    __tablename__ = "response_items"

    id = Column(String(36), primary_key=True, default=_uuid)
    response_id = Column(String(36), ForeignKey("responses.id"), nullable=False)
    question_id = Column(String(36), ForeignKey("questions.id"), nullable=False)
    value = Column(Text, nullable=False)

    response = relationship("Response", back_populates="items")

    __table_args__ = (
        Index("ix_response_items_response_id", "response_id"),
        Index("ix_response_items_question_id", "question_id"),
    )


class QrToken(Base):
    """Public link token mapping to an organization's survey."""

    __tablename__ = "qr_tokens"

    id = Column(String(36), primary_key=True, default=_uuid)
    org_id = Column(String(36), ForeignKey("organizations.id"), nullable=False)
    survey_id = Column(String(36), ForeignKey("surveys.id"), nullable=False)
    token = Column(String(64), nullable=False, unique=True)
    expires_at = Column(DateTime(timezone=True), nullable=True)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=_now)


__all__ = [
    "Base",
    "Organization",
    "Survey",
    "Question",
    "Response",
    "ResponseItem",
    "QrToken",
]
