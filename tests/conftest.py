from __future__ import annotations

import json
from datetime import datetime, timezone

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session

from feedback_api.app.config import CacheBackend, Settings
from feedback_api.app.db import FeedbackStore, create_engine_for, make_sessionmaker
from feedback_api.app.main import create_app
from feedback_api.app.models_tenant import (
    Base,
    Organization,
    QrToken,
    Question,
    Response,
    ResponseItem,
    Survey,
)

NOW = datetime(2024, 3, 15, 12, 0, tzinfo=timezone.utc)


class Seeder:
    """Insert rows through a synchronous session; every call commits."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def _save(self, obj):
        self.session.add(obj)
        self.session.commit()
        return obj

    def org(self, code: str, name: str | None = None, is_active: bool = True):
        return self._save(
            Organization(code=code, name=name or code.upper(), is_active=is_active)
        )

    def survey(
        self,
        org,
        title: str = "Store feedback",
        questions=(),
        description: str | None = None,
        is_active: bool = True,
        created_at=None,
    ):
        extra = {"created_at": created_at} if created_at is not None else {}
        survey = self._save(
            Survey(
                org_id=org.id,
                title=title,
                description=description,
                is_active=is_active,
                **extra,
            )
        )
        for order, question in enumerate(questions, start=1):
            choices = question.get("choices")
            if choices is not None and not isinstance(choices, str):
                choices = json.dumps(choices)
            self.session.add(
                Question(
                    survey_id=survey.id,
                    order=question.get("order", order),
                    prompt=question.get("prompt", f"Question {order}"),
                    type=question["type"],
                    choices=choices,
                    is_active=question.get("is_active", True),
                )
            )
        self.session.commit()
        return survey

    def questions(self, survey):
        return sorted(
            self.session.query(Question).filter_by(survey_id=survey.id).all(),
            key=lambda q: q.order,
        )

    def response(self, org, survey, submitted_at=NOW, answers=(), source="QR", **context):
        response = Response(
            org_id=org.id,
            survey_id=survey.id,
            source=source,
            submitted_at=submitted_at,
            **context,
        )
        self.session.add(response)
        self.session.flush()
        for question, value in answers:
            self.session.add(
                ResponseItem(response_id=response.id, question_id=question.id, value=value)
            )
        self.session.commit()
        return response

    def qr_token(self, org, survey, token: str, expires_at=None, is_active: bool = True):
        return self._save(
            QrToken(
                org_id=org.id,
                survey_id=survey.id,
                token=token,
                expires_at=expires_at,
                is_active=is_active,
            )
        )


@pytest.fixture
def anyio_backend() -> str:
    return "asyncio"


@pytest.fixture
def db_path(tmp_path):
    return tmp_path / "feedback.db"


@pytest.fixture
def db_session(db_path):
    engine = create_engine(f"sqlite:///{db_path}")
    Base.metadata.create_all(engine)
    with Session(engine, expire_on_commit=False) as session:
        yield session
    engine.dispose()


@pytest.fixture
def seed(db_session) -> Seeder:
    return Seeder(db_session)


@pytest.fixture
async def store(db_path, db_session):
    engine = create_engine_for(f"sqlite+aiosqlite:///{db_path}")
    yield FeedbackStore(make_sessionmaker(engine))
    await engine.dispose()


@pytest.fixture
def settings(db_path) -> Settings:
    return Settings(
        database_url=f"sqlite+aiosqlite:///{db_path}",
        org_cache_backend=CacheBackend.MEMORY,
        org_cache_ttl_sec=30,
    )


@pytest.fixture
def client(settings, db_session):
    app = create_app(settings)
    with TestClient(app) as c:
        yield c
