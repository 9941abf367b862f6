#!/usr/bin/env python3
"""Seed a demo organization with a survey and a QR token.

Creates the schema if needed, then inserts one organization, a survey
with one question of every type, and an active QR token. Re-running with
the same ``--code`` reuses the existing organization.

Example::

    python -m feedback_api.scripts.seed_demo --code demo --name "Demo Supermarket"
"""

from __future__ import annotations

import argparse
import asyncio
import json
import secrets

from sqlalchemy import select

from feedback_api.app.config import get_settings
from feedback_api.app.db import create_engine_for, create_schema, make_sessionmaker
from feedback_api.app.domain.enums import QuestionType
from feedback_api.app.models_tenant import Organization, QrToken, Question, Survey

DEMO_QUESTIONS = [
    ("How was your overall experience?", QuestionType.RATING_1_5, None),
    ("Did you find what you came for?", QuestionType.YES_NO, None),
    (
        "Which section did you visit most?",
        QuestionType.CHOICE_SINGLE,
        [
            {"key": "FRESH", "label": "Fresh produce"},
            {"key": "BAKERY", "label": "Bakery"},
            "Household",
        ],
    ),
    ("What made you leave fast (if you did)?", QuestionType.TEXT, None),
]


async def seed(database_url: str, code: str, name: str) -> dict[str, str]:
    """Insert demo data into ``database_url`` and return the created ids."""

    engine = create_engine_for(database_url)
    try:
        await create_schema(engine)
        Session = make_sessionmaker(engine)
        async with Session() as session:
            org = await session.scalar(
                select(Organization).where(Organization.code == code)
            )
            if org is None:
                org = Organization(code=code, name=name)
                session.add(org)
                await session.flush()

            survey = Survey(
                org_id=org.id,
                title="Quick Store Feedback",
                description="Help us improve in under 30 seconds.",
            )
            session.add(survey)
            await session.flush()

            for order, (prompt, qtype, choices) in enumerate(DEMO_QUESTIONS, start=1):
                session.add(
                    Question(
                        survey_id=survey.id,
                        order=order,
                        prompt=prompt,
                        type=qtype.value,
                        choices=json.dumps(choices) if choices else None,
                    )
                )

            token = QrToken(
                org_id=org.id, survey_id=survey.id, token=secrets.token_urlsafe(8)
            )
            session.add(token)
            await session.commit()
            return {"org_id": org.id, "survey_id": survey.id, "qr_token": token.token}
    finally:
        await engine.dispose()


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="Seed demo feedback data")
    parser.add_argument("--code", default="demo", help="organization code")
    parser.add_argument("--name", default="Demo Supermarket", help="organization name")
    parser.add_argument(
        "--database-url",
        default=None,
        help="SQLAlchemy async URL (defaults to DATABASE_URL)",
    )
    args = parser.parse_args(argv)

    url = args.database_url or get_settings().database_url
    result = asyncio.run(seed(url, args.code, args.name))
    print(json.dumps(result, indent=2))


if __name__ == "__main__":  # pragma: no cover - CLI entry
    main()
