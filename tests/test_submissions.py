from datetime import datetime, timedelta, timezone

import pytest
from sqlalchemy import select

from feedback_api.app.domain.errors import (
    InvalidSubmissionError,
    QrTokenExpiredError,
    SurveyNotFoundError,
)
from feedback_api.app.models_tenant import Response, ResponseItem
from feedback_api.app.services.submissions import (
    coerce_minutes,
    get_public_survey,
    resolve_qr_token,
    submit_public_response,
    submit_response,
)

NOW = datetime(2024, 3, 15, 12, 0, tzinfo=timezone.utc)

QUESTIONS = [
    {"type": "RATING_1_5", "prompt": "Overall?"},
    {
        "type": "CHOICE_SINGLE",
        "prompt": "Section?",
        "choices": [{"key": "FRESH", "label": "Fresh produce"}, "Bakery"],
    },
    {"type": "TEXT", "prompt": "Retired", "is_active": False},
]


@pytest.mark.parametrize(
    "value, expected",
    [(None, None), ("12.9", 12), (-3, 0), ("x", None), (True, None), (float("inf"), None)],
)
def test_coerce_minutes(value, expected):
    assert coerce_minutes(value) == expected


@pytest.mark.anyio
async def test_staff_submission_normalizes_context(seed, store, db_session):
    org = seed.org("acme")
    survey = seed.survey(org, questions=QUESTIONS)
    rating, choice, _ = seed.questions(survey)

    data = await submit_response(
        store,
        org.id,
        survey.id,
        [(rating.id, " 4 "), (choice.id, "fresh")],
        source="paper",
        visit_frequency="weekly",
        time_spent_min="7.8",
        fast_exit_reason="teleported",
        peak_hour_bucket=" 10-12 ",
    )

    assert data["submittedAt"].endswith("Z")
    row = db_session.scalar(select(Response).where(Response.id == data["responseId"]))
    assert row.org_id == org.id
    assert row.source == "PAPER"
    assert row.visit_frequency == "WEEKLY"
    assert row.time_spent_min == 7
    assert row.fast_exit_reason is None
    assert row.peak_hour_bucket == "10-12"
    values = db_session.scalars(
        select(ResponseItem.value).where(ResponseItem.response_id == row.id)
    ).all()
    assert sorted(values) == ["4", "fresh"]


@pytest.mark.anyio
async def test_staff_submission_defaults_source(seed, store, db_session):
    org = seed.org("acme")
    survey = seed.survey(org, questions=QUESTIONS)
    rating = seed.questions(survey)[0]
    data = await submit_response(store, org.id, survey.id, [(rating.id, "5")], source="fax")
    row = db_session.scalar(select(Response).where(Response.id == data["responseId"]))
    assert row.source == "STAFF"


@pytest.mark.anyio
@pytest.mark.parametrize(
    "items, message",
    [
        ([], "items[] is required"),
        ([("", "5")], "Each item needs questionId"),
        ([("q", "  ")], "Each item needs value"),
    ],
)
async def test_item_validation(seed, store, items, message):
    org = seed.org("acme")
    survey = seed.survey(org, questions=QUESTIONS)
    with pytest.raises(InvalidSubmissionError) as exc:
        await submit_response(store, org.id, survey.id, items)
    assert exc.value.message == message


@pytest.mark.anyio
async def test_answers_must_target_active_questions(seed, store):
    org = seed.org("acme")
    survey = seed.survey(org, questions=QUESTIONS)
    retired = seed.questions(survey)[2]
    with pytest.raises(InvalidSubmissionError, match="Invalid questionId"):
        await submit_response(store, org.id, survey.id, [(retired.id, "hello")])


@pytest.mark.anyio
async def test_cannot_submit_to_another_org_or_inactive_survey(seed, store):
    org = seed.org("acme")
    other = seed.org("other")
    survey = seed.survey(other, questions=QUESTIONS)
    closed = seed.survey(org, questions=QUESTIONS, is_active=False)
    with pytest.raises(SurveyNotFoundError):
        await submit_response(store, org.id, survey.id, [("x", "1")])
    with pytest.raises(SurveyNotFoundError):
        await submit_response(store, org.id, closed.id, [("x", "1")])


@pytest.mark.anyio
async def test_qr_token_resolution(seed, store):
    org = seed.org("acme")
    survey = seed.survey(org)
    seed.qr_token(org, survey, "live", expires_at=NOW + timedelta(days=1))
    seed.qr_token(org, survey, "old", expires_at=NOW - timedelta(seconds=1))
    seed.qr_token(org, survey, "off", is_active=False)

    record = await resolve_qr_token(store, "live", now=NOW)
    assert (record.org_id, record.survey_id) == (org.id, survey.id)
    with pytest.raises(QrTokenExpiredError):
        await resolve_qr_token(store, "old", now=NOW)
    with pytest.raises(SurveyNotFoundError):
        await resolve_qr_token(store, "off", now=NOW)
    with pytest.raises(SurveyNotFoundError):
        await resolve_qr_token(store, "missing", now=NOW)


@pytest.mark.anyio
async def test_public_survey_lists_active_questions(seed, store):
    org = seed.org("acme")
    survey = seed.survey(org, title="Quick", questions=QUESTIONS)
    seed.qr_token(org, survey, "tok")

    data = await get_public_survey(store, "tok")

    assert data["orgId"] == org.id
    assert data["survey"]["title"] == "Quick"
    questions = data["survey"]["questions"]
    assert [q["type"] for q in questions] == ["RATING_1_5", "CHOICE_SINGLE"]
    assert questions[0]["choices"] == []
    assert questions[1]["choices"] == [
        {"key": "FRESH", "label": "Fresh produce"},
        {"key": "BAKERY", "label": "Bakery"},
    ]


@pytest.mark.anyio
async def test_public_submission_is_recorded_as_qr(seed, store, db_session):
    org = seed.org("acme")
    survey = seed.survey(org, questions=QUESTIONS)
    rating = seed.questions(survey)[0]
    seed.qr_token(org, survey, "tok")

    data = await submit_public_response(
        store, "tok", [(rating.id, "5")], visit_frequency="first_time"
    )

    row = db_session.scalar(select(Response).where(Response.id == data["responseId"]))
    assert row.org_id == org.id
    assert row.source == "QR"
    assert row.visit_frequency == "FIRST_TIME"
