from datetime import datetime, timezone

import pytest

from feedback_api.app.domain.errors import SurveyNotFoundError
from feedback_api.app.services.survey_catalog import get_survey_detail, list_surveys

JAN = datetime(2024, 1, 5, 9, tzinfo=timezone.utc)
FEB = datetime(2024, 2, 5, 9, tzinfo=timezone.utc)


def test_list_surveys_newest_first(client, seed):
    org = seed.org("acme")
    older = seed.survey(org, title="Winter", created_at=JAN)
    newer = seed.survey(org, title="Spring", is_active=False, created_at=FEB)
    seed.survey(seed.org("other"), title="Not yours")

    resp = client.get("/api/surveys", headers={"X-Org-Id": "acme"})

    assert resp.status_code == 200
    assert resp.json()["data"] == [
        {
            "id": newer.id,
            "title": "Spring",
            "description": None,
            "isActive": False,
            "createdAt": "2024-02-05T09:00:00Z",
        },
        {
            "id": older.id,
            "title": "Winter",
            "description": None,
            "isActive": True,
            "createdAt": "2024-01-05T09:00:00Z",
        },
    ]


def test_survey_detail_lists_active_questions(client, seed):
    org = seed.org("acme")
    survey = seed.survey(
        org,
        title="Checkout",
        questions=[
            {"type": "CHOICE_SINGLE", "prompt": "Aisle?", "choices": ["Dairy"]},
            {"type": "TEXT", "prompt": "Retired", "is_active": False},
        ],
    )

    resp = client.get(f"/api/surveys/{survey.id}", headers={"X-Org-Id": "acme"})

    assert resp.status_code == 200
    data = resp.json()["data"]
    assert data["title"] == "Checkout"
    assert [q["prompt"] for q in data["questions"]] == ["Aisle?"]
    assert data["questions"][0]["choices"] == [{"key": "DAIRY", "label": "Dairy"}]


def test_survey_detail_of_another_org_is_not_found(client, seed):
    seed.org("acme")
    foreign = seed.survey(seed.org("other"))
    resp = client.get(f"/api/surveys/{foreign.id}", headers={"X-Org-Id": "acme"})
    assert resp.status_code == 404
    assert resp.json()["error"]["message"] == "Survey not found"


def test_survey_catalog_requires_org_header(client):
    assert client.get("/api/surveys").status_code == 400


@pytest.mark.anyio
async def test_catalog_services_are_tenant_scoped(seed, store):
    a = seed.org("org-a")
    b = seed.org("org-b")
    survey_a = seed.survey(a, title="A only")

    assert [s["title"] for s in await list_surveys(store, a.id)] == ["A only"]
    assert await list_surveys(store, b.id) == []
    with pytest.raises(SurveyNotFoundError):
        await get_survey_detail(store, b.id, survey_a.id)
