"""Recruitment Routes — verifies the HTTP flow from project to scheduled match.

Invariants:
    - Role gate: missing identity -> 401, wrong role -> 403
    - Duplicate application -> 409 DUPLICATE_APPLICATION
    - Approve is idempotent and returns the same Match
    - Timezone-less scheduled_at -> 400 before any write
"""

import pytest

from whiteloop.core.domain_types import Role

from tests.services.factories import (
    SCREENER_CRITERIA, STUDY_VALUES, headers_for, make_caller,
)

QUALIFIED = {"years": 4, "consent": True}


@pytest.fixture
def as_researcher(researcher):
    return headers_for(researcher)


@pytest.fixture
def as_participant(participant):
    return headers_for(participant)


@pytest.fixture
async def study_id(client, as_researcher):
    res = await client.post("/api/v1/projects", headers=as_researcher, json={
        "title": "Checkout research",
        "description": "Why do shoppers abandon carts?",
        "domain": "ecommerce",
        "budget_cents": 500000,
    })
    assert res.status_code == 201
    project_id = res.json()["id"]

    res = await client.post(
        f"/api/v1/projects/{project_id}/studies",
        headers=as_researcher,
        json={**STUDY_VALUES, "screener": {"criteria": SCREENER_CRITERIA}},
    )
    assert res.status_code == 201
    assert res.json()["screener_id"] is not None
    return res.json()["id"]


@pytest.fixture
async def application_id(client, study_id, as_participant):
    await client.put(
        "/api/v1/participants/me/profile", headers=as_participant,
        json={"demographics": {"country": "PT"}},
    )
    res = await client.post(
        f"/api/v1/studies/{study_id}/applications",
        headers=as_participant, json={"answers": QUALIFIED},
    )
    assert res.status_code == 201
    return res.json()["application"]["id"]


# --- Submission ----------------------------------------------------------------

async def test_submit_returns_screening(client, study_id, as_participant):
    await client.put(
        "/api/v1/participants/me/profile", headers=as_participant,
        json={"demographics": {"country": "BR"}},
    )
    res = await client.post(
        f"/api/v1/studies/{study_id}/applications",
        headers=as_participant, json={"answers": QUALIFIED},
    )
    assert res.status_code == 201
    body = res.json()
    assert body["screening"] == {"score": 3.0, "decision": "approve"}
    assert body["application"]["status"] == "pending"
    assert body["application"]["score"] == 3
    assert body["match"] is None


async def test_duplicate_submission_is_409(client, study_id, application_id, as_participant):
    res = await client.post(
        f"/api/v1/studies/{study_id}/applications",
        headers=as_participant, json={"answers": {}},
    )
    assert res.status_code == 409
    assert res.json()["error"]["code"] == "DUPLICATE_APPLICATION"


async def test_submit_to_unknown_study_is_404(client, as_participant):
    res = await client.post(
        "/api/v1/studies/00000000-0000-0000-0000-000000000000/applications",
        headers=as_participant, json={"answers": {}},
    )
    assert res.status_code == 404


async def test_researcher_cannot_submit(client, study_id, as_researcher):
    res = await client.post(
        f"/api/v1/studies/{study_id}/applications",
        headers=as_researcher, json={"answers": {}},
    )
    assert res.status_code == 403
    assert res.json()["error"]["code"] == "FORBIDDEN"


async def test_missing_identity_is_401(client, study_id):
    res = await client.post(
        f"/api/v1/studies/{study_id}/applications", json={"answers": {}},
    )
    assert res.status_code == 401


async def test_malformed_identity_is_401(client, study_id):
    res = await client.post(
        f"/api/v1/studies/{study_id}/applications",
        headers={"X-User-Id": "not-a-uuid", "X-User-Role": "participant"},
        json={"answers": {}},
    )
    assert res.status_code == 401


async def test_invalid_criteria_is_400(client, as_researcher):
    res = await client.post("/api/v1/projects", headers=as_researcher, json={
        "title": "Project", "description": "A long enough description",
        "domain": "saas", "budget_cents": 0,
    })
    project_id = res.json()["id"]
    res = await client.post(
        f"/api/v1/projects/{project_id}/studies", headers=as_researcher,
        json={**STUDY_VALUES, "screener": {"criteria": {
            "threshold": 1,
            "rules": [{"field": "x", "op": "eq", "target": 1, "weight": "2"}],
        }}},
    )
    assert res.status_code == 400
    assert res.json()["error"]["code"] == "VALIDATION_ERROR"


# --- Review --------------------------------------------------------------------

async def test_approve_is_idempotent(client, application_id, as_researcher):
    first = await client.post(
        f"/api/v1/applications/{application_id}/approve", headers=as_researcher,
    )
    second = await client.post(
        f"/api/v1/applications/{application_id}/approve", headers=as_researcher,
    )
    assert first.status_code == second.status_code == 201
    assert first.json()["id"] == second.json()["id"]
    assert first.json()["status"] == "awaiting_schedule"

    res = await client.get(
        f"/api/v1/applications/{application_id}", headers=as_researcher,
    )
    assert res.json()["status"] == "approved"


async def test_participant_cannot_approve(client, application_id, as_participant):
    res = await client.post(
        f"/api/v1/applications/{application_id}/approve", headers=as_participant,
    )
    assert res.status_code == 403


async def test_reject_after_approve_is_409(client, application_id, as_researcher):
    await client.post(
        f"/api/v1/applications/{application_id}/approve", headers=as_researcher,
    )
    res = await client.post(
        f"/api/v1/applications/{application_id}/reject", headers=as_researcher,
    )
    assert res.status_code == 409
    assert res.json()["error"]["code"] == "INVALID_TRANSITION"


async def test_waitlist_then_filter(client, study_id, application_id, as_researcher):
    res = await client.post(
        f"/api/v1/applications/{application_id}/waitlist", headers=as_researcher,
    )
    assert res.status_code == 200

    res = await client.get(
        f"/api/v1/studies/{study_id}/applications",
        headers=as_researcher, params={"status": "waitlist"},
    )
    assert [a["id"] for a in res.json()] == [application_id]

    res = await client.get(
        f"/api/v1/studies/{study_id}/applications",
        headers=as_researcher, params={"status": "pending"},
    )
    assert res.json() == []


async def test_admin_may_review(client, application_id):
    admin = headers_for(make_caller(Role.ADMIN))
    res = await client.post(
        f"/api/v1/applications/{application_id}/reject", headers=admin,
    )
    assert res.status_code == 200


# --- Scheduling ----------------------------------------------------------------

@pytest.fixture
async def match_id(client, application_id, as_researcher):
    res = await client.post(
        f"/api/v1/applications/{application_id}/approve", headers=as_researcher,
    )
    return res.json()["id"]


async def test_schedule_requires_timezone(client, match_id, as_researcher):
    res = await client.post(
        f"/api/v1/matches/{match_id}/schedule", headers=as_researcher,
        json={"scheduled_at": "2026-11-02T15:00:00"},
    )
    assert res.status_code == 400

    res = await client.get(f"/api/v1/matches/{match_id}", headers=as_researcher)
    assert res.json()["status"] == "awaiting_schedule"
    assert res.json()["scheduled_at"] is None


async def test_schedule_sets_status(client, study_id, match_id, as_researcher):
    res = await client.post(
        f"/api/v1/matches/{match_id}/schedule", headers=as_researcher,
        json={"scheduled_at": "2026-11-02T15:00:00Z", "external_event_ref": "cal-1"},
    )
    assert res.status_code == 200
    assert res.json()["status"] == "scheduled"
    assert res.json()["scheduled_at"].startswith("2026-11-02T15:00:00")
    assert res.json()["external_event_ref"] == "cal-1"

    res = await client.get(f"/api/v1/studies/{study_id}/matches", headers=as_researcher)
    assert [m["id"] for m in res.json()] == [match_id]


async def test_schedule_unknown_match_is_404(client, as_researcher):
    res = await client.post(
        "/api/v1/matches/00000000-0000-0000-0000-000000000000/schedule",
        headers=as_researcher, json={"scheduled_at": "2026-11-02T15:00:00Z"},
    )
    assert res.status_code == 404


# --- Profile -------------------------------------------------------------------

async def test_profile_upsert_requires_participant(client, as_researcher, as_participant):
    res = await client.put(
        "/api/v1/participants/me/profile", headers=as_researcher,
        json={"languages": ["en"]},
    )
    assert res.status_code == 403

    res = await client.put(
        "/api/v1/participants/me/profile", headers=as_participant,
        json={"languages": ["en"]},
    )
    assert res.status_code == 200
    assert res.json()["languages"] == ["en"]
    assert res.json()["interests"] is None
