"""Application Intake — verifies screening on submit and the duplicate guard.

Invariants:
    - Submission creates a pending application carrying the screening score
    - A second submission for the same (study, participant) is a conflict
    - Malformed stored criteria route to manual review with score 0
    - auto_approve screeners approve and match on an "approve" decision only
"""

from uuid import uuid4

import pytest
from sqlalchemy import func, select

from whiteloop.core.domain_types import Decision, Role
from whiteloop.core.errors import DuplicateApplicationError, ResourceNotFoundError
from whiteloop.models.application import Application
from whiteloop.models.match import Match
from whiteloop.models.screener import Screener
from whiteloop.services.application_intake import (
    MANUAL_REVIEW, ApplicationIntake, score_or_manual,
)

from tests.services.factories import SCREENER_CRITERIA, make_caller, seed_study

QUALIFIED = {"years": 4, "consent": True}


async def test_qualified_applicant_scores_approve_but_stays_pending(
    test_db, seeded, profiled_participant,
):
    result = await ApplicationIntake(test_db).submit(
        seeded.study_id, profiled_participant, QUALIFIED,
    )
    assert result.screening.decision == Decision.APPROVE
    assert result.screening.score == 3
    assert result.application.score == 3
    assert result.application.status == "pending"
    assert result.match is None


async def test_failing_must_rule_rejects_with_zero(test_db, seeded, profiled_participant):
    result = await ApplicationIntake(test_db).submit(
        seeded.study_id, profiled_participant, {"years": 9, "consent": False},
    )
    assert result.screening.decision == Decision.REJECT
    assert result.application.score == 0
    assert result.application.status == "pending"


async def test_below_threshold_goes_to_manual(test_db, seeded, profiled_participant):
    result = await ApplicationIntake(test_db).submit(
        seeded.study_id, profiled_participant, {"years": 1, "consent": True},
    )
    assert result.screening.decision == Decision.MANUAL
    assert result.application.score == 1


async def test_missing_profile_fails_profile_rules(test_db, seeded, participant):
    result = await ApplicationIntake(test_db).submit(
        seeded.study_id, participant, QUALIFIED,
    )
    assert result.screening.score == 2
    assert result.screening.decision == Decision.MANUAL


async def test_duplicate_submission_conflicts(test_db, seeded, profiled_participant):
    study_id = seeded.study_id
    intake = ApplicationIntake(test_db)
    await intake.submit(study_id, profiled_participant, QUALIFIED)

    with pytest.raises(DuplicateApplicationError):
        await intake.submit(study_id, profiled_participant, {"years": 0})

    count = await test_db.scalar(
        select(func.count()).select_from(Application)
        .where(Application.study_id == study_id),
    )
    assert count == 1


async def test_same_participant_may_apply_to_another_study(
    test_db, seeded, researcher, profiled_participant,
):
    other = await seed_study(test_db, researcher)
    intake = ApplicationIntake(test_db)
    await intake.submit(seeded.study_id, profiled_participant, QUALIFIED)
    result = await intake.submit(other.study_id, profiled_participant, QUALIFIED)
    assert result.application.study_id == other.study_id


async def test_unknown_study_is_not_found(test_db, participant):
    with pytest.raises(ResourceNotFoundError):
        await ApplicationIntake(test_db).submit(uuid4(), participant, {})


async def test_study_without_screener_goes_to_manual(test_db, researcher, participant):
    ids = await seed_study(test_db, researcher)
    result = await ApplicationIntake(test_db).submit(ids.study_id, participant, {})
    assert result.screening.decision == Decision.MANUAL
    assert result.application.score == 0


async def test_malformed_stored_criteria_go_to_manual(test_db, seeded, profiled_participant):
    screener = await test_db.get(Screener, seeded.screener_id)
    screener.criteria = {"threshold": "high", "rules": [{"op": "???"}]}
    await test_db.commit()

    result = await ApplicationIntake(test_db).submit(
        seeded.study_id, profiled_participant, QUALIFIED,
    )
    assert result.screening.decision == Decision.MANUAL
    assert result.screening.score == 0


async def test_auto_approve_creates_match(test_db, researcher, profiled_participant):
    ids = await seed_study(
        test_db, researcher,
        {"criteria": SCREENER_CRITERIA, "auto_approve": True},
    )
    result = await ApplicationIntake(test_db).submit(
        ids.study_id, profiled_participant, QUALIFIED,
    )
    assert result.match is not None
    assert result.match.status == "awaiting_schedule"
    assert result.application.status == "approved"


async def test_auto_approve_skips_manual_decisions(test_db, researcher):
    ids = await seed_study(
        test_db, researcher,
        {"criteria": SCREENER_CRITERIA, "auto_approve": True},
    )
    newcomer = make_caller(Role.PARTICIPANT)
    result = await ApplicationIntake(test_db).submit(
        ids.study_id, newcomer, {"years": 1, "consent": True},
    )
    assert result.match is None
    assert result.application.status == "pending"
    assert await test_db.scalar(select(func.count()).select_from(Match)) == 0


def test_score_or_manual_without_screener():
    assert score_or_manual(None, {}, {}) == MANUAL_REVIEW
