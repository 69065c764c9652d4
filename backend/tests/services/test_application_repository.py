"""Application Repository — verifies creation, status writes and listings.

Invariants:
    - create() starts every application as pending
    - set_status() rejects non-review statuses and never changes score
    - set_status(only_from=...) refuses when the current status is not listed
"""

from uuid import uuid4

import pytest

from whiteloop.core.domain_types import ApplicationStatus, Role
from whiteloop.core.errors import (
    DuplicateApplicationError, InputValidationError, InvalidTransitionError,
    ResourceNotFoundError,
)
from whiteloop.services.application_repository import ApplicationRepository
from whiteloop.services.user_directory import ensure_user

from tests.services.factories import make_caller


async def _create(db, study_id, score=4):
    caller = make_caller(Role.PARTICIPANT)
    await ensure_user(db, caller)
    application = await ApplicationRepository(db).create(
        study_id, caller.user_id, {"q": "a"}, score,
    )
    return application.id, caller.user_id


async def test_create_starts_pending(test_db, seeded):
    application_id, _ = await _create(test_db, seeded.study_id)
    application = await ApplicationRepository(test_db).get(application_id)
    assert application.status == "pending"
    assert application.answers == {"q": "a"}


async def test_duplicate_create_raises(test_db, seeded):
    study_id = seeded.study_id
    _, participant_id = await _create(test_db, study_id)
    with pytest.raises(DuplicateApplicationError):
        await ApplicationRepository(test_db).create(study_id, participant_id, {}, 0)


async def test_set_status_keeps_score(test_db, seeded):
    application_id, _ = await _create(test_db, seeded.study_id, score=7)
    repo = ApplicationRepository(test_db)
    await repo.set_status(application_id, ApplicationStatus.WAITLIST)
    application = await repo.get(application_id)
    assert application.status == "waitlist"
    assert application.score == 7


async def test_set_status_rejects_pending_target(test_db, seeded):
    application_id, _ = await _create(test_db, seeded.study_id)
    with pytest.raises(InputValidationError):
        await ApplicationRepository(test_db).set_status(
            application_id, ApplicationStatus.PENDING,
        )


async def test_set_status_only_from_guard(test_db, seeded):
    application_id, _ = await _create(test_db, seeded.study_id)
    repo = ApplicationRepository(test_db)
    await repo.set_status(application_id, ApplicationStatus.REJECTED)
    with pytest.raises(InvalidTransitionError):
        await repo.set_status(
            application_id, ApplicationStatus.APPROVED,
            only_from=(ApplicationStatus.PENDING,),
        )


async def test_set_status_unknown_application(test_db):
    with pytest.raises(ResourceNotFoundError):
        await ApplicationRepository(test_db).set_status(
            uuid4(), ApplicationStatus.APPROVED,
            only_from=(ApplicationStatus.PENDING,),
        )


async def test_list_for_study_filters_by_status(test_db, seeded):
    first_id, _ = await _create(test_db, seeded.study_id)
    second_id, _ = await _create(test_db, seeded.study_id)
    repo = ApplicationRepository(test_db)
    await repo.set_status(first_id, ApplicationStatus.WAITLIST)

    assert len(await repo.list_for_study(seeded.study_id)) == 2
    pending = await repo.list_for_study(seeded.study_id, ApplicationStatus.PENDING)
    assert [a.id for a in pending] == [second_id]
