"""Application Repository — owns Application rows and their uniqueness invariant.

Invariants:
    - create() is the single enforcement point for one application per
      (study, participant); the unique index decides, not a prior SELECT
    - New applications always start as pending
    - set_status() never touches score
    - set_status() is unconditional unless only_from is given; the lifecycle
      guard belongs to the callers (MatchCoordinator)

Design Decisions:
    - Insert-then-catch over check-then-insert: two concurrent submissions
      cannot both pass a check, but only one can pass the index
    - IntegrityError is re-examined before being reported as a duplicate: a
      foreign-key failure must not masquerade as a conflict
"""

import logging
from collections.abc import Iterable

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from whiteloop.core.application_lifecycle import REVIEW_TARGETS
from whiteloop.core.domain_types import (
    ApplicationId, ApplicationStatus, StudyId, UserId,
)
from whiteloop.core.errors import (
    DuplicateApplicationError, ErrorContext, InputValidationError,
    InvalidTransitionError, ResourceNotFoundError,
)
from whiteloop.models.application import Application

logger = logging.getLogger(__name__)


class ApplicationRepository:
    """Persistence for applications."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def create(
        self,
        study_id: StudyId,
        participant_id: UserId,
        answers: dict,
        score: int,
    ) -> Application:
        """Insert a pending application. Raises DuplicateApplicationError."""
        application = Application(
            study_id=study_id,
            participant_id=participant_id,
            answers=answers,
            score=score,
            status=ApplicationStatus.PENDING.value,
        )
        self.db.add(application)
        try:
            await self.db.commit()
        except IntegrityError:
            await self.db.rollback()
            if await self._find(study_id, participant_id) is None:
                raise
            logger.info(
                "Duplicate application rejected",
                extra={"study_id": study_id, "participant_id": participant_id},
            )
            raise DuplicateApplicationError(
                str(study_id), str(participant_id),
                ErrorContext(study_id=str(study_id)),
            )
        logger.info(
            "Application created",
            extra={"application_id": application.id, "study_id": study_id},
        )
        return application

    async def set_status(
        self,
        application_id: ApplicationId,
        new_status: ApplicationStatus,
        only_from: Iterable[ApplicationStatus] | None = None,
        commit: bool = True,
    ) -> None:
        """Write a review status.

        With only_from, the write is conditional on the current status and an
        InvalidTransitionError is raised when it does not hold.
        """
        if new_status not in REVIEW_TARGETS:
            raise InputValidationError(
                f"'{new_status.value}' is not a review status", field="status",
            )
        stmt = update(Application).where(Application.id == application_id)
        if only_from is not None:
            stmt = stmt.where(
                Application.status.in_([s.value for s in only_from]),
            )
        result = await self.db.execute(
            stmt.values(status=new_status.value),
            execution_options={"synchronize_session": "evaluate"},
        )
        if result.rowcount == 0:
            current = await self.db.scalar(
                select(Application.status).where(Application.id == application_id),
            )
            await self.db.rollback()
            ctx = ErrorContext(application_id=str(application_id))
            if current is None:
                raise ResourceNotFoundError("Application", str(application_id), ctx)
            raise InvalidTransitionError(current, new_status.value, ctx)
        if commit:
            await self.db.commit()

    async def get(self, application_id: ApplicationId) -> Application | None:
        return await self.db.get(Application, application_id)

    async def get_or_404(self, application_id: ApplicationId) -> Application:
        application = await self.get(application_id)
        if application is None:
            raise ResourceNotFoundError(
                "Application", str(application_id),
                ErrorContext(application_id=str(application_id)),
            )
        return application

    async def list_for_study(
        self, study_id: StudyId, status: ApplicationStatus | None = None,
    ) -> list[Application]:
        """Review queue for a study, newest first."""
        query = (
            select(Application)
            .where(Application.study_id == study_id)
            .order_by(Application.created_at.desc())
        )
        if status is not None:
            query = query.where(Application.status == status.value)
        result = await self.db.execute(query)
        return list(result.scalars().all())

    async def _find(
        self, study_id: StudyId, participant_id: UserId,
    ) -> Application | None:
        result = await self.db.execute(
            select(Application)
            .where(Application.study_id == study_id)
            .where(Application.participant_id == participant_id),
        )
        return result.scalar_one_or_none()
