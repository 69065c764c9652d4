"""Match Coordinator — turns approved applications into exactly one Match and schedules it.

Invariants:
    - At most one Match per application (unique index on matches.application_id)
    - A Match only exists for an approved application: approve_and_match writes
      the status and inserts the Match in one transaction
    - Duplicate match creation is idempotent success: the caller receives the
      pre-existing Match, never a conflict
    - schedule() always sets scheduled_at and status together; re-scheduling
      overwrites (last write wins)
    - decline() refuses to reject/waitlist an approved application, so a Match
      can never outlive its approval

Design Decisions:
    - Insert first, then resolve IntegrityError by reading the winner: the
      unique index is the only synchronization point, no locks in process
    - Fast path for already-approved applications avoids a doomed INSERT on
      ordinary retries; the insert-and-catch path still covers true races
"""

import logging
from datetime import datetime

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from whiteloop.core.application_lifecycle import check_transition
from whiteloop.core.domain_types import (
    ApplicationId, ApplicationStatus, MatchId, MatchStatus, StudyId,
)
from whiteloop.core.errors import (
    ErrorContext, InputValidationError, ResourceNotFoundError,
)
from whiteloop.models.application import Application
from whiteloop.models.match import Match
from whiteloop.services.application_repository import ApplicationRepository

logger = logging.getLogger(__name__)

_APPROVABLE_FROM = (ApplicationStatus.PENDING, ApplicationStatus.APPROVED)


class MatchCoordinator:
    """Cross-entity invariants between applications and matches."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.applications = ApplicationRepository(db)

    async def create_match_for_application(self, application_id: ApplicationId) -> Match:
        """Create the application's Match, or return the one that already exists.

        Does not check the application's status; callers approve first.
        """
        await self.applications.get_or_404(application_id)
        return await self._commit_match(_new_match(application_id))

    async def approve_and_match(self, application_id: ApplicationId) -> Match:
        """Approve and create the Match in a single transaction. Idempotent."""
        application = await self.applications.get_or_404(application_id)
        ctx = ErrorContext(
            application_id=str(application_id),
            study_id=str(application.study_id),
        )
        needs_write = check_transition(
            ApplicationStatus(application.status), ApplicationStatus.APPROVED, ctx,
        )
        if not needs_write:
            existing = await self._get_by_application(application_id)
            if existing is not None:
                return existing
        await self.applications.set_status(
            application_id, ApplicationStatus.APPROVED,
            only_from=_APPROVABLE_FROM, commit=False,
        )
        match = await self._commit_match(_new_match(application_id))
        logger.info(
            "Application approved",
            extra={"application_id": application_id, "match_id": match.id},
        )
        return match

    async def decline(
        self, application_id: ApplicationId, target: ApplicationStatus,
    ) -> Application:
        """Reject or waitlist. Same-state repeats are no-ops."""
        if target not in (ApplicationStatus.REJECTED, ApplicationStatus.WAITLIST):
            raise InputValidationError(
                f"'{target.value}' is not a decline status", field="status",
            )
        application = await self.applications.get_or_404(application_id)
        ctx = ErrorContext(application_id=str(application_id))
        if check_transition(ApplicationStatus(application.status), target, ctx):
            await self.applications.set_status(
                application_id, target,
                only_from=(ApplicationStatus.PENDING, target),
            )
            logger.info(
                f"Application moved to {target.value}",
                extra={"application_id": application_id},
            )
        return application

    async def schedule(
        self,
        match_id: MatchId,
        scheduled_at: datetime,
        external_event_ref: str | None = None,
    ) -> Match:
        """Set (or overwrite) the match's schedule."""
        match = await self.get_or_404(match_id)
        match.scheduled_at = scheduled_at
        match.external_event_ref = external_event_ref
        match.status = MatchStatus.SCHEDULED.value
        await self.db.commit()
        logger.info("Match scheduled", extra={"match_id": match_id})
        return match

    async def get(self, match_id: MatchId) -> Match | None:
        return await self.db.get(Match, match_id)

    async def get_or_404(self, match_id: MatchId) -> Match:
        match = await self.get(match_id)
        if match is None:
            raise ResourceNotFoundError(
                "Match", str(match_id), ErrorContext(match_id=str(match_id)),
            )
        return match

    async def list_for_study(self, study_id: StudyId) -> list[Match]:
        result = await self.db.execute(
            select(Match)
            .join(Application, Application.id == Match.application_id)
            .where(Application.study_id == study_id)
            .order_by(Match.scheduled_at.desc(), Application.created_at.desc()),
        )
        return list(result.scalars().all())

    async def _get_by_application(self, application_id: ApplicationId) -> Match | None:
        result = await self.db.execute(
            select(Match).where(Match.application_id == application_id),
        )
        return result.scalar_one_or_none()

    async def _commit_match(self, match: Match) -> Match:
        """Commit the new Match; on a uniqueness race return the winner."""
        application_id = match.application_id
        self.db.add(match)
        try:
            await self.db.commit()
        except IntegrityError:
            await self.db.rollback()
            existing = await self._get_by_application(application_id)
            if existing is None:
                raise
            logger.info(
                "Duplicate match creation absorbed",
                extra={"application_id": application_id, "match_id": existing.id},
            )
            return existing
        return match


def _new_match(application_id: ApplicationId) -> Match:
    return Match(
        application_id=application_id,
        status=MatchStatus.AWAITING_SCHEDULE.value,
        scheduled_at=None,
        external_event_ref=None,
        video_room=None,
    )
