"""Application Intake — screens a submission and persists it as a pending application.

Invariants:
    - The study must exist before anything is written (404 otherwise)
    - Screening is computed once here; the stored score never changes afterwards
    - Malformed stored criteria never block a submission: they score 0 and
      route the application to manual review
    - Auto-approval only fires for an "approve" decision on an auto_approve
      screener, and goes through approve_and_match like a researcher approval

Design Decisions:
    - Intake is the imperative shell around the pure evaluator: load criteria
      and profile, call score_applicant, then hand the result to the repository
"""

import logging
from dataclasses import dataclass

from sqlalchemy.ext.asyncio import AsyncSession

from whiteloop.core.criteria import parse_criteria
from whiteloop.core.domain_types import Decision, StudyId
from whiteloop.core.errors import InputValidationError
from whiteloop.core.role_gate import Caller
from whiteloop.core.screening import (
    ScreeningResult, persisted_score, score_applicant,
)
from whiteloop.models.application import Application
from whiteloop.models.match import Match
from whiteloop.models.screener import Screener
from whiteloop.services.application_repository import ApplicationRepository
from whiteloop.services.match_coordinator import MatchCoordinator
from whiteloop.services.study_catalog import StudyCatalog
from whiteloop.services.user_directory import ensure_user, get_profile_document

logger = logging.getLogger(__name__)

MANUAL_REVIEW = ScreeningResult(score=0, decision=Decision.MANUAL)


@dataclass
class IntakeResult:
    application: Application
    screening: ScreeningResult
    match: Match | None = None


def score_or_manual(screener: Screener | None, profile: dict, answers: dict) -> ScreeningResult:
    """Score against the screener's criteria, falling back to manual review."""
    if screener is None or screener.criteria is None:
        return MANUAL_REVIEW
    try:
        criteria = parse_criteria(screener.criteria)
    except InputValidationError as e:
        logger.warning(
            f"Screener {screener.id} has malformed criteria ({e.message}); "
            "routing to manual review",
        )
        return MANUAL_REVIEW
    return score_applicant(criteria, profile, answers)


class ApplicationIntake:

    def __init__(self, db: AsyncSession):
        self.db = db
        self.catalog = StudyCatalog(db)
        self.applications = ApplicationRepository(db)

    async def submit(
        self, study_id: StudyId, participant: Caller, answers: dict,
    ) -> IntakeResult:
        study = await self.catalog.get_study_or_404(study_id)
        screener = await self.catalog.get_screener(study)
        await ensure_user(self.db, participant)
        profile = await get_profile_document(self.db, participant.user_id)

        screening = score_or_manual(screener, profile, answers)
        application = await self.applications.create(
            study_id, participant.user_id, answers, persisted_score(screening),
        )
        logger.info(
            f"Application screened: {screening.decision.value} ({screening.score})",
            extra={"application_id": application.id, "study_id": study_id},
        )

        match = None
        if (
            screener is not None
            and screener.auto_approve
            and screening.decision == Decision.APPROVE
        ):
            match = await MatchCoordinator(self.db).approve_and_match(application.id)
        return IntakeResult(application=application, screening=screening, match=match)
