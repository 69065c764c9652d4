"""Study Routes — application intake and per-study listings.

Invariants:
    - Submitting requires the participant role; listings require researcher
    - A second submission by the same participant returns 409
"""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from whiteloop.api.dependencies import require
from whiteloop.core.domain_types import ApplicationStatus
from whiteloop.core.role_gate import Caller, Operation
from whiteloop.infrastructure.database import get_db
from whiteloop.schemas.applications import (
    ApplicationResponse, ApplicationSubmit, MatchResponse, SubmissionResponse,
)
from whiteloop.schemas.artifacts import InsightResponse
from whiteloop.schemas.screening import ScreeningResponse
from whiteloop.services.application_intake import ApplicationIntake
from whiteloop.services.application_repository import ApplicationRepository
from whiteloop.services.artifact_pipeline import SessionArtifactPipeline
from whiteloop.services.match_coordinator import MatchCoordinator
from whiteloop.services.study_catalog import StudyCatalog

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/studies", tags=["studies"])


@router.post(
    "/{study_id}/applications",
    response_model=SubmissionResponse,
    status_code=status.HTTP_201_CREATED,
)
async def submit_application(
    study_id: UUID,
    body: ApplicationSubmit,
    caller: Caller = Depends(require(Operation.SUBMIT_APPLICATION)),
    db: AsyncSession = Depends(get_db),
):
    """Screen the participant's answers and create a pending application."""
    result = await ApplicationIntake(db).submit(study_id, caller, body.answers)
    return SubmissionResponse(
        application=ApplicationResponse.model_validate(result.application),
        screening=ScreeningResponse(
            score=result.screening.score, decision=result.screening.decision,
        ),
        match=MatchResponse.model_validate(result.match) if result.match else None,
    )


@router.get("/{study_id}/applications", response_model=list[ApplicationResponse])
async def list_applications(
    study_id: UUID,
    status_filter: ApplicationStatus | None = Query(None, alias="status"),
    _: Caller = Depends(require(Operation.VIEW_APPLICATIONS)),
    db: AsyncSession = Depends(get_db),
):
    await StudyCatalog(db).get_study_or_404(study_id)
    applications = await ApplicationRepository(db).list_for_study(
        study_id, status_filter,
    )
    return [ApplicationResponse.model_validate(a) for a in applications]


@router.get("/{study_id}/matches", response_model=list[MatchResponse])
async def list_matches(
    study_id: UUID,
    _: Caller = Depends(require(Operation.VIEW_MATCHES)),
    db: AsyncSession = Depends(get_db),
):
    await StudyCatalog(db).get_study_or_404(study_id)
    matches = await MatchCoordinator(db).list_for_study(study_id)
    return [MatchResponse.model_validate(m) for m in matches]


@router.get("/{study_id}/insights", response_model=list[InsightResponse])
async def list_insights(
    study_id: UUID,
    _: Caller = Depends(require(Operation.VIEW_INSIGHTS)),
    db: AsyncSession = Depends(get_db),
):
    await StudyCatalog(db).get_study_or_404(study_id)
    insights = await SessionArtifactPipeline(db).list_insights_for_study(study_id)
    return [InsightResponse.model_validate(i) for i in insights]
