"""Application Review Routes — approve, reject, waitlist.

Invariants:
    - approve is idempotent: repeated calls return the same Match (200/201 alike)
    - reject/waitlist of an approved application is 409 (its Match must stay valid)
    - Repeating a decline with the same status is a no-op success
"""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from whiteloop.api.dependencies import require
from whiteloop.core.domain_types import ApplicationStatus
from whiteloop.core.role_gate import Caller, Operation
from whiteloop.infrastructure.database import get_db
from whiteloop.schemas.applications import ApplicationResponse, MatchResponse
from whiteloop.services.application_repository import ApplicationRepository
from whiteloop.services.match_coordinator import MatchCoordinator

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/applications", tags=["applications"])


@router.get("/{application_id}", response_model=ApplicationResponse)
async def get_application(
    application_id: UUID,
    _: Caller = Depends(require(Operation.VIEW_APPLICATIONS)),
    db: AsyncSession = Depends(get_db),
):
    application = await ApplicationRepository(db).get_or_404(application_id)
    return ApplicationResponse.model_validate(application)


@router.post(
    "/{application_id}/approve",
    response_model=MatchResponse,
    status_code=status.HTTP_201_CREATED,
)
async def approve_application(
    application_id: UUID,
    _: Caller = Depends(require(Operation.APPROVE_APPLICATION)),
    db: AsyncSession = Depends(get_db),
):
    """Approve and create the Match atomically. Safe to retry."""
    match = await MatchCoordinator(db).approve_and_match(application_id)
    return MatchResponse.model_validate(match)


@router.post("/{application_id}/reject")
async def reject_application(
    application_id: UUID,
    _: Caller = Depends(require(Operation.REJECT_APPLICATION)),
    db: AsyncSession = Depends(get_db),
):
    await MatchCoordinator(db).decline(application_id, ApplicationStatus.REJECTED)
    return {"ok": True}


@router.post("/{application_id}/waitlist")
async def waitlist_application(
    application_id: UUID,
    _: Caller = Depends(require(Operation.WAITLIST_APPLICATION)),
    db: AsyncSession = Depends(get_db),
):
    await MatchCoordinator(db).decline(application_id, ApplicationStatus.WAITLIST)
    return {"ok": True}
