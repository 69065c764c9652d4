"""Match Routes — read and schedule matches.

Invariants:
    - scheduled_at without a timezone offset is rejected with 400 before the core runs
    - Re-scheduling overwrites the previous time and event reference
"""

from uuid import UUID

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from whiteloop.api.dependencies import require
from whiteloop.core.role_gate import Caller, Operation
from whiteloop.infrastructure.database import get_db
from whiteloop.schemas.applications import MatchResponse, ScheduleRequest
from whiteloop.services.match_coordinator import MatchCoordinator

router = APIRouter(prefix="/api/v1/matches", tags=["matches"])


@router.get("/{match_id}", response_model=MatchResponse)
async def get_match(
    match_id: UUID,
    _: Caller = Depends(require(Operation.VIEW_MATCHES)),
    db: AsyncSession = Depends(get_db),
):
    match = await MatchCoordinator(db).get_or_404(match_id)
    return MatchResponse.model_validate(match)


@router.post("/{match_id}/schedule", response_model=MatchResponse)
async def schedule_match(
    match_id: UUID,
    body: ScheduleRequest,
    _: Caller = Depends(require(Operation.SCHEDULE_MATCH)),
    db: AsyncSession = Depends(get_db),
):
    match = await MatchCoordinator(db).schedule(
        match_id, body.scheduled_at, body.external_event_ref,
    )
    return MatchResponse.model_validate(match)
