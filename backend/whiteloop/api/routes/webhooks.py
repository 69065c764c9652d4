"""Webhook Routes — session completion and transcript delivery from external services.

Invariants:
    - Only the service role may call these endpoints
    - Duplicate deliveries surface as 409 so the sender can stop retrying
"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from whiteloop.api.dependencies import require
from whiteloop.core.role_gate import Caller, Operation
from whiteloop.infrastructure.database import get_db
from whiteloop.schemas.artifacts import (
    SessionCompleted, SessionResponse, TranscriptIngest,
)
from whiteloop.services.artifact_pipeline import SessionArtifactPipeline

router = APIRouter(prefix="/api/v1/webhooks", tags=["webhooks"])


@router.post(
    "/session-completed",
    response_model=SessionResponse,
    status_code=status.HTTP_201_CREATED,
)
async def session_completed(
    body: SessionCompleted,
    _: Caller = Depends(require(Operation.RECORD_SESSION)),
    db: AsyncSession = Depends(get_db),
):
    session = await SessionArtifactPipeline(db).record_session(
        body.match_id, body.started_at, body.ended_at, body.recording_ref,
    )
    return SessionResponse.model_validate(session)


@router.post("/transcript")
async def ingest_transcript(
    body: TranscriptIngest,
    _: Caller = Depends(require(Operation.INGEST_TRANSCRIPT)),
    db: AsyncSession = Depends(get_db),
):
    transcript = await SessionArtifactPipeline(db).record_transcript(
        body.session_id, body.raw_text, body.segments,
    )
    return {"ok": True, "transcript_id": str(transcript.id)}
