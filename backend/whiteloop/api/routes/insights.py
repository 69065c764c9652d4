"""Insight Routes — the seam used by insight-generation workers.

Invariants:
    - Explicit theme/rationale are stored as given
    - Without them, the configured InsightDrafter drafts from the session's
      transcript (or from nothing, yielding the fallback theme)
    - A transcript_id that does not belong to the session is a 400
"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from whiteloop.api.dependencies import require
from whiteloop.core.errors import InputValidationError
from whiteloop.core.role_gate import Caller, Operation
from whiteloop.infrastructure.database import get_db
from whiteloop.schemas.artifacts import InsightGenerate, InsightResponse
from whiteloop.services.artifact_pipeline import SessionArtifactPipeline
from whiteloop.services.insight_drafting import (
    InsightDraft, InsightDrafter, get_insight_drafter,
)

router = APIRouter(prefix="/api/v1/insights", tags=["insights"])


@router.post(
    "/generate",
    response_model=InsightResponse,
    status_code=status.HTTP_201_CREATED,
)
async def generate_insight(
    body: InsightGenerate,
    _: Caller = Depends(require(Operation.GENERATE_INSIGHT)),
    drafter: InsightDrafter = Depends(get_insight_drafter),
    db: AsyncSession = Depends(get_db),
):
    pipeline = SessionArtifactPipeline(db)
    transcript = await pipeline.get_transcript_for_session(body.session_id)
    if body.transcript_id and (transcript is None or transcript.id != body.transcript_id):
        raise InputValidationError(
            "transcript_id does not belong to session_id", field="transcript_id",
        )

    if body.theme is not None:
        draft = InsightDraft(
            theme=body.theme,
            rationale=body.rationale,
            evidence=body.evidence,
            sentiment=body.sentiment.value if body.sentiment else None,
            tags=body.tags or [],
        )
    else:
        draft = drafter.draft(transcript.raw_text if transcript else "")

    insight = await pipeline.record_insight(
        study_id=body.study_id,
        participant_id=body.participant_id,
        session_id=body.session_id,
        theme=draft.theme,
        rationale=draft.rationale,
        evidence=draft.evidence,
        sentiment=draft.sentiment,
        tags=draft.tags,
    )
    return InsightResponse.model_validate(insight)
