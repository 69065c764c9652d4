"""Session Artifact Pipeline — Session -> Transcript -> InsightUnit for a completed match.

Invariants:
    - At most one Session per Match, at most one Transcript per Session
      (unique indexes; a second write is a ConflictError, never an overwrite)
    - A Session is only recorded for a scheduled Match
    - A Transcript requires its Session to exist (ResourceNotFoundError otherwise)
    - InsightUnits are append-only and unbounded per session; their study and
      participant must be the ones behind the session's application

Design Decisions:
    - Parent existence is checked before the insert so "missing parent" (404)
      and "duplicate child" (409) stay distinguishable on every backend
    - The pipeline guarantees shape and association integrity only; theme and
      rationale quality belong to whoever drafts the insight
"""

import logging
from datetime import datetime

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from whiteloop.core.domain_types import (
    MatchId, MatchStatus, SessionId, StudyId, UserId,
)
from whiteloop.core.errors import (
    DuplicateSessionError, DuplicateTranscriptError, ErrorContext,
    InputValidationError, MatchNotScheduledError, ResourceNotFoundError,
)
from whiteloop.models.application import Application
from whiteloop.models.insight_unit import InsightUnit
from whiteloop.models.match import Match
from whiteloop.models.research_session import ResearchSession
from whiteloop.models.study import Study
from whiteloop.models.transcript import Transcript
from whiteloop.models.user import User

logger = logging.getLogger(__name__)


class SessionArtifactPipeline:
    """Records downstream artifacts of scheduled matches."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def record_session(
        self,
        match_id: MatchId,
        started_at: datetime | None = None,
        ended_at: datetime | None = None,
        recording_ref: str | None = None,
    ) -> ResearchSession:
        ctx = ErrorContext(match_id=str(match_id))
        match = await self.db.get(Match, match_id)
        if match is None:
            raise ResourceNotFoundError("Match", str(match_id), ctx)
        if match.status != MatchStatus.SCHEDULED.value:
            raise MatchNotScheduledError(str(match_id), ctx)

        session = ResearchSession(
            match_id=match_id, started_at=started_at,
            ended_at=ended_at, recording_ref=recording_ref,
        )
        self.db.add(session)
        try:
            await self.db.commit()
        except IntegrityError:
            await self.db.rollback()
            if await self._session_for_match(match_id) is None:
                raise
            raise DuplicateSessionError(str(match_id), ctx)
        logger.info(
            "Session recorded",
            extra={"match_id": match_id, "session_id": session.id},
        )
        return session

    async def record_transcript(
        self,
        session_id: SessionId,
        raw_text: str,
        segments: list | None = None,
    ) -> Transcript:
        ctx = ErrorContext(session_id=str(session_id))
        await self._get_session_or_404(session_id)

        transcript = Transcript(
            session_id=session_id, raw_text=raw_text, segments=segments,
        )
        self.db.add(transcript)
        try:
            await self.db.commit()
        except IntegrityError:
            await self.db.rollback()
            if await self.get_transcript_for_session(session_id) is None:
                raise
            logger.warning(
                "Duplicate transcript rejected", extra={"session_id": session_id},
            )
            raise DuplicateTranscriptError(str(session_id), ctx)
        logger.info("Transcript recorded", extra={"session_id": session_id})
        return transcript

    async def record_insight(
        self,
        study_id: StudyId,
        participant_id: UserId,
        session_id: SessionId,
        theme: str,
        rationale: str,
        evidence: dict | None = None,
        sentiment: str | None = None,
        tags: list[str] | None = None,
    ) -> InsightUnit:
        ctx = ErrorContext(study_id=str(study_id), session_id=str(session_id))
        if await self.db.get(Study, study_id) is None:
            raise ResourceNotFoundError("Study", str(study_id), ctx)
        if await self.db.get(User, participant_id) is None:
            raise ResourceNotFoundError("Participant", str(participant_id), ctx)
        await self._get_session_or_404(session_id)

        application = await self._application_for_session(session_id)
        if (
            application.study_id != study_id
            or application.participant_id != participant_id
        ):
            raise InputValidationError(
                "Session does not belong to this study and participant",
                field="session_id", context=ctx,
            )

        insight = InsightUnit(
            study_id=study_id,
            participant_id=participant_id,
            session_id=session_id,
            theme=theme,
            rationale=rationale,
            evidence=evidence,
            sentiment=sentiment,
            tags=list(tags or []),
        )
        self.db.add(insight)
        await self.db.commit()
        logger.info(
            "Insight recorded",
            extra={"session_id": session_id, "study_id": study_id},
        )
        return insight

    async def get_transcript_for_session(self, session_id: SessionId) -> Transcript | None:
        result = await self.db.execute(
            select(Transcript).where(Transcript.session_id == session_id),
        )
        return result.scalar_one_or_none()

    async def list_insights_for_study(self, study_id: StudyId) -> list[InsightUnit]:
        result = await self.db.execute(
            select(InsightUnit)
            .where(InsightUnit.study_id == study_id)
            .order_by(InsightUnit.created_at.desc()),
        )
        return list(result.scalars().all())

    async def _get_session_or_404(self, session_id: SessionId) -> ResearchSession:
        session = await self.db.get(ResearchSession, session_id)
        if session is None:
            raise ResourceNotFoundError(
                "Session", str(session_id), ErrorContext(session_id=str(session_id)),
            )
        return session

    async def _session_for_match(self, match_id: MatchId) -> ResearchSession | None:
        result = await self.db.execute(
            select(ResearchSession).where(ResearchSession.match_id == match_id),
        )
        return result.scalar_one_or_none()

    async def _application_for_session(self, session_id: SessionId) -> Application:
        result = await self.db.execute(
            select(Application)
            .join(Match, Match.application_id == Application.id)
            .join(ResearchSession, ResearchSession.match_id == Match.id)
            .where(ResearchSession.id == session_id),
        )
        return result.scalar_one()
