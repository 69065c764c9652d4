"""Artifact Schemas — webhook and worker payloads for sessions, transcripts and insights.

Invariants:
    - ended_at, when given with started_at, is not before it
    - An insight request either names a theme with a rationale, or neither
      (the drafter fills both from the transcript)
"""

from datetime import datetime
from uuid import UUID

from pydantic import AwareDatetime, BaseModel, ConfigDict, Field, model_validator

from whiteloop.core.domain_types import Sentiment


class SessionCompleted(BaseModel):
    match_id: UUID
    started_at: AwareDatetime | None = None
    ended_at: AwareDatetime | None = None
    recording_ref: str | None = Field(None, max_length=2000)

    @model_validator(mode="after")
    def check_time_order(self):
        if self.started_at and self.ended_at and self.ended_at < self.started_at:
            raise ValueError("ended_at cannot be before started_at")
        return self


class SessionResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    match_id: UUID
    started_at: datetime | None
    ended_at: datetime | None
    recording_ref: str | None


class TranscriptIngest(BaseModel):
    session_id: UUID
    raw_text: str = Field(max_length=2_000_000)
    segments: list[dict] | None = None


class InsightGenerate(BaseModel):
    study_id: UUID
    participant_id: UUID
    session_id: UUID
    transcript_id: UUID | None = None
    theme: str | None = Field(None, min_length=1, max_length=255)
    rationale: str | None = Field(None, min_length=1, max_length=5000)
    evidence: dict | None = None
    sentiment: Sentiment | None = None
    tags: list[str] | None = Field(None, max_length=50)

    @model_validator(mode="after")
    def theme_and_rationale_together(self):
        if (self.theme is None) != (self.rationale is None):
            raise ValueError("theme and rationale must be given together")
        return self


class InsightResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    study_id: UUID
    participant_id: UUID
    session_id: UUID
    theme: str
    rationale: str
    evidence: dict | None
    sentiment: str | None
    tags: list[str]
    created_at: datetime
