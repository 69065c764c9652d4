"""Application & Match Schemas — submission, review and scheduling payloads.

Invariants:
    - ScheduleRequest.scheduled_at must carry a timezone offset (400 otherwise)
    - Response models are built from ORM rows (from_attributes)
"""

from datetime import datetime
from typing import Any
from uuid import UUID

from pydantic import AwareDatetime, BaseModel, ConfigDict, Field

from whiteloop.schemas.screening import ScreeningResponse


class ApplicationSubmit(BaseModel):
    answers: dict[str, Any] = Field(default_factory=dict)


class ApplicationResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    study_id: UUID
    participant_id: UUID
    answers: dict[str, Any]
    score: int
    status: str
    created_at: datetime


class MatchResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    application_id: UUID
    scheduled_at: datetime | None
    external_event_ref: str | None
    video_room: str | None
    status: str


class SubmissionResponse(BaseModel):
    application: ApplicationResponse
    screening: ScreeningResponse
    match: MatchResponse | None = None


class ScheduleRequest(BaseModel):
    scheduled_at: AwareDatetime
    external_event_ref: str | None = Field(None, max_length=255)
