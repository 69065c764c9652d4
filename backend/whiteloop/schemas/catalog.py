"""Catalog Schemas — projects, studies and participant profiles.

Invariants:
    - ProjectCreate.title 3-200 chars, description 10-2000 chars
    - StudyCreate numeric fields positive (reward may be zero)
"""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator

from whiteloop.core.domain_types import ProjectStatus, StudyStatus
from whiteloop.schemas.screening import ScreenerPayload


class ProjectCreate(BaseModel):
    title: str = Field(min_length=3, max_length=200)
    description: str = Field(min_length=10, max_length=2000)
    domain: str = Field(min_length=2, max_length=120)
    budget_cents: int = Field(ge=0)
    status: ProjectStatus = ProjectStatus.DRAFT

    @field_validator("title", "description", "domain")
    @classmethod
    def strip_text(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("cannot be empty or whitespace")
        return v


class ProjectResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    researcher_id: UUID
    title: str
    description: str | None
    domain: str | None
    budget_cents: int
    status: str
    created_at: datetime


class StudyCreate(BaseModel):
    name: str = Field(min_length=3, max_length=255)
    modality: str = Field(min_length=3, max_length=50)
    duration_min: int = Field(gt=0)
    participant_reward_cents: int = Field(ge=0)
    timezone: str = Field(min_length=2, max_length=120)
    max_participants: int = Field(gt=0)
    status: StudyStatus = StudyStatus.RECRUITING
    screener: ScreenerPayload | None = None


class StudyResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    project_id: UUID
    name: str
    modality: str
    duration_min: int
    participant_reward_cents: int
    timezone: str
    max_participants: int
    screener_id: UUID | None
    status: str
    created_at: datetime


class ProfileUpsert(BaseModel):
    languages: list[str] | None = None
    demographics: dict | None = None
    expertise: list[str] | None = None
    interests: list[str] | None = None


class ProfileResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    user_id: UUID
    languages: list[str] | None
    demographics: dict | None
    expertise: list[str] | None
    interests: list[str] | None
