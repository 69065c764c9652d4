"""Application ORM — a participant's request to join a study.

Invariants:
    - (study_id, participant_id) is unique: uq_applications_study_participant
    - score is set once at insert and never updated (score >= 0 checked)
    - status is one of: pending, approved, rejected, waitlist

Design Decisions:
    - Uniqueness enforced by the database, detected as IntegrityError at insert:
      concurrent duplicate submissions cannot both succeed
    - (study_id, status) index backs the per-study review queue listing
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import (
    String, Integer, DateTime, ForeignKey, JSON,
    CheckConstraint, Index, UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.dialects.postgresql import UUID

from whiteloop.db.base import Base


class Application(Base):
    __tablename__ = "applications"
    __table_args__ = (
        UniqueConstraint(
            "study_id", "participant_id",
            name="uq_applications_study_participant",
        ),
        CheckConstraint("score >= 0", name="score_non_negative"),
        Index("ix_applications_study_id_status", "study_id", "status"),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4,
    )
    study_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("studies.id", ondelete="CASCADE"),
        nullable=False,
    )
    participant_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    )
    answers: Mapped[dict] = mapped_column(JSON, nullable=False, default=dict)
    score: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    status: Mapped[str] = mapped_column(
        String(20), nullable=False, default="pending",
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
