"""ParticipantProfile ORM — the profile document screening rules traverse.

Invariants:
    - One profile per user (user_id is the primary key)
    - Non-answers rule fields resolve against to_document()

Design Decisions:
    - JSON columns over Postgres ARRAY: same shape on SQLite test databases
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import DateTime, ForeignKey, JSON
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.dialects.postgresql import UUID

from whiteloop.db.base import Base


class ParticipantProfile(Base):
    __tablename__ = "participant_profiles"

    user_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("users.id", ondelete="CASCADE"),
        primary_key=True,
    )
    languages: Mapped[list | None] = mapped_column(JSON, nullable=True)
    demographics: Mapped[dict | None] = mapped_column(JSON, nullable=True)
    expertise: Mapped[list | None] = mapped_column(JSON, nullable=True)
    interests: Mapped[list | None] = mapped_column(JSON, nullable=True)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )

    def to_document(self) -> dict:
        """Profile as the screening evaluator sees it."""
        return {
            "languages": self.languages,
            "demographics": self.demographics,
            "expertise": self.expertise,
            "interests": self.interests,
        }
