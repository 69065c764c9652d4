"""Match ORM — the scheduling unit created once an application is approved.

Invariants:
    - application_id is unique: at most one match per application
    - status == 'scheduled' iff scheduled_at IS NOT NULL (ck_matches_schedule_consistent)
    - external_event_ref and video_room are opaque identifiers, never interpreted
    - video_room is reserved for the video-room integration; matches are
      created with it unset and no endpoint here writes it

Design Decisions:
    - The check constraint makes a half-written schedule impossible even if a
      future code path forgets to set both columns together
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import String, DateTime, ForeignKey, CheckConstraint
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.dialects.postgresql import UUID

from whiteloop.db.base import Base


class Match(Base):
    __tablename__ = "matches"
    __table_args__ = (
        CheckConstraint(
            "(status = 'scheduled' AND scheduled_at IS NOT NULL) OR "
            "(status = 'awaiting_schedule' AND scheduled_at IS NULL)",
            name="schedule_consistent",
        ),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4,
    )
    application_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("applications.id", ondelete="CASCADE"),
        nullable=False, unique=True,
    )
    scheduled_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True,
    )
    external_event_ref: Mapped[str | None] = mapped_column(
        String(255), nullable=True,
    )
    # Filled by the video-room integration.
    video_room: Mapped[str | None] = mapped_column(String(255), nullable=True)
    status: Mapped[str] = mapped_column(
        String(20), nullable=False, default="awaiting_schedule",
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
