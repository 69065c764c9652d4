"""Screener ORM — screening criteria and questions attached to a study.

Invariants:
    - criteria is stored as plain JSON ({threshold, rules}); it is parsed by
      core.criteria.parse_criteria at scoring time
    - auto_approve only acts on an "approve" screening decision
"""

import uuid

from sqlalchemy import Boolean, ForeignKey, JSON
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.dialects.postgresql import UUID

from whiteloop.db.base import Base


class Screener(Base):
    __tablename__ = "screeners"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4,
    )
    project_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("projects.id", ondelete="CASCADE"),
        nullable=False,
    )
    criteria: Mapped[dict | None] = mapped_column(JSON, nullable=True)
    questions: Mapped[list | None] = mapped_column(JSON, nullable=True)
    auto_approve: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False,
    )
