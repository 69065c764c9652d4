"""Initial schema — users, catalog, applications, matches, session artifacts.

Revision ID: 001_initial
Revises: None
Create Date: 2026-10-19

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects.postgresql import UUID

revision: str = "001_initial"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _created_at() -> sa.Column:
    return sa.Column(
        "created_at", sa.DateTime(timezone=True), nullable=False,
        server_default=sa.func.now(),
    )


def _fk(name: str, target: str, ondelete: str = "CASCADE", **kwargs) -> sa.Column:
    return sa.Column(
        name, UUID(as_uuid=True),
        sa.ForeignKey(target, ondelete=ondelete), **kwargs,
    )


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column("role", sa.String(20), nullable=False, server_default="participant"),
        sa.Column("email", sa.String(255), nullable=True),
        sa.Column("full_name", sa.String(255), nullable=True),
        sa.Column("country", sa.String(120), nullable=True),
        _created_at(),
    )

    op.create_table(
        "participant_profiles",
        _fk("user_id", "users.id", primary_key=True),
        sa.Column("languages", sa.JSON, nullable=True),
        sa.Column("demographics", sa.JSON, nullable=True),
        sa.Column("expertise", sa.JSON, nullable=True),
        sa.Column("interests", sa.JSON, nullable=True),
        sa.Column(
            "updated_at", sa.DateTime(timezone=True), nullable=False,
            server_default=sa.func.now(),
        ),
    )

    op.create_table(
        "projects",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        _fk("researcher_id", "users.id", nullable=False),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("description", sa.Text, nullable=True),
        sa.Column("domain", sa.String(120), nullable=True),
        sa.Column("budget_cents", sa.Integer, nullable=False),
        sa.Column("status", sa.String(20), nullable=False, server_default="draft"),
        _created_at(),
    )
    op.create_index("ix_projects_researcher_id", "projects", ["researcher_id"])

    op.create_table(
        "screeners",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        _fk("project_id", "projects.id", nullable=False),
        sa.Column("criteria", sa.JSON, nullable=True),
        sa.Column("questions", sa.JSON, nullable=True),
        sa.Column("auto_approve", sa.Boolean, nullable=False, server_default="false"),
    )

    op.create_table(
        "studies",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        _fk("project_id", "projects.id", nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("modality", sa.String(50), nullable=False),
        sa.Column("duration_min", sa.Integer, nullable=False),
        sa.Column("participant_reward_cents", sa.Integer, nullable=False),
        sa.Column("timezone", sa.String(120), nullable=False),
        sa.Column("max_participants", sa.Integer, nullable=False),
        _fk("screener_id", "screeners.id", ondelete="SET NULL", nullable=True),
        sa.Column("status", sa.String(20), nullable=False, server_default="recruiting"),
        _created_at(),
    )
    op.create_index("ix_studies_project_id", "studies", ["project_id"])

    op.create_table(
        "applications",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        _fk("study_id", "studies.id", nullable=False),
        _fk("participant_id", "users.id", nullable=False),
        sa.Column("answers", sa.JSON, nullable=False),
        sa.Column("score", sa.Integer, nullable=False, server_default="0"),
        sa.Column("status", sa.String(20), nullable=False, server_default="pending"),
        _created_at(),
        sa.UniqueConstraint(
            "study_id", "participant_id",
            name="uq_applications_study_participant",
        ),
        sa.CheckConstraint("score >= 0", name="ck_applications_score_non_negative"),
    )
    op.create_index(
        "ix_applications_study_id_status", "applications", ["study_id", "status"],
    )

    op.create_table(
        "matches",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        _fk("application_id", "applications.id", nullable=False),
        sa.Column("scheduled_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("external_event_ref", sa.String(255), nullable=True),
        sa.Column("video_room", sa.String(255), nullable=True),
        sa.Column(
            "status", sa.String(20), nullable=False,
            server_default="awaiting_schedule",
        ),
        _created_at(),
        sa.UniqueConstraint("application_id", name="uq_matches_application_id"),
        sa.CheckConstraint(
            "(status = 'scheduled' AND scheduled_at IS NOT NULL) OR "
            "(status = 'awaiting_schedule' AND scheduled_at IS NULL)",
            name="ck_matches_schedule_consistent",
        ),
    )

    op.create_table(
        "sessions",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        _fk("match_id", "matches.id", nullable=False),
        sa.Column("started_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("ended_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("recording_ref", sa.Text, nullable=True),
        _created_at(),
        sa.UniqueConstraint("match_id", name="uq_sessions_match_id"),
    )

    op.create_table(
        "transcripts",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        _fk("session_id", "sessions.id", nullable=False),
        sa.Column("raw_text", sa.Text, nullable=False),
        sa.Column("segments", sa.JSON, nullable=True),
        _created_at(),
        sa.UniqueConstraint("session_id", name="uq_transcripts_session_id"),
    )

    op.create_table(
        "insight_units",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        _fk("study_id", "studies.id", nullable=False),
        _fk("participant_id", "users.id", nullable=False),
        _fk("session_id", "sessions.id", nullable=False),
        sa.Column("theme", sa.String(255), nullable=False),
        sa.Column("rationale", sa.Text, nullable=False),
        sa.Column("evidence", sa.JSON, nullable=True),
        sa.Column("sentiment", sa.String(20), nullable=True),
        sa.Column("tags", sa.JSON, nullable=False),
        _created_at(),
    )
    op.create_index("ix_insight_units_study_id", "insight_units", ["study_id"])


def downgrade() -> None:
    op.drop_index("ix_insight_units_study_id", table_name="insight_units")
    op.drop_table("insight_units")
    op.drop_table("transcripts")
    op.drop_table("sessions")
    op.drop_table("matches")
    op.drop_index("ix_applications_study_id_status", table_name="applications")
    op.drop_table("applications")
    op.drop_index("ix_studies_project_id", table_name="studies")
    op.drop_table("studies")
    op.drop_table("screeners")
    op.drop_index("ix_projects_researcher_id", table_name="projects")
    op.drop_table("projects")
    op.drop_table("participant_profiles")
    op.drop_table("users")
