"""ORM Models — SQLAlchemy declarative models for all domain entities.

Invariants:
    - All models inherit from Base (db/base.py)
    - Uniqueness invariants live here as constraints, not in service code:
      one application per (study, participant), one match per application,
      one session per match, one transcript per session

Design Decisions:
    - One file per entity for locality
    - All models imported here so Base.metadata is complete before
      create_all() or alembic autogenerate runs
"""

from whiteloop.models.user import User  # noqa: F401
from whiteloop.models.participant_profile import ParticipantProfile  # noqa: F401
from whiteloop.models.project import Project  # noqa: F401
from whiteloop.models.screener import Screener  # noqa: F401
from whiteloop.models.study import Study  # noqa: F401
from whiteloop.models.application import Application  # noqa: F401
from whiteloop.models.match import Match  # noqa: F401
from whiteloop.models.research_session import ResearchSession  # noqa: F401
from whiteloop.models.transcript import Transcript  # noqa: F401
from whiteloop.models.insight_unit import InsightUnit  # noqa: F401
