"""Role Gate — which caller role may invoke which operation.

Invariants:
    - Every gated operation appears in PERMISSIONS (no implicit allow)
    - ADMIN may invoke every operation
    - authorize() is pure: raises ForbiddenError, returns None on success

Design Decisions:
    - Explicit table over decorators scattered across routes: the whole
      authorization surface is reviewable in one screen
    - Core operations assume authorize() already passed; they never re-check roles
"""

from dataclasses import dataclass
from enum import Enum

from whiteloop.core.domain_types import Role, UserId
from whiteloop.core.errors import ForbiddenError


class Operation(str, Enum):
    """Externally callable operations."""
    SUBMIT_APPLICATION = "submit_application"
    UPSERT_PROFILE = "upsert_profile"
    APPROVE_APPLICATION = "approve_application"
    REJECT_APPLICATION = "reject_application"
    WAITLIST_APPLICATION = "waitlist_application"
    VIEW_APPLICATIONS = "view_applications"
    SCHEDULE_MATCH = "schedule_match"
    VIEW_MATCHES = "view_matches"
    CREATE_PROJECT = "create_project"
    CREATE_STUDY = "create_study"
    RECORD_SESSION = "record_session"
    INGEST_TRANSCRIPT = "ingest_transcript"
    GENERATE_INSIGHT = "generate_insight"
    VIEW_INSIGHTS = "view_insights"


PERMISSIONS: dict[Operation, frozenset[Role]] = {
    Operation.SUBMIT_APPLICATION: frozenset({Role.PARTICIPANT}),
    Operation.UPSERT_PROFILE: frozenset({Role.PARTICIPANT}),
    Operation.APPROVE_APPLICATION: frozenset({Role.RESEARCHER}),
    Operation.REJECT_APPLICATION: frozenset({Role.RESEARCHER}),
    Operation.WAITLIST_APPLICATION: frozenset({Role.RESEARCHER}),
    Operation.VIEW_APPLICATIONS: frozenset({Role.RESEARCHER}),
    Operation.SCHEDULE_MATCH: frozenset({Role.RESEARCHER}),
    Operation.VIEW_MATCHES: frozenset({Role.RESEARCHER}),
    Operation.CREATE_PROJECT: frozenset({Role.RESEARCHER}),
    Operation.CREATE_STUDY: frozenset({Role.RESEARCHER}),
    Operation.RECORD_SESSION: frozenset({Role.SERVICE}),
    Operation.INGEST_TRANSCRIPT: frozenset({Role.SERVICE}),
    Operation.GENERATE_INSIGHT: frozenset({Role.SERVICE}),
    Operation.VIEW_INSIGHTS: frozenset({Role.RESEARCHER}),
}


@dataclass(frozen=True)
class Caller:
    """Authenticated caller as asserted by the upstream auth proxy."""
    user_id: UserId
    role: Role
    email: str | None = None


def is_allowed(role: Role, operation: Operation) -> bool:
    return role == Role.ADMIN or role in PERMISSIONS[operation]


def authorize(caller: Caller, operation: Operation) -> None:
    if not is_allowed(caller.role, operation):
        raise ForbiddenError(caller.role.value, operation.value)
