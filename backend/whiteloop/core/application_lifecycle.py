"""Application Lifecycle — the review state machine, as pure checks.

Invariants:
    - pending -> approved | rejected | waitlist; the three targets are terminal
    - Requesting the status an application already has is a no-op, not an error
      (retries and duplicate clicks must be safe)
    - Leaving a terminal status raises InvalidTransitionError

Design Decisions:
    - The repository's set_status stays unconditional; the review workflow calls
      check_transition() first so cross-entity rules (a Match exists only for an
      approved application) are decided in one place
"""

from whiteloop.core.domain_types import ApplicationStatus
from whiteloop.core.errors import ErrorContext, InvalidTransitionError

REVIEW_TARGETS = frozenset({
    ApplicationStatus.APPROVED,
    ApplicationStatus.REJECTED,
    ApplicationStatus.WAITLIST,
})

ALLOWED_TRANSITIONS: dict[ApplicationStatus, frozenset[ApplicationStatus]] = {
    ApplicationStatus.PENDING: REVIEW_TARGETS,
    ApplicationStatus.APPROVED: frozenset(),
    ApplicationStatus.REJECTED: frozenset(),
    ApplicationStatus.WAITLIST: frozenset(),
}


def is_terminal(status: ApplicationStatus) -> bool:
    return not ALLOWED_TRANSITIONS[status]


def check_transition(
    current: ApplicationStatus,
    requested: ApplicationStatus,
    context: ErrorContext | None = None,
) -> bool:
    """Return True when a write is needed, False for a same-state no-op.

    Raises InvalidTransitionError when the lifecycle forbids the move.
    """
    if current == requested:
        return False
    if requested not in ALLOWED_TRANSITIONS[current]:
        raise InvalidTransitionError(current.value, requested.value, context)
    return True
