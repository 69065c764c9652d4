"""API Dependencies — caller identity and role gating for routes.

Invariants:
    - Identity comes from X-User-Id / X-User-Role headers set by the auth proxy
    - Missing or unparseable identity -> 401; role not permitted -> 403
    - Core services receive an already-authorized Caller

Design Decisions:
    - require(operation) returns a dependency per operation so each route's
      permission is visible in its signature
"""

from uuid import UUID

from fastapi import Depends, Header

from whiteloop.core.domain_types import Role, UserId
from whiteloop.core.errors import UnauthorizedError
from whiteloop.core.role_gate import Caller, Operation, authorize


async def get_caller(
    x_user_id: str | None = Header(None),
    x_user_role: str | None = Header(None),
    x_user_email: str | None = Header(None),
) -> Caller:
    """Resolve the caller asserted by the upstream auth proxy."""
    if not x_user_id or not x_user_role:
        raise UnauthorizedError()
    try:
        user_id = UserId(UUID(x_user_id))
        role = Role(x_user_role.lower())
    except ValueError:
        raise UnauthorizedError("Invalid caller identity")
    return Caller(user_id=user_id, role=role, email=x_user_email)


def require(operation: Operation):
    """Dependency factory: authorize the caller for one operation."""

    async def _authorized(caller: Caller = Depends(get_caller)) -> Caller:
        authorize(caller, operation)
        return caller

    return _authorized
