"""User Directory — mirrors authenticated callers into the users table and keeps profiles.

Invariants:
    - ensure_user() is idempotent and safe under concurrent first requests
    - A participant profile belongs to exactly one user (user_id primary key)
    - Profile fields omitted from an upsert keep their stored value

Design Decisions:
    - Users are ensured lazily on the first call that needs a foreign key to
      them, rather than through a separate sign-up flow
"""

import logging

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from whiteloop.core.role_gate import Caller
from whiteloop.models.participant_profile import ParticipantProfile
from whiteloop.models.user import User

logger = logging.getLogger(__name__)

PROFILE_FIELDS = ("languages", "demographics", "expertise", "interests")


async def ensure_user(db: AsyncSession, caller: Caller) -> User:
    """Return the caller's user row, inserting it on first sight."""
    user = await db.get(User, caller.user_id)
    if user is not None:
        return user
    user = User(
        id=caller.user_id, role=caller.role.value, email=caller.email,
        full_name=None, country=None,
    )
    db.add(user)
    try:
        await db.commit()
    except IntegrityError:
        await db.rollback()
        user = await db.get(User, caller.user_id)
        if user is None:
            raise
        return user
    logger.info("User record created", extra={"role": caller.role.value})
    return user


async def get_profile_document(db: AsyncSession, user_id) -> dict:
    """Profile as seen by screening; empty when the participant has none."""
    profile = await db.get(ParticipantProfile, user_id)
    return profile.to_document() if profile else {}


async def upsert_profile(
    db: AsyncSession, caller: Caller, fields: dict,
) -> ParticipantProfile:
    await ensure_user(db, caller)
    profile = await db.get(ParticipantProfile, caller.user_id)
    if profile is None:
        profile = ParticipantProfile(
            user_id=caller.user_id, **dict.fromkeys(PROFILE_FIELDS),
        )
        db.add(profile)
    for name in PROFILE_FIELDS:
        if name in fields:
            setattr(profile, name, fields[name])
    await db.commit()
    return profile
