"""Participant Routes — the profile that screening rules read."""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from whiteloop.api.dependencies import require
from whiteloop.core.role_gate import Caller, Operation
from whiteloop.infrastructure.database import get_db
from whiteloop.schemas.catalog import ProfileResponse, ProfileUpsert
from whiteloop.services.user_directory import upsert_profile

router = APIRouter(prefix="/api/v1/participants", tags=["participants"])


@router.put("/me/profile", response_model=ProfileResponse)
async def put_my_profile(
    body: ProfileUpsert,
    caller: Caller = Depends(require(Operation.UPSERT_PROFILE)),
    db: AsyncSession = Depends(get_db),
):
    """Create or update the caller's profile. Omitted fields are kept."""
    profile = await upsert_profile(db, caller, body.model_dump(exclude_unset=True))
    return ProfileResponse.model_validate(profile)
