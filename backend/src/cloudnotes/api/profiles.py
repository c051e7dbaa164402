"""Profile API endpoints."""

from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.models.profile import Profile
from ..core.schemas.profiles import ProfileResponse, ProfileUpdate
from ..core.services import ProfileService
from ..database import get_db_session
from ..middleware.auth import get_admin_profile, get_current_profile

router = APIRouter(prefix="/profiles", tags=["profiles"])


@router.get("/me", response_model=ProfileResponse)
async def get_my_profile(profile: Profile = Depends(get_current_profile)):
    """Profile of the signed-in user."""
    return profile


@router.put("/me", response_model=ProfileResponse)
async def update_my_profile(
    request: ProfileUpdate,
    profile: Profile = Depends(get_current_profile),
    session: AsyncSession = Depends(get_db_session),
):
    """Update display name or avatar."""
    return await ProfileService(session).update_profile(profile.id, request)


@router.get("/", response_model=List[ProfileResponse])
async def list_profiles(
    profile: Profile = Depends(get_admin_profile),
    session: AsyncSession = Depends(get_db_session),
):
    """All profiles, newest first. Admin only."""
    return await ProfileService(session).list_profiles(profile)
