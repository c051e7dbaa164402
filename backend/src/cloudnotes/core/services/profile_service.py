"""Profile service implementation."""

from typing import List, Optional
from uuid import UUID

from fastapi import HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from ..models.profile import Profile
from ..realtime import ChangeFeed, ChangeType, get_change_feed
from ..repositories.profile_repository import ProfileRepository
from ..schemas.profiles import ProfileResponse, ProfileUpdate
from .interfaces import IProfileService


class ProfileService(IProfileService):
    """Profile reads plus self-service display edits."""

    def __init__(self, session: AsyncSession, change_feed: Optional[ChangeFeed] = None):
        self.session = session
        self.profile_repo = ProfileRepository(session)
        self.change_feed = change_feed or get_change_feed()

    async def get_profile(self, user_id: UUID) -> ProfileResponse:
        profile = await self.profile_repo.get_by_id(user_id)
        if not profile:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Profile not found")
        return ProfileResponse.model_validate(profile)

    async def list_profiles(self, viewer: Profile) -> List[ProfileResponse]:
        """All profiles, newest first. Admin only."""
        if not viewer.is_admin:
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Admin access required")
        profiles = await self.profile_repo.list_profiles()
        return [ProfileResponse.model_validate(p) for p in profiles]

    async def update_profile(self, user_id: UUID, request: ProfileUpdate) -> ProfileResponse:
        """Update display name and avatar; email and admin flag are not editable here."""
        update_data = request.model_dump(exclude_unset=True)
        if not update_data:
            return await self.get_profile(user_id)

        profile = await self.profile_repo.update_profile(user_id, update_data)
        if not profile:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Profile not found")

        await self.change_feed.publish("profiles", ChangeType.UPDATE, user_id)
        return ProfileResponse.model_validate(profile)
