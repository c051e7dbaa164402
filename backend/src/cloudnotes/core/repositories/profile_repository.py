"""Profile repository for database operations."""

from typing import List, Optional
from uuid import UUID

from sqlalchemy import desc, select
from sqlalchemy.ext.asyncio import AsyncSession

from ..models.profile import Profile


class ProfileRepository:
    """Repository for the profiles collection."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_id(self, profile_id: UUID) -> Optional[Profile]:
        """Get the profile matching a user id."""
        stmt = select(Profile).where(Profile.id == profile_id)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def list_profiles(self) -> List[Profile]:
        """All profiles, newest first."""
        stmt = select(Profile).order_by(desc(Profile.created_at))
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def update_profile(self, profile_id: UUID, update_data: dict) -> Optional[Profile]:
        """Update profile data."""
        profile = await self.get_by_id(profile_id)
        if not profile:
            return None

        for key, value in update_data.items():
            setattr(profile, key, value)

        await self.session.commit()
        await self.session.refresh(profile)
        return profile
