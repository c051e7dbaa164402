"""Account repository for database operations."""

from typing import Optional
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ..models.profile import Profile
from ..models.user import User


class UserRepository:
    """Repository for login accounts."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create_with_profile(self, user_data: dict, profile_data: dict) -> tuple[User, Profile]:
        """Create an account and its profile in one transaction."""
        user = User(**user_data)
        self.session.add(user)
        await self.session.flush()

        profile = Profile(id=user.id, email=user.email, **profile_data)
        self.session.add(profile)
        await self.session.commit()
        await self.session.refresh(user)
        await self.session.refresh(profile)
        return user, profile

    async def get_by_id(self, user_id: UUID) -> Optional[User]:
        """Get user by ID."""
        stmt = select(User).where(User.id == user_id)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_by_email(self, email: str) -> Optional[User]:
        """Get user by email."""
        stmt = select(User).where(User.email == email)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def is_email_taken(self, email: str) -> bool:
        """Check if email exists."""
        return await self.get_by_email(email) is not None
