"""Authentication dependencies."""

from typing import Optional
from uuid import UUID

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from ..config import get_settings
from ..core.models.profile import Profile
from ..core.repositories.profile_repository import ProfileRepository
from ..database import get_db_session
from ..security import get_user_id_from_token


class JWTBearer(HTTPBearer):
    """JWT Bearer token authentication.

    Falls back to the browser session cookie so pages and the realtime
    socket share one login.
    """

    def __init__(self, auto_error: bool = True):
        super().__init__(auto_error=False)
        self.require_token = auto_error

    async def __call__(self, request: Request) -> Optional[UUID]:
        token = await self.extract_token(request)
        if not token:
            if self.require_token:
                raise HTTPException(
                    status_code=status.HTTP_403_FORBIDDEN, detail="Not authenticated"
                )
            return None

        user_id = await get_user_id_from_token(token)
        if not user_id:
            if self.require_token:
                raise HTTPException(
                    status_code=status.HTTP_403_FORBIDDEN, detail="Invalid token or expired token"
                )
            return None

        return user_id

    async def extract_token(self, request: Request) -> Optional[str]:
        if request.headers.get("Authorization"):
            credentials: Optional[HTTPAuthorizationCredentials] = await super().__call__(request)
            if not credentials or credentials.scheme.lower() != "bearer":
                raise HTTPException(
                    status_code=status.HTTP_403_FORBIDDEN, detail="Invalid authentication scheme"
                )
            return credentials.credentials
        return request.cookies.get(get_settings().session_cookie_name)


async def get_access_token(request: Request) -> Optional[str]:
    """Raw access token from the Authorization header or session cookie."""
    return await JWTBearer(auto_error=False).extract_token(request)


# Dependency for getting current user ID from JWT
async def get_current_user_id(user_id: UUID = Depends(JWTBearer())) -> UUID:
    """Get current authenticated user ID."""
    return user_id


async def get_current_profile(
    user_id: UUID = Depends(get_current_user_id),
    session: AsyncSession = Depends(get_db_session),
) -> Profile:
    """Profile row of the authenticated caller."""
    profile = await ProfileRepository(session).get_by_id(user_id)
    if not profile:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Profile not found")
    return profile


async def get_admin_profile(profile: Profile = Depends(get_current_profile)) -> Profile:
    """Profile of the caller, who must be an admin."""
    if not profile.is_admin:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Admin access required")
    return profile
