"""Session and profile loading for pages and API calls."""

import logging
from dataclasses import dataclass
from typing import Optional
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from ...security import decode_access_token
from ..models.profile import Profile
from ..repositories.profile_repository import ProfileRepository
from ..schemas.auth import AuthSession
from .interfaces import ISessionLoader

logger = logging.getLogger(__name__)


class LoginRequired(Exception):
    """No live session; send the caller to the login view."""


class AdminRequired(Exception):
    """Session is valid but the profile is not an admin; send them to the dashboard."""


@dataclass
class LoadedSession:
    session: AuthSession
    profile: Optional[Profile]

    @property
    def user_id(self) -> UUID:
        return self.session.user_id

    @property
    def is_admin(self) -> bool:
        return bool(self.profile and self.profile.is_admin)


class SessionLoader(ISessionLoader):
    """Checks for a live session and fetches the matching profile row."""

    def __init__(self, session: AsyncSession):
        self.session = session
        self.profile_repo = ProfileRepository(session)

    async def get_session(self, token: Optional[str]) -> Optional[AuthSession]:
        if not token:
            return None

        payload = await decode_access_token(token)
        if not payload or not payload.get("sub"):
            return None

        try:
            user_id = UUID(payload["sub"])
        except ValueError:
            return None
        return AuthSession(user_id=user_id, token_id=payload.get("jti"))

    async def load(self, token: Optional[str]) -> LoadedSession:
        auth_session = await self.get_session(token)
        if auth_session is None:
            raise LoginRequired()

        profile = await self.profile_repo.get_by_id(auth_session.user_id)
        if profile is None:
            logger.warning(f"No profile row for session user {auth_session.user_id}")
        return LoadedSession(session=auth_session, profile=profile)

    async def load_admin(self, token: Optional[str]) -> LoadedSession:
        loaded = await self.load(token)
        if not loaded.is_admin:
            logger.info(f"Non-admin {loaded.user_id} refused admin view")
            raise AdminRequired()
        return loaded
