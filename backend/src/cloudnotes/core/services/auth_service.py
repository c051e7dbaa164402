"""Authentication service implementation."""

import logging
from typing import Optional

from fastapi import HTTPException, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from ...config import get_settings
from ...security import blacklist_token, create_access_token, hash_password, needs_update, verify_password
from ..realtime import ChangeFeed, ChangeType, get_change_feed
from ..repositories.profile_repository import ProfileRepository
from ..repositories.user_repository import UserRepository
from ..schemas.auth import LoginRequest, RegisterRequest, TokenResponse
from ..schemas.profiles import ProfileResponse
from .interfaces import IAuthService

logger = logging.getLogger(__name__)


def _email_taken() -> HTTPException:
    return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Email already registered")


class AuthService(IAuthService):
    """Authentication service implementation."""

    def __init__(self, session: AsyncSession, change_feed: Optional[ChangeFeed] = None):
        self.session = session
        self.user_repo = UserRepository(session)
        self.profile_repo = ProfileRepository(session)
        self.change_feed = change_feed or get_change_feed()
        self.settings = get_settings()

    async def register_user(self, request: RegisterRequest) -> ProfileResponse:
        """Register a new account and create its profile alongside it."""
        if await self.user_repo.is_email_taken(request.email):
            raise _email_taken()

        admin_emails = {email.strip().lower() for email in self.settings.admin_emails}
        try:
            user, profile = await self.user_repo.create_with_profile(
                {
                    "email": request.email,
                    "password_hash": hash_password(request.password),
                    "is_active": True,
                },
                {
                    "full_name": request.full_name,
                    "is_admin": request.email in admin_emails,
                },
            )
        except IntegrityError:
            # a concurrent sign-up took the address between the check and the insert
            await self.session.rollback()
            logger.info(f"Registration race lost for {request.email}")
            raise _email_taken()

        logger.info(f"Registered user {user.id}", extra={"is_admin": profile.is_admin})
        await self.change_feed.publish("profiles", ChangeType.INSERT, profile.id)
        return ProfileResponse.model_validate(profile)

    async def authenticate_user(self, request: LoginRequest) -> TokenResponse:
        """Login user and return an access token."""
        user = await self.user_repo.get_by_email(request.email)
        if not user or not user.can_login() or not verify_password(request.password, user.password_hash):
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid credentials"
            )

        if needs_update(user.password_hash):
            user.password_hash = hash_password(request.password)
            await self.session.commit()

        profile = await self.profile_repo.get_by_id(user.id)
        if not profile:
            # Profiles are created with the account; a missing one is a data problem
            logger.error(f"User {user.id} has no profile")
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid credentials"
            )

        access_token = create_access_token(data={"sub": str(user.id)})
        return TokenResponse(
            access_token=access_token,
            token_type="bearer",
            expires_in=self.settings.access_token_expire_minutes * 60,
            profile=ProfileResponse.model_validate(profile),
        )

    async def sign_out(self, access_token: str) -> bool:
        """Revoke the token so later session lookups return nothing."""
        revoked = await blacklist_token(access_token)
        if not revoked:
            logger.warning("Sign-out could not revoke the access token")
        return revoked
