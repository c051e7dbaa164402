"""Authentication API endpoints."""

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from ..config import get_settings
from ..core.schemas.auth import AuthSession, LoginRequest, RegisterRequest, TokenResponse
from ..core.schemas.common import MessageResponse
from ..core.schemas.profiles import ProfileResponse
from ..core.services import AuthService, SessionLoader
from ..database import get_db_session
from ..middleware.auth import get_access_token

router = APIRouter(prefix="/auth", tags=["authentication"])


@router.post("/register", response_model=ProfileResponse, status_code=status.HTTP_201_CREATED)
async def register(request: RegisterRequest, session: AsyncSession = Depends(get_db_session)):
    """Register a new account; its profile is created alongside."""
    auth_service = AuthService(session)
    return await auth_service.register_user(request)


@router.post("/login", response_model=TokenResponse)
async def login(
    request: LoginRequest, response: Response, session: AsyncSession = Depends(get_db_session)
):
    """Login and get an access token. Also sets the browser session cookie."""
    auth_service = AuthService(session)
    token = await auth_service.authenticate_user(request)
    set_session_cookie(response, token.access_token, token.expires_in)
    return token


@router.get("/session", response_model=Optional[AuthSession])
async def get_session(
    token: Optional[str] = Depends(get_access_token),
    session: AsyncSession = Depends(get_db_session),
):
    """Current session, or null when signed out."""
    return await SessionLoader(session).get_session(token)


@router.post("/logout", response_model=MessageResponse)
async def logout(
    response: Response,
    token: Optional[str] = Depends(get_access_token),
    session: AsyncSession = Depends(get_db_session),
):
    """Sign out: revoke the token and clear the session cookie."""
    if not token:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Not authenticated")

    revoked = await AuthService(session).sign_out(token)
    clear_session_cookie(response)
    if revoked:
        return {"message": "Signed out"}
    return {"message": "Session cleared"}


def set_session_cookie(response: Response, token: str, max_age: int) -> None:
    settings = get_settings()
    response.set_cookie(
        key=settings.session_cookie_name,
        value=token,
        max_age=max_age,
        httponly=True,
        secure=settings.session_cookie_secure,
        samesite="lax",
    )


def clear_session_cookie(response: Response) -> None:
    response.delete_cookie(get_settings().session_cookie_name)
