"""
Service layer interfaces and implementations.
"""

from .interfaces import (
    IAuthService,
    IHealthService,
    INoteService,
    IProfileService,
    ISessionLoader,
)

from .auth_service import AuthService
from .health_service import HealthService
from .note_service import NoteService
from .profile_service import ProfileService
from .session_service import AdminRequired, LoadedSession, LoginRequired, SessionLoader

__all__ = [
    # Interfaces
    "IAuthService",
    "ISessionLoader",
    "INoteService",
    "IProfileService",
    "IHealthService",

    # Implementations
    "AuthService",
    "SessionLoader",
    "NoteService",
    "ProfileService",
    "HealthService",

    # Session outcomes
    "LoadedSession",
    "LoginRequired",
    "AdminRequired",
]
