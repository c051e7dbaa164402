"""
Pydantic schemas for validating and documenting API requests and responses.
"""

from .auth import AuthSession, LoginRequest, RegisterRequest, TokenResponse
from .common import HealthCheckResponse, MessageResponse
from .notes import NoteCreate, NoteResponse, NoteUpdate
from .profiles import ProfileResponse, ProfileUpdate

__all__ = [
    # Auth schemas
    "AuthSession",
    "LoginRequest",
    "RegisterRequest",
    "TokenResponse",
    # Profile schemas
    "ProfileResponse",
    "ProfileUpdate",
    # Note schemas
    "NoteCreate",
    "NoteUpdate",
    "NoteResponse",
    # Common schemas
    "HealthCheckResponse",
    "MessageResponse",
]
