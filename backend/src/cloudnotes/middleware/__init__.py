"""Middleware for authentication and other cross-cutting concerns."""

from .auth import (
    JWTBearer,
    get_access_token,
    get_admin_profile,
    get_current_profile,
    get_current_user_id,
)

__all__ = [
    "JWTBearer",
    "get_access_token",
    "get_current_user_id",
    "get_current_profile",
    "get_admin_profile",
]
