"""
Database models for Cloud Notes Hub.

SQLAlchemy ORM models for the two user-facing tables plus the login
accounts that back them:

    - User: login account (email + password hash)
    - Profile: per-user metadata including the admin flag
    - Note: note content with owner and visibility
"""

from .base import BaseModel
from .note import Note
from .profile import Profile
from .user import User

__all__ = [
    "BaseModel",
    "User",
    "Profile",
    "Note",
]
