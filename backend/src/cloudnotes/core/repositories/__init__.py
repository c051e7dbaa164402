"""Repository layer for data access."""

from .note_repository import NoteRepository
from .profile_repository import ProfileRepository
from .user_repository import UserRepository

__all__ = [
    "UserRepository",
    "ProfileRepository",
    "NoteRepository",
]
