"""
Service interfaces for Cloud Notes Hub.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional
from uuid import UUID

from ..models.profile import Profile
from ..schemas.auth import AuthSession, LoginRequest, RegisterRequest, TokenResponse
from ..schemas.common import HealthCheckResponse
from ..schemas.notes import NoteCreate, NoteResponse, NoteUpdate
from ..schemas.profiles import ProfileResponse, ProfileUpdate


class IAuthService(ABC):
    """Account registration, login and sign-out."""

    @abstractmethod
    async def register_user(self, request: RegisterRequest) -> ProfileResponse:
        """Create an account together with its profile."""
        pass

    @abstractmethod
    async def authenticate_user(self, request: LoginRequest) -> TokenResponse:
        """Check credentials and issue an access token."""
        pass

    @abstractmethod
    async def sign_out(self, access_token: str) -> bool:
        """Revoke an access token."""
        pass


class ISessionLoader(ABC):
    """Resolves the caller's session and profile."""

    @abstractmethod
    async def get_session(self, token: Optional[str]) -> Optional[AuthSession]:
        """Session for a token, or None."""
        pass

    @abstractmethod
    async def load(self, token: Optional[str]):
        """Session plus profile; raises LoginRequired without a session."""
        pass

    @abstractmethod
    async def load_admin(self, token: Optional[str]):
        """Like load(), but raises AdminRequired for non-admins."""
        pass


class INoteService(ABC):
    """Notes repository accessor."""

    @abstractmethod
    async def list_my_notes(self, user_id: UUID) -> List[NoteResponse]:
        """Caller's own notes, newest first."""
        pass

    @abstractmethod
    async def list_all_notes(self, viewer: Profile) -> List[NoteResponse]:
        """Every note, newest first. Admin only."""
        pass

    @abstractmethod
    async def list_public_notes(self) -> List[NoteResponse]:
        """Notes marked public."""
        pass

    @abstractmethod
    async def create_note(self, user_id: UUID, request: NoteCreate) -> NoteResponse:
        """Create new note."""
        pass

    @abstractmethod
    async def get_note(self, note_id: UUID, viewer: Profile) -> NoteResponse:
        """Get note by ID."""
        pass

    @abstractmethod
    async def update_note(self, note_id: UUID, viewer: Profile, request: NoteUpdate) -> NoteResponse:
        """Apply a partial update."""
        pass

    @abstractmethod
    async def delete_note(self, note_id: UUID, viewer: Profile) -> bool:
        """Delete note."""
        pass

    @abstractmethod
    async def toggle_visibility(self, note_id: UUID, viewer: Profile) -> NoteResponse:
        """Flip is_public on a note the viewer may write."""
        pass


class IProfileService(ABC):
    """Profile reads and self-service edits."""

    @abstractmethod
    async def get_profile(self, user_id: UUID) -> ProfileResponse:
        """Profile for a user id."""
        pass

    @abstractmethod
    async def list_profiles(self, viewer: Profile) -> List[ProfileResponse]:
        """All profiles. Admin only."""
        pass

    @abstractmethod
    async def update_profile(self, user_id: UUID, request: ProfileUpdate) -> ProfileResponse:
        """Update display fields."""
        pass


class IHealthService(ABC):
    """Health check service."""

    @abstractmethod
    async def get_health_status(self) -> HealthCheckResponse:
        """Get app health status."""
        pass

    @abstractmethod
    async def check_database_health(self) -> Dict[str, Any]:
        """Check DB connection."""
        pass

    @abstractmethod
    async def check_redis_health(self) -> Dict[str, Any]:
        """Check Redis connection."""
        pass
