"""API routers for Cloud Notes Hub."""

from .auth import router as auth_router
from .health import router as health_router
from .notes import router as notes_router
from .profiles import router as profiles_router
from .realtime import router as realtime_router

__all__ = ["auth_router", "notes_router", "profiles_router", "realtime_router", "health_router"]
