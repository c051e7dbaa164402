"""Server-rendered pages."""

from .pages import router as pages_router

__all__ = ["pages_router"]
