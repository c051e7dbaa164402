# Main application entry point
import os
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import RedirectResponse

from . import __version__
from .api import auth_router, health_router, notes_router, profiles_router, realtime_router
from .config import get_settings
from .core.logging import LoggingMiddleware, get_logger, setup_logging
from .core.redis_client import get_redis_client
from .core.services import AdminRequired, LoginRequired
from .database import create_tables
from .web import pages_router

# Setup logging first
setup_logging()
logger = get_logger("main")

settings = get_settings()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events."""
    # Startup
    logger.info(
        "Starting Cloud Notes Hub",
        extra={"version": __version__, "environment": settings.environment, "debug": settings.debug},
    )

    # Realtime and sign-out need Redis, but pages work without it
    redis_client = get_redis_client()
    try:
        await redis_client.connect()
        logger.info("Redis connection established")
    except Exception as e:
        logger.warning(f"Redis connection failed: {e}. Continuing without Redis...")

    # Tests run against their own SQLite engine
    if os.getenv("CLOUDNOTES_SKIP_LIFESPAN_DB") == "1":
        logger.info("Skipping DB table creation due to CLOUDNOTES_SKIP_LIFESPAN_DB=1")
    else:
        try:
            await create_tables()
            logger.info("Database tables created/verified")
        except Exception as e:
            logger.error("Failed to create database tables", exc_info=e)
            raise

    yield

    # Shutdown
    logger.info("Shutting down Cloud Notes Hub")
    try:
        await redis_client.disconnect()
        logger.info("Redis connection closed")
    except Exception as e:
        logger.warning(f"Redis disconnect failed: {e}")


app = FastAPI(
    title=settings.app_name,
    description="Personal notes with public sharing and an admin overview",
    version=__version__,
    lifespan=lifespan,
)

# Add logging middleware
app.add_middleware(LoggingMiddleware)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=settings.cors_allow_credentials,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(auth_router, prefix="/api")
app.include_router(profiles_router, prefix="/api")
app.include_router(notes_router, prefix="/api")
app.include_router(realtime_router, prefix="/api")
app.include_router(health_router, prefix="/api")
app.include_router(pages_router)


@app.exception_handler(LoginRequired)
async def login_required_handler(request: Request, exc: LoginRequired):
    return RedirectResponse(get_settings().login_path, status_code=303)


@app.exception_handler(AdminRequired)
async def admin_required_handler(request: Request, exc: AdminRequired):
    return RedirectResponse(get_settings().dashboard_path, status_code=303)


# API root endpoint for better navigation
@app.get("/api/")
async def api_root():
    return {
        "message": f"{settings.app_name} API",
        "version": __version__,
        "documentation": {
            "swagger_ui": "/docs",
            "redoc": "/redoc",
            "openapi_json": "/openapi.json",
        },
        "endpoints": {
            "authentication": "/api/auth/",
            "profiles": "/api/profiles/",
            "notes": "/api/notes/",
            "realtime": "/api/realtime/{table}",
            "health": "/api/health/",
        },
    }


# Basic unprefixed health endpoint for load balancers
@app.get("/health")
async def basic_health():
    return {"status": "ok"}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("cloudnotes.main:app", host=settings.host, port=settings.port, reload=settings.reload)
