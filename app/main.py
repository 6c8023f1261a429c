"""
Main FastAPI application.

This is the entry point for the API server.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from app.core.config import settings
from app.core.pipeline_config import UnknownStageError
from app.db.session import get_async_session_context
from app.errors import AppError, app_error_handler, unknown_stage_handler
from app.routers import admins, auth, candidates, health, pipeline, stats
from app.services.auth_service import AuthService

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s %(message)s",
)
logger = logging.getLogger(__name__)


async def bootstrap_super_admin() -> None:
    """Make sure the configured super admin account exists."""
    email = settings.BOOTSTRAP_SUPER_ADMIN_EMAIL
    password = settings.BOOTSTRAP_SUPER_ADMIN_PASSWORD
    if not email or not password:
        return
    async with get_async_session_context() as session:
        await AuthService(session).ensure_super_admin(
            email, password, settings.BOOTSTRAP_SUPER_ADMIN_NAME
        )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Lifespan context manager for the FastAPI app.

    On startup the optional bootstrap super admin is created.
    """
    logger.info("Starting %s...", settings.APP_NAME)
    await bootstrap_super_admin()

    yield  # The server runs while we're "yielded" here

    logger.info("Shutting down %s...", settings.APP_NAME)


# Create the FastAPI application
app = FastAPI(
    title=settings.APP_NAME,
    description="Backend API for the recruitment pipeline dashboard",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_exception_handler(AppError, app_error_handler)
app.add_exception_handler(UnknownStageError, unknown_stage_handler)


# Include routers (API endpoints)
app.include_router(health.router, tags=["Health"])
app.include_router(auth.router)
app.include_router(admins.router)
app.include_router(candidates.router)
app.include_router(stats.router)
app.include_router(pipeline.router)
