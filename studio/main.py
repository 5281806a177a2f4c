"""
FastAPI Production Application

Main entry point for the Photography Studio API.
"""

from contextlib import asynccontextmanager
from pathlib import Path
from typing import Optional

from fastapi import FastAPI
from fastapi.staticfiles import StaticFiles
import structlog

from studio.config import Settings, get_settings
from studio.config.logging import configure_logging
from studio.database.connection import Database
from studio.serving.api import create_api_app

logger = structlog.get_logger(__name__)


def create_app(settings: Optional[Settings] = None, database: Optional[Database] = None) -> FastAPI:
    """
    Build the application around one Database.

    The pool is opened lazily by the engine; startup only verifies that the
    database answers, and shutdown closes the pool.
    """
    settings = settings or get_settings()
    database = database or Database.from_settings(settings.database)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Application lifespan manager."""
        configure_logging(settings=settings)
        logger.info("Starting Photography Studio API", environment=settings.app_env)

        try:
            await database.connect()
        except Exception as e:
            # Health checks report the outage; requests fail with database errors
            logger.warning("Database unavailable at startup", error=str(e))

        yield

        logger.info("Shutting down...")
        await database.dispose()

    app = create_api_app(settings, lifespan=lifespan)
    app.state.database = database

    # Serve the dashboard build after the API so /api paths always win
    if settings.frontend_dir:
        frontend_path = Path(settings.frontend_dir)
        if frontend_path.is_dir():
            app.mount("/", StaticFiles(directory=frontend_path, html=True), name="frontend")
            logger.info("Serving dashboard", directory=str(frontend_path))
        else:
            logger.warning("Dashboard directory not found", directory=str(frontend_path))

    return app


app = create_app()
