"""FastAPI application for the fittrack JSON API."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from .. import __version__
from ..clients.health import StaticHealthFeed
from ..config import Settings, configure_logging
from ..data import seed_exercises
from ..db import Database, ExerciseRepository, ProgramRepository
from ..errors import ConstraintViolation, NotFound, StorageUnavailable
from ..models.preferences import AppLanguage
from ..preferences import Preferences
from .routers import exercises, home, preferences, programs

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Open the stores on startup and close them on shutdown."""
    settings: Settings = app.state.settings

    db = Database(settings.db_path)
    await db.connection()
    prefs = Preferences.open(
        settings.preferences_path, AppLanguage(settings.default_language)
    )

    app.state.db = db
    app.state.prefs = prefs
    app.state.exercise_repo = ExerciseRepository(db)
    app.state.program_repo = ProgramRepository(db)

    if settings.seed_on_startup:
        await seed_exercises(app.state.exercise_repo)

    try:
        yield
    finally:
        await prefs.close()
        await db.close()
        logger.debug("Closed stores")


def _error(status_code: int, exc: Exception) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"detail": str(exc)})


def create_app(settings: Settings | None = None) -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = settings or Settings()
    configure_logging(settings.log_level)

    app = FastAPI(
        title="fittrack",
        description="Exercise library, workout programs and preferences",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.health_feed = StaticHealthFeed()

    app.include_router(exercises.router)
    app.include_router(programs.router)
    app.include_router(preferences.router)
    app.include_router(home.router)

    @app.exception_handler(NotFound)
    async def not_found(request: Request, exc: NotFound):
        return _error(404, exc)

    @app.exception_handler(ConstraintViolation)
    async def conflict(request: Request, exc: ConstraintViolation):
        return _error(409, exc)

    @app.exception_handler(ValueError)
    async def invalid(request: Request, exc: ValueError):
        return _error(422, exc)

    @app.exception_handler(StorageUnavailable)
    async def unavailable(request: Request, exc: StorageUnavailable):
        logger.error("Storage unavailable: %s", exc)
        return _error(503, exc)

    @app.get("/health")
    async def health():
        """Health check endpoint."""
        return {"status": "healthy", "version": __version__}

    return app
