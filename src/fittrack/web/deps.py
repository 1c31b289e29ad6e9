"""Request dependencies backed by app state."""

from fastapi import Request

from ..clients.health import HealthDataFeed
from ..db import ExerciseRepository, ProgramRepository
from ..localization import Localizer
from ..preferences import Preferences


def get_exercise_repo(request: Request) -> ExerciseRepository:
    return request.app.state.exercise_repo


def get_program_repo(request: Request) -> ProgramRepository:
    return request.app.state.program_repo


def get_prefs(request: Request) -> Preferences:
    return request.app.state.prefs


def get_health_feed(request: Request) -> HealthDataFeed:
    return request.app.state.health_feed


async def get_localizer(request: Request) -> Localizer:
    prefs: Preferences = request.app.state.prefs
    return Localizer(await prefs.language.selected_language())
