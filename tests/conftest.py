"""Pytest configuration and fixtures."""

import tempfile
from pathlib import Path

import pytest
import pytest_asyncio

from fittrack.config import Settings
from fittrack.db import Database, ExerciseRepository, ProgramRepository
from fittrack.models.exercises import Exercise, MuscleGroup
from fittrack.models.program import ExerciseSettings, WorkoutProgram
from fittrack.preferences import Preferences


@pytest.fixture
def temp_db_path():
    """Create a temporary database path."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir) / "test.db"


@pytest.fixture
def settings(tmp_path):
    """Settings pointing at an empty data directory."""
    return Settings(data_dir=tmp_path / "data", log_level="WARNING")


@pytest_asyncio.fixture
async def db(temp_db_path):
    database = Database(temp_db_path)
    await database.connection()
    yield database
    await database.close()


@pytest.fixture
def exercise_repo(db):
    return ExerciseRepository(db)


@pytest.fixture
def program_repo(db):
    return ProgramRepository(db)


@pytest_asyncio.fixture
async def prefs(tmp_path):
    preferences = Preferences.open(tmp_path / "preferences.db")
    yield preferences
    await preferences.close()


@pytest.fixture
def squat():
    return Exercise(
        name="Squat",
        muscle_groups=[MuscleGroup.LEGS, MuscleGroup.CORE],
        description="The king of leg exercises.",
    )


@pytest.fixture
def lunges():
    return Exercise(name="Lunges", muscle_groups=[MuscleGroup.LEGS])


@pytest.fixture
def leg_day(squat, lunges):
    """A program with settings for two exercises."""
    settings = [
        ExerciseSettings(exercise_id=squat.id, sets=5, reps=5, weight_kg=100.0),
        ExerciseSettings(exercise_id=lunges.id, sets=3, reps=12, weight_kg=20.0),
    ]
    return WorkoutProgram(
        name="Leg Day",
        exercise_ids=[s.exercise_id for s in settings],
        exercise_settings=settings,
        duration_minutes=45,
    )
