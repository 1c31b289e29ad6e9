"""Database layer for fittrack."""

from .engine import Database, init_db
from .observe import Subscription
from .repositories import ExerciseRepository, ProgramRepository
from .store import ListQuery

__all__ = [
    "Database",
    "ExerciseRepository",
    "init_db",
    "ListQuery",
    "ProgramRepository",
    "Subscription",
]
