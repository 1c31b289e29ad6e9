"""CLI commands for fittrack."""

from .exercises import exercises
from .init import init
from .programs import programs
from .serve import serve
from .settings import settings

__all__ = [
    "exercises",
    "init",
    "programs",
    "serve",
    "settings",
]
