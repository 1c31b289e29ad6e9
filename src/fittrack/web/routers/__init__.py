"""API routers."""

from . import exercises, home, preferences, programs

__all__ = ["exercises", "home", "preferences", "programs"]
