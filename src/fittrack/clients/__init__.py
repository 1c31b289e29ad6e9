"""Collaborators outside the data layer."""

from .health import (
    HealthDataFeed,
    HealthSnapshot,
    StatData,
    StaticHealthFeed,
    build_stat_cards,
)

__all__ = [
    "build_stat_cards",
    "HealthDataFeed",
    "HealthSnapshot",
    "StatData",
    "StaticHealthFeed",
]
