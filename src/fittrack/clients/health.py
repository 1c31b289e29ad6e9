"""Read-only feed of today's health totals and the home stat cards built on it."""

from dataclasses import dataclass
from typing import Protocol, runtime_checkable

from ..models.preferences import StatType

# Placeholder values for stats the health feed does not provide
SAMPLE_VALUES = {
    StatType.WATER: ("6", 0.75),
    StatType.CALORIES_EATEN: ("1,650", 0.83),
    StatType.DISTANCE: ("3.8", 0.76),
    StatType.HEART_RATE: ("68", 0.97),
    StatType.SLEEP: ("7.5", 0.94),
    StatType.STEPS: ("8,420", 0.84),
    StatType.CALORIES_BURNED: ("1,850", 0.74),
    StatType.ACTIVITY_TIME: ("45", 0.75),
}


@dataclass
class HealthSnapshot:
    """Today's totals as reported by the platform."""

    steps: int = 0
    active_energy: float = 0.0  # kcal
    exercise_minutes: float = 0.0


@runtime_checkable
class HealthDataFeed(Protocol):
    """Protocol for health data sources. Values are only read, never written."""

    @property
    def source_name(self) -> str:
        ...

    async def today(self) -> HealthSnapshot:
        ...


class StaticHealthFeed:
    """A feed that always reports the same snapshot."""

    def __init__(self, snapshot: HealthSnapshot | None = None):
        self.snapshot = snapshot or HealthSnapshot()

    @property
    def source_name(self) -> str:
        return "static"

    async def today(self) -> HealthSnapshot:
        return self.snapshot


@dataclass
class StatData:
    """One home screen card."""

    type: StatType
    current_value: str
    goal_value: str
    progress: float

    def to_dict(self) -> dict:
        return {
            "type": self.type.value,
            "current_value": self.current_value,
            "goal_value": self.goal_value,
            "unit": self.type.unit,
            "progress": self.progress,
        }


def _goal_number(stat: StatType) -> float:
    return float(stat.default_goal.replace(",", ""))


def _progress(value: float, stat: StatType) -> float:
    goal = _goal_number(stat)
    return min(value / goal, 1.0) if goal else 0.0


def build_stat_cards(
    stats: list[StatType], snapshot: HealthSnapshot | None = None
) -> list[StatData]:
    """Build cards for the enabled stats, in the given order.

    Steps, calories burned and activity time come from the snapshot when
    one is given; everything else shows sample values.
    """
    cards = []
    for stat in stats:
        if snapshot is not None and stat is StatType.STEPS:
            value = float(snapshot.steps)
            current = f"{snapshot.steps:,}"
        elif snapshot is not None and stat is StatType.CALORIES_BURNED:
            value = snapshot.active_energy
            current = f"{round(snapshot.active_energy):,}"
        elif snapshot is not None and stat is StatType.ACTIVITY_TIME:
            value = snapshot.exercise_minutes
            current = f"{round(snapshot.exercise_minutes)}"
        else:
            current, progress = SAMPLE_VALUES[stat]
            cards.append(StatData(stat, current, stat.default_goal, progress))
            continue
        cards.append(StatData(stat, current, stat.default_goal, _progress(value, stat)))
    return cards
