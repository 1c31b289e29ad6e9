"""Preference values: home statistics, weight unit and language."""

from enum import Enum

KG_TO_LBS = 2.20462


class StatType(str, Enum):
    """Statistics that can be shown on the home screen."""

    STEPS = "steps"
    CALORIES_BURNED = "caloriesBurned"
    ACTIVITY_TIME = "activityTime"
    WATER = "water"
    CALORIES_EATEN = "caloriesEaten"
    DISTANCE = "distance"
    HEART_RATE = "heartRate"
    SLEEP = "sleep"

    @classmethod
    def from_raw(cls, value: str) -> "StatType | None":
        try:
            return cls(value)
        except ValueError:
            return None

    @property
    def localization_key(self) -> str:
        return _STAT_KEYS[self]

    @property
    def unit(self) -> str:
        return _STAT_UNITS[self]

    @property
    def default_goal(self) -> str:
        return _STAT_GOALS[self]


_STAT_KEYS = {
    StatType.STEPS: "stats.steps",
    StatType.CALORIES_BURNED: "stats.calories",
    StatType.ACTIVITY_TIME: "stats.activity",
    StatType.WATER: "stats.water",
    StatType.CALORIES_EATEN: "stats.calories_eaten",
    StatType.DISTANCE: "stats.distance",
    StatType.HEART_RATE: "stats.heart_rate",
    StatType.SLEEP: "stats.sleep",
}

_STAT_UNITS = {
    StatType.STEPS: "",
    StatType.CALORIES_BURNED: "kcal",
    StatType.ACTIVITY_TIME: "min",
    StatType.WATER: "glasses",
    StatType.CALORIES_EATEN: "kcal",
    StatType.DISTANCE: "km",
    StatType.HEART_RATE: "bpm",
    StatType.SLEEP: "h",
}

_STAT_GOALS = {
    StatType.STEPS: "10,000",
    StatType.CALORIES_BURNED: "2,500",
    StatType.ACTIVITY_TIME: "60",
    StatType.WATER: "8",
    StatType.CALORIES_EATEN: "2,000",
    StatType.DISTANCE: "5.0",
    StatType.HEART_RATE: "70",
    StatType.SLEEP: "8",
}

DEFAULT_HOME_STATS = [
    StatType.STEPS,
    StatType.CALORIES_BURNED,
    StatType.ACTIVITY_TIME,
    StatType.WATER,
]


class WeightUnit(str, Enum):
    """Units a weight can be displayed in."""

    KILOGRAMS = "kg"
    POUNDS = "lbs"

    @property
    def abbreviation(self) -> str:
        return self.value


class AppLanguage(str, Enum):
    """Supported UI languages."""

    ENGLISH = "en"
    GERMAN = "de"

    @property
    def native_name(self) -> str:
        return "English" if self is AppLanguage.ENGLISH else "Deutsch"


def kg_to_lbs(kg: float) -> float:
    return kg * KG_TO_LBS


def lbs_to_kg(lbs: float) -> float:
    return lbs / KG_TO_LBS


def to_display(unit: WeightUnit, kg: float) -> float:
    """Convert a stored (kilogram) weight to the display unit."""
    if unit is WeightUnit.POUNDS:
        return kg_to_lbs(kg)
    return kg


def to_storage(unit: WeightUnit, value: float) -> float:
    """Convert a weight entered in the display unit back to kilograms."""
    if unit is WeightUnit.POUNDS:
        return lbs_to_kg(value)
    return value


def format_weight(unit: WeightUnit, kg: float) -> str:
    """Format a stored weight for display, e.g. '132.3 lbs'."""
    return f"{to_display(unit, kg):.1f} {unit.abbreviation}"
