"""String lookup for display names.

Lookups never fail: an unknown key comes back unchanged, and callers treat
that as "not translated".
"""

import re

from .models.preferences import AppLanguage

CATALOG: dict[str, dict[str, str]] = {
    "en": {
        "muscle.chest": "Chest",
        "muscle.back": "Back",
        "muscle.legs": "Legs",
        "muscle.shoulders": "Shoulders",
        "muscle.arms": "Arms",
        "muscle.core": "Core",
        "muscle.cardio": "Cardio",
        "muscle.full_body": "Full Body",
        "stats.steps": "Steps",
        "stats.calories": "Calories",
        "stats.activity": "Activity",
        "stats.water": "Water",
        "stats.calories_eaten": "Calories Eaten",
        "stats.distance": "Distance",
        "stats.heart_rate": "Heart Rate",
        "stats.sleep": "Sleep",
        "settings.weight_unit_kg": "Kilograms (kg)",
        "settings.weight_unit_lbs": "Pounds (lbs)",
        "exercise.name.bench_press": "Bench Press",
        "exercise.name.push_ups": "Push-ups",
        "exercise.name.dumbbell_flyes": "Dumbbell Flyes",
        "exercise.name.incline_bench_press": "Incline Bench Press",
        "exercise.name.deadlift": "Deadlift",
        "exercise.name.pull_ups": "Pull-ups",
        "exercise.name.bent_over_row": "Bent Over Row",
        "exercise.name.lat_pulldown": "Lat Pulldown",
        "exercise.name.squat": "Squat",
        "exercise.name.lunges": "Lunges",
        "exercise.name.leg_press": "Leg Press",
        "exercise.name.romanian_deadlift": "Romanian Deadlift",
        "exercise.name.overhead_press": "Overhead Press",
        "exercise.name.lateral_raise": "Lateral Raise",
        "exercise.name.face_pulls": "Face Pulls",
        "exercise.name.barbell_curl": "Barbell Curl",
        "exercise.name.tricep_dips": "Tricep Dips",
        "exercise.name.hammer_curls": "Hammer Curls",
        "exercise.name.tricep_pushdown": "Tricep Pushdown",
        "exercise.name.plank": "Plank",
        "exercise.name.russian_twists": "Russian Twists",
        "exercise.name.hanging_leg_raises": "Hanging Leg Raises",
        "exercise.name.cable_crunches": "Cable Crunches",
        "exercise.name.running": "Running",
        "exercise.name.cycling": "Cycling",
        "exercise.name.jump_rope": "Jump Rope",
        "exercise.name.burpees": "Burpees",
        "exercise.name.clean_and_press": "Clean and Press",
        "exercise.name.kettlebell_swings": "Kettlebell Swings",
        "exercise.name.turkish_get_up": "Turkish Get-Up",
    },
    "de": {
        "muscle.chest": "Brust",
        "muscle.back": "Rücken",
        "muscle.legs": "Beine",
        "muscle.shoulders": "Schultern",
        "muscle.arms": "Arme",
        "muscle.core": "Rumpf",
        "muscle.cardio": "Ausdauer",
        "muscle.full_body": "Ganzkörper",
        "stats.steps": "Schritte",
        "stats.calories": "Kalorien",
        "stats.activity": "Aktivität",
        "stats.water": "Wasser",
        "stats.calories_eaten": "Aufgenommene Kalorien",
        "stats.distance": "Distanz",
        "stats.heart_rate": "Herzfrequenz",
        "stats.sleep": "Schlaf",
        "settings.weight_unit_kg": "Kilogramm (kg)",
        "settings.weight_unit_lbs": "Pfund (lbs)",
        "exercise.name.bench_press": "Bankdrücken",
        "exercise.name.push_ups": "Liegestütze",
        "exercise.name.dumbbell_flyes": "Kurzhantel-Fliegende",
        "exercise.name.incline_bench_press": "Schrägbankdrücken",
        "exercise.name.deadlift": "Kreuzheben",
        "exercise.name.pull_ups": "Klimmzüge",
        "exercise.name.bent_over_row": "Vorgebeugtes Rudern",
        "exercise.name.lat_pulldown": "Latzug",
        "exercise.name.squat": "Kniebeuge",
        "exercise.name.lunges": "Ausfallschritte",
        "exercise.name.leg_press": "Beinpresse",
        "exercise.name.romanian_deadlift": "Rumänisches Kreuzheben",
        "exercise.name.overhead_press": "Schulterdrücken",
        "exercise.name.lateral_raise": "Seitheben",
        "exercise.name.face_pulls": "Face Pulls",
        "exercise.name.barbell_curl": "Langhantel-Curl",
        "exercise.name.tricep_dips": "Trizeps-Dips",
        "exercise.name.hammer_curls": "Hammer-Curls",
        "exercise.name.tricep_pushdown": "Trizepsdrücken am Kabel",
        "exercise.name.plank": "Unterarmstütz",
        "exercise.name.russian_twists": "Russian Twists",
        "exercise.name.hanging_leg_raises": "Hängendes Beinheben",
        "exercise.name.cable_crunches": "Kabel-Crunches",
        "exercise.name.running": "Laufen",
        "exercise.name.cycling": "Radfahren",
        "exercise.name.jump_rope": "Seilspringen",
        "exercise.name.burpees": "Burpees",
        "exercise.name.clean_and_press": "Umsetzen und Drücken",
        "exercise.name.kettlebell_swings": "Kettlebell-Schwünge",
        "exercise.name.turkish_get_up": "Turkish Get-Up",
    },
}


def _slug(name: str) -> str:
    return re.sub(r"[^a-z0-9]+", "_", name.lower()).strip("_")


def exercise_key(name: str) -> str | None:
    """Localization key for a preset exercise name, or None."""
    key = f"exercise.name.{_slug(name)}"
    return key if key in CATALOG["en"] else None


class Localizer:
    """Looks up display strings for one language."""

    def __init__(
        self,
        language: AppLanguage | str = AppLanguage.GERMAN,
        catalog: dict[str, dict[str, str]] | None = None,
    ):
        self.language = AppLanguage(language)
        self.catalog = catalog if catalog is not None else CATALOG

    def lookup(self, key: str) -> str:
        """Translated string, or the key itself when there is none."""
        return self.catalog.get(self.language.value, {}).get(key, key)
