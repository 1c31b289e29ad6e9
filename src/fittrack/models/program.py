"""Workout program data models."""

import json
import logging
from dataclasses import dataclass, field
from datetime import datetime

from ..errors import DeserializationFailure
from .exercises import new_id

logger = logging.getLogger(__name__)

DEFAULT_PRESET_ICON = "figure.strengthtraining.traditional"

PRESET_ICONS = [
    DEFAULT_PRESET_ICON,
    "figure.run",
    "bicycle",
    "figure.yoga",
    "figure.core.training",
    "dumbbell",
    "heart.fill",
    "bolt.heart",
    "figure.mixed.cardio",
    "figure.cooldown",
    "figure.walk",
    "figure.pool.swim",
    "figure.arms.open",
    "figure.climbing",
]


@dataclass
class ExerciseSettings:
    """Sets, reps, weight and rest for one exercise inside a program.

    Weight is always kilograms; unit conversion happens at display time.
    """

    exercise_id: str
    sets: int = 3
    reps: int = 10
    weight_kg: float = 0.0
    rest_seconds: int = 60
    notes: str = ""
    id: str = field(default_factory=new_id)

    def __post_init__(self):
        for name in ("sets", "reps", "rest_seconds"):
            if getattr(self, name) < 0:
                raise ValueError(f"{name} must be >= 0")
        if self.weight_kg < 0:
            raise ValueError("weight_kg must be >= 0")

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "id": self.id,
            "exercise_id": self.exercise_id,
            "sets": self.sets,
            "reps": self.reps,
            "weight_kg": self.weight_kg,
            "rest_seconds": self.rest_seconds,
            "notes": self.notes,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "ExerciseSettings":
        """Create from dictionary."""
        kwargs = {"id": data["id"]} if data.get("id") else {}
        return cls(
            exercise_id=data["exercise_id"],
            sets=int(data.get("sets", 3)),
            reps=int(data.get("reps", 10)),
            weight_kg=float(data.get("weight_kg", 0.0)),
            rest_seconds=int(data.get("rest_seconds", 60)),
            notes=data.get("notes", ""),
            **kwargs,
        )


def dump_settings(settings: list[ExerciseSettings]) -> str:
    """Serialize an ordered settings list to its JSON blob."""
    return json.dumps([s.to_dict() for s in settings])


def decode_settings(blob: str | bytes) -> list[ExerciseSettings]:
    """Decode a settings blob, raising DeserializationFailure if corrupt."""
    try:
        data = json.loads(blob)
        if not isinstance(data, list):
            raise TypeError("settings blob is not a list")
        return [ExerciseSettings.from_dict(item) for item in data]
    except (ValueError, TypeError, KeyError) as e:
        raise DeserializationFailure(f"Invalid exercise settings blob: {e}") from e


def load_settings(blob: str | bytes | None) -> list[ExerciseSettings]:
    """Decode a settings blob; missing or corrupt blobs give an empty list."""
    if not blob:
        return []
    try:
        return decode_settings(blob)
    except DeserializationFailure as e:
        logger.warning("%s; using defaults", e)
        return []


@dataclass(frozen=True)
class PresetIcon:
    name: str


@dataclass(frozen=True)
class CustomImage:
    data: bytes


@dataclass
class WorkoutProgram:
    """A named, ordered collection of exercises with per-exercise settings."""

    name: str
    description: str = ""
    image_data: bytes | None = None
    use_preset_icon: bool = True
    preset_icon_name: str | None = DEFAULT_PRESET_ICON
    exercise_ids: list[str] = field(default_factory=list)
    exercise_settings: list[ExerciseSettings] = field(default_factory=list)
    duration_minutes: int | None = None
    created_at: datetime = field(default_factory=datetime.now)
    last_modified_at: datetime = field(default_factory=datetime.now)
    completion_count: int = 0
    last_completed_at: datetime | None = None
    id: str = field(default_factory=new_id)

    def __post_init__(self):
        if self.completion_count < 0:
            raise ValueError("completion_count must be >= 0")

    @property
    def icon(self) -> PresetIcon | CustomImage | None:
        """The active visual representation."""
        if self.use_preset_icon:
            return PresetIcon(self.preset_icon_name or DEFAULT_PRESET_ICON)
        if self.image_data is not None:
            return CustomImage(self.image_data)
        return None

    def touch(self, at: datetime | None = None) -> None:
        """Refresh last_modified_at without moving it backwards."""
        at = at or datetime.now()
        self.last_modified_at = max(at, self.last_modified_at)

    def rename(self, name: str) -> None:
        if not name or not name.strip():
            raise ValueError("Program name must not be empty")
        self.name = name
        self.touch()

    def set_description(self, description: str) -> None:
        self.description = description
        self.touch()

    def set_preset_icon(self, icon_name: str) -> None:
        self.use_preset_icon = True
        self.preset_icon_name = icon_name
        self.touch()

    def set_custom_image(self, data: bytes) -> None:
        """Switch to a custom image; the preset name is kept but inactive."""
        self.use_preset_icon = False
        self.image_data = data
        self.touch()

    def set_exercises(self, settings: list[ExerciseSettings]) -> None:
        """Replace the exercise list and its settings in one edit."""
        self.exercise_settings = list(settings)
        self.exercise_ids = [s.exercise_id for s in settings]
        self.touch()

    def mark_completed(self, at: datetime | None = None) -> None:
        """Record one completion. Does not count as a structural edit."""
        self.completion_count += 1
        self.last_completed_at = at or datetime.now()

    def effective_settings(self) -> list[ExerciseSettings]:
        """Saved settings, or defaults for each exercise when none exist."""
        if self.exercise_settings:
            return list(self.exercise_settings)
        return [ExerciseSettings(exercise_id=eid) for eid in self.exercise_ids]

    def to_dict(self) -> dict:
        """Convert to dictionary for export.

        Custom image bytes are not included; only whether one is present.
        """
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "use_preset_icon": self.use_preset_icon,
            "preset_icon_name": self.preset_icon_name,
            "has_custom_image": self.image_data is not None,
            "exercise_ids": list(self.exercise_ids),
            "exercise_settings": [s.to_dict() for s in self.exercise_settings],
            "duration_minutes": self.duration_minutes,
            "created_at": self.created_at.isoformat(),
            "last_modified_at": self.last_modified_at.isoformat(),
            "completion_count": self.completion_count,
            "last_completed_at": (
                self.last_completed_at.isoformat() if self.last_completed_at else None
            ),
        }

    def get_summary(self) -> str:
        """Generate a short text summary of the program."""
        summary = f"Program: {self.name}\n"
        if self.description:
            summary += f"Description: {self.description}\n"
        if self.duration_minutes:
            summary += f"Duration: {self.duration_minutes} min\n"
        summary += f"Exercises: {len(self.exercise_ids)}\n"
        summary += f"Completed: {self.completion_count} time(s)"
        if self.last_completed_at:
            summary += f", last on {self.last_completed_at.strftime('%Y-%m-%d')}"
        return summary
