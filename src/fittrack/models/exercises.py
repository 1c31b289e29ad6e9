"""Exercise definitions and metadata."""

import json
import logging
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import TYPE_CHECKING
from uuid import uuid4

if TYPE_CHECKING:
    from ..localization import Localizer

logger = logging.getLogger(__name__)


class MuscleGroup(str, Enum):
    """Muscle groups used to tag exercises."""

    CHEST = "chest"
    BACK = "back"
    LEGS = "legs"
    SHOULDERS = "shoulders"
    ARMS = "arms"
    CORE = "core"
    CARDIO = "cardio"
    FULL_BODY = "full_body"

    @property
    def localization_key(self) -> str:
        return f"muscle.{self.value}"

    @classmethod
    def from_raw(cls, value: str) -> "MuscleGroup | None":
        """Return the muscle group for a raw tag, or None if unknown."""
        try:
            return cls(value)
        except ValueError:
            return None


def parse_muscle_groups(raw: str | list | None) -> list[MuscleGroup]:
    """Decode stored muscle group tags.

    Accepts a JSON string or an already decoded list. Unknown tags are
    dropped; a corrupt payload yields an empty list.
    """
    if raw is None:
        return []
    if isinstance(raw, str):
        try:
            raw = json.loads(raw)
        except json.JSONDecodeError:
            logger.warning("Dropping corrupt muscle group payload: %r", raw)
            return []
    if not isinstance(raw, list):
        return []

    groups = []
    for value in raw:
        group = MuscleGroup.from_raw(value) if isinstance(value, str) else None
        if group is not None:
            groups.append(group)
    return groups


def new_id() -> str:
    """Generate an opaque record identifier."""
    return str(uuid4())


@dataclass
class Exercise:
    """An exercise in the library, either preset or user-authored."""

    name: str
    muscle_groups: list[MuscleGroup]
    description: str = ""
    instructions: str = ""
    is_favorite: bool = False
    placeholder_image_url: str | None = None
    placeholder_video_url: str | None = None
    is_custom: bool = False
    created_at: datetime = field(default_factory=datetime.now)
    id: str = field(default_factory=new_id)

    def __post_init__(self):
        if not self.name or not self.name.strip():
            raise ValueError("Exercise name must not be empty")

    def targets(self, group: MuscleGroup) -> bool:
        return group in self.muscle_groups

    def display_name(self, localizer: "Localizer | None" = None) -> str:
        """Name as shown to the user.

        Custom exercises keep their name verbatim. Preset exercises are
        looked up by localization key and fall back to the stored name.
        """
        if self.is_custom or localizer is None:
            return self.name

        from ..localization import exercise_key

        key = exercise_key(self.name)
        if key is None:
            return self.name
        localized = localizer.lookup(key)
        return self.name if localized == key else localized

    def to_dict(self) -> dict:
        """Convert to dictionary for storage."""
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "instructions": self.instructions,
            "muscle_groups": [mg.value for mg in self.muscle_groups],
            "is_favorite": self.is_favorite,
            "placeholder_image_url": self.placeholder_image_url,
            "placeholder_video_url": self.placeholder_video_url,
            "is_custom": self.is_custom,
            "created_at": self.created_at.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Exercise":
        """Create from dictionary."""
        kwargs = {}
        if data.get("id"):
            kwargs["id"] = data["id"]
        if data.get("created_at"):
            kwargs["created_at"] = datetime.fromisoformat(data["created_at"])
        return cls(
            name=data["name"],
            muscle_groups=parse_muscle_groups(data.get("muscle_groups", [])),
            description=data.get("description", ""),
            instructions=data.get("instructions", ""),
            is_favorite=data.get("is_favorite", False),
            placeholder_image_url=data.get("placeholder_image_url"),
            placeholder_video_url=data.get("placeholder_video_url"),
            is_custom=data.get("is_custom", False),
            **kwargs,
        )
