"""Creating and editing workout programs."""

import logging
from dataclasses import replace
from datetime import datetime

from ..db.repositories import ExerciseRepository, ProgramRepository
from ..models.exercises import Exercise
from ..models.preferences import WeightUnit, to_storage
from ..models.program import DEFAULT_PRESET_ICON, ExerciseSettings, WorkoutProgram

logger = logging.getLogger(__name__)


async def create_program(
    repo: ProgramRepository,
    name: str,
    description: str = "",
    preset_icon: str | None = None,
    image_data: bytes | None = None,
    duration_minutes: int | None = None,
    exercise_ids: list[str] | None = None,
) -> WorkoutProgram:
    """Create and store a new program.

    A blank name is rejected before the store is touched. Supplying
    image_data makes the custom image the active icon.
    """
    if not name or not name.strip():
        raise ValueError("Program name is required")

    use_preset_icon = image_data is None
    now = datetime.now()
    settings = [ExerciseSettings(exercise_id=eid) for eid in exercise_ids or []]
    program = WorkoutProgram(
        name=name.strip(),
        description=description,
        image_data=image_data,
        use_preset_icon=use_preset_icon,
        preset_icon_name=(preset_icon or DEFAULT_PRESET_ICON) if use_preset_icon else None,
        exercise_ids=[s.exercise_id for s in settings],
        exercise_settings=settings,
        duration_minutes=duration_minutes,
        created_at=now,
        last_modified_at=now,
    )
    await repo.insert(program)
    logger.info("Created program %s (%s)", program.name, program.id)
    return program


class ProgramEditor:
    """Working copy of a program's name and exercise settings.

    Nothing is written until save(), which stores the whole settings list
    at once.
    """

    def __init__(self, program: WorkoutProgram):
        self.program = program
        self.name = program.name
        self.settings = [replace(s) for s in program.effective_settings()]

    @property
    def can_save(self) -> bool:
        return bool(self.name and self.name.strip())

    @property
    def exercise_ids(self) -> list[str]:
        return [s.exercise_id for s in self.settings]

    def rename(self, name: str) -> None:
        self.name = name

    def entry(self, entry_id: str) -> ExerciseSettings:
        for setting in self.settings:
            if setting.id == entry_id:
                return setting
        raise KeyError(entry_id)

    def entry_for_exercise(self, exercise_id: str) -> ExerciseSettings | None:
        """First settings entry for an exercise, if it is in the program."""
        for setting in self.settings:
            if setting.exercise_id == exercise_id:
                return setting
        return None

    def add_exercise(self, exercise_id: str, **values) -> ExerciseSettings:
        """Append an exercise with default (or given) settings."""
        entry = ExerciseSettings(exercise_id=exercise_id, **values)
        self.settings.append(entry)
        return entry

    def update_entry(self, entry_id: str, **changes) -> ExerciseSettings:
        """Change fields of one entry; invalid values raise ValueError."""
        current = self.entry(entry_id)
        updated = replace(current, **changes)
        self.settings[self.settings.index(current)] = updated
        return updated

    def set_weight(self, entry_id: str, value: float, unit: WeightUnit) -> ExerciseSettings:
        """Set a weight entered in the display unit."""
        return self.update_entry(entry_id, weight_kg=to_storage(unit, value))

    def remove_entry(self, entry_id: str) -> None:
        self.settings.remove(self.entry(entry_id))

    def remove_exercise(self, exercise_id: str) -> int:
        """Remove every entry for an exercise. Returns how many were removed."""
        before = len(self.settings)
        self.settings = [s for s in self.settings if s.exercise_id != exercise_id]
        return before - len(self.settings)

    def clear(self) -> None:
        self.settings = []

    def move(self, source: int, destination: int) -> None:
        entry = self.settings.pop(source)
        destination = max(0, min(destination, len(self.settings)))
        self.settings.insert(destination, entry)

    async def save(self, repo: ProgramRepository) -> WorkoutProgram:
        """Write the name and full settings list back to the store."""
        if not self.can_save:
            raise ValueError("Program name is required")

        self.program.name = self.name.strip()
        self.program.set_exercises(self.settings)
        await repo.update(self.program)
        return self.program


async def resolve_exercises(
    program: WorkoutProgram, exercise_repo: ExerciseRepository
) -> list[tuple[Exercise, ExerciseSettings]]:
    """Pair each program entry with its exercise, in program order.

    Entries whose exercise no longer exists are left out.
    """
    library = {e.id: e for e in await exercise_repo.get_all()}
    resolved = []
    for setting in program.effective_settings():
        exercise = library.get(setting.exercise_id)
        if exercise is None:
            logger.debug(
                "Program %s references missing exercise %s",
                program.id,
                setting.exercise_id,
            )
            continue
        resolved.append((exercise, setting))
    return resolved


async def complete_program(
    repo: ProgramRepository, program_id: str, at: datetime | None = None
) -> WorkoutProgram:
    """Record that a program was completed once."""
    return await repo.increment_completion_count(program_id, at)
