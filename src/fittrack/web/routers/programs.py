"""Workout program routes."""

from fastapi import APIRouter, Depends, HTTPException

from ...db import ExerciseRepository, ProgramRepository
from ...localization import Localizer
from ...models.preferences import to_display
from ...models.program import PRESET_ICONS, WorkoutProgram
from ...preferences import Preferences
from ...services import ProgramEditor, complete_program, create_program, resolve_exercises
from ..deps import get_exercise_repo, get_localizer, get_prefs, get_program_repo
from ..schemas import ProgramCreate, ProgramUpdate, SettingsEntry, SettingsEntryUpdate

router = APIRouter(prefix="/programs", tags=["programs"])


async def _get_or_404(repo: ProgramRepository, program_id: str) -> WorkoutProgram:
    program = await repo.get_by_id(program_id)
    if not program:
        raise HTTPException(status_code=404, detail="Program not found")
    return program


def _check_icon(name: str | None) -> None:
    if name is not None and name not in PRESET_ICONS:
        raise ValueError(f"Unknown preset icon {name!r}")


async def _program_json(
    program: WorkoutProgram,
    exercise_repo: ExerciseRepository,
    prefs: Preferences,
    localizer: Localizer,
) -> dict:
    """Program with its exercises resolved and weights in the preferred unit."""
    unit = await prefs.weight_unit.selected_unit()
    data = program.to_dict()
    data["weight_unit"] = unit.value
    data["exercises"] = [
        {
            **setting.to_dict(),
            "name": exercise.display_name(localizer),
            "muscle_groups": [g.value for g in exercise.muscle_groups],
            "weight": round(to_display(unit, setting.weight_kg), 2),
        }
        for exercise, setting in await resolve_exercises(program, exercise_repo)
    ]
    return data


@router.get("")
async def list_programs(repo: ProgramRepository = Depends(get_program_repo)):
    """List programs, most recently modified first."""
    return [p.to_dict() for p in await repo.get_all()]


@router.post("", status_code=201)
async def new_program(
    payload: ProgramCreate,
    repo: ProgramRepository = Depends(get_program_repo),
    exercise_repo: ExerciseRepository = Depends(get_exercise_repo),
    prefs: Preferences = Depends(get_prefs),
    localizer: Localizer = Depends(get_localizer),
):
    _check_icon(payload.preset_icon_name)
    program = await create_program(
        repo,
        payload.name,
        description=payload.description,
        preset_icon=payload.preset_icon_name,
        duration_minutes=payload.duration_minutes,
        exercise_ids=payload.exercise_ids,
    )
    return await _program_json(program, exercise_repo, prefs, localizer)


@router.get("/{program_id}")
async def get_program(
    program_id: str,
    repo: ProgramRepository = Depends(get_program_repo),
    exercise_repo: ExerciseRepository = Depends(get_exercise_repo),
    prefs: Preferences = Depends(get_prefs),
    localizer: Localizer = Depends(get_localizer),
):
    program = await _get_or_404(repo, program_id)
    return await _program_json(program, exercise_repo, prefs, localizer)


@router.patch("/{program_id}")
async def update_program(
    program_id: str,
    payload: ProgramUpdate,
    repo: ProgramRepository = Depends(get_program_repo),
    exercise_repo: ExerciseRepository = Depends(get_exercise_repo),
    prefs: Preferences = Depends(get_prefs),
    localizer: Localizer = Depends(get_localizer),
):
    """Update name, description, icon or duration."""
    program = await _get_or_404(repo, program_id)
    changes = payload.model_dump(exclude_unset=True)
    if "name" in changes:
        program.rename((changes["name"] or "").strip())
    if "description" in changes:
        program.set_description(changes["description"] or "")
    if changes.get("preset_icon_name"):
        _check_icon(changes["preset_icon_name"])
        program.set_preset_icon(changes["preset_icon_name"])
    if "duration_minutes" in changes:
        program.duration_minutes = changes["duration_minutes"]
        program.touch()
    await repo.update(program)
    return await _program_json(program, exercise_repo, prefs, localizer)


@router.put("/{program_id}/exercises")
async def replace_exercises(
    program_id: str,
    entries: list[SettingsEntry],
    repo: ProgramRepository = Depends(get_program_repo),
    exercise_repo: ExerciseRepository = Depends(get_exercise_repo),
    prefs: Preferences = Depends(get_prefs),
    localizer: Localizer = Depends(get_localizer),
):
    """Replace the whole exercise list, in the given order."""
    program = await _get_or_404(repo, program_id)
    unit = await prefs.weight_unit.selected_unit()
    editor = ProgramEditor(program)
    editor.clear()
    for entry in entries:
        added = editor.add_exercise(
            entry.exercise_id,
            sets=entry.sets,
            reps=entry.reps,
            rest_seconds=entry.rest_seconds,
            notes=entry.notes,
        )
        editor.set_weight(added.id, entry.weight, unit)
    await editor.save(repo)
    return await _program_json(program, exercise_repo, prefs, localizer)


@router.post("/{program_id}/exercises", status_code=201)
async def add_exercise(
    program_id: str,
    entry: SettingsEntry,
    repo: ProgramRepository = Depends(get_program_repo),
    exercise_repo: ExerciseRepository = Depends(get_exercise_repo),
    prefs: Preferences = Depends(get_prefs),
    localizer: Localizer = Depends(get_localizer),
):
    """Append an exercise to the program."""
    program = await _get_or_404(repo, program_id)
    if not await exercise_repo.get_by_id(entry.exercise_id):
        raise HTTPException(status_code=404, detail="Exercise not found")

    unit = await prefs.weight_unit.selected_unit()
    editor = ProgramEditor(program)
    added = editor.add_exercise(
        entry.exercise_id,
        sets=entry.sets,
        reps=entry.reps,
        rest_seconds=entry.rest_seconds,
        notes=entry.notes,
    )
    editor.set_weight(added.id, entry.weight, unit)
    await editor.save(repo)
    return await _program_json(program, exercise_repo, prefs, localizer)


@router.patch("/{program_id}/exercises/{entry_id}")
async def update_exercise_entry(
    program_id: str,
    entry_id: str,
    payload: SettingsEntryUpdate,
    repo: ProgramRepository = Depends(get_program_repo),
    exercise_repo: ExerciseRepository = Depends(get_exercise_repo),
    prefs: Preferences = Depends(get_prefs),
    localizer: Localizer = Depends(get_localizer),
):
    """Change one exercise's settings without rewriting the others."""
    program = await _get_or_404(repo, program_id)
    editor = ProgramEditor(program)
    try:
        editor.entry(entry_id)
    except KeyError:
        raise HTTPException(status_code=404, detail="Exercise entry not found")

    changes = payload.model_dump(exclude_unset=True, exclude_none=True)
    weight = changes.pop("weight", None)
    if weight is not None:
        changes["weight_kg"] = await prefs.weight_unit.to_storage_value(weight)
    updated = editor.update_entry(entry_id, **changes)

    await repo.update_settings_entry(program_id, updated)
    program = await _get_or_404(repo, program_id)
    return await _program_json(program, exercise_repo, prefs, localizer)


@router.delete("/{program_id}/exercises/{exercise_id}")
async def remove_exercise(
    program_id: str,
    exercise_id: str,
    repo: ProgramRepository = Depends(get_program_repo),
    exercise_repo: ExerciseRepository = Depends(get_exercise_repo),
    prefs: Preferences = Depends(get_prefs),
    localizer: Localizer = Depends(get_localizer),
):
    """Remove every entry for an exercise from the program."""
    program = await _get_or_404(repo, program_id)
    editor = ProgramEditor(program)
    if editor.remove_exercise(exercise_id):
        await editor.save(repo)
    return await _program_json(program, exercise_repo, prefs, localizer)


@router.post("/{program_id}/complete")
async def complete(program_id: str, repo: ProgramRepository = Depends(get_program_repo)):
    """Record one completed workout."""
    program = await complete_program(repo, program_id)
    return program.to_dict()


@router.delete("/{program_id}")
async def delete_program(program_id: str, repo: ProgramRepository = Depends(get_program_repo)):
    """Delete a program and its exercise settings."""
    deleted = await repo.delete(program_id)
    return {"status": "deleted" if deleted else "absent"}
