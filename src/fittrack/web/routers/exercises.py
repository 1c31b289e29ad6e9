"""Exercise library routes."""

from fastapi import APIRouter, Depends, HTTPException

from ...db import ExerciseRepository, ListQuery, ProgramRepository
from ...localization import Localizer
from ...models.exercises import Exercise, MuscleGroup
from ..deps import get_exercise_repo, get_localizer, get_program_repo
from ..schemas import ExerciseCreate, ExerciseUpdate, FavoriteUpdate

router = APIRouter(prefix="/exercises", tags=["exercises"])


def _exercise_json(exercise: Exercise, localizer: Localizer) -> dict:
    data = exercise.to_dict()
    data["display_name"] = exercise.display_name(localizer)
    return data


async def _get_or_404(repo: ExerciseRepository, exercise_id: str) -> Exercise:
    exercise = await repo.get_by_id(exercise_id)
    if not exercise:
        raise HTTPException(status_code=404, detail="Exercise not found")
    return exercise


@router.get("")
async def list_exercises(
    search: str | None = None,
    muscle_group: MuscleGroup | None = None,
    favorites: bool = False,
    custom: bool | None = None,
    repo: ExerciseRepository = Depends(get_exercise_repo),
    localizer: Localizer = Depends(get_localizer),
):
    """List exercises sorted by name, with optional filters."""
    where = {}
    if favorites:
        where["is_favorite"] = True
    if custom is not None:
        where["is_custom"] = custom
    query = ListQuery(search=search, where=where, tag=muscle_group, order_by="name")
    return [_exercise_json(e, localizer) for e in await repo.list(query)]


@router.post("", status_code=201)
async def create_exercise(
    payload: ExerciseCreate,
    repo: ExerciseRepository = Depends(get_exercise_repo),
    localizer: Localizer = Depends(get_localizer),
):
    """Create a custom exercise."""
    exercise = Exercise(
        name=payload.name.strip(),
        muscle_groups=list(dict.fromkeys(payload.muscle_groups)),
        description=payload.description,
        instructions=payload.instructions,
        is_custom=True,
    )
    await repo.insert(exercise)
    return _exercise_json(exercise, localizer)


@router.get("/{exercise_id}")
async def get_exercise(
    exercise_id: str,
    repo: ExerciseRepository = Depends(get_exercise_repo),
    localizer: Localizer = Depends(get_localizer),
):
    return _exercise_json(await _get_or_404(repo, exercise_id), localizer)


@router.patch("/{exercise_id}")
async def update_exercise(
    exercise_id: str,
    payload: ExerciseUpdate,
    repo: ExerciseRepository = Depends(get_exercise_repo),
    localizer: Localizer = Depends(get_localizer),
):
    """Update an exercise (partial)."""
    exercise = await _get_or_404(repo, exercise_id)
    changes = payload.model_dump(exclude_unset=True, exclude_none=True)
    if "name" in changes:
        name = changes["name"].strip()
        if not name:
            raise ValueError("Exercise name must not be empty")
        exercise.name = name
    if "muscle_groups" in changes:
        exercise.muscle_groups = list(dict.fromkeys(payload.muscle_groups))
    if "description" in changes:
        exercise.description = changes["description"]
    if "instructions" in changes:
        exercise.instructions = changes["instructions"]
    await repo.update(exercise)
    return _exercise_json(exercise, localizer)


@router.put("/{exercise_id}/favorite")
async def set_favorite(
    exercise_id: str,
    payload: FavoriteUpdate,
    repo: ExerciseRepository = Depends(get_exercise_repo),
):
    await repo.toggle_favorite(exercise_id, payload.is_favorite)
    return {"id": exercise_id, "is_favorite": payload.is_favorite}


@router.get("/{exercise_id}/programs")
async def exercise_programs(
    exercise_id: str,
    repo: ProgramRepository = Depends(get_program_repo),
):
    """Programs that include this exercise."""
    return [p.to_dict() for p in await repo.programs_using(exercise_id)]


@router.delete("/{exercise_id}")
async def delete_exercise(
    exercise_id: str,
    repo: ExerciseRepository = Depends(get_exercise_repo),
):
    """Delete an exercise. Deleting a missing exercise is not an error."""
    deleted = await repo.delete(exercise_id)
    return {"status": "deleted" if deleted else "absent"}
