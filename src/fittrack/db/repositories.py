"""Data access layer for fittrack.

Thin typed facades over the table gateways. Business rules live in the
models and in services; these classes only delegate.
"""

from __future__ import annotations

from datetime import datetime

from ..models.exercises import Exercise, MuscleGroup
from ..models.program import ExerciseSettings, WorkoutProgram
from .engine import Database
from .observe import SnapshotCallback, Subscription
from .store import ExerciseTable, ListQuery, ProgramTable


class ExerciseRepository:
    """Repository for the exercise library."""

    def __init__(self, db: Database):
        self.table = ExerciseTable(db)

    async def get_all(self) -> list[Exercise]:
        """All exercises sorted by name."""
        return await self.table.list(ListQuery(order_by="name"))

    async def get_by_id(self, exercise_id: str) -> Exercise | None:
        return await self.table.get(exercise_id)

    async def get_favorites(self) -> list[Exercise]:
        return await self.table.list(ListQuery(where={"is_favorite": True}))

    async def search(self, query: str) -> list[Exercise]:
        """Exercises whose name contains the query, ignoring case."""
        return await self.table.list(ListQuery(search=query))

    async def get_by_muscle_group(self, muscle_group: MuscleGroup) -> list[Exercise]:
        return await self.table.list(ListQuery(tag=muscle_group))

    async def list(self, query: ListQuery) -> list[Exercise]:
        return await self.table.list(query)

    async def insert(self, exercise: Exercise) -> None:
        await self.table.insert(exercise)

    async def insert_many(self, exercises: list[Exercise]) -> None:
        await self.table.insert_many(exercises)

    async def update(self, exercise: Exercise) -> None:
        await self.table.update(exercise)

    async def delete(self, exercise_id: str) -> bool:
        return await self.table.delete(exercise_id)

    async def toggle_favorite(self, exercise_id: str, is_favorite: bool) -> None:
        await self.table.set_favorite(exercise_id, is_favorite)

    async def count(self) -> int:
        return await self.table.count()

    async def observe_all(
        self, callback: SnapshotCallback, query: ListQuery | None = None
    ) -> Subscription:
        """Live view of exercises, sorted by name unless a query says otherwise."""
        return await self.table.observe(callback, query or ListQuery(order_by="name"))


class ProgramRepository:
    """Repository for workout programs."""

    def __init__(self, db: Database):
        self.table = ProgramTable(db)

    async def get_all(self) -> list[WorkoutProgram]:
        """All programs, most recently modified first."""
        return await self.table.list(
            ListQuery(order_by="last_modified_at", descending=True)
        )

    async def get_by_id(self, program_id: str) -> WorkoutProgram | None:
        return await self.table.get(program_id)

    async def list(self, query: ListQuery) -> list[WorkoutProgram]:
        return await self.table.list(query)

    async def insert(self, program: WorkoutProgram) -> None:
        await self.table.insert(program)

    async def update(self, program: WorkoutProgram) -> None:
        await self.table.update(program)

    async def delete(self, program_id: str) -> bool:
        return await self.table.delete(program_id)

    async def increment_completion_count(
        self, program_id: str, at: datetime | None = None
    ) -> WorkoutProgram:
        return await self.table.increment_completion(program_id, at)

    async def update_settings_entry(
        self, program_id: str, entry: ExerciseSettings
    ) -> None:
        await self.table.update_settings_entry(program_id, entry)

    async def programs_using(self, exercise_id: str) -> list[WorkoutProgram]:
        return await self.table.programs_using(exercise_id)

    async def count(self) -> int:
        return await self.table.count()

    async def observe_all(
        self, callback: SnapshotCallback, query: ListQuery | None = None
    ) -> Subscription:
        return await self.table.observe(
            callback, query or ListQuery(order_by="last_modified_at", descending=True)
        )
