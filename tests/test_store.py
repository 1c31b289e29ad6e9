"""Tests for the local store and repositories."""

import asyncio
from datetime import datetime, timedelta

import aiosqlite
import pytest

from fittrack.db import Database, ExerciseRepository, ListQuery, ProgramRepository
from fittrack.errors import ConstraintViolation, NotFound, StorageUnavailable
from fittrack.models.exercises import Exercise, MuscleGroup
from fittrack.models.program import (
    ExerciseSettings,
    WorkoutProgram,
    dump_settings,
    load_settings,
)


class TestExerciseCrud:
    """Tests for exercise insert/get/update/delete."""

    @pytest.mark.asyncio
    async def test_insert_then_get(self, exercise_repo, squat):
        await exercise_repo.insert(squat)
        assert await exercise_repo.get_by_id(squat.id) == squat

    @pytest.mark.asyncio
    async def test_get_missing_returns_none(self, exercise_repo):
        assert await exercise_repo.get_by_id("nope") is None

    @pytest.mark.asyncio
    async def test_duplicate_id_is_constraint_violation(self, exercise_repo, squat):
        await exercise_repo.insert(squat)
        with pytest.raises(ConstraintViolation):
            await exercise_repo.insert(squat)
        assert await exercise_repo.count() == 1

    @pytest.mark.asyncio
    async def test_insert_many_is_atomic(self, exercise_repo, squat, lunges):
        clash = Exercise(name="Clash", muscle_groups=[], id=squat.id)
        with pytest.raises(ConstraintViolation):
            await exercise_repo.insert_many([squat, lunges, clash])
        assert await exercise_repo.count() == 0

    @pytest.mark.asyncio
    async def test_update_replaces_record(self, exercise_repo, squat):
        await exercise_repo.insert(squat)
        squat.description = "Back squat"
        squat.muscle_groups = [MuscleGroup.LEGS]
        await exercise_repo.update(squat)

        stored = await exercise_repo.get_by_id(squat.id)
        assert stored.description == "Back squat"
        assert stored.muscle_groups == [MuscleGroup.LEGS]

    @pytest.mark.asyncio
    async def test_update_missing_raises_not_found(self, exercise_repo, squat):
        with pytest.raises(NotFound) as exc_info:
            await exercise_repo.update(squat)
        assert exc_info.value.record_id == squat.id

    @pytest.mark.asyncio
    async def test_delete_missing_is_tolerated(self, exercise_repo, squat):
        await exercise_repo.insert(squat)
        assert await exercise_repo.delete(squat.id) is True
        assert await exercise_repo.delete(squat.id) is False
        assert await exercise_repo.get_by_id(squat.id) is None

    @pytest.mark.asyncio
    async def test_toggle_favorite(self, exercise_repo, squat):
        await exercise_repo.insert(squat)
        await exercise_repo.toggle_favorite(squat.id, True)

        assert (await exercise_repo.get_by_id(squat.id)).is_favorite
        assert [e.id for e in await exercise_repo.get_favorites()] == [squat.id]

    @pytest.mark.asyncio
    async def test_toggle_favorite_missing(self, exercise_repo):
        with pytest.raises(NotFound):
            await exercise_repo.toggle_favorite("nope", True)


class TestExerciseQueries:
    """Tests for filtering and sorting."""

    @pytest.fixture
    def library(self):
        return [
            Exercise(name="squat", muscle_groups=[MuscleGroup.LEGS]),
            Exercise(name="Bench Press", muscle_groups=[MuscleGroup.CHEST, MuscleGroup.ARMS]),
            Exercise(name="Push-ups", muscle_groups=[MuscleGroup.CHEST], is_favorite=True),
            Exercise(name="My 100% Row", muscle_groups=[MuscleGroup.BACK], is_custom=True),
        ]

    @pytest.mark.asyncio
    async def test_sorted_by_name_ignoring_case(self, exercise_repo, library):
        await exercise_repo.insert_many(library)
        names = [e.name for e in await exercise_repo.get_all()]
        assert names == ["Bench Press", "My 100% Row", "Push-ups", "squat"]

    @pytest.mark.asyncio
    async def test_search_is_case_insensitive(self, exercise_repo, library):
        await exercise_repo.insert_many(library)
        assert [e.name for e in await exercise_repo.search("PRESS")] == ["Bench Press"]

    @pytest.mark.asyncio
    async def test_search_treats_wildcards_literally(self, exercise_repo, library):
        await exercise_repo.insert_many(library)
        assert [e.name for e in await exercise_repo.search("100%")] == ["My 100% Row"]
        assert await exercise_repo.search("_") == []

    @pytest.mark.asyncio
    async def test_search_folds_non_ascii_case(self, exercise_repo):
        await exercise_repo.insert(Exercise(name="Überzug", muscle_groups=[MuscleGroup.CHEST]))
        assert [e.name for e in await exercise_repo.search("überzug")] == ["Überzug"]
        assert [e.name for e in await exercise_repo.search("ÜBER")] == ["Überzug"]

    @pytest.mark.asyncio
    async def test_tag_underscore_is_literal(self, db, exercise_repo):
        async with db.transaction() as conn:
            await conn.execute(
                "INSERT INTO exercises (id, name, muscle_groups, created_at) VALUES (?, ?, ?, ?)",
                ("odd", "Odd", '["fullxbody"]', "2024-01-01T00:00:00"),
            )
        burpees = Exercise(name="Burpees", muscle_groups=[MuscleGroup.FULL_BODY])
        await exercise_repo.insert(burpees)

        found = await exercise_repo.list(ListQuery(tag=MuscleGroup.FULL_BODY))
        assert [e.id for e in found] == [burpees.id]

    @pytest.mark.asyncio
    async def test_by_muscle_group(self, exercise_repo, library):
        await exercise_repo.insert_many(library)
        chest = await exercise_repo.get_by_muscle_group(MuscleGroup.CHEST)
        assert [e.name for e in chest] == ["Bench Press", "Push-ups"]

    @pytest.mark.asyncio
    async def test_combined_filters(self, exercise_repo, library):
        await exercise_repo.insert_many(library)
        query = ListQuery(where={"is_favorite": True}, tag=MuscleGroup.CHEST)
        assert [e.name for e in await exercise_repo.list(query)] == ["Push-ups"]

    @pytest.mark.asyncio
    async def test_descending_order(self, exercise_repo, library):
        await exercise_repo.insert_many(library)
        query = ListQuery(order_by="name", descending=True)
        assert [e.name for e in await exercise_repo.list(query)][0] == "squat"

    @pytest.mark.asyncio
    async def test_unknown_filter_column(self, exercise_repo):
        with pytest.raises(ValueError):
            await exercise_repo.list(ListQuery(where={"name": "x"}))
        with pytest.raises(ValueError):
            await exercise_repo.list(ListQuery(order_by="description"))


class TestPrograms:
    """Tests for program storage and the settings child table."""

    @pytest.mark.asyncio
    async def test_insert_then_get(self, program_repo, leg_day):
        await program_repo.insert(leg_day)
        assert await program_repo.get_by_id(leg_day.id) == leg_day

    @pytest.mark.asyncio
    async def test_custom_image_round_trip(self, program_repo):
        program = WorkoutProgram(name="Custom", use_preset_icon=False, image_data=b"\x89PNG\r\n")
        await program_repo.insert(program)
        stored = await program_repo.get_by_id(program.id)
        assert stored.image_data == b"\x89PNG\r\n"
        assert not stored.use_preset_icon

    @pytest.mark.asyncio
    async def test_sorted_by_last_modified_desc(self, program_repo):
        now = datetime.now()
        older = WorkoutProgram(name="Older", last_modified_at=now - timedelta(days=2))
        newer = WorkoutProgram(name="Newer", last_modified_at=now)
        middle = WorkoutProgram(name="Middle", last_modified_at=now - timedelta(days=1))
        for program in (older, newer, middle):
            await program_repo.insert(program)

        assert [p.name for p in await program_repo.get_all()] == ["Newer", "Middle", "Older"]

    @pytest.mark.asyncio
    async def test_update_replaces_settings(self, program_repo, leg_day):
        await program_repo.insert(leg_day)
        leg_day.set_exercises([ExerciseSettings(exercise_id="deadlift", sets=1, reps=5)])
        await program_repo.update(leg_day)

        stored = await program_repo.get_by_id(leg_day.id)
        assert stored.exercise_ids == ["deadlift"]
        assert len(stored.exercise_settings) == 1
        assert stored.exercise_settings[0].reps == 5

    @pytest.mark.asyncio
    async def test_delete_cascades_to_settings(self, db, program_repo, leg_day):
        await program_repo.insert(leg_day)
        await program_repo.delete(leg_day.id)

        row = await db.fetchone("SELECT COUNT(*) FROM program_exercise_settings")
        assert row[0] == 0

    @pytest.mark.asyncio
    async def test_increment_completion(self, program_repo, leg_day):
        await program_repo.insert(leg_day)
        modified = (await program_repo.get_by_id(leg_day.id)).last_modified_at
        done_at = datetime.now() + timedelta(hours=1)

        await program_repo.increment_completion_count(leg_day.id, done_at)
        updated = await program_repo.increment_completion_count(leg_day.id, done_at)

        assert updated.completion_count == 2
        assert updated.last_completed_at == done_at
        assert updated.last_modified_at == modified

    @pytest.mark.asyncio
    async def test_concurrent_increments_are_not_lost(self, program_repo, leg_day):
        await program_repo.insert(leg_day)
        await asyncio.gather(
            *(program_repo.increment_completion_count(leg_day.id) for _ in range(10))
        )
        assert (await program_repo.get_by_id(leg_day.id)).completion_count == 10

    @pytest.mark.asyncio
    async def test_increment_missing(self, program_repo):
        with pytest.raises(NotFound):
            await program_repo.increment_completion_count("nope")

    @pytest.mark.asyncio
    async def test_update_settings_entry(self, program_repo, leg_day):
        await program_repo.insert(leg_day)
        entry = leg_day.exercise_settings[1]
        entry.weight_kg = 24.0

        await program_repo.update_settings_entry(leg_day.id, entry)

        stored = await program_repo.get_by_id(leg_day.id)
        assert stored.exercise_settings[1].weight_kg == 24.0
        assert stored.exercise_settings[0] == leg_day.exercise_settings[0]
        assert stored.last_modified_at >= leg_day.last_modified_at

    @pytest.mark.asyncio
    async def test_settings_ids_are_scoped_to_program(self, program_repo, leg_day):
        await program_repo.insert(leg_day)
        copy = WorkoutProgram(name="Leg Day (copy)")
        copy.set_exercises(load_settings(dump_settings(leg_day.exercise_settings)))

        await program_repo.insert(copy)

        stored = await program_repo.get_by_id(copy.id)
        assert [s.id for s in stored.exercise_settings] == [
            s.id for s in leg_day.exercise_settings
        ]

        entry = stored.exercise_settings[0]
        entry.sets = 1
        await program_repo.update_settings_entry(copy.id, entry)
        original = await program_repo.get_by_id(leg_day.id)
        assert original.exercise_settings[0].sets == 5

    @pytest.mark.asyncio
    async def test_update_settings_entry_missing(self, program_repo, leg_day):
        await program_repo.insert(leg_day)
        with pytest.raises(NotFound):
            await program_repo.update_settings_entry(
                leg_day.id, ExerciseSettings(exercise_id="x")
            )

    @pytest.mark.asyncio
    async def test_programs_using(self, program_repo, leg_day, squat):
        other = WorkoutProgram(name="Upper")
        await program_repo.insert(leg_day)
        await program_repo.insert(other)

        using = await program_repo.programs_using(squat.id)
        assert [p.id for p in using] == [leg_day.id]


class TestObserve:
    """Tests for live query subscriptions."""

    @pytest.mark.asyncio
    async def test_immediate_delivery(self, exercise_repo, squat):
        await exercise_repo.insert(squat)
        snapshots = []

        subscription = await exercise_repo.observe_all(snapshots.append)

        assert snapshots == [[squat]]
        subscription.cancel()

    @pytest.mark.asyncio
    async def test_changes_delivered_in_order(self, exercise_repo, squat, lunges):
        snapshots = []
        subscription = await exercise_repo.observe_all(snapshots.append)

        await exercise_repo.insert(squat)
        await exercise_repo.insert(lunges)
        await exercise_repo.delete(squat.id)

        assert [[e.name for e in s] for s in snapshots] == [
            [],
            ["Squat"],
            ["Lunges", "Squat"],
            ["Lunges"],
        ]
        subscription.cancel()

    @pytest.mark.asyncio
    async def test_cancel_stops_delivery(self, exercise_repo, squat):
        snapshots = []
        subscription = await exercise_repo.observe_all(snapshots.append)
        subscription.cancel()

        await exercise_repo.insert(squat)

        assert snapshots == [[]]
        assert not subscription.active

    @pytest.mark.asyncio
    async def test_filtered_query_ignores_unrelated_changes(self, exercise_repo, squat):
        snapshots = []
        await exercise_repo.observe_all(snapshots.append, ListQuery(tag=MuscleGroup.CHEST))

        await exercise_repo.insert(squat)
        bench = Exercise(name="Bench Press", muscle_groups=[MuscleGroup.CHEST])
        await exercise_repo.insert(bench)

        assert [[e.name for e in s] for s in snapshots] == [[], ["Bench Press"]]

    @pytest.mark.asyncio
    async def test_failed_write_delivers_nothing(self, exercise_repo, squat):
        await exercise_repo.insert(squat)
        snapshots = []
        await exercise_repo.observe_all(snapshots.append)

        with pytest.raises(ConstraintViolation):
            await exercise_repo.insert(squat)

        assert len(snapshots) == 1

    @pytest.mark.asyncio
    async def test_async_callback(self, program_repo, leg_day):
        counts = []

        async def on_change(programs):
            counts.append(len(programs))

        await program_repo.observe_all(on_change)
        await program_repo.insert(leg_day)

        assert counts == [0, 1]

    @pytest.mark.asyncio
    async def test_failing_callback_does_not_break_writes(self, exercise_repo, squat):
        calls = []

        def explode(snapshot):
            calls.append(snapshot)
            if len(calls) > 1:
                raise RuntimeError("boom")

        await exercise_repo.observe_all(explode)
        await exercise_repo.insert(squat)

        assert await exercise_repo.count() == 1
        assert len(calls) == 2

    @pytest.mark.asyncio
    async def test_failed_first_delivery_unsubscribes(self, db, exercise_repo, squat):
        calls = []

        def explode(snapshot):
            calls.append(snapshot)
            raise RuntimeError("boom")

        with pytest.raises(RuntimeError):
            await exercise_repo.observe_all(explode)

        assert db.observers.count("exercises") == 0
        await exercise_repo.insert(squat)
        assert len(calls) == 1


class TestDatabase:
    """Tests for connection handling and schema management."""

    @pytest.mark.asyncio
    async def test_in_memory(self, squat):
        async with Database.in_memory() as db:
            repo = ExerciseRepository(db)
            await repo.insert(squat)
            assert await repo.count() == 1

    @pytest.mark.asyncio
    async def test_data_survives_reopen(self, temp_db_path, leg_day):
        async with Database(temp_db_path) as db:
            await ProgramRepository(db).insert(leg_day)
        async with Database(temp_db_path) as db:
            assert await ProgramRepository(db).get_by_id(leg_day.id) == leg_day

    @pytest.mark.asyncio
    async def test_stale_schema_is_recreated(self, temp_db_path, squat):
        async with Database(temp_db_path) as db:
            await ExerciseRepository(db).insert(squat)

        async with aiosqlite.connect(temp_db_path) as conn:
            await conn.execute("PRAGMA user_version = 99")
            await conn.commit()

        async with Database(temp_db_path) as db:
            assert await ExerciseRepository(db).count() == 0

    @pytest.mark.asyncio
    async def test_unopenable_path(self, tmp_path):
        db = Database(tmp_path / "missing" / "dir" / "test.db")
        with pytest.raises(StorageUnavailable):
            await db.connection()
