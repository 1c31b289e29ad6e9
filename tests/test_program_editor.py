"""Tests for the program editing workflow."""

from datetime import datetime, timedelta

import pytest

from fittrack.models.preferences import WeightUnit
from fittrack.models.program import DEFAULT_PRESET_ICON, ExerciseSettings, WorkoutProgram
from fittrack.services import ProgramEditor, complete_program, create_program, resolve_exercises


class TestCreateProgram:
    """Tests for create_program."""

    @pytest.mark.asyncio
    async def test_blank_name_rejected(self, program_repo):
        with pytest.raises(ValueError):
            await create_program(program_repo, "   ")
        assert await program_repo.count() == 0

    @pytest.mark.asyncio
    async def test_defaults(self, program_repo):
        program = await create_program(program_repo, " Push ")
        stored = await program_repo.get_by_id(program.id)

        assert stored.name == "Push"
        assert stored.use_preset_icon
        assert stored.preset_icon_name == DEFAULT_PRESET_ICON
        assert stored.completion_count == 0
        assert stored.created_at == stored.last_modified_at

    @pytest.mark.asyncio
    async def test_custom_image(self, program_repo):
        program = await create_program(program_repo, "Pull", image_data=b"img")
        assert not program.use_preset_icon
        assert program.preset_icon_name is None

    @pytest.mark.asyncio
    async def test_with_exercises(self, program_repo, squat, lunges):
        program = await create_program(
            program_repo, "Leg Day", exercise_ids=[squat.id, lunges.id]
        )
        stored = await program_repo.get_by_id(program.id)
        assert stored.exercise_ids == [squat.id, lunges.id]
        assert [s.sets for s in stored.exercise_settings] == [3, 3]


class TestProgramEditor:
    """Tests for ProgramEditor."""

    @pytest.mark.asyncio
    async def test_leg_day(self, exercise_repo, program_repo, squat, lunges):
        """Build a program, tune one exercise and read it back."""
        await exercise_repo.insert_many([squat, lunges])
        program = await create_program(program_repo, "Leg Day")

        editor = ProgramEditor(program)
        squat_entry = editor.add_exercise(squat.id)
        editor.add_exercise(lunges.id)
        editor.update_entry(squat_entry.id, sets=5, reps=5, weight_kg=100.0)
        await editor.save(program_repo)

        stored = await program_repo.get_by_id(program.id)
        entries = await resolve_exercises(stored, exercise_repo)

        assert [e.name for e, _ in entries] == ["Squat", "Lunges"]
        squat_settings = entries[0][1]
        assert (squat_settings.sets, squat_settings.reps, squat_settings.weight_kg) == (5, 5, 100.0)
        assert entries[1][1].sets == 3

    @pytest.mark.asyncio
    async def test_save_refreshes_last_modified(self, program_repo):
        program = WorkoutProgram(
            name="Old", last_modified_at=datetime.now() - timedelta(days=3)
        )
        await program_repo.insert(program)

        editor = ProgramEditor(program)
        editor.rename("New")
        await editor.save(program_repo)

        stored = await program_repo.get_by_id(program.id)
        assert stored.name == "New"
        assert stored.last_modified_at > datetime.now() - timedelta(minutes=1)

    @pytest.mark.asyncio
    async def test_blank_name_blocks_save(self, program_repo, leg_day):
        await program_repo.insert(leg_day)
        editor = ProgramEditor(leg_day)
        editor.rename(" ")

        assert not editor.can_save
        with pytest.raises(ValueError):
            await editor.save(program_repo)
        assert (await program_repo.get_by_id(leg_day.id)).name == "Leg Day"

    def test_working_copy_is_independent(self, leg_day):
        editor = ProgramEditor(leg_day)
        editor.update_entry(editor.settings[0].id, sets=10)
        assert leg_day.exercise_settings[0].sets == 5

    def test_defaults_for_programs_without_settings(self):
        program = WorkoutProgram(name="Old", exercise_ids=["a", "b"])
        editor = ProgramEditor(program)
        assert editor.exercise_ids == ["a", "b"]
        assert all(s.reps == 10 for s in editor.settings)

    def test_update_entry_validates(self, leg_day):
        editor = ProgramEditor(leg_day)
        with pytest.raises(ValueError):
            editor.update_entry(editor.settings[0].id, reps=-1)

    def test_unknown_entry(self, leg_day):
        editor = ProgramEditor(leg_day)
        with pytest.raises(KeyError):
            editor.update_entry("nope", sets=1)

    def test_set_weight_in_pounds(self, leg_day):
        editor = ProgramEditor(leg_day)
        entry = editor.set_weight(editor.settings[0].id, 220.462, WeightUnit.POUNDS)
        assert entry.weight_kg == pytest.approx(100.0)

    def test_remove_exercise(self, leg_day, squat, lunges):
        editor = ProgramEditor(leg_day)
        editor.add_exercise(squat.id)

        assert editor.remove_exercise(squat.id) == 2
        assert editor.exercise_ids == [lunges.id]
        assert editor.remove_exercise(squat.id) == 0

    def test_move(self, leg_day, squat, lunges):
        editor = ProgramEditor(leg_day)
        editor.move(0, 1)
        assert editor.exercise_ids == [lunges.id, squat.id]

    def test_entry_for_exercise(self, leg_day, squat):
        editor = ProgramEditor(leg_day)
        assert editor.entry_for_exercise(squat.id).sets == 5
        assert editor.entry_for_exercise("missing") is None


class TestResolveExercises:
    """Tests for joining program entries with the library."""

    @pytest.mark.asyncio
    async def test_dangling_ids_omitted(self, exercise_repo, program_repo, leg_day, squat, lunges):
        await exercise_repo.insert_many([squat, lunges])
        await program_repo.insert(leg_day)
        await exercise_repo.delete(lunges.id)

        entries = await resolve_exercises(leg_day, exercise_repo)

        assert [e.id for e, _ in entries] == [squat.id]
        stored = await program_repo.get_by_id(leg_day.id)
        assert stored.exercise_ids == [squat.id, lunges.id]

    @pytest.mark.asyncio
    async def test_keeps_program_order(self, exercise_repo, squat, lunges):
        await exercise_repo.insert_many([squat, lunges])
        settings = [ExerciseSettings(exercise_id=lunges.id), ExerciseSettings(exercise_id=squat.id)]
        program = WorkoutProgram(name="Reverse", exercise_settings=settings)

        entries = await resolve_exercises(program, exercise_repo)
        assert [e.name for e, _ in entries] == ["Lunges", "Squat"]


class TestCompleteProgram:
    """Tests for recording completions."""

    @pytest.mark.asyncio
    async def test_complete(self, program_repo, leg_day):
        await program_repo.insert(leg_day)
        updated = await complete_program(program_repo, leg_day.id)
        assert updated.completion_count == 1
        assert updated.last_completed_at is not None
