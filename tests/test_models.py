"""Tests for data models."""

from datetime import datetime, timedelta

import pytest

from fittrack.errors import DeserializationFailure
from fittrack.models.exercises import Exercise, MuscleGroup, parse_muscle_groups
from fittrack.models.preferences import (
    AppLanguage,
    StatType,
    WeightUnit,
    format_weight,
    kg_to_lbs,
    lbs_to_kg,
    to_display,
    to_storage,
)
from fittrack.models.program import (
    DEFAULT_PRESET_ICON,
    CustomImage,
    ExerciseSettings,
    PresetIcon,
    WorkoutProgram,
    decode_settings,
    dump_settings,
    load_settings,
)


class TestExercise:
    """Tests for Exercise model."""

    def test_exercise_to_dict(self, squat):
        """Test exercise serialization."""
        data = squat.to_dict()

        assert data["name"] == "Squat"
        assert data["muscle_groups"] == ["legs", "core"]
        assert data["is_favorite"] is False
        assert data["is_custom"] is False

    def test_exercise_from_dict(self, squat):
        """Test exercise deserialization."""
        restored = Exercise.from_dict(squat.to_dict())
        assert restored == squat

    def test_empty_name_rejected(self):
        with pytest.raises(ValueError):
            Exercise(name="  ", muscle_groups=[MuscleGroup.CHEST])

    def test_ids_are_unique(self):
        a = Exercise(name="A", muscle_groups=[])
        b = Exercise(name="A", muscle_groups=[])
        assert a.id != b.id

    def test_targets(self, squat):
        assert squat.targets(MuscleGroup.LEGS)
        assert not squat.targets(MuscleGroup.CHEST)


class TestMuscleGroups:
    """Tests for muscle group tag decoding."""

    def test_parse_json(self):
        assert parse_muscle_groups('["chest", "arms"]') == [MuscleGroup.CHEST, MuscleGroup.ARMS]

    def test_unknown_tags_dropped(self):
        assert parse_muscle_groups(["chest", "wings"]) == [MuscleGroup.CHEST]

    def test_corrupt_payload_is_empty(self):
        assert parse_muscle_groups("not json") == []
        assert parse_muscle_groups('{"chest": 1}') == []
        assert parse_muscle_groups(None) == []

    def test_localization_key(self):
        assert MuscleGroup.FULL_BODY.localization_key == "muscle.full_body"


class TestExerciseSettings:
    """Tests for per-exercise settings."""

    def test_defaults(self):
        s = ExerciseSettings(exercise_id="x")
        assert (s.sets, s.reps, s.weight_kg, s.rest_seconds, s.notes) == (3, 10, 0.0, 60, "")

    @pytest.mark.parametrize("field", ["sets", "reps", "rest_seconds", "weight_kg"])
    def test_negative_values_rejected(self, field):
        with pytest.raises(ValueError):
            ExerciseSettings(exercise_id="x", **{field: -1})

    def test_blob_round_trip_preserves_order(self):
        settings = [
            ExerciseSettings(exercise_id="b", sets=5, reps=5, weight_kg=100.0),
            ExerciseSettings(exercise_id="a", notes="slow eccentric"),
        ]
        assert decode_settings(dump_settings(settings)) == settings

    def test_decode_corrupt_blob(self):
        with pytest.raises(DeserializationFailure):
            decode_settings(b"\x00garbage")
        with pytest.raises(DeserializationFailure):
            decode_settings('[{"sets": 3}]')

    def test_load_falls_back_to_empty(self):
        assert load_settings(None) == []
        assert load_settings("{broken") == []


class TestWorkoutProgram:
    """Tests for WorkoutProgram model."""

    def test_defaults(self):
        program = WorkoutProgram(name="Push")
        assert program.use_preset_icon
        assert program.preset_icon_name == DEFAULT_PRESET_ICON
        assert program.completion_count == 0
        assert program.last_completed_at is None
        assert program.exercise_ids == []

    def test_preset_icon(self):
        program = WorkoutProgram(name="Run", preset_icon_name="figure.run")
        assert program.icon == PresetIcon("figure.run")

    def test_custom_image_icon(self):
        program = WorkoutProgram(name="Push")
        before = program.last_modified_at
        program.set_custom_image(b"\x89PNG")

        assert program.icon == CustomImage(b"\x89PNG")
        assert program.preset_icon_name == DEFAULT_PRESET_ICON
        assert program.last_modified_at >= before

    def test_custom_without_image_has_no_icon(self):
        program = WorkoutProgram(name="Push", use_preset_icon=False, image_data=None)
        assert program.icon is None

    def test_effective_settings_defaults(self):
        program = WorkoutProgram(name="Old", exercise_ids=["a", "b"])
        settings = program.effective_settings()
        assert [s.exercise_id for s in settings] == ["a", "b"]
        assert all(s.sets == 3 and s.reps == 10 for s in settings)

    def test_effective_settings_saved(self, leg_day):
        assert leg_day.effective_settings() == leg_day.exercise_settings

    def test_mark_completed_does_not_touch_modified(self):
        program = WorkoutProgram(name="Push")
        modified = program.last_modified_at
        done_at = modified + timedelta(hours=1)

        program.mark_completed(done_at)

        assert program.completion_count == 1
        assert program.last_completed_at == done_at
        assert program.last_modified_at == modified

    def test_touch_never_moves_backwards(self):
        program = WorkoutProgram(name="Push")
        modified = program.last_modified_at
        program.touch(modified - timedelta(days=1))
        assert program.last_modified_at == modified

    def test_rename_rejects_blank(self):
        program = WorkoutProgram(name="Push")
        with pytest.raises(ValueError):
            program.rename("")

    def test_set_exercises_updates_ids(self, leg_day):
        settings = list(reversed(leg_day.exercise_settings))
        leg_day.set_exercises(settings)
        assert leg_day.exercise_ids == [s.exercise_id for s in settings]

    def test_negative_completion_count_rejected(self):
        with pytest.raises(ValueError):
            WorkoutProgram(name="Push", completion_count=-1)

    def test_to_dict_hides_image_bytes(self):
        program = WorkoutProgram(name="Push", image_data=b"abc", use_preset_icon=False)
        data = program.to_dict()
        assert data["has_custom_image"] is True
        assert "image_data" not in data

    def test_summary(self, leg_day):
        leg_day.mark_completed(datetime(2024, 3, 1, 18, 0))
        summary = leg_day.get_summary()
        assert "Program: Leg Day" in summary
        assert "Exercises: 2" in summary
        assert "last on 2024-03-01" in summary


class TestWeightConversion:
    """Tests for kg/lbs conversion."""

    @pytest.mark.parametrize("kg", [0, 0.5, 20, 97.3, 225])
    def test_round_trip(self, kg):
        assert lbs_to_kg(kg_to_lbs(kg)) == pytest.approx(kg, abs=1e-6)
        assert to_storage(WeightUnit.POUNDS, to_display(WeightUnit.POUNDS, kg)) == pytest.approx(
            kg, abs=1e-6
        )

    def test_factor(self):
        assert kg_to_lbs(100) == pytest.approx(220.462)

    def test_kilograms_pass_through(self):
        assert to_display(WeightUnit.KILOGRAMS, 42.5) == 42.5
        assert to_storage(WeightUnit.KILOGRAMS, 42.5) == 42.5

    def test_format_weight(self):
        assert format_weight(WeightUnit.KILOGRAMS, 60) == "60.0 kg"
        assert format_weight(WeightUnit.POUNDS, 60) == "132.3 lbs"


class TestPreferenceEnums:
    """Tests for stat, unit and language enums."""

    def test_stat_raw_values(self):
        assert StatType("caloriesBurned") is StatType.CALORIES_BURNED
        assert StatType.from_raw("bogus") is None

    def test_stat_metadata(self):
        assert StatType.STEPS.default_goal == "10,000"
        assert StatType.HEART_RATE.unit == "bpm"
        assert StatType.SLEEP.localization_key == "stats.sleep"

    def test_unit_and_language(self):
        assert WeightUnit("lbs") is WeightUnit.POUNDS
        assert WeightUnit.KILOGRAMS.abbreviation == "kg"
        assert AppLanguage.GERMAN.native_name == "Deutsch"
