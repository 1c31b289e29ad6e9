"""Data models for fittrack."""

from .exercises import Exercise, MuscleGroup
from .preferences import AppLanguage, StatType, WeightUnit
from .program import CustomImage, ExerciseSettings, PresetIcon, WorkoutProgram

__all__ = [
    "AppLanguage",
    "CustomImage",
    "Exercise",
    "ExerciseSettings",
    "MuscleGroup",
    "PresetIcon",
    "StatType",
    "WeightUnit",
    "WorkoutProgram",
]
