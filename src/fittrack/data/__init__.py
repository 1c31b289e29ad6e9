"""Data loading utilities."""

from .seed import PRESET_EXERCISES, preset_exercises, seed_exercises

__all__ = ["PRESET_EXERCISES", "preset_exercises", "seed_exercises"]
