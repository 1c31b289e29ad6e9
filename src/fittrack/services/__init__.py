"""Workflows built on the repositories."""

from .program_editor import (
    ProgramEditor,
    complete_program,
    create_program,
    resolve_exercises,
)

__all__ = ["complete_program", "create_program", "ProgramEditor", "resolve_exercises"]
