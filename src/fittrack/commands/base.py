"""Shared CLI utilities."""

import asyncio
from functools import wraps

import click

from ..config import Settings
from ..db import Database, ExerciseRepository, ProgramRepository
from ..localization import Localizer
from ..models.exercises import Exercise
from ..models.preferences import AppLanguage
from ..models.program import WorkoutProgram
from ..preferences import Preferences


def async_command(f):
    """Decorator to run async Click commands."""

    @wraps(f)
    def wrapper(*args, **kwargs):
        return asyncio.run(f(*args, **kwargs))

    return wrapper


def get_settings(ctx: click.Context) -> Settings:
    """Settings stored on the root context by the main group."""
    obj = ctx.ensure_object(dict)
    if "settings" not in obj:
        obj["settings"] = Settings()
    return obj["settings"]


def ensure_initialized(ctx: click.Context) -> None:
    """Ensure the database is initialized."""
    db_path = get_settings(ctx).db_path
    if not db_path.exists():
        click.echo(
            click.style("Error: ", fg="red")
            + "Data store not initialized. Run 'fittrack init' first."
        )
        ctx.exit(1)


def open_database(ctx: click.Context) -> Database:
    return Database(get_settings(ctx).db_path)


def open_preferences(ctx: click.Context) -> Preferences:
    settings = get_settings(ctx)
    return Preferences.open(
        settings.preferences_path, AppLanguage(settings.default_language)
    )


async def get_localizer(prefs: Preferences) -> Localizer:
    return Localizer(await prefs.language.selected_language())


async def find_exercise(repo: ExerciseRepository, ref: str) -> Exercise | None:
    """Look up an exercise by id, falling back to an exact name match."""
    exercise = await repo.get_by_id(ref)
    if exercise:
        return exercise
    for candidate in await repo.search(ref):
        if candidate.name.lower() == ref.lower():
            return candidate
    return None


async def find_program(repo: ProgramRepository, ref: str) -> WorkoutProgram | None:
    """Look up a program by id, falling back to an exact name match."""
    program = await repo.get_by_id(ref)
    if program:
        return program
    for candidate in await repo.get_all():
        if candidate.name.lower() == ref.lower():
            return candidate
    return None


def echo_success(message: str) -> None:
    """Print a success message."""
    click.echo(click.style("[OK] ", fg="green") + message)


def echo_error(message: str) -> None:
    """Print an error message."""
    click.echo(click.style("[ERROR] ", fg="red") + message)


def echo_info(message: str) -> None:
    """Print an info message."""
    click.echo(click.style("[INFO] ", fg="blue") + message)


def echo_warning(message: str) -> None:
    """Print a warning message."""
    click.echo(click.style("[WARN] ", fg="yellow") + message)


def truncate(text: str, width: int = 30) -> str:
    return text[:width] + "..." if len(text) > width else text


def format_table(headers: list[str], rows: list[list[str]], padding: int = 2) -> str:
    """Format data as a simple table."""
    if not rows:
        return ""

    widths = [len(h) for h in headers]
    for row in rows:
        for i, cell in enumerate(row):
            widths[i] = max(widths[i], len(str(cell)))

    lines = [
        "".join(h.ljust(widths[i] + padding) for i, h in enumerate(headers)).rstrip(),
        "".join("-" * w + " " * padding for w in widths).rstrip(),
    ]
    for row in rows:
        lines.append(
            "".join(str(cell).ljust(widths[i] + padding) for i, cell in enumerate(row)).rstrip()
        )

    return "\n".join(lines)
