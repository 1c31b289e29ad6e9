"""Exercise library commands."""

import click

from ..db import ExerciseRepository, ListQuery, ProgramRepository
from ..errors import FitTrackError
from ..models.exercises import Exercise, MuscleGroup
from .base import (
    async_command,
    echo_error,
    echo_info,
    echo_success,
    echo_warning,
    ensure_initialized,
    find_exercise,
    format_table,
    get_localizer,
    open_database,
    open_preferences,
    truncate,
)

MUSCLE_CHOICES = click.Choice([g.value for g in MuscleGroup])


@click.group()
@click.pass_context
def exercises(ctx):
    """Browse and manage the exercise library."""
    ensure_initialized(ctx)


@exercises.command(name="list")
@click.option("--muscle", "-m", type=MUSCLE_CHOICES, help="Only exercises for this muscle group")
@click.option("--search", "-s", help="Name contains this text")
@click.option("--favorites", is_flag=True, help="Only favorites")
@click.option("--custom", is_flag=True, help="Only custom exercises")
@click.pass_context
@async_command
async def list_exercises(ctx, muscle: str | None, search: str | None, favorites: bool, custom: bool):
    """List exercises, sorted by name."""
    where = {}
    if favorites:
        where["is_favorite"] = True
    if custom:
        where["is_custom"] = True
    query = ListQuery(
        search=search,
        where=where,
        tag=MuscleGroup(muscle) if muscle else None,
        order_by="name",
    )

    async with open_database(ctx) as db, open_preferences(ctx) as prefs:
        results = await ExerciseRepository(db).list(query)
        localizer = await get_localizer(prefs)

    if not results:
        echo_info("No exercises found")
        return

    headers = ["ID", "Name", "Muscle Groups", "Fav", "Custom"]
    rows = []
    for exercise in results:
        rows.append([
            exercise.id,
            truncate(exercise.display_name(localizer)),
            ", ".join(localizer.lookup(g.localization_key) for g in exercise.muscle_groups),
            "*" if exercise.is_favorite else "",
            "yes" if exercise.is_custom else "",
        ])

    click.echo()
    click.echo(format_table(headers, rows))
    click.echo()
    click.echo(f"Total: {len(results)} exercise(s)")


@exercises.command()
@click.argument("ref")
@click.pass_context
@async_command
async def show(ctx, ref: str):
    """Show one exercise by id or name."""
    async with open_database(ctx) as db, open_preferences(ctx) as prefs:
        exercise = await find_exercise(ExerciseRepository(db), ref)
        localizer = await get_localizer(prefs)

    if not exercise:
        echo_error(f"Exercise {ref} not found")
        ctx.exit(1)

    click.echo()
    click.echo(f"{exercise.display_name(localizer)} (ID: {exercise.id})")
    click.echo("-" * 40)
    groups = ", ".join(localizer.lookup(g.localization_key) for g in exercise.muscle_groups)
    click.echo(f"Muscle groups: {groups}")
    if exercise.description:
        click.echo(f"Description: {exercise.description}")
    if exercise.instructions:
        click.echo()
        click.echo(exercise.instructions)
    click.echo()
    click.echo(f"Favorite: {'yes' if exercise.is_favorite else 'no'}")
    click.echo(f"Custom: {'yes' if exercise.is_custom else 'no'}")


@exercises.command()
@click.argument("name")
@click.option(
    "--muscle", "-m", "muscles", type=MUSCLE_CHOICES, multiple=True, required=True,
    help="Muscle group (repeat for several)",
)
@click.option("--description", "-d", default="", help="Short description")
@click.option("--instructions", "-i", default="", help="How to perform it")
@click.pass_context
@async_command
async def add(ctx, name: str, muscles: tuple[str, ...], description: str, instructions: str):
    """Add a custom exercise."""
    try:
        exercise = Exercise(
            name=name.strip(),
            muscle_groups=[MuscleGroup(m) for m in dict.fromkeys(muscles)],
            description=description,
            instructions=instructions,
            is_custom=True,
        )
    except ValueError as e:
        echo_error(str(e))
        ctx.exit(1)

    async with open_database(ctx) as db:
        try:
            await ExerciseRepository(db).insert(exercise)
        except FitTrackError as e:
            echo_error(f"Could not save exercise: {e}")
            ctx.exit(1)

    echo_success(f"Added {exercise.name} (ID: {exercise.id})")


@exercises.command()
@click.argument("ref")
@click.option("--off", is_flag=True, help="Remove from favorites")
@click.pass_context
@async_command
async def favorite(ctx, ref: str, off: bool):
    """Mark an exercise as a favorite."""
    async with open_database(ctx) as db:
        repo = ExerciseRepository(db)
        exercise = await find_exercise(repo, ref)
        if not exercise:
            echo_error(f"Exercise {ref} not found")
            ctx.exit(1)
        await repo.toggle_favorite(exercise.id, not off)

    if off:
        echo_success(f"{exercise.name} removed from favorites")
    else:
        echo_success(f"{exercise.name} added to favorites")


@exercises.command()
@click.argument("ref")
@click.option("--force", "-f", is_flag=True, help="Skip confirmation")
@click.pass_context
@async_command
async def delete(ctx, ref: str, force: bool):
    """Delete an exercise.

    Programs that use it keep the reference; it is skipped when they are shown.
    """
    async with open_database(ctx) as db:
        repo = ExerciseRepository(db)
        exercise = await find_exercise(repo, ref)
        if not exercise:
            echo_error(f"Exercise {ref} not found")
            ctx.exit(1)

        using = await ProgramRepository(db).programs_using(exercise.id)
        if using:
            names = ", ".join(p.name for p in using)
            echo_warning(f"Used by {len(using)} program(s): {names}")

        if not force:
            click.echo(f"Exercise: {exercise.name}")
            if not click.confirm("Are you sure you want to delete this exercise?"):
                echo_info("Cancelled")
                return

        await repo.delete(exercise.id)

    echo_success(f"Exercise {exercise.name} deleted")
