"""Program management commands."""

import json

import click
import pyperclip
import questionary
from questionary import Style

from ..db import ExerciseRepository, ProgramRepository
from ..errors import FitTrackError
from ..models.preferences import format_weight
from ..models.program import PRESET_ICONS
from ..services import ProgramEditor, complete_program, create_program, resolve_exercises
from .base import (
    async_command,
    echo_error,
    echo_info,
    echo_success,
    ensure_initialized,
    find_exercise,
    find_program,
    format_table,
    get_localizer,
    open_database,
    open_preferences,
    truncate,
)

custom_style = Style([
    ("qmark", "fg:cyan bold"),
    ("question", "bold"),
    ("answer", "fg:green bold"),
    ("pointer", "fg:cyan bold"),
    ("highlighted", "fg:cyan bold"),
    ("selected", "fg:green"),
])


@click.group()
@click.pass_context
def programs(ctx):
    """Manage workout programs.

    Commands for creating, editing, viewing, and deleting programs.
    """
    ensure_initialized(ctx)


@programs.command(name="list")
@click.pass_context
@async_command
async def list_programs(ctx):
    """List programs, most recently modified first."""
    async with open_database(ctx) as db:
        all_programs = await ProgramRepository(db).get_all()

    if not all_programs:
        echo_info("No programs found. Create one with 'fittrack programs create'")
        return

    headers = ["ID", "Name", "Exercises", "Duration", "Completed", "Modified"]
    rows = []

    for prog in all_programs:
        rows.append([
            prog.id,
            truncate(prog.name),
            str(len(prog.exercise_ids)),
            f"{prog.duration_minutes} min" if prog.duration_minutes else "-",
            str(prog.completion_count),
            prog.last_modified_at.strftime("%Y-%m-%d %H:%M"),
        ])

    click.echo()
    click.echo(format_table(headers, rows))
    click.echo()
    click.echo(f"Total: {len(all_programs)} program(s)")


async def _pick_exercises(repo: ExerciseRepository, localizer) -> list[str]:
    library = await repo.get_all()
    choices = [
        questionary.Choice(e.display_name(localizer), e.id, checked=False)
        for e in library
    ]
    selected = await questionary.checkbox(
        "Which exercises should the program include?",
        choices=choices,
        style=custom_style,
    ).ask_async()
    return selected or []


@programs.command()
@click.argument("name")
@click.option("--description", "-d", default="", help="Program description")
@click.option("--icon", type=click.Choice(PRESET_ICONS), help="Preset icon")
@click.option("--image", type=click.Path(exists=True, dir_okay=False), help="Custom image file")
@click.option("--duration", type=click.IntRange(min=1), help="Expected duration in minutes")
@click.option("--exercise", "-e", "exercise_refs", multiple=True, help="Exercise id or name (repeatable)")
@click.option("--pick", is_flag=True, help="Choose exercises interactively")
@click.pass_context
@async_command
async def create(
    ctx,
    name: str,
    description: str,
    icon: str | None,
    image: str | None,
    duration: int | None,
    exercise_refs: tuple[str, ...],
    pick: bool,
):
    """Create a new program.

    Examples:

        fittrack programs create "Leg Day" -e Squat -e Lunges

        fittrack programs create "Push" --pick --duration 45
    """
    image_data = None
    if image:
        with open(image, "rb") as f:
            image_data = f.read()

    async with open_database(ctx) as db, open_preferences(ctx) as prefs:
        exercise_repo = ExerciseRepository(db)
        exercise_ids = []
        for ref in exercise_refs:
            exercise = await find_exercise(exercise_repo, ref)
            if not exercise:
                echo_error(f"Exercise {ref} not found")
                ctx.exit(1)
            exercise_ids.append(exercise.id)

        if pick:
            localizer = await get_localizer(prefs)
            exercise_ids.extend(await _pick_exercises(exercise_repo, localizer))

        try:
            program = await create_program(
                ProgramRepository(db),
                name,
                description=description,
                preset_icon=icon,
                image_data=image_data,
                duration_minutes=duration,
                exercise_ids=exercise_ids,
            )
        except (ValueError, FitTrackError) as e:
            echo_error(str(e))
            ctx.exit(1)

    echo_success(f"Created {program.name} with {len(program.exercise_ids)} exercise(s)")
    echo_info(f"ID: {program.id}")


@programs.command()
@click.argument("ref")
@click.pass_context
@async_command
async def show(ctx, ref: str):
    """Show a program and its exercises."""
    async with open_database(ctx) as db, open_preferences(ctx) as prefs:
        program = await find_program(ProgramRepository(db), ref)
        if not program:
            echo_error(f"Program {ref} not found")
            ctx.exit(1)
        entries = await resolve_exercises(program, ExerciseRepository(db))
        unit = await prefs.weight_unit.selected_unit()
        localizer = await get_localizer(prefs)

    click.echo()
    click.echo("=" * 60)
    click.echo(f"{program.name} (ID: {program.id})")
    click.echo("=" * 60)
    click.echo()
    click.echo(program.get_summary())

    if not entries:
        click.echo()
        echo_info("No exercises yet. Add one with 'fittrack programs add-exercise'")
        return

    headers = ["#", "Exercise", "Sets", "Reps", "Weight", "Rest", "Notes"]
    rows = []
    for i, (exercise, setting) in enumerate(entries, 1):
        rows.append([
            str(i),
            truncate(exercise.display_name(localizer)),
            str(setting.sets),
            str(setting.reps),
            format_weight(unit, setting.weight_kg),
            f"{setting.rest_seconds}s",
            truncate(setting.notes, 20),
        ])

    click.echo()
    click.echo(format_table(headers, rows))


@programs.command(name="add-exercise")
@click.argument("program_ref")
@click.argument("exercise_ref")
@click.option("--sets", type=click.IntRange(min=0), default=3, show_default=True)
@click.option("--reps", type=click.IntRange(min=0), default=10, show_default=True)
@click.option("--weight", type=click.FloatRange(min=0), default=0.0, help="In your display unit")
@click.option("--rest", type=click.IntRange(min=0), default=60, show_default=True, help="Seconds")
@click.option("--notes", default="")
@click.pass_context
@async_command
async def add_exercise(
    ctx,
    program_ref: str,
    exercise_ref: str,
    sets: int,
    reps: int,
    weight: float,
    rest: int,
    notes: str,
):
    """Append an exercise to a program."""
    async with open_database(ctx) as db, open_preferences(ctx) as prefs:
        program_repo = ProgramRepository(db)
        program = await find_program(program_repo, program_ref)
        if not program:
            echo_error(f"Program {program_ref} not found")
            ctx.exit(1)
        exercise = await find_exercise(ExerciseRepository(db), exercise_ref)
        if not exercise:
            echo_error(f"Exercise {exercise_ref} not found")
            ctx.exit(1)

        unit = await prefs.weight_unit.selected_unit()
        editor = ProgramEditor(program)
        entry = editor.add_exercise(
            exercise.id, sets=sets, reps=reps, rest_seconds=rest, notes=notes
        )
        editor.set_weight(entry.id, weight, unit)
        await editor.save(program_repo)

    echo_success(f"Added {exercise.name} to {program.name}")


@programs.command(name="remove-exercise")
@click.argument("program_ref")
@click.argument("exercise_ref")
@click.pass_context
@async_command
async def remove_exercise(ctx, program_ref: str, exercise_ref: str):
    """Remove an exercise from a program."""
    async with open_database(ctx) as db:
        program_repo = ProgramRepository(db)
        program = await find_program(program_repo, program_ref)
        if not program:
            echo_error(f"Program {program_ref} not found")
            ctx.exit(1)

        exercise = await find_exercise(ExerciseRepository(db), exercise_ref)
        exercise_id = exercise.id if exercise else exercise_ref

        editor = ProgramEditor(program)
        removed = editor.remove_exercise(exercise_id)
        if not removed:
            echo_error(f"{exercise_ref} is not part of {program.name}")
            ctx.exit(1)
        await editor.save(program_repo)

    echo_success(f"Removed {exercise_ref} from {program.name}")


@programs.command()
@click.argument("ref")
@click.argument("new_name")
@click.pass_context
@async_command
async def rename(ctx, ref: str, new_name: str):
    """Rename a program."""
    async with open_database(ctx) as db:
        repo = ProgramRepository(db)
        program = await find_program(repo, ref)
        if not program:
            echo_error(f"Program {ref} not found")
            ctx.exit(1)

        editor = ProgramEditor(program)
        editor.rename(new_name)
        if not editor.can_save:
            echo_error("Program name cannot be empty")
            ctx.exit(1)
        await editor.save(repo)

    echo_success(f"Renamed to {program.name}")


@programs.command()
@click.argument("ref")
@click.pass_context
@async_command
async def complete(ctx, ref: str):
    """Record a completed workout for a program."""
    async with open_database(ctx) as db:
        repo = ProgramRepository(db)
        program = await find_program(repo, ref)
        if not program:
            echo_error(f"Program {ref} not found")
            ctx.exit(1)
        program = await complete_program(repo, program.id)

    echo_success(f"{program.name} completed {program.completion_count} time(s)")


@programs.command()
@click.argument("ref")
@click.option("--force", "-f", is_flag=True, help="Skip confirmation")
@click.pass_context
@async_command
async def delete(ctx, ref: str, force: bool):
    """Delete a program."""
    async with open_database(ctx) as db:
        repo = ProgramRepository(db)
        program = await find_program(repo, ref)
        if not program:
            echo_error(f"Program {ref} not found")
            ctx.exit(1)

        if not force:
            click.echo(f"Program: {program.name}")
            if not click.confirm("Are you sure you want to delete this program?"):
                echo_info("Cancelled")
                return

        await repo.delete(program.id)

    echo_success(f"Program {program.name} deleted")


@programs.command()
@click.argument("ref")
@click.option("--clipboard", "-c", is_flag=True, help="Copy to clipboard instead of printing")
@click.option("--output", "-o", type=click.Path(), help="Write to file instead of stdout")
@click.pass_context
@async_command
async def export(ctx, ref: str, clipboard: bool, output: str | None):
    """Export a program as JSON.

    Exercises are included inline so the export stands on its own.
    """
    async with open_database(ctx) as db:
        program = await find_program(ProgramRepository(db), ref)
        if not program:
            echo_error(f"Program {ref} not found")
            ctx.exit(1)
        entries = await resolve_exercises(program, ExerciseRepository(db))

    data = program.to_dict()
    data["exercises"] = [
        {"name": exercise.name, **setting.to_dict()} for exercise, setting in entries
    ]
    content = json.dumps(data, indent=2)

    if clipboard:
        try:
            pyperclip.copy(content)
        except pyperclip.PyperclipException as e:
            echo_error(f"Could not copy to clipboard: {e}")
            ctx.exit(1)
        echo_success("Copied to clipboard!")

    elif output:
        with open(output, "w") as f:
            f.write(content)
        echo_success(f"Exported to {output}")

    else:
        click.echo(content)
