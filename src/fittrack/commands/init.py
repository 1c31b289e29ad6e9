"""Initialize data store command."""

import click

from ..data import seed_exercises
from ..db import ExerciseRepository
from .base import async_command, echo_info, echo_success, get_settings, open_database


@click.command()
@click.pass_context
@async_command
async def init(ctx):
    """Initialize the fittrack data store.

    Creates the data directory and the SQLite database, then fills an empty
    exercise library with the preset exercises. Running it again is safe.
    """
    settings = get_settings(ctx)
    echo_info(f"Initializing fittrack in {settings.data_dir}")

    async with open_database(ctx) as db:
        count = await seed_exercises(ExerciseRepository(db))
    echo_success("Database initialized")

    if count:
        echo_success(f"Exercise library populated ({count} preset exercises)")
    else:
        echo_info("Exercise library already populated")

    click.echo()
    click.echo("fittrack is ready to use!")
    click.echo()
    click.echo("Next steps:")
    click.echo("  fittrack exercises list              # Browse the library")
    click.echo('  fittrack programs create "Leg Day" --pick')
    click.echo("  fittrack serve                       # Start the JSON API")
