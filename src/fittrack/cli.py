"""CLI entry point for fittrack."""

import logging

import click

from . import __version__
from .commands import exercises, init, programs, serve, settings
from .config import Settings, configure_logging


@click.group()
@click.version_option(version=__version__, prog_name="fittrack")
@click.option("--verbose", "-v", is_flag=True, help="Log debug output")
@click.pass_context
def main(ctx, verbose: bool):
    """fittrack: workout programs and exercise library.

    Example usage:

        # Create the data store and the preset exercises
        fittrack init

        # Browse exercises
        fittrack exercises list --muscle legs

        # Build a program
        fittrack programs create "Leg Day" -e Squat -e Lunges
        fittrack programs show "Leg Day"

        # Show weights in pounds
        fittrack settings unit lbs
    """
    obj = ctx.ensure_object(dict)
    app_settings = obj.get("settings") or Settings()
    obj["settings"] = app_settings
    configure_logging(logging.DEBUG if verbose else app_settings.log_level)


# Register commands
main.add_command(init)
main.add_command(exercises)
main.add_command(programs)
main.add_command(settings)
main.add_command(serve)


def run():
    """Run the CLI (handles async event loop)."""
    main()


if __name__ == "__main__":
    run()
