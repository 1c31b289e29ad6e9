"""Web server command."""

import click
import uvicorn

from .base import get_settings


@click.command()
@click.option("--host", default="127.0.0.1", help="Host to bind to (default: 127.0.0.1)")
@click.option("--port", "-p", default=8000, type=int, help="Port to bind to (default: 8000)")
@click.option("--reload", is_flag=True, help="Enable auto-reload for development")
@click.pass_context
def serve(ctx: click.Context, host: str, port: int, reload: bool):
    """Start the JSON API server.

    The database is created and seeded on startup if needed.

    Examples:

        # Start on default port (8000)
        fittrack serve

        # Start on custom port
        fittrack serve --port 3000

        # Development mode with auto-reload
        fittrack serve --reload
    """
    from ..web import create_app

    settings = get_settings(ctx)

    click.echo()
    click.echo(click.style("Starting fittrack API server...", fg="green"))
    click.echo()
    click.echo(f"  Local:   http://{host}:{port}")
    click.echo(f"  Docs:    http://{host}:{port}/docs")
    click.echo()
    click.echo("Press Ctrl+C to stop the server.")
    click.echo()

    # Reload needs an import string; the factory then reads settings from the environment
    uvicorn.run(
        create_app(settings) if not reload else "fittrack.web:create_app",
        host=host,
        port=port,
        reload=reload,
        factory=reload,
        log_level=settings.log_level.lower(),
    )
