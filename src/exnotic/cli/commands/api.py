"""CLI commands for API server management."""

from __future__ import annotations

import typer

from exnotic.config.settings import settings

api_app = typer.Typer(
    name="api",
    help="API server management commands",
    no_args_is_help=True,
)


@api_app.command()
def start(
    host: str = typer.Option(
        settings.host, "--host", help="Interface to bind the server to"
    ),
    port: int = typer.Option(
        settings.port, "--port", "-p", help="Port to run the server on"
    ),
    production: bool = typer.Option(
        False, "--production", help="Run in production mode"
    ),
) -> None:
    """
    Start the exnotic API server.

    Development mode (default): Auto-reload enabled, info logging.
    Production mode: Multiple workers, warning-level logging. Each worker
    keeps its own ephemeral cache.

    Examples:
        exnotic api start
        exnotic api start --port 3000
        exnotic api start --host 0.0.0.0 --production
    """
    import uvicorn

    if production:
        uvicorn.run(
            "exnotic.api.main:app",
            host=host,
            port=port,
            workers=2,
            log_level="warning",
        )
    else:
        uvicorn.run(
            "exnotic.api.main:app",
            host=host,
            port=port,
            reload=True,
            log_level="info",
        )
