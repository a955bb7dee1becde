"""
Main CLI entry point for exnotic.
"""

from __future__ import annotations

import typer
from rich.panel import Panel

from exnotic import __version__
from exnotic.cli.commands import lookup
from exnotic.cli.commands.api import api_app
from exnotic.cli.output import configure_logging, console
from exnotic.config.settings import settings

app = typer.Typer(
    name="exnotic",
    help="Ad-light YouTube search, channel and playback backend",
    no_args_is_help=True,
    rich_markup_mode="rich",
)

# Add subcommands
app.add_typer(api_app, name="api", help="API server management commands")
app.command(name="search")(lookup.search)
app.command(name="channel")(lookup.channel)
app.command(name="video")(lookup.video)


@app.command()
def version() -> None:
    """Show version information."""
    console.print(
        Panel(
            f"[bold blue]exnotic[/bold blue] v{__version__}",
            title="Version",
            border_style="blue",
        )
    )


@app.callback(invoke_without_command=True)
def main(
    ctx: typer.Context,
    version: bool = typer.Option(
        False, "--version", "-v", help="Show version and exit"
    ),
    log_level: str = typer.Option(
        settings.log_level, "--log-level", help="Logging level for exnotic loggers"
    ),
) -> None:
    """
    exnotic - ad-light YouTube frontend backend.

    Search YouTube, look up channels and resolve playable video sources
    through Invidious, proxy embeds and oEmbed.
    """
    if version:
        console.print(f"exnotic v{__version__}")
        raise typer.Exit(code=0)

    configure_logging(log_level)

    if ctx.invoked_subcommand is None:
        console.print("[yellow]Use 'exnotic --help' for available commands[/yellow]")
        raise typer.Exit(code=1)


if __name__ == "__main__":
    app()
