"""
Shared console output and logging setup for CLI commands.
"""

from __future__ import annotations

import logging

from rich.console import Console
from rich.panel import Panel

from exnotic.api.middleware.request_id import RequestIdFilter

console = Console()

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - [%(request_id)s] %(message)s"


def configure_logging(level: str = "INFO") -> logging.Logger:
    """
    Attach a console handler to the ``exnotic`` logger.

    Calling it again replaces the handler instead of stacking a second one.

    Parameters
    ----------
    level : str, optional
        Standard level name (default: "INFO").

    Returns
    -------
    logging.Logger
        The configured ``exnotic`` logger.
    """
    package_logger = logging.getLogger("exnotic")
    package_logger.setLevel(level.upper())

    for handler in list(package_logger.handlers):
        if getattr(handler, "_exnotic_console", False):
            package_logger.removeHandler(handler)

    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    handler.addFilter(RequestIdFilter())
    handler._exnotic_console = True  # type: ignore[attr-defined]
    package_logger.addHandler(handler)
    return package_logger


def print_error(message: str, title: str = "Error") -> None:
    """Print an error message in a red panel."""
    console.print(Panel(f"[red]{message}[/red]", title=title, border_style="red"))


def print_warning(message: str, title: str = "Not Found") -> None:
    """Print a warning message in a yellow panel."""
    console.print(
        Panel(f"[yellow]{message}[/yellow]", title=title, border_style="yellow")
    )


def truncate(text: str | None, width: int) -> str:
    if not text:
        return ""
    return text[: width - 3] + "..." if len(text) > width else text
