"""Console output helpers for the CLI."""

import logging

from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape

console = Console()


def print_success(message: str) -> None:
    """Print a success message."""
    console.print(f"[green]✓[/green] {escape(message)}")


def print_error(message: str) -> None:
    """Print an error message."""
    console.print(f"[red]✗[/red] {escape(message)}")


def configure_logging(verbose: bool) -> None:
    """Route package logging through rich.

    Args:
        verbose: Show debug messages instead of only warnings and above.
    """
    handler = RichHandler(console=console, show_path=False, markup=False)
    logger = logging.getLogger("msipack")
    logger.handlers = [handler]
    logger.setLevel(logging.DEBUG if verbose else logging.WARNING)
    logger.propagate = False
