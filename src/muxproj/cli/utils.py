"""CLI utilities for output formatting and common functionality."""

import shutil
import sys
from collections.abc import Callable
from functools import wraps
from typing import Any

import click

from ..utils.logging import LogContext, MuxprojException, get_logger

logger = get_logger(__name__, LogContext.CLI)


class CliError(Exception):
    """Exception for CLI errors."""

    def __init__(self, message: str, exit_code: int = 1):
        """Initialize CLI error.

        Args:
            message: Error message
            exit_code: Exit code for the CLI
        """
        super().__init__(message)
        self.message = message
        self.exit_code = exit_code


def error_handler(func: Callable[..., Any]) -> Callable[..., Any]:
    """Decorator for handling CLI errors."""

    @wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            return func(*args, **kwargs)
        except (click.ClickException, click.exceptions.Exit, click.Abort):
            raise
        except CliError as e:
            click.echo(click.style(f"Error: {e.message}", fg="red"), err=True)
            sys.exit(e.exit_code)
        except MuxprojException as e:
            logger.error(f"{type(e).__name__}: {e.message}", error_context=e.context)
            click.echo(click.style(f"Error: {e.message}", fg="red"), err=True)
            sys.exit(1)
        except Exception as e:
            logger.error(f"Unexpected error in {func.__name__}", exception=e)
            click.echo(click.style(f"Unexpected error: {e}", fg="red"), err=True)
            sys.exit(1)

    return wrapper


def success_message(message: str) -> None:
    """Display a success message."""
    click.echo(click.style(f"✓ {message}", fg="green"))


def show_continuation_prompt() -> None:
    """Block until the user presses ENTER."""
    click.echo()
    click.prompt(
        "Press ENTER to continue.", default="", show_default=False, prompt_suffix=""
    )


def yes_no(condition: bool) -> None:
    """Print a colored Yes/No check result."""
    if condition:
        click.echo(click.style("Yes", fg="green"))
    else:
        click.echo(click.style("No", fg="red"))


def output_columns(items: list[str], width: int | None = None) -> None:
    """Print items in as many columns as fit the terminal."""
    if not items:
        return
    width = width or shutil.get_terminal_size((80, 24)).columns
    cell = max(len(item) for item in items) + 2
    per_row = max(1, width // cell)
    for start in range(0, len(items), per_row):
        row = items[start : start + per_row]
        click.echo("".join(item.ljust(cell) for item in row).rstrip())
