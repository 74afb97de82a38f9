"""Informational commands: commands, completions, version, doctor."""

import click

from .. import __version__
from ..config.loader import MuxprojSettings
from ..tmux.service import tmux_version
from .utils import yes_no

COMMANDS = {
    "commands": "Lists commands available in muxproj",
    "completions": "Used for shell completion",
    "new": "Create a new project file and open it in your editor",
    "edit": "Alias of new",
    "open": "Alias of new",
    "start": (
        "Start a tmux session using a project's name (with an optional [ALIAS] "
        "for project reuse) or a path to a project config file (via the -p flag)"
    ),
    "stop": "Stop a tmux session using a project's muxproj config",
    "local": "Start a tmux session using ./.muxproj.y[a]ml",
    "debug": "Output the shell commands that are generated by muxproj",
    "copy": "Copy an existing project to a new project and open it in your editor",
    "delete": "Deletes given project",
    "implode": "Deletes all muxproj projects",
    "version": "Display installed muxproj version",
    "doctor": "Look for problems in your configuration",
    "list": "Lists all muxproj projects",
}

COMPLETABLE_COMMANDS = ("start", "stop", "edit", "open", "copy", "delete")


def doctor_report(settings: MuxprojSettings) -> None:
    """Print the environment checks muxproj depends on."""
    click.echo("Checking if tmux is installed ==> ", nl=False)
    yes_no(tmux_version() is not None)

    click.echo("Checking if $EDITOR is set ==> ", nl=False)
    yes_no(bool(settings.editor))

    click.echo("Checking if $SHELL is set ==> ", nl=False)
    yes_no(bool(settings.shell))


@click.command()
@click.argument("shell", required=False)
def commands(shell: str | None) -> None:
    """Lists commands available in muxproj."""
    if shell == "zsh":
        click.echo("\n".join(f"{name}:{desc}" for name, desc in COMMANDS.items()))
    else:
        click.echo("\n".join(COMMANDS))


@click.command()
@click.argument("arg")
@click.pass_context
def completions(ctx: click.Context, arg: str) -> None:
    """Used for shell completion."""
    if arg in COMPLETABLE_COMMANDS:
        click.echo("\n".join(ctx.obj["locator"].configs()))


@click.command()
def version() -> None:
    """Display installed muxproj version."""
    click.echo(f"muxproj {__version__}")


@click.command()
@click.pass_context
def doctor(ctx: click.Context) -> None:
    """Look for problems in your configuration."""
    doctor_report(ctx.obj["settings"])
