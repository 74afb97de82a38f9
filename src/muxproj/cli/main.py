"""Main CLI entry point for muxproj."""

import sys
from pathlib import Path

import click

from .. import __version__
from ..config.loader import load_settings
from ..config.locator import ConfigLocator
from ..utils.logging import ConfigurationError, setup_logging
from .info import COMMANDS, commands, completions, doctor, version
from .lifecycle import debug, local, start, stop
from .projects import copy, delete, implode, list_projects, new

ALIASES = {
    "open": "new",
    "edit": "new",
    "o": "new",
    "e": "new",
    "n": "new",
    "s": "start",
    "st": "stop",
    ".": "local",
    "c": "copy",
    "cp": "copy",
    "d": "delete",
    "rm": "delete",
    "i": "implode",
    "l": "list",
    "ls": "list",
}

RESERVED_COMMANDS = frozenset(COMMANDS) | frozenset(ALIASES) | {"-v", "help"}


class AliasedGroup(click.Group):
    """Click group that also accepts the short command aliases."""

    def get_command(self, ctx: click.Context, cmd_name: str) -> click.Command | None:
        return super().get_command(ctx, ALIASES.get(cmd_name, cmd_name))

    def resolve_command(
        self, ctx: click.Context, args: list[str]
    ) -> tuple[str | None, click.Command | None, list[str]]:
        _, cmd, args = super().resolve_command(ctx, args)
        return (cmd.name if cmd else None), cmd, args


@click.group(cls=AliasedGroup)
@click.version_option(__version__, "-v", "--version", prog_name="muxproj")
@click.option("--verbose", is_flag=True, help="Enable debug logging on stderr")
@click.option(
    "--log-file",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Also write logs to this file",
)
@click.pass_context
def main(ctx: click.Context, verbose: bool, log_file: Path | None) -> None:
    """muxproj - create and manage tmux sessions from YAML project files.

    Projects live in ~/.config/muxproj (or $MUXPROJ_CONFIG) or in a local
    ./.muxproj.yml. Running `muxproj NAME` starts project NAME.
    """
    cli_overrides = {
        "log_level": "DEBUG" if verbose else None,
        "log_file": str(log_file) if log_file else None,
    }
    try:
        settings = load_settings(cli_overrides)
    except ConfigurationError as e:
        raise click.UsageError(e.message)

    setup_logging(
        settings.log_level,
        Path(settings.log_file) if settings.log_file else None,
        enable_structured=settings.structured_logs,
    )

    ctx.ensure_object(dict)
    ctx.obj["settings"] = settings
    ctx.obj["locator"] = ConfigLocator.from_settings(settings, Path.cwd())


for command in (
    commands,
    completions,
    new,
    start,
    stop,
    local,
    debug,
    copy,
    delete,
    implode,
    list_projects,
    version,
    doctor,
):
    main.add_command(command)


def bootstrap_args(args: list[str], locator: ConfigLocator) -> list[str]:
    """Rewrite bare invocations into the command they stand for.

    No arguments with a local project file means ``local``; a first argument
    that is not a command but names an existing project means ``start``.
    """
    if not args and locator.local_project() is not None:
        return ["local"]
    name = args[0] if args else None
    if (
        name
        and not name.startswith("-")
        and name not in RESERVED_COMMANDS
        and locator.exists(name)
    ):
        return ["start", *args]
    return list(args)


def run() -> None:
    """Console script entry point."""
    args = sys.argv[1:]
    try:
        locator = ConfigLocator.from_settings(load_settings(), Path.cwd())
    except ConfigurationError:
        # main reports the error as a usage error
        main(args=args, prog_name="muxproj")
        return
    main(args=bootstrap_args(args, locator), prog_name="muxproj")


if __name__ == "__main__":
    run()
