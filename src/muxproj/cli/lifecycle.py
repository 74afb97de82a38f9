"""Session lifecycle commands: start, stop, local, debug."""

import sys

import click

from ..core.enums import AttachOverride
from ..core.models import LifecycleRequest
from ..core.orchestrator import LifecycleOrchestrator, run_script
from ..tmux.service import tmux_version_supported
from .utils import error_handler, show_continuation_prompt

attach_option = click.option(
    "-a",
    "--attach/--no-attach",
    default=None,
    help="Attach to tmux session after creation.",
)
custom_name_option = click.option(
    "--name", "-n", "custom_name", help="Give the session a different name"
)
project_config_option = click.option(
    "--project-config", "-p", help="Path to project config file"
)
suppress_option = click.option(
    "--suppress-tmux-version-warning",
    is_flag=True,
    help="Don't show a warning for unsupported tmux versions",
)


def get_orchestrator(ctx: click.Context) -> LifecycleOrchestrator:
    settings = ctx.obj["settings"]
    return LifecycleOrchestrator(
        ctx.obj["locator"],
        version_supported=tmux_version_supported,
        confirm=show_continuation_prompt,
        echo=click.secho,
        run_script=lambda script: run_script(script, settings.script_shell),
    )


@click.command()
@click.argument("name", required=False)
@click.argument("args", nargs=-1)
@attach_option
@custom_name_option
@project_config_option
@suppress_option
@click.pass_context
@error_handler
def start(
    ctx: click.Context,
    name: str | None,
    args: tuple[str, ...],
    attach: bool | None,
    custom_name: str | None,
    project_config: str | None,
    suppress_tmux_version_warning: bool,
) -> None:
    """Start a tmux session from a project name or config file.

    NAME: Project name (with -p, passed on as the first argument)
    ARGS: Extra arguments available to the project file
    """
    request = LifecycleRequest(
        name=name,
        project_config=project_config,
        args=list(args),
        attach=AttachOverride.from_flag(attach),
        custom_name=custom_name,
        suppress_version_warning=suppress_tmux_version_warning,
    )
    sys.exit(get_orchestrator(ctx).start(request))


@click.command()
@click.argument("name", required=False)
@project_config_option
@suppress_option
@click.pass_context
@error_handler
def stop(
    ctx: click.Context,
    name: str | None,
    project_config: str | None,
    suppress_tmux_version_warning: bool,
) -> None:
    """Stop a tmux session using a project's config."""
    request = LifecycleRequest(
        name=name,
        project_config=project_config,
        suppress_version_warning=suppress_tmux_version_warning,
    )
    sys.exit(get_orchestrator(ctx).stop(request))


@click.command()
@attach_option
@suppress_option
@click.pass_context
@error_handler
def local(
    ctx: click.Context, attach: bool | None, suppress_tmux_version_warning: bool
) -> None:
    """Start a tmux session using ./.muxproj.y[a]ml."""
    request = LifecycleRequest(
        attach=AttachOverride.from_flag(attach),
        suppress_version_warning=suppress_tmux_version_warning,
    )
    sys.exit(get_orchestrator(ctx).local(request))


@click.command()
@click.argument("name", required=False)
@click.argument("args", nargs=-1)
@attach_option
@custom_name_option
@project_config_option
@click.pass_context
@error_handler
def debug(
    ctx: click.Context,
    name: str | None,
    args: tuple[str, ...],
    attach: bool | None,
    custom_name: str | None,
    project_config: str | None,
) -> None:
    """Output the shell commands that are generated for a project."""
    request = LifecycleRequest(
        name=name,
        project_config=project_config,
        args=list(args),
        attach=AttachOverride.from_flag(attach),
        custom_name=custom_name,
    )
    click.echo(get_orchestrator(ctx).debug(request), nl=False)
