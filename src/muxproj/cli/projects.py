"""Project file commands: new, copy, delete, implode, list."""

import asyncio
import shutil
from pathlib import Path

import click

from ..config.locator import ConfigLocator
from ..core.synthesizer import save_descriptor, synthesize
from ..tmux.service import SessionIntrospector, can_introspect
from ..utils.logging import IntrospectionError, LogContext, audit_log, get_logger
from .info import doctor_report
from .utils import CliError, error_handler, output_columns, success_message

logger = get_logger(__name__, LogContext.CLI)


def create_from_session(
    locator: ConfigLocator,
    name: str,
    session: str,
    local: bool = False,
    introspector: SessionIntrospector | None = None,
) -> Path:
    """Capture ``session`` and write it out as project ``name``."""
    if not can_introspect():
        raise IntrospectionError(
            "Creating projects from sessions is unsupported for tmux version 1.5 or lower."
        )

    introspector = introspector or SessionIntrospector()
    snapshot = asyncio.run(introspector.capture(session))
    descriptor = synthesize(name, snapshot)
    return save_descriptor(descriptor, locator.resolve(name, local))


def open_in_editor(ctx: click.Context, path: Path) -> None:
    """Open a project file in the configured editor, or run the doctor."""
    settings = ctx.obj["settings"]
    if not settings.editor:
        doctor_report(settings)
        return
    try:
        click.edit(filename=str(path), editor=settings.editor)
    except click.ClickException as e:
        logger.warning(f"Editor failed: {e.format_message()}", path=str(path))
        doctor_report(settings)


@audit_log("copy project file")
def copy_project_file(source: Path, destination: Path) -> Path:
    destination.parent.mkdir(parents=True, exist_ok=True)
    shutil.copyfile(source, destination)
    return destination


@click.command()
@click.argument("name")
@click.argument("session", required=False)
@click.option(
    "--local",
    "-l",
    is_flag=True,
    help="Create local project file at ./.muxproj.yml",
)
@click.pass_context
@error_handler
def new(ctx: click.Context, name: str, session: str | None, local: bool) -> None:
    """Create a new project file and open it in your editor.

    NAME: Project name
    SESSION: Running tmux session to build the project from
    """
    locator = ctx.obj["locator"]
    if session:
        path = create_from_session(locator, name, session, local)
        success_message(f"Created project '{name}' from session '{session}' at {path}")
        return

    path = locator.find_or_create(name, local)
    open_in_editor(ctx, path)


@click.command()
@click.argument("existing")
@click.argument("new")
@click.pass_context
@error_handler
def copy(ctx: click.Context, existing: str, new: str) -> None:
    """Copy an existing project to a new project and open it in your editor."""
    locator = ctx.obj["locator"]
    if not locator.exists(existing):
        raise CliError(f"Project {existing} doesn't exist!")

    existing_path = locator.project(existing)
    new_path = locator.project(new)
    new_exists = locator.exists(new)

    question = f"{new} already exists, would you like to overwrite it?"
    if not new_exists or click.confirm(click.style(question, fg="red")):
        if new_exists:
            click.echo(f"Overwriting {new}")
        copy_project_file(existing_path, new_path)

    open_in_editor(ctx, new_path)


@click.command()
@click.argument("projects", nargs=-1)
@click.pass_context
@error_handler
def delete(ctx: click.Context, projects: tuple[str, ...]) -> None:
    """Deletes given projects."""
    locator = ctx.obj["locator"]
    for project in projects:
        if not locator.exists(project):
            click.echo(f"{project} does not exist!")
            continue
        question = f"Are you sure you want to delete {project}?"
        if click.confirm(click.style(question, fg="red")):
            locator.project(project).unlink()
            logger.info("Project deleted", project=project)
            click.echo(f"Deleted {project}")


@click.command()
@click.pass_context
@error_handler
def implode(ctx: click.Context) -> None:
    """Deletes all muxproj projects."""
    locator = ctx.obj["locator"]
    question = "Are you sure you want to delete all muxproj configs?"
    if click.confirm(click.style(question, fg="red")):
        for directory in locator.directories():
            if directory.is_dir():
                shutil.rmtree(directory)
                logger.info("Project directory removed", path=str(directory))
        click.echo("Deleted all muxproj projects.")


@click.command("list")
@click.option(
    "--newline",
    "-n",
    is_flag=True,
    help="Force output to be one entry per line.",
)
@click.pass_context
def list_projects(ctx: click.Context, newline: bool) -> None:
    """Lists all muxproj projects."""
    configs = ctx.obj["locator"].configs()
    click.echo("muxproj projects:")
    if newline:
        if configs:
            click.echo("\n".join(configs))
    else:
        output_columns(configs)
