"""
Lifecycle orchestration for start, stop, debug and local.

Each invocation moves through the same states::

    ParseRequest -> ResolveConfigSource -> [VersionGate] -> Validate -> Render|Kill

No path reaches render or kill without a project that passed validation.
"""

import subprocess
from collections.abc import Callable
from pathlib import Path

from ..config.locator import ConfigLocator
from ..tmux.service import UNSUPPORTED_VERSION_MSG
from ..utils.logging import LogContext, get_logger
from .enums import AttachOverride, Command
from .models import LifecycleRequest, ProjectOptions
from .project import Project, load_project

logger = get_logger(__name__, LogContext.LIFECYCLE)

ProjectLoader = Callable[[ProjectOptions, ConfigLocator], Project]
Echo = Callable[..., None]


def run_script(script: str, shell: str = "bash") -> int:
    """Run ``script`` in a child shell and return its exit status."""
    logger.debug("Running generated script", shell=shell)
    completed = subprocess.run([shell, "-c", script], check=False)
    return completed.returncode


class LifecycleOrchestrator:
    """Turn lifecycle requests into validated projects and run their scripts."""

    def __init__(
        self,
        locator: ConfigLocator,
        *,
        version_supported: Callable[[], bool],
        confirm: Callable[[], None],
        echo: Echo,
        run_script: Callable[[str], int] = run_script,
        project_loader: ProjectLoader = load_project,
    ):
        """Initialize the orchestrator.

        Args:
            locator: Resolves project names to project files
            version_supported: Predicate for the tmux version gate
            confirm: Blocks until the user acknowledges a warning
            echo: Writes a message for the user (``err``/``fg`` keywords)
            run_script: Runs a generated script, returning its exit status
            project_loader: Builds a validated project from an options bag
        """
        self.locator = locator
        self.version_supported = version_supported
        self.confirm = confirm
        self.echo = echo
        self.run_script = run_script
        self.project_loader = project_loader

    def start(self, request: LifecycleRequest) -> int:
        project = self.prepare(Command.START, request)
        self._show_deprecations(project, prompt=True)
        return self.run_script(project.render())

    def stop(self, request: LifecycleRequest) -> int:
        project = self.prepare(Command.STOP, request)
        return self.run_script(project.kill())

    def local(self, request: LifecycleRequest) -> int:
        project = self.prepare(Command.LOCAL, request)
        self._show_deprecations(project, prompt=True)
        return self.run_script(project.render())

    def debug(self, request: LifecycleRequest) -> str:
        project = self.prepare(Command.DEBUG, request)
        self._show_deprecations(project, prompt=False)
        return project.render()

    def prepare(self, command: Command, request: LifecycleRequest) -> Project:
        """Run the request up to and including validation.

        Raises:
            ResolutionError: If the project file cannot be found
            ValidationError: If the project file is invalid
        """
        options = self.build_options(command, request)
        logger.info(
            f"{command.value} requested",
            command=command.value,
            project=options.name,
            project_config=str(options.project_config)
            if options.project_config
            else None,
        )

        if command.version_gated and self.version_warning(
            request.suppress_version_warning
        ):
            self.echo(UNSUPPORTED_VERSION_MSG, fg="red")
            self.confirm()

        return self.project_loader(options, self.locator)

    def build_options(
        self, command: Command, request: LifecycleRequest
    ) -> ProjectOptions:
        """Apply config-path precedence and the attach override."""
        name = request.name
        args = list(request.args)

        # An explicit project config replaces name-based resolution
        if request.project_config:
            if name and command.forwards_args:
                args.insert(0, name)
            name = None

        if command is Command.LOCAL:
            name = None

        if not command.forwards_args:
            args = []

        return ProjectOptions(
            args=tuple(args),
            custom_name=request.custom_name,
            force_attach=request.attach is AttachOverride.FORCE_ATTACH,
            force_detach=request.attach is AttachOverride.FORCE_DETACH,
            name=name,
            project_config=Path(request.project_config)
            if request.project_config
            else None,
        )

    def version_warning(self, suppressed: bool) -> bool:
        return not suppressed and not self.version_supported()

    def _show_deprecations(self, project: Project, prompt: bool) -> None:
        deprecations = project.deprecations
        if not deprecations:
            return
        for deprecation in deprecations:
            self.echo(deprecation, fg="red", err=True)
        if prompt:
            self.confirm()
