"""
Project loading, validation and script rendering.

A project file is a Jinja2 template over YAML: positional arguments given
after the project name are available as ``args`` and ``key=value`` arguments
as ``settings``. The rendered YAML is validated into a :class:`Project`,
which produces the shell scripts that start and stop its tmux session.
"""

import shlex
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml
from jinja2 import Environment, FileSystemLoader, TemplateError

from ..config.locator import ConfigLocator
from ..utils.logging import (
    LogContext,
    ResolutionError,
    ValidationError,
    get_logger,
)
from .models import ProjectOptions

logger = get_logger(__name__, LogContext.PROJECT)

TEMPLATE_DIR = Path(__file__).parent / "templates"

DEPRECATED_OPTIONS = {
    "tabs": "the windows option",
    "cli_args": "the tmux_options option",
    "pre": "the on_project_start hook",
    "post": "the on_project_stop hook",
}


@dataclass
class Pane:
    index: int
    commands: list[str]
    title: str | None = None


@dataclass
class Window:
    index: int
    name: str
    panes: list[Pane]
    layout: str | None = None
    root: str | None = None
    pre: list[str] = field(default_factory=list)


def _as_commands(value: Any) -> list[str]:
    """Normalize a command, a list of commands or nothing to a list."""
    if value is None:
        return []
    if isinstance(value, list):
        return [str(item) for item in value if item is not None]
    return [str(value)]


def _parse_pane(index: int, value: Any) -> Pane:
    if isinstance(value, dict):
        if len(value) != 1:
            raise ValidationError(f"Pane {index} must be a single-key mapping")
        title, commands = next(iter(value.items()))
        return Pane(index=index, commands=_as_commands(commands), title=str(title))
    return Pane(index=index, commands=_as_commands(value))


def _parse_window(index: int, entry: Any, project_root: str | None) -> Window:
    if not isinstance(entry, dict) or len(entry) != 1:
        raise ValidationError(f"Window {index} must be a single-key mapping")
    name, body = next(iter(entry.items()))
    name = "" if name is None else str(name)

    if isinstance(body, dict):
        root = body.get("root")
        if root is not None:
            root = str(Path(project_root or ".", str(root)).expanduser())
        panes_value = body.get("panes")
        if panes_value is None:
            panes = [Pane(index=0, commands=[])]
        elif isinstance(panes_value, list):
            panes = [_parse_pane(i, pane) for i, pane in enumerate(panes_value)]
        else:
            panes = [_parse_pane(0, panes_value)]
        return Window(
            index=index,
            name=name,
            panes=panes or [Pane(index=0, commands=[])],
            layout=body.get("layout"),
            root=root,
            pre=_as_commands(body.get("pre")),
        )

    if isinstance(body, list):
        panes = [_parse_pane(i, pane) for i, pane in enumerate(body)]
        return Window(index=index, name=name, panes=panes or [Pane(0, [])])

    return Window(index=index, name=name, panes=[Pane(0, _as_commands(body))])


class Project:
    """A validated project ready to render its start and stop scripts."""

    def __init__(
        self,
        data: dict[str, Any],
        options: ProjectOptions | None = None,
        path: Path | None = None,
    ):
        self.data = data
        self.options = options or ProjectOptions()
        self.path = path
        self._windows: list[Window] | None = None

    @property
    def name(self) -> str | None:
        name = (
            self.options.custom_name
            or self.data.get("name")
            or self.data.get("project_name")
        )
        if name is None or not str(name).strip():
            return None
        return str(name).replace(".", "_").replace(":", "_")

    @property
    def root(self) -> str | None:
        root = self.data.get("root") or self.data.get("project_root")
        return str(Path(str(root)).expanduser()) if root else None

    @property
    def windows(self) -> list[Window]:
        if self._windows is None:
            entries = self.data.get("windows")
            if entries is None:
                entries = self.data.get("tabs")
            if entries is None:
                entries = []
            if not isinstance(entries, list):
                raise ValidationError("The windows option must be a list")
            self._windows = [
                _parse_window(i, entry, self.root) for i, entry in enumerate(entries)
            ]
        return self._windows

    @property
    def attach(self) -> bool:
        if self.options.force_attach:
            return True
        if self.options.force_detach:
            return False
        return bool(self.data.get("attach", True))

    @property
    def tmux(self) -> str:
        """Base tmux invocation including socket and extra options."""
        parts = [shlex.quote(str(self.data.get("tmux_command") or "tmux"))]
        socket_name = self.data.get("socket_name")
        if socket_name:
            parts.append(f"-L {shlex.quote(str(socket_name))}")
        tmux_options = self.data.get("tmux_options") or self.data.get("cli_args")
        if tmux_options:
            parts.append(str(tmux_options))
        return " ".join(parts)

    @property
    def on_project_start(self) -> list[str]:
        return _as_commands(self.data.get("on_project_start") or self.data.get("pre"))

    @property
    def on_project_stop(self) -> list[str]:
        return _as_commands(self.data.get("on_project_stop") or self.data.get("post"))

    @property
    def pre_window(self) -> list[str]:
        return _as_commands(self.data.get("pre_window"))

    @property
    def startup_window(self) -> str | None:
        value = self.data.get("startup_window")
        return None if value is None else str(value)

    @property
    def startup_pane(self) -> str | None:
        value = self.data.get("startup_pane")
        return None if value is None else str(value)

    @property
    def deprecations(self) -> list[str]:
        """Warnings for legacy options present in the project file."""
        return [
            f"DEPRECATION: The {option} option has been replaced by "
            f"{replacement} and will not be supported in a future release."
            for option, replacement in DEPRECATED_OPTIONS.items()
            if option in self.data
        ]

    def validate(self) -> "Project":
        if self.options.force_attach and self.options.force_detach:
            raise ValidationError("Cannot force_attach and force_detach at the same time")
        if not self.windows:
            raise ValidationError("Your project file should include some windows.")
        if not self.name:
            raise ValidationError("Your project file didn't specify a 'project_name'")
        return self

    def render(self) -> str:
        """Shell script that creates (if needed) and attaches the session."""
        return self._render_template("start.sh.j2")

    def kill(self) -> str:
        """Shell script that stops the session."""
        return self._render_template("stop.sh.j2")

    def _render_template(self, template_name: str) -> str:
        env = Environment(
            loader=FileSystemLoader(str(TEMPLATE_DIR)),
            keep_trailing_newline=True,
            trim_blocks=True,
            lstrip_blocks=True,
        )
        env.filters["q"] = lambda value: shlex.quote(str(value))
        return env.get_template(template_name).render(project=self)


def project_file(options: ProjectOptions, locator: ConfigLocator) -> Path:
    """Pick the project file an options bag refers to.

    An explicit config path wins over a name, and a name wins over the local
    project file.
    """
    if options.project_config is not None:
        path = Path(options.project_config).expanduser()
        if not path.exists():
            raise ResolutionError(f"Project config ({path}) doesn't exist.")
        return path
    if options.name:
        if not locator.exists(options.name):
            raise ResolutionError(f"Project {options.name} doesn't exist.")
        return locator.project(options.name)
    local = locator.local_project()
    if local is None:
        raise ResolutionError("Cannot find a project to start.")
    return local


def parse_settings(args: tuple[str, ...]) -> dict[str, str]:
    """Collect ``key=value`` arguments."""
    settings = {}
    for arg in args:
        key, sep, value = arg.partition("=")
        if sep:
            settings[key] = value
    return settings


def load_project(options: ProjectOptions, locator: ConfigLocator) -> Project:
    """Resolve, render and validate the project an options bag refers to.

    Raises:
        ResolutionError: If no project file can be found
        ValidationError: If the project file is invalid
    """
    path = project_file(options, locator)
    logger.debug("Loading project file", path=str(path))

    try:
        content = Environment().from_string(path.read_text()).render(
            args=list(options.args), settings=parse_settings(options.args)
        )
    except TemplateError as e:
        raise ValidationError(f"Failed to render project file {path}: {e}")

    try:
        data = yaml.safe_load(content)
    except yaml.YAMLError as e:
        raise ValidationError(f"Failed to parse project file {path}: {e}")
    if not isinstance(data, dict):
        raise ValidationError(f"Project file {path} must contain a mapping")

    return Project(data, options, path).validate()
