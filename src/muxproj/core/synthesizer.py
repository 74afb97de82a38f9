"""Turn a captured tmux session into a project descriptor."""

from pathlib import Path

import yaml
from pydantic import ValidationError as SchemaError

from ..tmux.service import SessionSnapshot
from ..utils.logging import LogContext, ValidationError, audit_log, get_logger
from .models import ProjectDescriptor, WindowDescriptor

logger = get_logger(__name__, LogContext.PROJECT)


def infer_project_root(snapshot: SessionSnapshot) -> str | None:
    """Session default path first, then the active window's path."""
    if snapshot.default_path:
        return snapshot.default_path
    for window in snapshot.windows:
        if window.active:
            return window.current_path
    return None


def synthesize(name: str, snapshot: SessionSnapshot) -> ProjectDescriptor:
    """Merge a session snapshot into an ordered project descriptor.

    Windows keep the order tmux reported them in. Each window gets one
    ``cd`` directive per pane whose window name matches exactly.
    """
    windows = [
        WindowDescriptor(
            name=window.name,
            layout=window.layout,
            panes=[f"cd {path}" for path in snapshot.panes_for(window.name)],
        )
        for window in snapshot.windows
    ]
    descriptor = ProjectDescriptor(
        name=name, project_root=infer_project_root(snapshot), windows=windows
    )
    logger.debug(
        "Project synthesized",
        project=name,
        project_root=descriptor.project_root,
        window_count=len(windows),
    )
    return descriptor


@audit_log("save project descriptor")
def save_descriptor(descriptor: ProjectDescriptor, path: Path) -> Path:
    """Write ``descriptor`` to ``path``. Not atomic."""
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w") as f:
        f.write(descriptor.to_yaml())
    return path


def load_descriptor(path: Path) -> ProjectDescriptor:
    """Read a project file written by :func:`save_descriptor`."""
    with open(path) as f:
        try:
            data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ValidationError(f"Invalid YAML in project file {path}: {e}")
    try:
        return ProjectDescriptor.from_config(data)
    except (KeyError, AttributeError, TypeError, SchemaError) as e:
        raise ValidationError(f"Malformed project file {path}: {e}")
