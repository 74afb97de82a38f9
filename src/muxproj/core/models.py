"""Data models for project descriptors and lifecycle requests."""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field

from .enums import AttachOverride


class WindowDescriptor(BaseModel):
    """One window of a project file."""

    name: str
    layout: str
    panes: list[str] = Field(default_factory=list)


class ProjectDescriptor(BaseModel):
    """Project file contents synthesized from a live session."""

    name: str
    project_root: str | None = None
    windows: list[WindowDescriptor] = Field(default_factory=list)

    def to_config(self) -> dict[str, Any]:
        """Return the mapping written to a project file."""
        return {
            "name": self.name,
            "project_root": self.project_root,
            "windows": [
                {window.name: {"layout": window.layout, "panes": list(window.panes)}}
                for window in self.windows
            ],
        }

    def to_yaml(self) -> str:
        return yaml.safe_dump(
            self.to_config(), default_flow_style=False, sort_keys=False
        )

    @classmethod
    def from_config(cls, data: dict[str, Any]) -> "ProjectDescriptor":
        """Build a descriptor from a parsed project file mapping."""
        windows = []
        for entry in data.get("windows") or []:
            for window_name, body in entry.items():
                body = body or {}
                windows.append(
                    WindowDescriptor(
                        name=str(window_name),
                        layout=body.get("layout", ""),
                        panes=list(body.get("panes") or []),
                    )
                )
        return cls(
            name=data["name"],
            project_root=data.get("project_root"),
            windows=windows,
        )


@dataclass
class LifecycleRequest:
    """Everything one start/stop/debug/local invocation asked for."""

    name: str | None = None
    project_config: str | None = None
    args: list[str] = field(default_factory=list)
    attach: AttachOverride = AttachOverride.UNSET
    custom_name: str | None = None
    suppress_version_warning: bool = False


@dataclass(frozen=True)
class ProjectOptions:
    """Options bag handed to the project loader."""

    args: tuple[str, ...] = ()
    custom_name: str | None = None
    force_attach: bool = False
    force_detach: bool = False
    name: str | None = None
    project_config: Path | None = None
