"""muxproj: manage tmux sessions from declarative YAML project files."""

__version__ = "0.1.0"

from .core.orchestrator import LifecycleOrchestrator
from .core.project import Project

__all__ = ["LifecycleOrchestrator", "Project", "__version__"]
