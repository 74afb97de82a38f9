"""
Pytest configuration and shared fixtures for muxproj tests.
"""

import logging
import sys
from pathlib import Path

import pytest

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from muxproj.config.locator import ConfigLocator
from muxproj.tmux.service import SessionSnapshot, WindowSnapshot


@pytest.fixture(autouse=True)
def reset_logging():
    """Restore root logger handlers replaced by CLI invocations."""
    root = logging.getLogger()
    handlers = root.handlers[:]
    level = root.level

    yield

    root.handlers[:] = handlers
    root.setLevel(level)


@pytest.fixture
def config_dir(tmp_path: Path) -> Path:
    """Provide an empty project directory."""
    directory = tmp_path / "config"
    directory.mkdir()
    return directory


@pytest.fixture
def workdir(tmp_path: Path) -> Path:
    """Provide a working directory for local project files."""
    directory = tmp_path / "work"
    directory.mkdir()
    return directory


@pytest.fixture
def locator(config_dir: Path, workdir: Path) -> ConfigLocator:
    """Locator over the temporary directories."""
    return ConfigLocator(config_dir, workdir)


@pytest.fixture
def write_project(config_dir: Path):
    """Write a project file into the project directory."""

    def _write(name: str, content: str, directory: Path | None = None) -> Path:
        path = (directory or config_dir) / f"{name}.yml"
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content)
        return path

    return _write


@pytest.fixture
def sample_project_yaml() -> str:
    return (
        "name: sample\n"
        "root: /tmp/sample\n"
        "windows:\n"
        "  - editor:\n"
        "      layout: main-vertical\n"
        "      panes:\n"
        "        - vim\n"
        "        - git status\n"
        "  - server: make serve\n"
    )


@pytest.fixture
def example_snapshot() -> SessionSnapshot:
    """Two windows, the first active, three panes in total."""
    return SessionSnapshot(
        windows=[
            WindowSnapshot(name="one", layout="tiled", active=True, current_path="/tmp/a"),
            WindowSnapshot(name="two", layout="tiled", active=False, current_path="/tmp/b"),
        ],
        pane_paths={"one": ["/tmp/a"], "two": ["/tmp/b", "/tmp/c"]},
        default_path=None,
    )
