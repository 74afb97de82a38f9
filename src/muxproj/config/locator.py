"""Project file location.

Every command that needs a project file goes through :class:`ConfigLocator`,
so name-based lookup, the local ``./.muxproj.yml`` convention and template
instantiation behave the same everywhere.
"""

from pathlib import Path

from jinja2 import Environment, FileSystemLoader, StrictUndefined

from ..utils.logging import LogContext, audit_log, get_logger
from .loader import MuxprojSettings

logger = get_logger(__name__, LogContext.CONFIG)

LOCAL_DEFAULTS = (".muxproj.yml", ".muxproj.yaml")
PROJECT_SUFFIXES = (".yml", ".yaml")
DEFAULT_TEMPLATE = "default.yml"
SAMPLE_TEMPLATE = Path(__file__).parent / "templates" / "sample.yml.j2"


class ConfigLocator:
    """Resolve project names to project file paths."""

    def __init__(
        self,
        config_dir: Path,
        cwd: Path,
        extra_dirs: tuple[Path, ...] = (),
    ):
        """Initialize the locator.

        Args:
            config_dir: Directory new project files are written to
            cwd: Directory searched for local project files
            extra_dirs: Additional read-only directories searched by name
        """
        self.config_dir = config_dir
        self.cwd = cwd
        self.extra_dirs = extra_dirs

    @classmethod
    def from_settings(cls, settings: MuxprojSettings, cwd: Path) -> "ConfigLocator":
        legacy = Path.home() / ".muxproj"
        return cls(settings.config_dir, cwd, extra_dirs=(legacy,))

    def directories(self) -> list[Path]:
        """Return every existing directory that holds project files."""
        dirs = [self.config_dir] + [d for d in self.extra_dirs if d.is_dir()]
        seen: list[Path] = []
        for directory in dirs:
            if directory not in seen:
                seen.append(directory)
        return seen

    def resolve(self, name: str, local: bool = False) -> Path:
        """Return the path a project file for ``name`` lives at.

        ``local`` selects the well-known file in the working directory and
        ignores ``name``.
        """
        if local:
            return self.cwd / LOCAL_DEFAULTS[0]
        return self.config_dir / f"{name}{PROJECT_SUFFIXES[0]}"

    def find_or_create(self, name: str, local: bool = False) -> Path:
        """Return the project file for ``name``, creating it from a template."""
        path = self.resolve(name, local)
        if path.exists():
            logger.debug("Using existing project file", path=str(path))
            return path
        return self._generate_project_file(name, path)

    def project(self, name: str) -> Path:
        """Find an existing project file by name, else the default path."""
        for directory in self.directories():
            if not directory.is_dir():
                continue
            for suffix in PROJECT_SUFFIXES:
                matches = sorted(directory.glob(f"**/{name}{suffix}"))
                if matches:
                    return matches[0]
        return self.resolve(name)

    def exists(self, name: str) -> bool:
        return self.project(name).exists()

    def local_project(self) -> Path | None:
        """Return the first local project file in the working directory."""
        for filename in LOCAL_DEFAULTS:
            path = self.cwd / filename
            if path.exists():
                return path
        return None

    def configs(self) -> list[str]:
        """List project names across all project directories."""
        names: set[str] = set()
        for directory in self.directories():
            if not directory.is_dir():
                continue
            for path in directory.rglob("*"):
                if path.suffix not in PROJECT_SUFFIXES or not path.is_file():
                    continue
                if path.name == DEFAULT_TEMPLATE and path.parent == directory:
                    continue
                names.add(path.relative_to(directory).with_suffix("").as_posix())
        return sorted(names)

    def has_default_template(self) -> bool:
        return (self.config_dir / DEFAULT_TEMPLATE).exists()

    def template_path(self) -> Path:
        """Template new project files are generated from."""
        if self.has_default_template():
            return self.config_dir / DEFAULT_TEMPLATE
        return SAMPLE_TEMPLATE

    @audit_log("generate project file")
    def _generate_project_file(self, name: str, path: Path) -> Path:
        template_path = self.template_path()
        env = Environment(
            loader=FileSystemLoader(str(template_path.parent)),
            undefined=StrictUndefined,
            keep_trailing_newline=True,
        )
        content = env.get_template(template_path.name).render(name=name)

        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content)

        logger.info(
            "Project file generated", path=str(path), template=str(template_path)
        )
        return path
