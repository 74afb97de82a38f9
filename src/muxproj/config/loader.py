"""Application settings loading."""

import os
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field

from ..utils.logging import ConfigurationError


def default_config_dir(environ: Mapping[str, str] | None = None) -> Path:
    """Return the XDG config directory for project files."""
    environ = os.environ if environ is None else environ
    xdg_home = environ.get("XDG_CONFIG_HOME")
    base = Path(xdg_home).expanduser() if xdg_home else Path.home() / ".config"
    return base / "muxproj"


class MuxprojSettings(BaseModel):
    """Settings model for muxproj."""

    # Project files
    config_dir: Path = Field(
        default_factory=default_config_dir,
        description="Directory holding project files",
    )

    # Environment the generated scripts and editor run in
    editor: str | None = Field(default=None, description="Editor for project files")
    shell: str | None = Field(default=None, description="User login shell")
    script_shell: str = Field(
        default="bash", description="Shell used to run generated scripts"
    )

    # Logging
    log_level: str = Field(default="WARNING", description="Logging level")
    log_file: str | None = Field(default=None, description="Log file path")
    structured_logs: bool = Field(
        default=False, description="Emit JSON structured log lines"
    )


def load_env_vars(environ: Mapping[str, str] | None = None) -> dict[str, Any]:
    """Load settings from environment variables."""
    environ = os.environ if environ is None else environ
    config: dict[str, Any] = {}
    prefix = "MUXPROJ_"

    env_mappings = {
        f"{prefix}CONFIG": "config_dir",
        f"{prefix}SCRIPT_SHELL": "script_shell",
        f"{prefix}LOG_LEVEL": "log_level",
        f"{prefix}LOG_FILE": "log_file",
        f"{prefix}STRUCTURED_LOGS": "structured_logs",
        "EDITOR": "editor",
        "SHELL": "shell",
    }

    for env_var, config_key in env_mappings.items():
        env_value = environ.get(env_var)
        if not env_value:
            continue
        if config_key == "structured_logs":
            config[config_key] = env_value.lower() in ("true", "1", "yes", "on")
        elif config_key == "config_dir":
            config[config_key] = Path(env_value).expanduser()
        else:
            config[config_key] = env_value

    if "config_dir" not in config:
        config["config_dir"] = default_config_dir(environ)

    return config


def load_settings(
    cli_overrides: dict[str, Any] | None = None,
    environ: Mapping[str, str] | None = None,
) -> MuxprojSettings:
    """Load settings from environment variables.

    Precedence order (highest to lowest):
    1. CLI flag overrides
    2. Environment variables
    3. Default values
    """
    config_data = load_env_vars(environ)

    if cli_overrides:
        config_data.update({k: v for k, v in cli_overrides.items() if v is not None})

    try:
        return MuxprojSettings(**config_data)
    except Exception as e:
        raise ConfigurationError(f"Invalid configuration: {e}")
