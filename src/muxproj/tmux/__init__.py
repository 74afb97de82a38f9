"""
Tmux introspection for muxproj.

This package provides:
- Capture of a running session's windows, panes and layouts
- The tmux version gates used by the lifecycle commands
"""

from .service import (
    UNSUPPORTED_VERSION_MSG,
    SessionIntrospector,
    SessionSnapshot,
    WindowSnapshot,
    can_introspect,
    tmux_version,
    tmux_version_supported,
)

__all__ = [
    "UNSUPPORTED_VERSION_MSG",
    "SessionIntrospector",
    "SessionSnapshot",
    "WindowSnapshot",
    "can_introspect",
    "tmux_version",
    "tmux_version_supported",
]
