"""
Tmux session introspection.

This module captures the window/pane/layout topology of a running tmux
session so it can be turned into a project file, and answers the version
questions the lifecycle commands gate on.
"""

import asyncio
import re
from dataclasses import dataclass, field

import libtmux
from libtmux import exc as libtmux_exc
from libtmux.common import get_version, has_gte_version

from ..utils.logging import IntrospectionError
from .logging_utils import (
    log_capture,
    log_capture_failed,
    log_query,
    log_version_check,
    tmux_logger,
)

MIN_SUPPORTED_VERSION = "1.8"
MIN_INTROSPECTION_VERSION = "1.6"

UNSUPPORTED_VERSION_MSG = (
    "WARNING: You are running an unsupported version of tmux. "
    f"muxproj supports tmux {MIN_SUPPORTED_VERSION} and newer; "
    "generated scripts may not behave as expected."
)

FIELD_SEPARATOR = "\t"
WINDOW_FORMAT = FIELD_SEPARATOR.join(
    ["#{window_name}", "#{window_layout}", "#{window_active}", "#{pane_current_path}"]
)
PANE_FORMAT = FIELD_SEPARATOR.join(["#{window_name}", "#{pane_current_path}"])
DEFAULT_PATH_RE = re.compile(r'^default-path "(.+)"$', re.MULTILINE)


@dataclass(frozen=True)
class WindowSnapshot:
    """A window as reported by ``list-windows``."""

    name: str
    layout: str
    active: bool
    current_path: str


@dataclass(frozen=True)
class SessionSnapshot:
    """Correlated result of the three introspection queries."""

    windows: list[WindowSnapshot]
    pane_paths: dict[str, list[str]] = field(default_factory=dict)
    default_path: str | None = None

    def panes_for(self, window_name: str) -> list[str]:
        """Pane paths of the window with exactly this name, in pane order."""
        return list(self.pane_paths.get(window_name, []))


@dataclass(frozen=True)
class QueryResult:
    """Output of one tmux query."""

    query: str
    succeeded: bool
    lines: list[str]


class SessionIntrospector:
    """Capture the topology of a live tmux session."""

    def __init__(self, server: libtmux.Server | None = None):
        """Initialize the introspector.

        Args:
            server: libtmux server to query; the default socket if omitted
        """
        self._server = server if server is not None else libtmux.Server()

    async def capture(self, session_name: str) -> SessionSnapshot:
        """Capture windows, panes and session options of ``session_name``.

        The three queries run concurrently. They are only correlated once all
        of them have finished, and the capture fails if any one of them did.

        Raises:
            IntrospectionError: If the session does not exist or a query failed
        """
        results = await asyncio.gather(
            asyncio.to_thread(
                self._query,
                "list-windows",
                session_name,
                "list-windows",
                "-t",
                session_name,
                "-F",
                WINDOW_FORMAT,
            ),
            asyncio.to_thread(
                self._query,
                "list-panes",
                session_name,
                "list-panes",
                "-s",
                "-t",
                session_name,
                "-F",
                PANE_FORMAT,
            ),
            asyncio.to_thread(
                self._query,
                "show-options",
                session_name,
                "show-options",
                "-t",
                session_name,
            ),
        )
        windows_result, panes_result, options_result = results

        if not all(result.succeeded for result in results):
            failed = [result.query for result in results if not result.succeeded]
            log_capture_failed(session_name, failed)
            raise IntrospectionError(
                f"Session '{session_name}' doesn't exist.",
                context={"session_name": session_name, "failed_queries": failed},
            )

        snapshot = SessionSnapshot(
            windows=parse_windows(windows_result.lines),
            pane_paths=group_panes(panes_result.lines),
            default_path=parse_default_path(options_result.lines),
        )
        log_capture(
            session_name, [w.name for w in snapshot.windows], snapshot.default_path
        )
        return snapshot

    def _query(self, query: str, session_name: str, *args: str) -> QueryResult:
        try:
            proc = self._server.cmd(*args)
        except libtmux_exc.LibTmuxException as e:
            tmux_logger.debug(f"tmux {query} raised: {e}", query=query)
            log_query(query, session_name, False, 0)
            return QueryResult(query, False, [])

        returncode = getattr(proc, "returncode", None)
        if returncode is None:
            # older libtmux releases only report stderr
            succeeded = not proc.stderr
        else:
            succeeded = returncode == 0
        lines = list(proc.stdout) if succeeded else []
        log_query(query, session_name, succeeded, len(lines))
        return QueryResult(query, succeeded, lines)


def parse_windows(lines: list[str]) -> list[WindowSnapshot]:
    """Parse ``list-windows`` output, keeping the reported order."""
    windows = []
    for line in lines:
        if not line.strip():
            continue
        name, layout, active, path = (line.split(FIELD_SEPARATOR) + ["", "", ""])[:4]
        windows.append(
            WindowSnapshot(
                name=name,
                layout=layout,
                active=active.strip() == "1",
                current_path=path,
            )
        )
    return windows


def group_panes(lines: list[str]) -> dict[str, list[str]]:
    """Group ``list-panes`` output by window name."""
    groups: dict[str, list[str]] = {}
    for line in lines:
        if not line.strip():
            continue
        window_name, _, path = line.partition(FIELD_SEPARATOR)
        groups.setdefault(window_name, []).append(path)
    return groups


def parse_default_path(lines: list[str]) -> str | None:
    """Extract the session ``default-path`` option, if set."""
    match = DEFAULT_PATH_RE.search("\n".join(lines))
    return match.group(1) if match else None


def tmux_version() -> str | None:
    """Return the installed tmux version, or None when tmux is missing."""
    try:
        return str(get_version())
    except libtmux_exc.LibTmuxException:
        return None


def _has_minimum(version: str) -> bool:
    try:
        return has_gte_version(version)
    except libtmux_exc.LibTmuxException:
        return False


def tmux_version_supported() -> bool:
    """Whether the installed tmux meets the supported minimum."""
    supported = _has_minimum(MIN_SUPPORTED_VERSION)
    log_version_check(tmux_version(), MIN_SUPPORTED_VERSION, supported)
    return supported


def can_introspect() -> bool:
    """Whether the installed tmux can report session topology."""
    return _has_minimum(MIN_INTROSPECTION_VERSION)
