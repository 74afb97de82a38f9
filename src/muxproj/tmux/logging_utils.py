"""Logging utilities for tmux operations."""

from ..utils.logging import LogContext, get_logger

tmux_logger = get_logger("muxproj.tmux", LogContext.TMUX)


def log_query(query: str, session_name: str, succeeded: bool, lines: int) -> None:
    """Log the outcome of a single introspection query."""
    message = f"Query {query} {'succeeded' if succeeded else 'failed'} - {session_name}"
    if succeeded:
        tmux_logger.debug(message, query=query, lines=lines)
    else:
        tmux_logger.warning(message, query=query)


def log_capture(session_name: str, windows: list[str], default_path: str | None) -> None:
    """Log a completed session capture."""
    message = f"Session captured - {session_name} (windows: {windows})"
    tmux_logger.info(message, window_count=len(windows), default_path=default_path)


def log_capture_failed(session_name: str, failed: list[str]) -> None:
    """Log a capture aborted by failing queries."""
    message = f"Session capture failed - {session_name} (failed queries: {failed})"
    tmux_logger.error(message, failed_queries=failed)


def log_version_check(version: str | None, minimum: str, supported: bool) -> None:
    """Log a tmux version gate evaluation."""
    message = f"tmux version {version or 'unknown'} (minimum {minimum})"
    if supported:
        tmux_logger.debug(message, supported=supported)
    else:
        tmux_logger.warning(message, supported=supported)
