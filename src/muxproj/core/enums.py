"""Shared enums for muxproj."""

from enum import Enum


class AttachOverride(Enum):
    """Command-line override of a project's attach setting."""

    UNSET = "unset"
    FORCE_ATTACH = "force_attach"
    FORCE_DETACH = "force_detach"

    @classmethod
    def from_flag(cls, attach: bool | None) -> "AttachOverride":
        """Map an ``--attach/--no-attach`` flag that may be absent."""
        if attach is None:
            return cls.UNSET
        return cls.FORCE_ATTACH if attach else cls.FORCE_DETACH


class Command(Enum):
    """Lifecycle commands driven by the orchestrator."""

    START = "start"
    STOP = "stop"
    DEBUG = "debug"
    LOCAL = "local"

    @property
    def forwards_args(self) -> bool:
        return self in (Command.START, Command.DEBUG)

    @property
    def version_gated(self) -> bool:
        return self is not Command.DEBUG
