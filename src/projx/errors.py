"""Error taxonomy for project-scoped operations."""

from __future__ import annotations


class ProjxError(Exception):
    """Base class for errors surfaced to the user as messages."""


class NoProjectsError(ProjxError):
    """No project is declared, or no project matched the lookup."""

    def __init__(self, message: str = "No projects are defined") -> None:
        super().__init__(message)


class NotInProjectError(ProjxError):
    """The focused buffer does not belong to any known project."""

    def __init__(self, path: str | None = None) -> None:
        self.path = path
        if path is None:
            message = "The current buffer is not visiting a file in any project"
        else:
            message = f"{path} is not part of any known project"
        super().__init__(message)


class SelectionCancelledError(ProjxError):
    """The user aborted a prompt or picked something that is not on offer."""

    def __init__(self, message: str = "Selection cancelled") -> None:
        super().__init__(message)


class ResourceCloseError(ProjxError):
    """Closing a single buffer failed."""


class ResourceOpenError(ProjxError):
    """Opening a single file as a buffer failed."""


class ExternalToolError(ProjxError):
    """File listing or search tooling failed."""
