"""Models for scoped operations and their results."""

from __future__ import annotations

from dataclasses import dataclass

from pydantic import BaseModel

from projx.models.buffers import Buffer


@dataclass(slots=True, frozen=True)
class ResolutionRequest:
    """How to pick the target project of a scoped operation."""

    explicit: bool = False
    live_only: bool = False


@dataclass(slots=True)
class BatchReport:
    """Outcome of a batch operation over one project."""

    root: str
    succeeded: int = 0
    failed: int = 0

    def __str__(self) -> str:
        if self.failed:
            return f"{self.succeeded} succeeded, {self.failed} failed"
        return f"{self.succeeded} succeeded"


@dataclass(slots=True, frozen=True)
class RevisitResult:
    """Where a revisit landed: the project root, or a file opened inside it."""

    root: str
    buffer: Buffer | None = None


class SearchHit(BaseModel):
    """A single matching line from a project search."""

    path: str
    line_number: int
    text: str = ""

    def __str__(self) -> str:
        return f"{self.path}:{self.line_number}:{self.text}"
