"""Project service: user-facing commands returning Result values."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from result import Err, Ok, Result

from projx.errors import ProjxError
from projx.models.operations import ResolutionRequest

if TYPE_CHECKING:
    from projx.data.discovery import ProjectRegistry
    from projx.data.protocols import WorkspaceProtocol
    from projx.models.buffers import Buffer
    from projx.models.operations import BatchReport, RevisitResult, SearchHit
    from projx.models.projects import ProjectSummary
    from projx.services.associations import AssociationEngine
    from projx.services.scoped_ops import ScopedOperationExecutor

logger = logging.getLogger(__name__)


class ProjectService:
    """Service for project-scoped commands."""

    def __init__(
        self,
        engine: AssociationEngine,
        executor: ScopedOperationExecutor,
        registry: ProjectRegistry,
        workspace: WorkspaceProtocol,
    ) -> None:
        self._engine = engine
        self._executor = executor
        self._registry = registry
        self._workspace = workspace

    async def list_projects(self, *, live_only: bool = True) -> Result[list[ProjectSummary], str]:
        """Projects with their open buffers, sorted by name."""
        try:
            return Ok(await self._engine.project_summaries(live_only=live_only))
        except ProjxError as exc:
            return Err(str(exc))

    async def open_files(self, paths: list[str]) -> Result[list[Buffer], str]:
        """Open files as buffers, registering the projects they belong to.

        A file that cannot be opened does not stop the others. When any file
        fails, the error names every failure and how many files did open.
        """
        opened: list[Buffer] = []
        errors: list[str] = []
        for path in paths:
            self._registry.detect(path)
            try:
                opened.append(await self._workspace.open_file(path))
            except ProjxError as exc:
                logger.warning("Failed to open %s: %s", path, exc)
                errors.append(str(exc))
        if errors:
            return Err(f"Opened {len(opened)} of {len(paths)} files; " + "; ".join(errors))
        return Ok(opened)

    async def create_scratch(self, name: str) -> Result[Buffer, str]:
        """Create and focus a buffer that visits no file."""
        if not name.strip():
            return Err("Buffer name cannot be empty")
        return Ok(await self._workspace.create_buffer(name.strip()))

    async def find_file(self) -> Result[Buffer, str]:
        """Open one file picked from the current project."""
        try:
            return Ok(await self._executor.find_file())
        except ProjxError as exc:
            return Err(str(exc))

    async def open_all(self, *, explicit: bool = False) -> Result[BatchReport, str]:
        """Open every file of the current (or a prompted) project."""
        try:
            root = await self._executor.resolve(ResolutionRequest(explicit=explicit))
            return Ok(await self._executor.open_all(root))
        except ProjxError as exc:
            return Err(str(exc))

    async def kill(self, *, explicit: bool = False) -> Result[BatchReport, str]:
        """Close every buffer of the current (or a prompted, live) project."""
        try:
            root = await self._executor.resolve(
                ResolutionRequest(explicit=explicit, live_only=True)
            )
            return Ok(await self._executor.kill(root))
        except ProjxError as exc:
            return Err(str(exc))

    async def revisit(self, *, open_file: bool = False) -> Result[RevisitResult, str]:
        try:
            return Ok(await self._executor.revisit(open_file=open_file))
        except ProjxError as exc:
            return Err(str(exc))

    async def grep(self, pattern: str) -> Result[list[SearchHit], str]:
        """Search the current project's relevant files."""
        if not pattern.strip():
            return Err("Search pattern cannot be empty")
        try:
            return Ok(await self._executor.grep(pattern))
        except ProjxError as exc:
            return Err(f"Search failed: {exc}")

    async def todo(self, tokens: tuple[str, ...]) -> Result[list[SearchHit], str]:
        """Search the current project for the given tag tokens."""
        if not tokens:
            return Err("No TODO tokens configured")
        try:
            return Ok(await self._executor.todo(tokens))
        except ProjxError as exc:
            return Err(f"Search failed: {exc}")
