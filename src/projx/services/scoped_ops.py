"""Scoped operations: resolve a target project, then act on it."""

from __future__ import annotations

import logging
import os
from typing import TYPE_CHECKING

from projx.data.search import todo_pattern
from projx.errors import (
    NoProjectsError,
    NotInProjectError,
    ResourceCloseError,
    ResourceOpenError,
)
from projx.models.operations import BatchReport, ResolutionRequest, RevisitResult

if TYPE_CHECKING:
    from projx.data.protocols import (
        FileListerProtocol,
        ProjectRegistryProtocol,
        SearcherProtocol,
        WorkspaceProtocol,
    )
    from projx.models.buffers import Buffer
    from projx.models.operations import SearchHit
    from projx.services.associations import AssociationEngine
    from projx.services.selection import Selector

logger = logging.getLogger(__name__)


class ScopedOperationExecutor:
    """Resolves which project an operation targets and applies it.

    Resolution always completes before any buffer is touched, so a failed
    or cancelled resolution leaves the workspace unchanged.
    """

    def __init__(
        self,
        *,
        engine: AssociationEngine,
        registry: ProjectRegistryProtocol,
        workspace: WorkspaceProtocol,
        selector: Selector,
        file_lister: FileListerProtocol,
        searcher: SearcherProtocol,
    ) -> None:
        self._engine = engine
        self._registry = registry
        self._workspace = workspace
        self._selector = selector
        self._file_lister = file_lister
        self._searcher = searcher

    async def resolve(self, request: ResolutionRequest) -> str:
        """Return the target root: the focused buffer's project, or a prompted one."""
        if request.explicit:
            return await self._prompt_for_root(live_only=request.live_only)
        return await self.current_root()

    async def current_root(self) -> str:
        focused = await self._workspace.focused_buffer()
        if focused is None or focused.path is None:
            raise NotInProjectError()
        root = self._registry.root_for_path(focused.path)
        if root is None:
            raise NotInProjectError(focused.path)
        return root

    async def _prompt_for_root(self, *, live_only: bool) -> str:
        index = await self._engine.name_root_index(live_only=live_only)
        if not index:
            raise NoProjectsError("No projects have open buffers" if live_only else "No projects")
        choices = sorted(index.items(), key=lambda item: item[0].lower())
        return self._selector.select("Project: ", choices)

    async def kill(self, root: str) -> BatchReport:
        """Close every buffer visiting a file of the project at ``root``."""
        table = await self._engine.build_associations()
        report = BatchReport(root=root)
        for buffer in table.get(root, []):
            try:
                await self._workspace.close_buffer(buffer)
            except ResourceCloseError as exc:
                logger.warning("Failed to close %s: %s", buffer.name, exc)
                report.failed += 1
                continue
            report.succeeded += 1
        logger.info("Killed buffers of %s: %s", root, report)
        return report

    async def open_all(self, root: str) -> BatchReport:
        """Open every file of the project at ``root``, keeping the current focus."""
        files = self._file_lister.list_files(root, self._registry.metadata(root))
        previous = await self._workspace.focused_buffer()
        report = BatchReport(root=root)
        try:
            for relative in files:
                try:
                    await self._workspace.open_file(os.path.join(root, relative))
                except ResourceOpenError as exc:
                    logger.warning("Failed to open %s: %s", relative, exc)
                    report.failed += 1
                    continue
                report.succeeded += 1
        finally:
            await self._workspace.focus(previous)
        logger.info("Opened files of %s: %s", root, report)
        return report

    async def find_file(self, root: str | None = None) -> Buffer:
        """Prompt for one project file by its display label and open it."""
        if root is None:
            root = await self.current_root()
        metadata = self._registry.metadata(root)
        files = self._file_lister.list_files(root, metadata)
        choices = [(metadata.file_name_map(root, relative), relative) for relative in files]
        relative = self._selector.select("Find file: ", choices)
        return await self._workspace.open_file(os.path.join(root, relative))

    async def revisit(self, *, open_file: bool = False) -> RevisitResult:
        """Prompt for any known project; land on its root or on a file inside it."""
        root = await self._prompt_for_root(live_only=False)
        if not open_file:
            return RevisitResult(root=root)
        return RevisitResult(root=root, buffer=await self.find_file(root))

    async def grep(
        self, pattern: str, root: str | None = None, *, whole_word: bool = False
    ) -> list[SearchHit]:
        """Search the relevant files of the current (or given) project."""
        if root is None:
            root = await self.current_root()
        files = self._file_lister.list_files(root, self._registry.metadata(root))
        return self._searcher.search(pattern, root, files, whole_word=whole_word)

    async def todo(self, tokens: tuple[str, ...], root: str | None = None) -> list[SearchHit]:
        """Find lines tagged with any of ``tokens`` in the current project."""
        return await self.grep(todo_pattern(tokens), root, whole_word=True)
