"""Protocol definitions for the collaborators around the association engine."""

from __future__ import annotations

from typing import Protocol

from projx.models.buffers import Buffer
from projx.models.operations import SearchHit
from projx.models.projects import ProjectMetadata


class ProjectRegistryProtocol(Protocol):
    """Read-only view of the declared projects."""

    def known_roots(self) -> list[str]: ...

    def root_for_path(self, path: str) -> str | None: ...

    def metadata(self, root: str) -> ProjectMetadata: ...


class ResourceEnumeratorProtocol(Protocol):
    """Enumerates the live buffers and reports which one has focus."""

    async def list_buffers(self) -> list[Buffer]: ...

    async def focused_buffer(self) -> Buffer | None: ...


class WorkspaceProtocol(ResourceEnumeratorProtocol, Protocol):
    """Buffer primitives the scoped operations act through."""

    async def open_file(self, path: str, *, focus: bool = True) -> Buffer: ...

    async def create_buffer(self, name: str, *, focus: bool = True) -> Buffer: ...

    async def close_buffer(self, buffer: Buffer) -> None: ...

    async def focus(self, buffer: Buffer | None) -> None: ...


class FileListerProtocol(Protocol):
    """Lists a project's files as sorted root-relative paths."""

    def list_files(self, root: str, metadata: ProjectMetadata) -> list[str]: ...


class SearcherProtocol(Protocol):
    """Runs a text search over a set of root-relative files."""

    def search(
        self, pattern: str, root: str, files: list[str], *, whole_word: bool = False
    ) -> list[SearchHit]: ...
