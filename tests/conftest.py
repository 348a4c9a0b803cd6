"""Shared fixtures for projx tests."""

from __future__ import annotations

from collections.abc import AsyncGenerator, Sequence
from pathlib import Path

import pytest

from projx.data.db import Database
from projx.data.discovery import ProjectRegistry
from projx.data.workspace import WorkspaceStore
from projx.errors import ResourceCloseError, ResourceOpenError
from projx.models.buffers import Buffer
from projx.models.operations import SearchHit
from projx.models.projects import ProjectMetadata
from projx.services.associations import AssociationEngine
from projx.services.scoped_ops import ScopedOperationExecutor
from projx.services.selection import Selector


class FakeWorkspace:
    """In-memory stand-in for the workspace store."""

    def __init__(self, buffers: Sequence[Buffer] = (), focused: Buffer | None = None) -> None:
        self.buffers: list[Buffer] = list(buffers)
        self.focused = focused
        self.fail_close: set[int] = set()
        self.fail_open: set[str] = set()
        self.opened_paths: list[str] = []
        self._next_id = max((b.buffer_id for b in self.buffers), default=0) + 1

    async def list_buffers(self) -> list[Buffer]:
        return list(self.buffers)

    async def focused_buffer(self) -> Buffer | None:
        return self.focused

    async def open_file(self, path: str, *, focus: bool = True) -> Buffer:
        if path in self.fail_open:
            raise ResourceOpenError(f"Cannot open {path}")
        self.opened_paths.append(path)
        buffer = next((b for b in self.buffers if b.path == path), None)
        if buffer is None:
            buffer = Buffer(buffer_id=self._next_id, name=Path(path).name, path=path)
            self._next_id += 1
            self.buffers.append(buffer)
        if focus:
            self.focused = buffer
        return buffer

    async def create_buffer(self, name: str, *, focus: bool = True) -> Buffer:
        buffer = Buffer(buffer_id=self._next_id, name=name)
        self._next_id += 1
        self.buffers.append(buffer)
        if focus:
            self.focused = buffer
        return buffer

    async def close_buffer(self, buffer: Buffer) -> None:
        if buffer.buffer_id in self.fail_close:
            raise ResourceCloseError(f"Buffer {buffer.name} refused to close")
        self.buffers = [b for b in self.buffers if b.buffer_id != buffer.buffer_id]
        if self.focused is not None and self.focused.buffer_id == buffer.buffer_id:
            self.focused = self.buffers[-1] if self.buffers else None

    async def focus(self, buffer: Buffer | None) -> None:
        self.focused = buffer


class FakeLister:
    def __init__(self, files: dict[str, list[str]] | None = None) -> None:
        self.files = files or {}
        self.calls: list[str] = []

    def list_files(self, root: str, metadata: ProjectMetadata) -> list[str]:
        self.calls.append(root)
        return list(self.files.get(root, []))


class FakeSearcher:
    def __init__(self, hits: list[SearchHit] | None = None) -> None:
        self.hits = hits or []
        self.calls: list[tuple[str, str, list[str], bool]] = []

    def search(
        self, pattern: str, root: str, files: list[str], *, whole_word: bool = False
    ) -> list[SearchHit]:
        self.calls.append((pattern, root, files, whole_word))
        return list(self.hits)


class ScriptedStrategy:
    """Selection strategy answering from a script; None means cancel."""

    def __init__(self, *answers: str | None) -> None:
        self.answers = list(answers)
        self.seen: list[tuple[str, list[str]]] = []

    def select(self, prompt: str, labels: Sequence[str]) -> str | None:
        self.seen.append((prompt, list(labels)))
        return self.answers.pop(0) if self.answers else None


def make_buffer(buffer_id: int, path: str | None, name: str | None = None) -> Buffer:
    default_name = Path(path).name if path else "*scratch*"
    return Buffer(buffer_id=buffer_id, name=name or default_name, path=path)


@pytest.fixture
def registry() -> ProjectRegistry:
    """Projects A at /p/a and B at /p/b, declared without touching the disk."""
    reg = ProjectRegistry()
    reg.register("/p/a", ProjectMetadata(name="A"))
    reg.register("/p/b", ProjectMetadata(name="B"))
    return reg


@pytest.fixture
def buffers() -> list[Buffer]:
    return [make_buffer(1, "/p/a/x"), make_buffer(2, "/p/a/y"), make_buffer(3, None)]


@pytest.fixture
def workspace(buffers: list[Buffer]) -> FakeWorkspace:
    return FakeWorkspace(buffers, focused=buffers[0])


@pytest.fixture
def engine(registry: ProjectRegistry, workspace: FakeWorkspace) -> AssociationEngine:
    return AssociationEngine(registry, workspace)


@pytest.fixture
def strategy() -> ScriptedStrategy:
    return ScriptedStrategy()


@pytest.fixture
def lister() -> FakeLister:
    return FakeLister({"/p/a": ["x", "y", "z"], "/p/b": ["main.c", "util/io.c"]})


@pytest.fixture
def searcher() -> FakeSearcher:
    return FakeSearcher([SearchHit(path="x", line_number=3, text="TODO: tidy")])


@pytest.fixture
def executor(
    engine: AssociationEngine,
    registry: ProjectRegistry,
    workspace: FakeWorkspace,
    strategy: ScriptedStrategy,
    lister: FakeLister,
    searcher: FakeSearcher,
) -> ScopedOperationExecutor:
    return ScopedOperationExecutor(
        engine=engine,
        registry=registry,
        workspace=workspace,
        selector=Selector(strategy),
        file_lister=lister,
        searcher=searcher,
    )


@pytest.fixture
async def in_memory_db() -> AsyncGenerator[Database]:
    """SQLite in-memory database for fast unit/integration tests."""
    db = Database(Path(":memory:"))
    await db.__aenter__()
    yield db  # type: ignore[misc]
    await db.__aexit__(None, None, None)


@pytest.fixture
def store(in_memory_db: Database) -> WorkspaceStore:
    return WorkspaceStore(in_memory_db)


@pytest.fixture
def project_tree(tmp_path: Path) -> Path:
    """Two on-disk projects: a Python one and a plain git checkout."""
    src = tmp_path / "src"
    alpha = src / "alpha"
    (alpha / "pkg").mkdir(parents=True)
    (alpha / "pyproject.toml").write_text("[project]\nname = 'alpha'\n", encoding="utf-8")
    (alpha / "pkg" / "__init__.py").write_text("", encoding="utf-8")
    (alpha / "pkg" / "core.py").write_text(
        "def run():\n    # TODO: handle errors\n    return 1\n", encoding="utf-8"
    )
    (alpha / "notes.bin").write_bytes(b"\x00\x01")
    (alpha / "__pycache__").mkdir()
    (alpha / "__pycache__" / "core.cpython-312.pyc").write_bytes(b"\x00")

    beta = src / "beta"
    (beta / ".git").mkdir(parents=True)
    (beta / "README").write_text("beta\nFIXME later\n", encoding="utf-8")

    (src / "loose").mkdir()
    return src
