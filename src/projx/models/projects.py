"""Project-level models."""

from __future__ import annotations

import os
from collections.abc import Callable

from pydantic import BaseModel, ConfigDict, Field

from projx.models.buffers import Buffer

FileNameMap = Callable[[str, str], str]

DEFAULT_IGNORED_DIRS = (".git", ".hg", ".svn", "__pycache__", ".venv", "node_modules")


def normalize_root(path: str | os.PathLike[str]) -> str:
    """Return the absolute, normalized form of a project root."""
    return os.path.abspath(os.path.expanduser(os.fspath(path)))


def relative_file_name(root: str, relative_path: str) -> str:
    """Label a project file by its root-relative path."""
    return relative_path


def basename_file_name(root: str, relative_path: str) -> str:
    """Label a project file by its base name only."""
    return os.path.basename(relative_path)


def basename_dir_file_name(root: str, relative_path: str) -> str:
    """Label a project file as ``name <dir>``, e.g. ``app.py <src/pkg>``."""
    head, tail = os.path.split(relative_path)
    return f"{tail} <{head}>" if head else tail


FILE_NAME_MAPS: dict[str, FileNameMap] = {
    "relative": relative_file_name,
    "basename": basename_file_name,
    "basename-dir": basename_dir_file_name,
}


class ProjectMetadata(BaseModel):
    """Attributes declared for a project root."""

    model_config = ConfigDict(frozen=True)

    name: str
    project_type: str = "generic"
    file_name_map: FileNameMap = Field(default=relative_file_name, exclude=True)
    relevant_files: tuple[str, ...] = ("*",)
    ignored_dirs: tuple[str, ...] = DEFAULT_IGNORED_DIRS


class ProjectSummary(BaseModel):
    """A project together with the buffers currently visiting its files."""

    name: str
    root: str
    project_type: str = "generic"
    buffers: list[Buffer] = Field(default_factory=list)

    @property
    def buffer_count(self) -> int:
        return len(self.buffers)
