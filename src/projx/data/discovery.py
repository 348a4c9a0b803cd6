"""Discover project roots from marker files and list their member files."""

from __future__ import annotations

import fnmatch
import logging
import os
import tomllib
from collections.abc import Iterable
from dataclasses import dataclass
from pathlib import PurePath

from projx.errors import ExternalToolError, NoProjectsError
from projx.models.projects import (
    FILE_NAME_MAPS,
    ProjectMetadata,
    normalize_root,
)

logger = logging.getLogger(__name__)

PROJECT_FILE = ".projx.toml"


@dataclass(frozen=True)
class ProjectType:
    """A kind of project, recognised by marker files at its root."""

    name: str
    markers: tuple[str, ...]
    relevant_files: tuple[str, ...] = ("*",)


# Checked in order; the first type with a marker present wins.
PROJECT_TYPES: tuple[ProjectType, ...] = (
    ProjectType(
        "python",
        ("pyproject.toml", "setup.py", "setup.cfg"),
        ("*.py", "*.pyi", "*.toml", "*.cfg", "*.ini", "*.md", "*.rst", "*.txt"),
    ),
    ProjectType(
        "node",
        ("package.json",),
        ("*.js", "*.jsx", "*.ts", "*.tsx", "*.mjs", "*.json", "*.css", "*.html", "*.md"),
    ),
    ProjectType(
        "make",
        ("Makefile", "GNUmakefile", "makefile"),
        ("*.c", "*.h", "*.cc", "*.cpp", "*.hpp", "*.mk", "Makefile", "*.md"),
    ),
    ProjectType("generic", (PROJECT_FILE, ".git")),
)


class ProjectRegistry:
    """Known project roots and their metadata, in registration order."""

    def __init__(self, project_types: tuple[ProjectType, ...] = PROJECT_TYPES) -> None:
        self._types = project_types
        self._projects: dict[str, ProjectMetadata] = {}

    def register(self, root: str, metadata: ProjectMetadata | None = None) -> str:
        """Declare ``root`` as a project. The first registration of a root wins."""
        normalized = normalize_root(root)
        if normalized not in self._projects:
            if metadata is None:
                project_type = self._match_type(normalized) or self._types[-1]
                metadata = load_project_metadata(normalized, project_type)
            self._projects[normalized] = metadata
            logger.debug("Registered project %s at %s", metadata.name, normalized)
        return normalized

    def detect(self, path: str) -> str | None:
        """Walk up from ``path`` to the nearest marked directory and register it."""
        current = normalize_root(path)
        if not os.path.isdir(current):
            current = os.path.dirname(current)
        while True:
            project_type = self._match_type(current)
            if project_type is not None:
                if current not in self._projects:
                    self.register(current, load_project_metadata(current, project_type))
                return current
            parent = os.path.dirname(current)
            if parent == current:
                return None
            current = parent

    def scan(self, directories: Iterable[str | os.PathLike[str]]) -> list[str]:
        """Register each directory, and each of its children, that is a project."""
        found: list[str] = []
        for directory in directories:
            base = normalize_root(directory)
            if not os.path.isdir(base):
                logger.info("Project directory not found: %s", base)
                continue
            candidates = [base]
            try:
                candidates.extend(
                    os.path.join(base, entry)
                    for entry in sorted(os.listdir(base))
                    if os.path.isdir(os.path.join(base, entry))
                )
            except OSError as exc:
                logger.warning("Failed to scan project directory %s: %s", base, exc)
            for candidate in candidates:
                project_type = self._match_type(candidate)
                if project_type is None:
                    continue
                if candidate not in self._projects:
                    self.register(candidate, load_project_metadata(candidate, project_type))
                found.append(candidate)
        return found

    def known_roots(self) -> list[str]:
        return list(self._projects)

    def root_for_path(self, path: str) -> str | None:
        """Return the innermost known root containing ``path``."""
        target = normalize_root(path)
        best: str | None = None
        for root in self._projects:
            prefix = root if root.endswith(os.sep) else root + os.sep
            if target == root or target.startswith(prefix):
                if best is None or len(root) > len(best):
                    best = root
        return best

    def metadata(self, root: str) -> ProjectMetadata:
        try:
            return self._projects[normalize_root(root)]
        except KeyError:
            raise NoProjectsError(f"Unknown project root: {root}") from None

    def _match_type(self, directory: str) -> ProjectType | None:
        for project_type in self._types:
            for marker in project_type.markers:
                if os.path.exists(os.path.join(directory, marker)):
                    return project_type
        return None


def load_project_metadata(root: str, project_type: ProjectType) -> ProjectMetadata:
    """Build metadata for ``root``, applying its ``.projx.toml`` when present."""
    defaults = ProjectMetadata(
        name=_project_name_from_root(root),
        project_type=project_type.name,
        relevant_files=project_type.relevant_files,
    )
    project_file = os.path.join(root, PROJECT_FILE)
    if not os.path.isfile(project_file):
        return defaults
    try:
        with open(project_file, "rb") as handle:
            payload = tomllib.load(handle)
        return _metadata_from_payload(payload, defaults)
    except (tomllib.TOMLDecodeError, OSError, ValueError) as exc:
        logger.warning("Ignoring invalid project file %s: %s", project_file, exc)
        return defaults


def _metadata_from_payload(
    payload: dict[str, object], defaults: ProjectMetadata
) -> ProjectMetadata:
    updates: dict[str, object] = {}
    if "name" in payload:
        name = payload["name"]
        if not isinstance(name, str) or not name.strip():
            raise ValueError("'name' must be a non-empty string")
        updates["name"] = name.strip()
    for key in ("relevant_files", "ignored_dirs"):
        if key in payload:
            value = payload[key]
            if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
                raise ValueError(f"'{key}' must be a list of strings")
            updates[key] = tuple(value)
    if "file_names" in payload:
        style = payload["file_names"]
        if not isinstance(style, str) or style not in FILE_NAME_MAPS:
            raise ValueError(f"'file_names' must be one of {', '.join(FILE_NAME_MAPS)}")
        updates["file_name_map"] = FILE_NAME_MAPS[style]
    return defaults.model_copy(update=updates)


def _project_name_from_root(root: str) -> str:
    """Extract a human-readable project name from a root path."""
    return os.path.basename(root.rstrip(os.sep)) or root


class FileLister:
    """Lists a project's relevant files by walking its root."""

    def list_files(self, root: str, metadata: ProjectMetadata) -> list[str]:
        ignored = set(metadata.ignored_dirs)
        files: list[str] = []

        def _raise(exc: OSError) -> None:
            raise ExternalToolError(f"Failed to list files under {root}: {exc}") from exc

        for dirpath, dirnames, filenames in os.walk(root, onerror=_raise):
            dirnames[:] = sorted(d for d in dirnames if d not in ignored)
            for filename in filenames:
                if not any(fnmatch.fnmatch(filename, pat) for pat in metadata.relevant_files):
                    continue
                relative = os.path.relpath(os.path.join(dirpath, filename), root)
                files.append(PurePath(relative).as_posix())
        files.sort()
        return files
