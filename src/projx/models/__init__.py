"""Pydantic models for projx."""

from projx.models.buffers import Buffer
from projx.models.operations import BatchReport, ResolutionRequest, RevisitResult, SearchHit
from projx.models.projects import (
    FILE_NAME_MAPS,
    FileNameMap,
    ProjectMetadata,
    ProjectSummary,
    normalize_root,
)

__all__ = [
    "BatchReport",
    "Buffer",
    "FILE_NAME_MAPS",
    "FileNameMap",
    "ProjectMetadata",
    "ProjectSummary",
    "ResolutionRequest",
    "RevisitResult",
    "SearchHit",
    "normalize_root",
]
