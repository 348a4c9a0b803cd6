"""Buffer models."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class Buffer(BaseModel):
    """An open buffer, optionally visiting a file."""

    model_config = ConfigDict(frozen=True)

    buffer_id: int
    name: str
    path: str | None = None
