"""SQLite-backed workspace: the set of open buffers and the focused one."""

from __future__ import annotations

import logging
import os
from datetime import UTC, datetime
from typing import TYPE_CHECKING

from projx.errors import ResourceCloseError, ResourceOpenError
from projx.models.buffers import Buffer
from projx.models.projects import normalize_root

if TYPE_CHECKING:
    from projx.data.db import Database

logger = logging.getLogger(__name__)

_BUFFER_COLUMNS = "b.buffer_id, b.name, b.path"


class WorkspaceStore:
    """Open buffers, kept in the workspace database between invocations."""

    def __init__(self, db: Database) -> None:
        self._db = db

    async def list_buffers(self) -> list[Buffer]:
        """All open buffers in the order they were opened."""
        rows = await self._db.fetch_all(
            f"SELECT {_BUFFER_COLUMNS} FROM buffers b ORDER BY b.buffer_id"
        )
        return [_row_to_buffer(row) for row in rows]

    async def focused_buffer(self) -> Buffer | None:
        row = await self._db.fetch_one(
            f"SELECT {_BUFFER_COLUMNS} FROM focus f "
            "JOIN buffers b ON b.buffer_id = f.buffer_id WHERE f.slot = 0"
        )
        return _row_to_buffer(row) if row is not None else None

    async def open_file(self, path: str, *, focus: bool = True) -> Buffer:
        """Visit ``path``, reusing the buffer already visiting it if there is one.

        Raises:
            ResourceOpenError: the path is not a readable regular file.
        """
        target = normalize_root(path)
        if not os.path.isfile(target) or not os.access(target, os.R_OK):
            raise ResourceOpenError(f"Cannot open {target}: not a readable file")

        row = await self._db.fetch_one(
            f"SELECT {_BUFFER_COLUMNS} FROM buffers b WHERE b.path = ?", (target,)
        )
        if row is not None:
            buffer = _row_to_buffer(row)
        else:
            buffer = await self._insert(os.path.basename(target), target)
            logger.debug("Opened %s as buffer %s", target, buffer.name)
        if focus:
            await self._set_focus(buffer.buffer_id)
        await self._db.commit()
        return buffer

    async def create_buffer(self, name: str, *, focus: bool = True) -> Buffer:
        """Create a buffer that visits no file."""
        buffer = await self._insert(name, None)
        if focus:
            await self._set_focus(buffer.buffer_id)
        await self._db.commit()
        return buffer

    async def close_buffer(self, buffer: Buffer) -> None:
        """Close ``buffer``; focus moves to the most recently opened survivor.

        Raises:
            ResourceCloseError: the buffer is no longer open.
        """
        focused = await self.focused_buffer()
        cursor = await self._db.execute(
            "DELETE FROM buffers WHERE buffer_id = ?", (buffer.buffer_id,)
        )
        if cursor.rowcount == 0:
            raise ResourceCloseError(f"Buffer {buffer.name} is not open")
        if focused is not None and focused.buffer_id == buffer.buffer_id:
            row = await self._db.fetch_one("SELECT MAX(buffer_id) AS buffer_id FROM buffers")
            await self._set_focus(row["buffer_id"] if row is not None else None)
        await self._db.commit()

    async def focus(self, buffer: Buffer | None) -> None:
        await self._set_focus(buffer.buffer_id if buffer is not None else None)
        await self._db.commit()

    async def _set_focus(self, buffer_id: int | None) -> None:
        await self._db.execute(
            "INSERT INTO focus (slot, buffer_id) VALUES (0, ?) "
            "ON CONFLICT(slot) DO UPDATE SET buffer_id = excluded.buffer_id",
            (buffer_id,),
        )

    async def _insert(self, name: str, path: str | None) -> Buffer:
        unique = await self._unique_name(name)
        cursor = await self._db.execute(
            "INSERT INTO buffers (name, path, opened_at) VALUES (?, ?, ?)",
            (unique, path, datetime.now(tz=UTC).isoformat()),
        )
        return Buffer(buffer_id=int(cursor.lastrowid or 0), name=unique, path=path)

    async def _unique_name(self, name: str) -> str:
        """Suffix ``name`` with ``<n>`` until no open buffer uses it."""
        rows = await self._db.fetch_all("SELECT name FROM buffers")
        taken = {str(row["name"]) for row in rows}
        if name not in taken:
            return name
        suffix = 2
        while f"{name}<{suffix}>" in taken:
            suffix += 1
        return f"{name}<{suffix}>"


def _row_to_buffer(row: object) -> Buffer:
    r: dict[str, object] = dict(row)  # type: ignore[arg-type]
    path = r.get("path")
    return Buffer(
        buffer_id=int(r["buffer_id"]),  # type: ignore[arg-type]
        name=str(r.get("name", "") or ""),
        path=str(path) if path else None,
    )
