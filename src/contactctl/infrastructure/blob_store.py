"""Blob stores — the persistence collaborator behind the contact store.

A blob store holds one opaque byte string under a fixed logical key.
It knows nothing about contacts; serialization happens in
:mod:`contactctl.infrastructure.codec`.

Contract:

- ``read()`` returns the stored bytes, or ``None`` when nothing has been
  written yet. I/O errors propagate; the caller decides how to recover.
- ``write(data)`` replaces the stored bytes and returns ``True`` on
  success, ``False`` when the write could not be completed.
"""

from __future__ import annotations

import logging
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Protocol, runtime_checkable

from sqlalchemy import insert, select, update
from sqlalchemy.exc import SQLAlchemyError

from contactctl.infrastructure.database.schema import blobs

if TYPE_CHECKING:
    from pathlib import Path

    from sqlalchemy.engine import Engine

logger = logging.getLogger(__name__)

DEFAULT_KEY = "contacts"


@runtime_checkable
class BlobStore(Protocol):
    """Key-value blob persistence bound to a single key."""

    key: str

    def read(self) -> bytes | None: ...

    def write(self, data: bytes) -> bool: ...


class MemoryBlobStore:
    """In-process blob store. Nothing survives the process."""

    def __init__(self, initial: bytes | None = None, *, key: str = DEFAULT_KEY) -> None:
        self.key = key
        self._data = initial
        self.writes = 0

    def read(self) -> bytes | None:
        return self._data

    def write(self, data: bytes) -> bool:
        self._data = data
        self.writes += 1
        return True


class FileBlobStore:
    """One file per key: ``{directory}/{key}.json``."""

    def __init__(self, directory: Path, *, key: str = DEFAULT_KEY) -> None:
        self.key = key
        self.path = directory / f"{key}.json"

    def read(self) -> bytes | None:
        if not self.path.exists():
            return None
        return self.path.read_bytes()

    def write(self, data: bytes) -> bool:
        """Replace the file, creating its directory on first write."""
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_bytes(data)
        except OSError:
            logger.warning("Failed to write blob %s to %s", self.key, self.path, exc_info=True)
            return False
        return True


class SqliteBlobStore:
    """Row-per-key blob store in the SQLite ``blobs`` table."""

    def __init__(self, engine: Engine, *, key: str = DEFAULT_KEY) -> None:
        self.key = key
        self._engine = engine

    def read(self) -> bytes | None:
        with self._engine.connect() as conn:
            value = conn.execute(select(blobs.c.value).where(blobs.c.key == self.key)).scalar()
        return bytes(value) if value is not None else None

    def write(self, data: bytes) -> bool:
        """Insert or overwrite the row for this key in one transaction."""
        values = {"value": data, "updated": datetime.now(UTC).isoformat()}
        try:
            with self._engine.begin() as conn:
                exists = conn.execute(
                    select(blobs.c.key).where(blobs.c.key == self.key)
                ).first()
                if exists is None:
                    conn.execute(insert(blobs).values(key=self.key, **values))
                else:
                    conn.execute(update(blobs).where(blobs.c.key == self.key).values(**values))
        except SQLAlchemyError:
            logger.warning("Failed to write blob %s", self.key, exc_info=True)
            return False
        return True
