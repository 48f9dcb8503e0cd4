"""ContactStore — the authoritative in-memory contact collection.

The store owns the list exclusively. Every change is written through
to the blob store as a full serialized collection; there are no
incremental writes and no transaction log.

Failure policy:

- **Load**: unreadable or corrupt data fails open. The store starts
  empty and the condition is logged; no error reaches the caller.
- **Write**: a failed write never rolls back the in-memory change. It is
  logged, reported to ``on_write_failure``, and the mutating call
  returns ``False``. A collection that cannot be encoded counts as a
  failed write.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from sqlalchemy.exc import SQLAlchemyError

from contactctl.infrastructure.codec import (
    CorruptCollectionError,
    decode_contacts,
    encode_contacts,
)

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable

    from contactctl.domain.contact import Contact
    from contactctl.infrastructure.blob_store import BlobStore

logger = logging.getLogger(__name__)


class ContactStore:
    """In-memory contact list mirrored to a :class:`BlobStore`.

    Parameters:
        backend: Persistence collaborator bound to the collection's key.
        on_write_failure: Called with ``(key, error)`` when a write fails.
    """

    def __init__(
        self,
        backend: BlobStore,
        *,
        on_write_failure: Callable[[str, str], None] | None = None,
    ) -> None:
        self._backend = backend
        self._contacts: list[Contact] = []
        self._on_write_failure = on_write_failure
        self._loaded = False

    @property
    def backend(self) -> BlobStore:
        return self._backend

    @property
    def is_loaded(self) -> bool:
        return self._loaded

    def __len__(self) -> int:
        return len(self._contacts)

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def load(self) -> list[Contact]:
        """Populate the collection from the backend. Never raises on bad data."""
        self._contacts = self._read_backend()
        self._loaded = True
        logger.debug("Loaded %d contacts from %s", len(self._contacts), self._backend.key)
        return self.list()

    def list(self) -> list[Contact]:
        """The current contacts in insertion order (a shallow copy)."""
        return self._contacts.copy()

    def get(self, contact_id: str) -> Contact | None:
        return next((c for c in self._contacts if c.id == contact_id), None)

    # ------------------------------------------------------------------
    # Writes — each one persists the full collection
    # ------------------------------------------------------------------

    def replace_all(self, contacts: Iterable[Contact]) -> bool:
        """Substitute the entire collection, then persist it.

        Returns False when the write-through failed (memory is still updated).
        """
        self._contacts = [*contacts]
        return self._persist()

    def append(self, contact: Contact) -> bool:
        """Add *contact* at the end of the collection, then persist."""
        return self.replace_all([*self._contacts, contact])

    def save(self) -> bool:
        """Persist the current collection unchanged."""
        return self._persist()

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    def _read_backend(self) -> list[Contact]:
        key = self._backend.key
        try:
            raw = self._backend.read()
        except (OSError, SQLAlchemyError) as exc:
            logger.warning("Could not read %s, starting empty: %s", key, exc)
            return []

        if raw is None:
            return []

        try:
            return decode_contacts(raw)
        except CorruptCollectionError as exc:
            logger.warning("Corrupt data in %s, starting empty: %s", key, exc)
            return []

    def _persist(self) -> bool:
        key = self._backend.key
        try:
            ok = self._backend.write(encode_contacts(self._contacts))
            error = "" if ok else "backend reported write failure"
        except (OSError, SQLAlchemyError, ValueError) as exc:
            ok, error = False, str(exc)

        if ok:
            logger.debug("Persisted %d contacts to %s", len(self._contacts), key)
            return True

        logger.warning("Write-through to %s failed: %s", key, error)
        if self._on_write_failure is not None:
            self._on_write_failure(key, error)
        return False
