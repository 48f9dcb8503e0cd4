"""AddressBook — the repository injected into every service.

Bundles the resolved settings, the blob store selected by
``[storage] backend``, the :class:`ContactStore` that owns the contact
list, and the lifecycle event bus.

The collection is loaded lazily on first access to :attr:`store`, so
``--help`` and ``--version`` never touch storage.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from contactctl.infrastructure.blob_store import FileBlobStore, MemoryBlobStore, SqliteBlobStore
from contactctl.infrastructure.database.engine import DATA_DIRNAME, init_database
from contactctl.infrastructure.store import ContactStore

if TYPE_CHECKING:
    from pathlib import Path

    from sqlalchemy.engine import Engine

    from contactctl.config.settings import ContactSettings
    from contactctl.infrastructure.blob_store import BlobStore
    from contactctl.plugins.event_bus import EventBus

logger = logging.getLogger(__name__)


def open_blob_store(settings: ContactSettings) -> tuple[BlobStore, Engine | None]:
    """Build the blob store named by ``settings.storage.backend``.

    Returns the store and, for the SQLite backend, its engine (so the
    owner can dispose of it).
    """
    key = settings.storage.key
    backend = settings.storage.backend
    if backend == "memory":
        return MemoryBlobStore(key=key), None
    if backend == "file":
        return FileBlobStore(settings.data_root / DATA_DIRNAME, key=key), None
    if backend == "sqlite":
        engine = init_database(settings.data_root)
        return SqliteBlobStore(engine, key=key), engine
    msg = f"Unknown storage backend: {backend!r}"
    raise ValueError(msg)


class AddressBook:
    """Repository encapsulating contact storage and lifecycle events.

    Parameters:
        settings: Resolved settings for this invocation.
        backend: Explicit blob store; overrides ``settings.storage``.
    """

    def __init__(self, settings: ContactSettings, *, backend: BlobStore | None = None) -> None:
        self._settings = settings
        self._engine: Engine | None = None
        if backend is None:
            backend, self._engine = open_blob_store(settings)
        self._event_bus: EventBus | None = None
        self._store = ContactStore(backend, on_write_failure=self._report_write_failure)
        self._pending_warnings: list[str] = []

    @property
    def root(self) -> Path:
        return self._settings.data_root

    @property
    def settings(self) -> ContactSettings:
        return self._settings

    @property
    def store(self) -> ContactStore:
        """The contact store, loaded on first access."""
        if not self._store.is_loaded:
            self._store.load()
        return self._store

    @property
    def event_bus(self) -> EventBus | None:
        """The plugin event bus (None if not initialized)."""
        return self._event_bus

    def init_event_bus(self, *, discover: bool = True) -> EventBus:
        """Create the plugin manager and event bus.

        With *discover*, entry-point plugins are loaded as well.
        """
        from contactctl.plugins.event_bus import EventBus
        from contactctl.plugins.manager import PluginManager

        pm = PluginManager()
        if discover:
            pm.discover_and_load()
        self._event_bus = EventBus(pm)
        return self._event_bus

    def dispatch(self, hook_name: str, payload: dict[str, Any]) -> list[str]:
        """Fire a lifecycle hook. No-op without an event bus."""
        if self._event_bus is None:
            return []
        return self._event_bus.dispatch(hook_name, payload)

    def drain_warnings(self) -> list[str]:
        """Return and clear warnings raised outside a service call (write failures)."""
        warnings, self._pending_warnings = self._pending_warnings, []
        return warnings

    def close(self) -> None:
        if self._engine is not None:
            self._engine.dispose()
            self._engine = None

    def _report_write_failure(self, key: str, error: str) -> None:
        self._pending_warnings.append(f"Changes not saved to {key}: {error}")
        self._pending_warnings.extend(self.dispatch("persist_failed", {"key": key, "error": error}))
