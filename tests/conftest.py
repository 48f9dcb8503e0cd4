"""Shared pytest fixtures and test helpers for contactctl tests."""

from __future__ import annotations

import itertools
import logging
from collections.abc import Callable, Generator
from pathlib import Path
from typing import Any

import pytest
from click.testing import CliRunner

from contactctl.config.settings import ContactSettings
from contactctl.domain.contact import Contact, ContactFields
from contactctl.infrastructure.blob_store import MemoryBlobStore
from contactctl.infrastructure.book import AddressBook
from contactctl.services.telemetry import disable_telemetry


@pytest.fixture(autouse=True)
def _reset_process_state() -> Generator[None]:
    """Undo global state a CLI invocation leaves behind (logging, telemetry)."""
    root = logging.getLogger()
    original_handlers = root.handlers[:]
    original_level = root.level
    yield
    root.handlers = original_handlers
    root.setLevel(original_level)
    logging.getLogger("contactctl").setLevel(logging.NOTSET)
    disable_telemetry()


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def blob() -> MemoryBlobStore:
    """Empty in-memory blob store."""
    return MemoryBlobStore()


@pytest.fixture
def book(tmp_path: Path, blob: MemoryBlobStore) -> Generator[AddressBook]:
    """Address book on an in-memory blob store, no plugins loaded."""
    settings = ContactSettings.from_cli(data_root=tmp_path)
    b = AddressBook(settings, backend=blob)
    try:
        yield b
    finally:
        b.close()


@pytest.fixture
def clock() -> Callable[[], str]:
    """Monotonic fake clock: each call is one second after the last."""
    ticks = itertools.count()
    return lambda: f"2026-03-01T10:00:{next(ticks):02d}.000Z"


@pytest.fixture
def _isolated_book(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Change CWD to a temp directory so the CLI creates an isolated address book.

    Use via ``@pytest.mark.usefixtures("_isolated_book")`` on command test
    classes.
    """
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("CONTACTCTL_CONFIG", raising=False)


# ---------------------------------------------------------------------------
# Shared test helpers
# ---------------------------------------------------------------------------


def make_contact(
    contact_id: str,
    first: str = "Jo",
    last: str = "Doe",
    **kwargs: Any,
) -> Contact:
    """Build a stored contact directly, bypassing the services."""
    kwargs.setdefault("created_at", "2026-01-01T00:00:00.000Z")
    kwargs.setdefault("updated_at", kwargs["created_at"])
    return Contact(id=contact_id, first_name=first, last_name=last, **kwargs)


def add_contact(book: AddressBook, first: str, last: str, **kwargs: Any) -> dict[str, Any]:
    """Add a contact via MutationService, asserting success."""
    from contactctl.services.mutation import MutationService

    fields = ContactFields(first_name=first, last_name=last, **kwargs)
    result = MutationService(book).add(fields)
    assert result.ok, result.error
    return result.data
