"""Tests for MutationService — add, update, delete, merge."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path
from typing import Any

import pytest

from contactctl.config.settings import ContactSettings
from contactctl.domain.contact import ContactFields
from contactctl.infrastructure.blob_store import MemoryBlobStore
from contactctl.infrastructure.book import AddressBook
from contactctl.infrastructure.codec import decode_contacts
from contactctl.plugins.hookspecs import hookimpl
from contactctl.services.mutation import MutationService
from tests.conftest import add_contact


class FailingBlobStore(MemoryBlobStore):
    def write(self, data: bytes) -> bool:
        return False


def _persisted_ids(blob: MemoryBlobStore) -> list[str]:
    return [c.id for c in decode_contacts(blob.read() or b"[]")]


# ---------------------------------------------------------------------------
# add()
# ---------------------------------------------------------------------------


class TestAdd:
    def test_assigns_identity_and_timestamps(
        self, book: AddressBook, clock: Callable[[], str]
    ) -> None:
        svc = MutationService(book, clock=clock, id_factory=lambda: "fixed-id")
        result = svc.add(ContactFields(first_name="Jo", last_name="Doe", phone=["555"]))
        assert result.ok
        assert result.op == "add"
        assert result.data["id"] == "fixed-id"
        contact = result.data["contact"]
        assert contact["createdAt"] == contact["updatedAt"] == "2026-03-01T10:00:00.000Z"
        assert contact["phone"] == ["555"]
        assert result.data["persisted"] is True

    def test_appends_at_end_and_persists(self, book: AddressBook, blob: MemoryBlobStore) -> None:
        first = add_contact(book, "Jo", "Doe")
        second = add_contact(book, "Al", "Bee")
        ids = [c.id for c in book.store.list()]
        assert ids == [first["id"], second["id"]]
        assert _persisted_ids(blob) == ids

    def test_ids_are_unique(self, book: AddressBook) -> None:
        ids = {add_contact(book, "Same", "Name")["id"] for _ in range(20)}
        assert len(ids) == 20

    def test_accepts_camel_case_mapping(self, book: AddressBook) -> None:
        result = MutationService(book).add({"firstName": "Jo", "lastName": "Doe"})
        assert result.ok
        assert result.data["contact"]["firstName"] == "Jo"

    def test_caller_cannot_choose_id(self, book: AddressBook) -> None:
        result = MutationService(book).add({"first_name": "Jo", "last_name": "Doe", "id": "mine"})
        assert result.ok
        assert result.data["id"] != "mine"

    def test_no_required_field_checks(self, book: AddressBook) -> None:
        result = MutationService(book).add(ContactFields(first_name="", last_name=""))
        assert result.ok

    def test_invalid_mapping(self, book: AddressBook) -> None:
        result = MutationService(book).add({"first_name": "Jo"})
        assert not result.ok
        assert result.error is not None
        assert result.error.code == "VALIDATION_FAILED"
        assert "last_name" in result.error.message
        assert len(book.store) == 0

    def test_write_failure_keeps_contact(self, tmp_path: Path) -> None:
        settings = ContactSettings.from_cli(data_root=tmp_path)
        book = AddressBook(settings, backend=FailingBlobStore())
        result = MutationService(book).add(ContactFields(first_name="Jo", last_name="Doe"))
        assert result.ok
        assert result.data["persisted"] is False
        assert len(book.store) == 1
        assert any("Changes not saved to contacts" in w for w in result.warnings)


# ---------------------------------------------------------------------------
# update()
# ---------------------------------------------------------------------------


class TestUpdate:
    def test_partial_update(self, book: AddressBook, clock: Callable[[], str]) -> None:
        svc = MutationService(book, clock=clock)
        created = svc.add(ContactFields(first_name="Jo", last_name="Doe", phone=["1"])).data
        result = svc.update(created["id"], {"company": "Acme"})
        assert result.ok
        assert result.data["changed"] is True
        assert result.data["fields_changed"] == ["company"]
        contact = result.data["contact"]
        assert contact["company"] == "Acme"
        assert contact["phone"] == ["1"]
        assert contact["createdAt"] == created["contact"]["createdAt"]
        assert contact["updatedAt"] > contact["createdAt"]

    def test_camel_case_keys(self, book: AddressBook) -> None:
        created = add_contact(book, "Jo", "Doe")
        result = MutationService(book).update(created["id"], {"firstName": "Joanna"})
        assert result.ok
        assert book.store.get(created["id"]).first_name == "Joanna"  # type: ignore[union-attr]

    def test_full_replacement(self, book: AddressBook) -> None:
        created = add_contact(book, "Jo", "Doe", company="Acme", notes="keep?")
        result = MutationService(book).update(
            created["id"], ContactFields(first_name="Jo", last_name="Doe", phone=["9"])
        )
        assert result.ok
        contact = book.store.get(created["id"])
        assert contact is not None
        assert contact.company is None
        assert contact.notes is None
        assert contact.phone == ["9"]

    def test_identity_fields_ignored_with_warning(self, book: AddressBook) -> None:
        created = add_contact(book, "Jo", "Doe")
        result = MutationService(book).update(
            created["id"],
            {"id": "hijack", "createdAt": "1999-01-01T00:00:00.000Z", "company": "Acme"},
        )
        assert result.ok
        contact = book.store.get(created["id"])
        assert contact is not None
        assert contact.created_at == created["contact"]["createdAt"]
        assert book.store.get("hijack") is None
        assert "Cannot change immutable field: id" in result.warnings
        assert "Cannot change immutable field: createdAt" in result.warnings

    def test_unknown_field_warning(self, book: AddressBook) -> None:
        created = add_contact(book, "Jo", "Doe")
        result = MutationService(book).update(created["id"], {"nickname": "JD"})
        assert result.ok
        assert result.warnings == ["Unknown field ignored: nickname"]

    def test_keeps_position(self, book: AddressBook) -> None:
        a = add_contact(book, "A", "A")["id"]
        b = add_contact(book, "B", "B")["id"]
        c = add_contact(book, "C", "C")["id"]
        MutationService(book).update(b, {"notes": "middle"})
        assert [x.id for x in book.store.list()] == [a, b, c]

    def test_invalid_value(self, book: AddressBook) -> None:
        created = add_contact(book, "Jo", "Doe")
        result = MutationService(book).update(created["id"], {"phone": 42})
        assert not result.ok
        assert result.error is not None
        assert result.error.code == "VALIDATION_FAILED"

    def test_missing_is_noop(self, book: AddressBook, blob: MemoryBlobStore) -> None:
        add_contact(book, "Jo", "Doe")
        writes = blob.writes
        result = MutationService(book).update("missing", {"company": "Acme"})
        assert result.ok
        assert result.data == {"id": "missing", "changed": False}
        assert result.warnings == ["No contact found with ID: missing"]
        assert blob.writes == writes

    def test_missing_strict(self, book: AddressBook) -> None:
        result = MutationService(book).update("missing", {"company": "Acme"}, strict=True)
        assert not result.ok
        assert result.error is not None
        assert result.error.code == "NOT_FOUND"

    def test_strict_from_config(self, tmp_path: Path) -> None:
        settings = ContactSettings.from_cli(
            data_root=tmp_path, contacts={"strict_missing": True}
        )
        book = AddressBook(settings, backend=MemoryBlobStore())
        result = MutationService(book).update("missing", {"company": "Acme"})
        assert not result.ok

    def test_explicit_lenient_overrides_config(self, tmp_path: Path) -> None:
        settings = ContactSettings.from_cli(data_root=tmp_path, strict=True)
        book = AddressBook(settings, backend=MemoryBlobStore())
        assert MutationService(book).update("missing", {}, strict=False).ok


# ---------------------------------------------------------------------------
# delete()
# ---------------------------------------------------------------------------


class TestDelete:
    def test_removes(self, book: AddressBook, blob: MemoryBlobStore) -> None:
        a = add_contact(book, "A", "A")["id"]
        b = add_contact(book, "B", "B")["id"]
        result = MutationService(book).delete(a)
        assert result.ok
        assert result.data == {"id": a, "changed": True, "persisted": True}
        assert [c.id for c in book.store.list()] == [b]
        assert _persisted_ids(blob) == [b]

    def test_missing_is_noop(self, book: AddressBook) -> None:
        add_contact(book, "A", "A")
        result = MutationService(book).delete("missing")
        assert result.ok
        assert result.data["changed"] is False
        assert len(book.store) == 1

    def test_missing_strict(self, book: AddressBook) -> None:
        result = MutationService(book).delete("missing", strict=True)
        assert not result.ok
        assert result.error is not None
        assert result.error.code == "NOT_FOUND"
        assert result.error.detail == {"id": "missing"}


# ---------------------------------------------------------------------------
# merge()
# ---------------------------------------------------------------------------


class TestMerge:
    def test_jo_doe_scenario(self, book: AddressBook, clock: Callable[[], str]) -> None:
        svc = MutationService(book, clock=clock)
        first = svc.add(
            ContactFields(
                first_name="Jo", last_name="Doe", phone=["111"], email=["a@x"], notes="n1"
            )
        ).data
        second = svc.add(
            ContactFields(
                first_name="Joe",
                last_name="D",
                phone=["111", "222"],
                email=["b@x"],
                company="Acme",
                notes="n2",
            )
        ).data

        result = svc.merge([first["id"], second["id"]])
        assert result.ok
        data = result.data
        assert data["changed"] is True
        assert data["id"] == first["id"]
        assert data["absorbed_ids"] == [second["id"]]
        merged = data["contact"]
        assert merged["firstName"] == "Jo"
        assert merged["lastName"] == "Doe"
        assert merged["phone"] == ["111", "222"]
        assert merged["email"] == ["a@x", "b@x"]
        assert merged["company"] == "Acme"
        assert merged["notes"] == "n1\n\nn2"
        assert merged["createdAt"] == first["contact"]["createdAt"]
        assert merged["updatedAt"] == "2026-03-01T10:00:02.000Z"
        assert [c.id for c in book.store.list()] == [first["id"]]

    def test_count_drops_by_absorbed(self, book: AddressBook) -> None:
        ids = [add_contact(book, "N", str(i))["id"] for i in range(5)]
        result = MutationService(book).merge(ids[1:4])
        assert result.ok
        assert len(book.store) == 3
        assert [c.id for c in book.store.list()] == [ids[0], ids[4], ids[1]]

    def test_primary_is_first_in_input_order(self, book: AddressBook) -> None:
        a = add_contact(book, "A", "A")["id"]
        b = add_contact(book, "B", "B")["id"]
        result = MutationService(book).merge([b, a])
        assert result.data["id"] == b
        assert book.store.list()[-1].first_name == "B"

    def test_unknown_ids_ignored(self, book: AddressBook) -> None:
        a = add_contact(book, "A", "A")["id"]
        b = add_contact(book, "B", "B")["id"]
        result = MutationService(book).merge(["ghost", a, "ghost2", b])
        assert result.ok
        assert result.data["id"] == a
        assert result.data["absorbed_ids"] == [b]

    @pytest.mark.parametrize("picks", [[], [0], [0, 0], ["ghost", 0]])
    def test_too_few_is_noop(
        self, book: AddressBook, blob: MemoryBlobStore, picks: list[Any]
    ) -> None:
        ids = [add_contact(book, "A", "A")["id"], add_contact(book, "B", "B")["id"]]
        before = book.store.list()
        writes = blob.writes
        requested = [ids[p] if isinstance(p, int) else p for p in picks]
        result = MutationService(book).merge(requested)
        assert result.ok
        assert result.data["changed"] is False
        assert "nothing changed" in result.warnings[0]
        assert book.store.list() == before
        assert blob.writes == writes

    def test_too_few_strict(self, book: AddressBook) -> None:
        a = add_contact(book, "A", "A")["id"]
        result = MutationService(book).merge([a, "ghost"], strict=True)
        assert not result.ok
        assert result.error is not None
        assert result.error.code == "MERGE_TOO_FEW"
        assert result.error.detail == {"valid_ids": [a]}

    def test_persists(self, book: AddressBook, blob: MemoryBlobStore) -> None:
        a = add_contact(book, "A", "A")["id"]
        b = add_contact(book, "B", "B")["id"]
        MutationService(book).merge([a, b])
        assert _persisted_ids(blob) == [a]


# ---------------------------------------------------------------------------
# Lifecycle hooks
# ---------------------------------------------------------------------------


class Recorder:
    def __init__(self) -> None:
        self.events: list[tuple[str, dict[str, Any]]] = []

    @hookimpl
    def post_add(self, contact_id: str) -> None:
        self.events.append(("post_add", {"contact_id": contact_id}))

    @hookimpl
    def post_update(self, contact_id: str, fields_changed: list[str]) -> None:
        self.events.append(("post_update", {"contact_id": contact_id, "fields": fields_changed}))

    @hookimpl
    def post_delete(self, contact_id: str) -> None:
        self.events.append(("post_delete", {"contact_id": contact_id}))

    @hookimpl
    def post_merge(self, primary_id: str, absorbed_ids: list[str]) -> None:
        self.events.append(("post_merge", {"primary": primary_id, "absorbed": absorbed_ids}))


class Broken:
    @hookimpl
    def post_add(self, contact_id: str) -> None:
        raise RuntimeError("plugin exploded")


class TestHooks:
    def test_hooks_fire_after_each_mutation(self, book: AddressBook) -> None:
        recorder = Recorder()
        book.init_event_bus(discover=False).plugin_manager.register_plugin(recorder)
        svc = MutationService(book)

        a = svc.add(ContactFields(first_name="A", last_name="A")).data["id"]
        b = svc.add(ContactFields(first_name="B", last_name="B")).data["id"]
        svc.update(a, {"company": "Acme"})
        svc.merge([a, b])
        svc.delete(a)

        assert [name for name, _ in recorder.events] == [
            "post_add",
            "post_add",
            "post_update",
            "post_merge",
            "post_delete",
        ]
        assert recorder.events[2][1] == {"contact_id": a, "fields": ["company"]}
        assert recorder.events[3][1] == {"primary": a, "absorbed": [b]}

    def test_noops_fire_nothing(self, book: AddressBook) -> None:
        recorder = Recorder()
        book.init_event_bus(discover=False).plugin_manager.register_plugin(recorder)
        svc = MutationService(book)
        svc.update("ghost", {"company": "x"})
        svc.delete("ghost")
        svc.merge(["ghost"])
        assert recorder.events == []

    def test_plugin_failure_is_a_warning(self, book: AddressBook) -> None:
        book.init_event_bus(discover=False).plugin_manager.register_plugin(Broken())
        result = MutationService(book).add(ContactFields(first_name="A", last_name="A"))
        assert result.ok
        assert len(book.store) == 1
        assert result.warnings == ["Plugin hook post_add failed: plugin exploded"]
