"""MutationService — the only way contacts are added, changed, or removed.

Ids and timestamps are assigned here and nowhere else: callers supply
editable fields only. Each operation applies to the in-memory store and
then writes the full collection through; a failed write is reported as a
warning (``data.persisted = False``) and the change stands.

Missing ids are permissive by default. ``update`` / ``delete`` of an
unknown id and ``merge`` with fewer than two valid ids return ``ok=True``
with ``data.changed = False`` and a warning. In strict mode
(``strict=True`` or ``[contacts] strict_missing``) they fail with
``NOT_FOUND`` / ``MERGE_TOO_FEW`` instead.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from pydantic import ValidationError

from contactctl.domain.contact import IMMUTABLE_FIELDS, Contact, ContactFields
from contactctl.domain.ids import generate_contact_id
from contactctl.domain.merge import plan_merge, select_participants
from contactctl.services.base import BaseService
from contactctl.services.contracts import MergeData, dump_validated
from contactctl.services.result import ServiceResult
from contactctl.services.telemetry import trace_span, traced

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence

    from contactctl.infrastructure.book import AddressBook

# camelCase wire name -> python field name, for changes given either way.
_FIELD_NAMES: dict[str, str] = {
    (info.alias or name): name for name, info in Contact.model_fields.items()
}


class MutationService(BaseService):
    """Add, update, delete, and merge contacts."""

    def __init__(
        self,
        book: AddressBook,
        *,
        clock: Callable[[], str] | None = None,
        id_factory: Callable[[], str] = generate_contact_id,
    ) -> None:
        super().__init__(book, clock=clock)
        self._id_factory = id_factory

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    @traced
    def add(self, fields: ContactFields | Mapping[str, Any]) -> ServiceResult:
        """Create a contact from *fields*. No required-field checks here."""
        op = "add"
        try:
            if not isinstance(fields, ContactFields):
                fields = ContactFields.model_validate(dict(fields))
        except ValidationError as exc:
            return ServiceResult.failure(op, "VALIDATION_FAILED", _summarize(exc))

        now = self._clock()
        contact = Contact(
            **fields.model_dump(),
            id=self._id_factory(),
            created_at=now,
            updated_at=now,
        )
        persisted = self._book.store.append(contact)

        warnings = self._book.drain_warnings()
        self._dispatch_event("post_add", {"contact_id": contact.id}, warnings)
        return ServiceResult(
            ok=True,
            op=op,
            data={"id": contact.id, "contact": contact.to_wire(), "persisted": persisted},
            warnings=warnings,
        )

    @traced
    def update(
        self,
        contact_id: str,
        changes: ContactFields | Mapping[str, Any],
        *,
        strict: bool | None = None,
    ) -> ServiceResult:
        """Replace fields of *contact_id* and refresh ``updated_at``.

        A :class:`ContactFields` replaces every editable field; a mapping
        (python or camelCase keys) replaces only the keys it names.
        ``id``, ``created_at`` and ``updated_at`` are never replaced.
        """
        op = "update"
        warnings: list[str] = []
        store = self._book.store

        current = store.get(contact_id)
        if current is None:
            return self._missing(op, contact_id, strict)

        applied = _normalize_changes(changes, warnings)
        try:
            updated = Contact.model_validate(
                {**current.model_dump(), **applied, "updated_at": self._clock()}
            )
        except ValidationError as exc:
            return ServiceResult.failure(op, "VALIDATION_FAILED", _summarize(exc), id=contact_id)

        fields_changed = [k for k, v in applied.items() if getattr(current, k) != v]
        persisted = store.replace_all(updated if c.id == contact_id else c for c in store.list())

        warnings.extend(self._book.drain_warnings())
        self._dispatch_event(
            "post_update",
            {"contact_id": contact_id, "fields_changed": fields_changed},
            warnings,
        )
        return ServiceResult(
            ok=True,
            op=op,
            data={
                "id": contact_id,
                "changed": True,
                "fields_changed": fields_changed,
                "contact": updated.to_wire(),
                "persisted": persisted,
            },
            warnings=warnings,
        )

    @traced
    def delete(self, contact_id: str, *, strict: bool | None = None) -> ServiceResult:
        """Remove *contact_id* if present."""
        op = "delete"
        store = self._book.store

        if store.get(contact_id) is None:
            return self._missing(op, contact_id, strict)

        persisted = store.replace_all(c for c in store.list() if c.id != contact_id)

        warnings = self._book.drain_warnings()
        self._dispatch_event("post_delete", {"contact_id": contact_id}, warnings)
        return ServiceResult(
            ok=True,
            op=op,
            data={"id": contact_id, "changed": True, "persisted": persisted},
            warnings=warnings,
        )

    @traced
    def merge(self, contact_ids: Sequence[str], *, strict: bool | None = None) -> ServiceResult:
        """Merge *contact_ids* into the first valid one.

        The merged record replaces every participant and is appended at
        the end of the list.
        """
        op = "merge"
        store = self._book.store
        contacts = store.list()

        with trace_span("plan_merge"):
            plan = plan_merge(contacts, contact_ids, now=self._clock())

        if plan is None:
            valid = [c.id for c in select_participants(contacts, contact_ids)]
            message = f"Merge needs at least 2 existing contacts, got {len(valid)}"
            if self._is_strict(strict):
                return ServiceResult.failure(op, "MERGE_TOO_FEW", message, valid_ids=valid)
            return ServiceResult(
                ok=True,
                op=op,
                data=dump_validated(MergeData, {"changed": False}),
                warnings=[f"{message}; nothing changed"],
            )

        with trace_span("write_through"):
            persisted = store.replace_all(plan.apply(contacts))

        warnings = self._book.drain_warnings()
        self._dispatch_event(
            "post_merge",
            {"primary_id": plan.merged.id, "absorbed_ids": plan.absorbed_ids},
            warnings,
        )
        return ServiceResult(
            ok=True,
            op=op,
            data=dump_validated(
                MergeData,
                {
                    "changed": True,
                    "id": plan.merged.id,
                    "absorbed_ids": plan.absorbed_ids,
                    "contact": plan.merged.to_wire(),
                    "persisted": persisted,
                },
            ),
            warnings=warnings,
        )

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    def _is_strict(self, strict: bool | None) -> bool:
        return self._book.settings.strict_missing if strict is None else strict

    def _missing(self, op: str, contact_id: str, strict: bool | None) -> ServiceResult:
        message = f"No contact found with ID: {contact_id}"
        if self._is_strict(strict):
            return ServiceResult.failure(op, "NOT_FOUND", message, id=contact_id)
        return ServiceResult(
            ok=True,
            op=op,
            data={"id": contact_id, "changed": False},
            warnings=[message],
        )


def _normalize_changes(
    changes: ContactFields | Mapping[str, Any],
    warnings: list[str],
) -> dict[str, Any]:
    """Map *changes* onto python field names, dropping immutable and unknown keys."""
    if isinstance(changes, ContactFields):
        return changes.model_dump()

    applied: dict[str, Any] = {}
    for key, value in changes.items():
        name = _FIELD_NAMES.get(key, key)
        if name in IMMUTABLE_FIELDS:
            warnings.append(f"Cannot change immutable field: {key}")
        elif name not in ContactFields.editable_names():
            warnings.append(f"Unknown field ignored: {key}")
        else:
            applied[name] = value
    return applied


def _summarize(exc: ValidationError) -> str:
    return "; ".join(
        f"{'.'.join(str(p) for p in err['loc']) or 'input'}: {err['msg']}" for err in exc.errors()
    )
