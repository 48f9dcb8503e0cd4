"""Contact model — the sole entity of the address book.

Field names are snake_case in Python and camelCase on the wire
(``firstName``, ``createdAt`` ...) so persisted collections stay readable
by anything that speaks the original blob format.

INVARIANT: ``id`` and ``created_at`` never change once assigned.
Callers supply :class:`ContactFields`; ids and timestamps are owned by
the mutation service.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

# Fields a caller may never set or replace.
IMMUTABLE_FIELDS: frozenset[str] = frozenset({"id", "created_at", "updated_at"})

# Fields carried by a share payload (never notes, avatar, or timestamps).
SHARE_FIELDS: tuple[str, ...] = (
    "first_name",
    "last_name",
    "phone",
    "email",
    "company",
    "address",
)


class ContactFields(BaseModel):
    """Editable contact fields, as supplied by a form or the CLI."""

    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )

    first_name: str
    last_name: str
    company: str | None = None
    phone: list[str] = Field(default_factory=list)
    email: list[str] = Field(default_factory=list)
    address: str | None = None
    notes: str | None = None
    avatar: str | None = None

    @classmethod
    def editable_names(cls) -> list[str]:
        """Python names of every editable field, in declaration order."""
        return list(cls.model_fields)


class Contact(ContactFields):
    """A stored contact record."""

    id: str
    created_at: str
    updated_at: str

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"

    def to_wire(self) -> dict[str, Any]:
        """Serialize with camelCase keys, omitting unset optionals."""
        return self.model_dump(by_alias=True, exclude_none=True, mode="json")

    def share_payload(self) -> dict[str, Any]:
        """The subset of fields a share serializer may expose."""
        return self.model_dump(
            by_alias=True,
            include=set(SHARE_FIELDS),
            exclude_none=True,
            mode="json",
        )


def clean_fields(
    fields: ContactFields,
) -> tuple[ContactFields, list[str]]:
    """Apply form-level cleaning and return ``(cleaned, errors)``.

    Names are trimmed and must be non-empty. Blank phone and email
    entries are dropped; the remaining entries keep their original form
    and order. Empty optional text becomes ``None``.
    """
    errors: list[str] = []
    first = fields.first_name.strip()
    last = fields.last_name.strip()
    if not first:
        errors.append("First name is required")
    if not last:
        errors.append("Last name is required")

    cleaned = fields.model_copy(
        update={
            "first_name": first,
            "last_name": last,
            "phone": [p for p in fields.phone if p.strip()],
            "email": [e for e in fields.email if e.strip()],
            "company": fields.company or None,
            "address": fields.address or None,
            "notes": fields.notes or None,
            "avatar": fields.avatar or None,
        }
    )
    return cleaned, errors
