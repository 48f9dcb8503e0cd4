"""Collection codec — contacts to and from the persisted blob.

The blob is a UTF-8 JSON array of contact objects using camelCase field
names. Unset optional fields are omitted.

Decoding is strict: anything other than a well-formed array of valid
contacts with distinct ids raises :class:`CorruptCollectionError`. The contact store turns
that into an empty collection.
"""

from __future__ import annotations

import json
from typing import TYPE_CHECKING

from pydantic import TypeAdapter, ValidationError

from contactctl.domain.contact import Contact

if TYPE_CHECKING:
    from collections.abc import Sequence

_COLLECTION = TypeAdapter(list[Contact])


class CorruptCollectionError(ValueError):
    """The persisted blob is not a valid contact collection."""


def encode_contacts(contacts: Sequence[Contact]) -> bytes:
    """Serialize *contacts* in order."""
    payload = [c.to_wire() for c in contacts]
    return json.dumps(payload, ensure_ascii=False).encode("utf-8")


def decode_contacts(raw: bytes) -> list[Contact]:
    """Parse a blob produced by :func:`encode_contacts` (or the original app)."""
    try:
        data = json.loads(raw.decode("utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError) as exc:
        msg = f"Blob is not valid JSON: {exc}"
        raise CorruptCollectionError(msg) from exc

    if not isinstance(data, list):
        msg = f"Expected a JSON array, got {type(data).__name__}"
        raise CorruptCollectionError(msg)

    try:
        contacts = _COLLECTION.validate_python(data)
    except ValidationError as exc:
        msg = f"Invalid contact record: {exc.error_count()} error(s)"
        raise CorruptCollectionError(msg) from exc

    seen: set[str] = set()
    for contact in contacts:
        if contact.id in seen:
            msg = f"Duplicate contact id: {contact.id}"
            raise CorruptCollectionError(msg)
        seen.add(contact.id)
    return contacts
