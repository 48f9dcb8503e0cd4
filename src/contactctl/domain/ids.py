"""Contact identifier generation.

Ids are random UUID4 strings. They carry no meaning and are never
derived from contact content, so editing a name never changes an id.

INVARIANT: IDs are permanent. Once generated, an ID never changes.
"""

from __future__ import annotations

import uuid


def generate_contact_id() -> str:
    """Return a new random contact id."""
    return str(uuid.uuid4())
