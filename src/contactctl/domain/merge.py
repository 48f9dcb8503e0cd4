"""Merge resolution — collapse several contacts into one surviving record.

The first valid id in the caller's order is the primary. Its identity
(``id``, ``created_at``) and its name and avatar survive unchanged; the
remaining fields are resolved from all participants:

- ``phone`` / ``email``: union, exact-string de-dup, first occurrence
  wins, primary's entries first, then the others in input order.
- ``address`` / ``company``: primary's value if non-empty, else the first
  non-empty value among the others, else empty.
- ``notes``: every non-empty note, primary first, joined by a blank line.
- ``updated_at``: the merge timestamp.

Unknown ids are ignored and repeated ids count once. Fewer than two
valid contacts is a no-op, not an error.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from contactctl.domain.contact import Contact

NOTES_SEPARATOR = "\n\n"


@dataclass(frozen=True)
class MergePlan:
    """Outcome of resolving a merge request against a contact list."""

    merged: Contact
    absorbed_ids: list[str]

    @property
    def removed_ids(self) -> set[str]:
        """Every id the store must drop before appending ``merged``."""
        return {self.merged.id, *self.absorbed_ids}

    def apply(self, contacts: Sequence[Contact]) -> list[Contact]:
        """Return the new collection: participants removed, merged appended.

        The primary's old position is not kept; it moves to the end.
        """
        removed = self.removed_ids
        return [c for c in contacts if c.id not in removed] + [self.merged]


def select_participants(contacts: Sequence[Contact], ids: Iterable[str]) -> list[Contact]:
    """Resolve *ids* to contacts in input order, skipping unknown and repeated ids."""
    by_id = {c.id: c for c in contacts}
    selected: list[Contact] = []
    seen: set[str] = set()
    for contact_id in ids:
        if contact_id in seen or contact_id not in by_id:
            continue
        seen.add(contact_id)
        selected.append(by_id[contact_id])
    return selected


def _union(lists: Iterable[list[str]]) -> list[str]:
    return list(dict.fromkeys(value for values in lists for value in values))


def _first_non_empty(values: Iterable[str | None]) -> str:
    return next((v for v in values if v), "")


def resolve_merge(participants: Sequence[Contact], *, now: str) -> Contact:
    """Combine *participants* (primary first) into the surviving record."""
    primary, *others = participants
    everyone = [primary, *others]
    return primary.model_copy(
        update={
            "phone": _union(c.phone for c in everyone),
            "email": _union(c.email for c in everyone),
            "address": _first_non_empty(c.address for c in everyone),
            "company": _first_non_empty(c.company for c in everyone),
            "notes": NOTES_SEPARATOR.join(c.notes for c in everyone if c.notes),
            "updated_at": now,
        }
    )


def plan_merge(
    contacts: Sequence[Contact],
    ids: Iterable[str],
    *,
    now: str,
) -> MergePlan | None:
    """Plan a merge of *ids* against *contacts*; ``None`` when fewer than two are valid."""
    participants = select_participants(contacts, ids)
    if len(participants) < 2:
        return None
    merged = resolve_merge(participants, now=now)
    return MergePlan(merged=merged, absorbed_ids=[c.id for c in participants[1:]])
