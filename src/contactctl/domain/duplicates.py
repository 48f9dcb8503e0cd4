"""Duplicate detection — single-pass grouping over the contact list.

Walks contacts in store order. Each contact not yet grouped becomes a
seed; every other ungrouped contact that matches the *seed* joins its
group. All members are then marked grouped before moving on, so groups
are disjoint and every group has at least two members.

This is deliberately NOT a transitive closure. Membership is decided
against the seed only: with A~B, B~C and A!~C, seeding from A yields
``[A, B]`` and C is left to be seeded on its own later. Grouping results
are observable to users choosing what to merge, so the single-pass
behaviour is kept as is rather than replaced by union-find.

Read-only: no mutation, no persistence.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from contactctl.domain.matching import is_duplicate, match_signals

if TYPE_CHECKING:
    from collections.abc import Sequence

    from contactctl.domain.contact import Contact


@dataclass(frozen=True)
class DuplicateGroup:
    """A seed contact and the contacts that matched it."""

    members: list[Contact]
    reasons: dict[str, list[str]] = field(default_factory=dict)

    @property
    def seed(self) -> Contact:
        return self.members[0]

    @property
    def ids(self) -> list[str]:
        return [c.id for c in self.members]


def find_duplicate_groups(contacts: Sequence[Contact]) -> list[list[Contact]]:
    """Return duplicate groups as plain lists of contacts, in seed order."""
    return [group.members for group in detect_duplicates(contacts)]


def detect_duplicates(contacts: Sequence[Contact]) -> list[DuplicateGroup]:
    """Group suspected duplicates, recording why each member matched its seed."""
    grouped: set[str] = set()
    groups: list[DuplicateGroup] = []

    for seed in contacts:
        if seed.id in grouped:
            continue

        # Match against the seed only; see module docstring.
        matches = [
            other
            for other in contacts
            if other.id != seed.id and other.id not in grouped and is_duplicate(seed, other)
        ]
        if not matches:
            continue

        members = [seed, *matches]
        grouped.update(c.id for c in members)
        groups.append(
            DuplicateGroup(
                members=members,
                reasons={m.id: match_signals(seed, m).reasons() for m in matches},
            )
        )

    return groups
