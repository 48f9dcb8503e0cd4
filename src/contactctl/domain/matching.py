"""Duplicate match predicate and search filter.

A pair of contacts is a suspected duplicate when ANY single signal
agrees; there is no scoring and no threshold.

- name: first AND last name equal, case-insensitively
- phone: at least one phone string equal, exactly (no normalization)
- email: at least one email equal, case-insensitively

Each signal is symmetric, so :func:`is_duplicate` is symmetric too.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from contactctl.domain.contact import Contact


@dataclass(frozen=True)
class MatchSignals:
    """Which signals fired for a pair of contacts."""

    name: bool
    phone: bool
    email: bool

    @property
    def any(self) -> bool:
        return self.name or self.phone or self.email

    def reasons(self) -> list[str]:
        """Names of the signals that fired, in a stable order."""
        return [
            label
            for label, fired in (("name", self.name), ("phone", self.phone), ("email", self.email))
            if fired
        ]


def name_match(a: Contact, b: Contact) -> bool:
    return (
        a.first_name.lower() == b.first_name.lower()
        and a.last_name.lower() == b.last_name.lower()
    )


def shared_phone(a: Contact, b: Contact) -> bool:
    return any(phone in b.phone for phone in a.phone)


def shared_email(a: Contact, b: Contact) -> bool:
    others = {email.lower() for email in b.email}
    return any(email.lower() in others for email in a.email)


def match_signals(a: Contact, b: Contact) -> MatchSignals:
    """Evaluate every signal for the pair ``(a, b)``."""
    return MatchSignals(
        name=name_match(a, b),
        phone=shared_phone(a, b),
        email=shared_email(a, b),
    )


def is_duplicate(a: Contact, b: Contact) -> bool:
    """True when any single signal agrees."""
    return name_match(a, b) or shared_phone(a, b) or shared_email(a, b)


def matches_term(contact: Contact, term: str) -> bool:
    """Search filter used by the contact list.

    Case-insensitive substring on ``"first last"`` and on each email;
    case-sensitive substring on each phone. An empty term matches all.
    """
    needle = term.lower()
    if needle in contact.full_name.lower():
        return True
    if any(needle in email.lower() for email in contact.email):
        return True
    return any(term in phone for phone in contact.phone)
