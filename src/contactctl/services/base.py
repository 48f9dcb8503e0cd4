"""BaseService — foundation for all contactctl services.

Every service receives an :class:`AddressBook` at construction time and
reaches the contact store only through it.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from contactctl.services._helpers import now_iso

if TYPE_CHECKING:
    from collections.abc import Callable

    from contactctl.infrastructure.book import AddressBook


class BaseService:
    """Base for service-layer classes.

    Parameters:
        book: The address book to operate on.
        clock: Source of timestamps; overridable for deterministic tests.
    """

    def __init__(self, book: AddressBook, *, clock: Callable[[], str] | None = None) -> None:
        self._book = book
        self._clock = clock or now_iso

    def _dispatch_event(self, hook_name: str, payload: dict[str, Any], warnings: list[str]) -> None:
        """Fire a lifecycle hook, collecting plugin failures as warnings.

        INVARIANT: Plugin failures are warnings, never errors.
        """
        warnings.extend(self._book.dispatch(hook_name, payload))
