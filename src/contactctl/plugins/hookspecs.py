"""Pluggy hook specifications for contact lifecycle events.

Hooks fire after the in-memory change has been applied, whether or not
the write-through succeeded. ``persist_failed`` is the observability
hook for failed write-throughs.
"""

from __future__ import annotations

import pluggy

PROJECT_NAME = "contactctl"

hookspec = pluggy.HookspecMarker(PROJECT_NAME)
hookimpl = pluggy.HookimplMarker(PROJECT_NAME)


class ContactctlHookSpec:
    """Hook specifications for the contactctl plugin system."""

    @hookspec
    def post_add(self, contact_id: str) -> None:
        """Called after a contact is added."""

    @hookspec
    def post_update(self, contact_id: str, fields_changed: list[str]) -> None:
        """Called after a contact's fields are replaced."""

    @hookspec
    def post_delete(self, contact_id: str) -> None:
        """Called after a contact is removed."""

    @hookspec
    def post_merge(self, primary_id: str, absorbed_ids: list[str]) -> None:
        """Called after contacts are merged into *primary_id*."""

    @hookspec
    def persist_failed(self, key: str, error: str) -> None:
        """Called when writing the collection to storage fails."""
