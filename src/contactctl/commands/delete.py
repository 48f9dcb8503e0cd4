"""Command: delete a contact."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from contactctl.commands._base import ContactCommand

if TYPE_CHECKING:
    from contactctl.commands._context import AppContext


@click.command(
    cls=ContactCommand,
    examples="""\
  contactctl delete 3f2b...
  contactctl --strict delete 3f2b...""",
)
@click.argument("contact_id")
@click.pass_obj
def delete(app: AppContext, contact_id: str) -> None:
    """Delete a contact by ID. Unknown ids are a no-op unless --strict is set."""
    from contactctl.services.mutation import MutationService

    app.emit(MutationService(app.book).delete(contact_id))
