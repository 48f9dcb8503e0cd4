"""Command: merge contacts into one."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from contactctl.commands._base import ContactCommand

if TYPE_CHECKING:
    from contactctl.commands._context import AppContext


@click.command(
    cls=ContactCommand,
    examples="""\
  contactctl merge 3f2b... 9c1d...
  contactctl merge $(contactctl -q duplicates | head -n 1)
  contactctl --json merge 3f2b... 9c1d... 77e0...""",
)
@click.argument("contact_ids", nargs=-1, required=True)
@click.pass_obj
def merge(app: AppContext, contact_ids: tuple[str, ...]) -> None:
    """Merge contacts; the first ID is kept as the primary.

    Phones and emails are combined, empty address/company are filled from
    the others, and notes are concatenated. The merged contact moves to
    the end of the list.
    """
    from contactctl.services.mutation import MutationService

    app.emit(MutationService(app.book).merge(list(contact_ids)))
