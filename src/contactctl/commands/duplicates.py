"""Command: list suspected duplicate groups."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from contactctl.commands._base import ContactCommand

if TYPE_CHECKING:
    from contactctl.commands._context import AppContext


@click.command(
    cls=ContactCommand,
    examples="""\
  contactctl duplicates
  contactctl -q duplicates          # one line of ids per group
  contactctl --json duplicates""",
)
@click.pass_obj
def duplicates(app: AppContext) -> None:
    """Find contacts that share a name, a phone number, or an email."""
    from contactctl.services.query import QueryService

    app.emit(QueryService(app.book).duplicates())
