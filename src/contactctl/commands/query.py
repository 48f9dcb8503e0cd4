"""Commands: list, show, and search contacts."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from contactctl.commands._base import ContactCommand

if TYPE_CHECKING:
    from contactctl.commands._context import AppContext


@click.command(
    "list",
    cls=ContactCommand,
    examples="""\
  contactctl list
  contactctl -q list                # ids only
  contactctl --json list""",
)
@click.pass_obj
def list_cmd(app: AppContext) -> None:
    """List all contacts in insertion order."""
    from contactctl.services.query import QueryService

    app.emit(QueryService(app.book).list_contacts())


@click.command(
    cls=ContactCommand,
    examples="""\
  contactctl show 3f2b...
  contactctl --json show 3f2b...""",
)
@click.argument("contact_id")
@click.pass_obj
def show(app: AppContext, contact_id: str) -> None:
    """Show one contact in full."""
    from contactctl.services.query import QueryService

    app.emit(QueryService(app.book).get(contact_id))


@click.command(
    cls=ContactCommand,
    examples="""\
  contactctl search doe
  contactctl search @example.com
  contactctl search 555""",
)
@click.argument("term")
@click.pass_obj
def search(app: AppContext, term: str) -> None:
    """Search names and emails (case-insensitive) and phone numbers."""
    from contactctl.services.query import QueryService

    app.emit(QueryService(app.book).search(term))
