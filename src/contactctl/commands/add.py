"""Command: add a contact."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from contactctl.commands._base import ContactCommand

if TYPE_CHECKING:
    from contactctl.commands._context import AppContext


@click.command(
    cls=ContactCommand,
    examples="""\
  contactctl add Jo Doe --phone 555-0100 --email jo@example.com
  contactctl add Ada Lovelace --company "Analytical Engines" --notes "Met at the expo"
  contactctl --json add Grace Hopper --phone 555-0101 --phone 555-0102""",
)
@click.argument("first_name")
@click.argument("last_name")
@click.option("--company", default=None, help="Company name.")
@click.option("--phone", "phones", multiple=True, help="Phone number (repeatable).")
@click.option("--email", "emails", multiple=True, help="Email address (repeatable).")
@click.option("--address", default=None, help="Postal address.")
@click.option("--notes", default=None, help="Free-text notes.")
@click.option("--avatar", default=None, help="Avatar image URL.")
@click.pass_obj
def add(
    app: AppContext,
    first_name: str,
    last_name: str,
    company: str | None,
    phones: tuple[str, ...],
    emails: tuple[str, ...],
    address: str | None,
    notes: str | None,
    avatar: str | None,
) -> None:
    """Add a new contact."""
    from contactctl.domain.contact import ContactFields, clean_fields
    from contactctl.services.mutation import MutationService
    from contactctl.services.result import ServiceResult

    fields, errors = clean_fields(
        ContactFields(
            first_name=first_name,
            last_name=last_name,
            company=company,
            phone=list(phones),
            email=list(emails),
            address=address,
            notes=notes,
            avatar=avatar,
        )
    )
    if errors:
        app.emit(ServiceResult.failure("add", "VALIDATION_FAILED", "; ".join(errors)))
        return

    app.emit(MutationService(app.book).add(fields))
