"""Command: update a contact's fields."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import click

from contactctl.commands._base import ContactCommand

if TYPE_CHECKING:
    from contactctl.commands._context import AppContext


@click.command(
    cls=ContactCommand,
    examples="""\
  contactctl update 3f2b... --company "New Co"
  contactctl update 3f2b... --phone 555-0100 --phone 555-0199
  contactctl update 3f2b... --notes ""
  contactctl --strict update 3f2b... --first-name Joanna""",
)
@click.argument("contact_id")
@click.option("--first-name", default=None, help="New first name.")
@click.option("--last-name", default=None, help="New last name.")
@click.option("--company", default=None, help="New company (empty string clears it).")
@click.option("--phone", "phones", multiple=True, help="Replace phone numbers (repeatable).")
@click.option("--email", "emails", multiple=True, help="Replace email addresses (repeatable).")
@click.option("--address", default=None, help="New address (empty string clears it).")
@click.option("--notes", default=None, help="New notes (empty string clears them).")
@click.option("--avatar", default=None, help="New avatar URL (empty string clears it).")
@click.pass_obj
def update(
    app: AppContext,
    contact_id: str,
    first_name: str | None,
    last_name: str | None,
    company: str | None,
    phones: tuple[str, ...],
    emails: tuple[str, ...],
    address: str | None,
    notes: str | None,
    avatar: str | None,
) -> None:
    """Replace fields of an existing contact.

    Unknown ids are a no-op unless --strict is set.
    """
    from contactctl.services.mutation import MutationService
    from contactctl.services.result import ServiceResult

    changes: dict[str, Any] = {}
    errors: list[str] = []
    for key, value in (("first_name", first_name), ("last_name", last_name)):
        if value is None:
            continue
        if not value.strip():
            errors.append(f"{key.replace('_', ' ').capitalize()} cannot be blank")
        changes[key] = value.strip()
    for key, value in (
        ("company", company),
        ("address", address),
        ("notes", notes),
        ("avatar", avatar),
    ):
        if value is not None:
            changes[key] = value or None
    if phones:
        changes["phone"] = [p for p in phones if p.strip()]
    if emails:
        changes["email"] = [e for e in emails if e.strip()]

    if errors:
        app.emit(ServiceResult.failure("update", "VALIDATION_FAILED", "; ".join(errors)))
        return
    if not changes:
        click.echo("No changes specified. Use --help for options.", err=True)
        raise SystemExit(1)

    app.emit(MutationService(app.book).update(contact_id, changes))
