"""Subcommand modules for contactctl.

register_commands() imports command modules on demand so
``contactctl --help`` stays fast.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import click


def register_commands(cli: click.Group) -> None:
    """Register every subcommand on the root CLI group."""
    from contactctl.commands.add import add
    from contactctl.commands.delete import delete
    from contactctl.commands.duplicates import duplicates
    from contactctl.commands.merge import merge
    from contactctl.commands.query import list_cmd, search, show
    from contactctl.commands.update import update

    for command in (add, update, delete, list_cmd, show, search, duplicates, merge):
        cli.add_command(command)
