"""AppContext — shared Click context for all commands.

Created once by the root CLI group and handed to subcommands via
``@click.pass_obj``. Opens the address book lazily and owns result
emission (stdout/stderr routing and exit codes).
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from contactctl.config.logging import configure_logging
from contactctl.output.formatters import OutputSettings, format_result

if TYPE_CHECKING:
    from contactctl.config.settings import ContactSettings
    from contactctl.infrastructure.book import AddressBook
    from contactctl.services.result import ServiceResult


class AppContext:
    """State flowing through Click's command hierarchy.

    The address book is opened on first use so ``--help`` and
    ``--version`` never touch storage.
    """

    def __init__(self, settings: ContactSettings) -> None:
        self.settings = settings
        self._book: AddressBook | None = None

        configure_logging(verbose=settings.verbose, log_json=settings.log_json)

        if settings.verbose:
            from contactctl.services.telemetry import enable_telemetry

            enable_telemetry()

    @property
    def book(self) -> AddressBook:
        """The address book (opened lazily on first access)."""
        if self._book is None:
            from contactctl.infrastructure.book import AddressBook

            self._book = AddressBook(self.settings)
            self._book.init_event_bus()
        return self._book

    def close(self) -> None:
        if self._book is not None:
            self._book.close()
            self._book = None

    def emit(self, result: ServiceResult) -> None:
        """Print *result* and exit 1 on failure.

        Success goes to stdout; warnings go to stderr (except in JSON
        mode, where they are part of the payload). Failures go to stderr.
        """
        settings = OutputSettings(
            json_output=self.settings.json_output,
            quiet=self.settings.quiet,
            verbose=self.settings.verbose,
            width=self.settings.output.table_width,
        )
        output = format_result(result, settings=settings)
        if result.ok:
            click.echo(output)
            if not settings.json_output:
                for warning in result.warnings:
                    click.echo(f"WARNING: {warning}", err=True)
        else:
            click.echo(output, err=True)
            raise SystemExit(1)
