"""contactctl entry point: global flags, settings, and subcommand wiring."""

from __future__ import annotations

from typing import Any

import click

from contactctl import __version__
from contactctl.commands import register_commands
from contactctl.commands._context import AppContext
from contactctl.config.settings import ContactSettings


@click.group(invoke_without_command=True, context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(__version__, prog_name="contactctl")
@click.option("--json", "json_output", is_flag=True, help="Print results as JSON.")
@click.option("-q", "--quiet", is_flag=True, help="Print ids only.")
@click.option("-v", "--verbose", is_flag=True, help="Show error detail, timings, debug logs.")
@click.option("--log-json", is_flag=True, help="Emit logs to stderr as JSON lines.")
@click.option("--strict", is_flag=True, help="Fail on unknown ids and too-small merges.")
@click.option("-c", "--config", "config_path", metavar="PATH", help="Use this contactctl.toml.")
@click.pass_context
def cli(ctx: click.Context, config_path: str | None, **flags: Any) -> None:
    """contactctl: keep an address book free of duplicates."""
    app = AppContext(ContactSettings.from_cli(config_path=config_path, **flags))
    ctx.obj = app
    ctx.call_on_close(app.close)

    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


register_commands(cli)
