"""CLI entry point for ical."""

from __future__ import annotations

import logging
from typing import Optional, Sequence

import typer

from icalcli.command import DateInterpreter, ParseFailure, parse_arguments
from icalcli.command.constants import PROGRAM_NAME
from icalcli.command.errors import CommandError
from icalcli.commands import execute
from icalcli.config import IcalConfig, load_config
from icalcli.errors import ConfigError
from icalcli.store import CalendarStore, StoreError

logger = logging.getLogger(__name__)

app = typer.Typer(add_completion=False)

# Option parsing is done by icalcli.command; click only hands over the raw words.
RAW_ARGUMENTS = {
    "allow_extra_args": True,
    "ignore_unknown_options": True,
    "help_option_names": [],
}


def format_error_for_user(error: Exception) -> str:
    if isinstance(error, ConfigError):
        return f"Configuration Error: {error.message}"
    if isinstance(error, (CommandError, StoreError)):
        return error.message
    return f"Error: {str(error)}"


def configure_logging(level: int) -> None:
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")


def run(arguments: Sequence[str], config: Optional[IcalConfig] = None) -> int:
    """Parse, validate and execute one invocation; return the exit code."""
    result = parse_arguments(arguments)
    if isinstance(result, ParseFailure):
        typer.secho(result.message, fg=typer.colors.RED, err=True)
        return 1

    try:
        config = config or load_config()
        store = CalendarStore(config.calendar_dir, config.tz)
        output = execute(result.command, store, DateInterpreter(config.tz))
    except (ConfigError, CommandError, StoreError) as exc:
        logger.debug("Command failed: %r", exc)
        typer.secho(format_error_for_user(exc), fg=typer.colors.RED, err=True)
        return 1

    typer.echo(output)
    return 0


@app.command(context_settings=RAW_ARGUMENTS)
def main(ctx: typer.Context) -> None:
    """Manage calendar events from the command line."""
    try:
        config = load_config()
    except ConfigError as exc:
        typer.secho(format_error_for_user(exc), fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)

    configure_logging(config.log_level)
    raise typer.Exit(code=run([PROGRAM_NAME, *ctx.args], config))


def cli():
    """Entry point for the CLI."""
    app()
