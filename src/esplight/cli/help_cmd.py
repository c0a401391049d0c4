from __future__ import annotations

import logging

import typer

from esplight.errors import MissingParameterError

from .common import exit_usage

logger = logging.getLogger(__name__)

USAGE = {
    "discover": "esplight discover [SECONDS, default=5] [--redact] [--no-state]",
    "switch": "esplight switch <hostname> <on|off|toggle> [transitionMs]",
    "set": "esplight set <hostname> <on|off|toggle> [transitionMs]",
    "color": "esplight color <hostname> <color> <kelvin> [transitionMs]",
}


def help_mode(
    mode: str | None = typer.Argument(None, help="Mode to describe"),
) -> None:
    """Show usage for a mode."""
    if mode is None:
        exit_usage(MissingParameterError("mode"))

    usage = USAGE.get(mode)
    if usage is None:
        logger.error("Unsupported help mode '%s'", mode)
        return

    typer.echo(f"Usage:\n{usage}")


def register(app: typer.Typer) -> None:
    app.command("help")(help_mode)
