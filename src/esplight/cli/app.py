from __future__ import annotations

from typing import Annotated

import typer

from esplight.utils.logging import setup_logging

from . import config as config_cmd
from .color import register as register_color
from .discover import register as register_discover
from .help_cmd import register as register_help
from .switch import register as register_switch

app = typer.Typer(
    help="esplight - control ESPHome lights on your network", no_args_is_help=True
)

app.add_typer(config_cmd.app, name="config")

register_discover(app)
register_switch(app)
register_color(app)
register_help(app)


@app.callback(invoke_without_command=True)
def main(
    version: Annotated[
        bool,
        typer.Option("--version", "-v", help="Show version and exit"),
    ] = False,
    log_level: Annotated[
        str | None,
        typer.Option(
            "--log-level",
            "-l",
            help="DEBUG, INFO, WARNING or ERROR (default: $LOGLEVEL or INFO)",
        ),
    ] = None,
) -> None:
    """esplight CLI."""
    setup_logging(log_level)

    if version:
        from importlib.metadata import version as get_version

        typer.echo(f"esplight version {get_version('esplight')}")
        raise typer.Exit()
