from __future__ import annotations

import logging
from typing import Annotated

import typer
from rich.console import Console

from esplight.core import service
from esplight.models import DesiredState

from .common import load_settings_or_exit, print_outcome, run_async

logger = logging.getLogger(__name__)


def switch(
    hostname: Annotated[str, typer.Argument(help="Device hostname, e.g. porch-light")],
    state: Annotated[str, typer.Argument(help="on, off or toggle")],
    transition_ms: Annotated[
        int, typer.Argument(min=0, help="Transition time in milliseconds")
    ] = 0,
    timeout: Annotated[
        float | None,
        typer.Option(
            "--timeout", "-t", min=0.1, help="Seconds to wait for the device to appear"
        ),
    ] = None,
) -> None:
    """Switch a light on, off, or toggle it."""
    settings = load_settings_or_exit()
    logger.debug("Device hostname: %s", hostname)
    logger.debug("Desired state: %s", state)
    logger.debug("Transition: %dms", transition_ms)

    desired = DesiredState.power(state, transition=transition_ms / 1000)
    outcome = run_async(
        service.control_light(hostname, desired, settings, timeout=timeout)
    )
    print_outcome(Console(), hostname, outcome)


def register(app: typer.Typer) -> None:
    app.command()(switch)
    app.command("set", help="Alias of 'switch'.")(switch)
