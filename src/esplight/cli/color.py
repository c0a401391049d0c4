from __future__ import annotations

import logging
from typing import Annotated

import typer
from rich.console import Console

from esplight.core import resolve_color, service
from esplight.errors import FormatError
from esplight.models import DesiredState

from .common import exit_usage, load_settings_or_exit, print_outcome, run_async

logger = logging.getLogger(__name__)


def color(
    hostname: Annotated[str, typer.Argument(help="Device hostname, e.g. porch-light")],
    color_text: Annotated[
        str,
        typer.Argument(
            metavar="COLOR",
            help="Color name (red, AliceBlue) or hex (#RRGGBB, AARRGGBB)",
        ),
    ],
    kelvin: Annotated[
        int, typer.Argument(min=0, max=65535, help="Color temperature in kelvin")
    ],
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
    """Set a light's color and color temperature."""
    settings = load_settings_or_exit()
    logger.debug("Device hostname: %s", hostname)

    try:
        resolved = resolve_color(color_text)
    except FormatError as exc:
        exit_usage(exc)
    logger.debug("Desired color: %s (alpha=%d)", resolved.hex, resolved.alpha)
    logger.debug("Transition: %dms", transition_ms)

    desired = DesiredState.set_color(resolved, kelvin, transition=transition_ms / 1000)
    outcome = run_async(
        service.control_light(hostname, desired, settings, timeout=timeout)
    )
    print_outcome(Console(), hostname, outcome)


def register(app: typer.Typer) -> None:
    app.command()(color)
