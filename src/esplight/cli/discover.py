from __future__ import annotations

import logging

import typer
from rich.console import Console
from rich.table import Table

from esplight.core import service
from esplight.utils.redaction import Redactor

from .common import load_settings_or_exit, run_async

logger = logging.getLogger(__name__)


def discover(
    seconds: float | None = typer.Argument(
        None,
        min=0.1,
        help="How long to listen for devices. Uses config default if omitted.",
    ),
    state: bool = typer.Option(
        True, "--state/--no-state", help="Query each light's current state"
    ),
    redact: bool = typer.Option(
        False,
        "--redact",
        help="Redact addresses and MACs in output",
    ),
) -> None:
    """Discover ESPHome lights via mDNS and show their state."""
    console = Console()

    settings = load_settings_or_exit()
    duration = seconds if seconds is not None else settings.discovery.discovery_time

    console.print(f"Discovering lights for {duration:g}s...")
    logger.info(
        "Discovery settings: service=%s, time=%.1fs",
        settings.discovery.service_type,
        duration,
    )
    found = run_async(
        service.discover_lights(settings, duration=duration, with_state=state)
    )

    if not found:
        console.print("No lights found.")
        return

    redactor = Redactor(enabled=redact)
    table = Table()
    table.add_column("Hostname", style="cyan")
    table.add_column("Address")
    table.add_column("MAC Address")
    table.add_column("Label", style="green")
    table.add_column("Power")
    table.add_column("BSHK")

    for device, light in found:
        row = redactor.device_columns(device)
        if light is None:
            row += [device.friendly_name, "", ""]
        else:
            row += [
                light.label,
                "on" if light.is_on else "off",
                f"({light.brightness:.2f}, {light.saturation:.2f}, "
                f"{light.hue:.0f}, {light.kelvin})",
            ]
        table.add_row(*row)

    console.print(table)
    console.print(f"\n[green]Found {len(found)} light(s)[/green]")


def register(app: typer.Typer) -> None:
    app.command()(discover)
