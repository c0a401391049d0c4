"""One invocation's worth of discovery, resolution and dispatch."""

from __future__ import annotations

import asyncio
import logging

import aioesphomeapi

from esplight.config import Settings
from esplight.core.discovery import DiscoverySession
from esplight.core.dispatcher import Dispatcher
from esplight.core.esphome import ESPHomeLightController
from esplight.core.registry import DeviceRegistry
from esplight.core.waiter import wait_for_device
from esplight.models import DesiredState, Device, LightState, Outcome

logger = logging.getLogger(__name__)


async def control_light(
    hostname: str,
    desired: DesiredState,
    settings: Settings,
    *,
    timeout: float | None = None,
) -> Outcome:
    """Resolve ``hostname`` through discovery and apply ``desired`` to it.

    Discovery keeps running until the command completes. The session and the
    controller are released on every exit path, cancellation included.
    """
    registry = DeviceRegistry()
    ceiling = timeout if timeout is not None else settings.discovery.resolve_timeout

    async with DiscoverySession(registry, settings.discovery):
        device = await wait_for_device(
            registry,
            hostname,
            timeout=ceiling,
            interval=settings.discovery.poll_interval,
        )
        async with ESPHomeLightController(settings.api) as controller:
            outcome = await Dispatcher(controller).dispatch(device, desired)

    logger.debug(
        "Outcome for %s: %s %s", hostname, outcome.status.value, outcome.reason
    )
    return outcome


async def discover_lights(
    settings: Settings,
    *,
    duration: float | None = None,
    with_state: bool = True,
) -> list[tuple[Device, LightState | None]]:
    """Listen for ``duration`` seconds and report what was found.

    Devices whose state cannot be read are still listed, with no state.
    """
    registry = DeviceRegistry()
    seconds = duration if duration is not None else settings.discovery.discovery_time
    logger.debug("Discovery time: %.1fs", seconds)

    async with DiscoverySession(registry, settings.discovery):
        await asyncio.sleep(seconds)
        logger.debug("Discovery window elapsed")

    devices = registry.devices()
    if not with_state:
        return [(device, None) for device in devices]

    results: list[tuple[Device, LightState | None]] = []
    async with ESPHomeLightController(settings.api) as controller:
        for device in devices:
            try:
                light = await controller.query_light_state(device)
            except (aioesphomeapi.APIConnectionError, OSError) as exc:
                # mDNS also announces ESPHome nodes that are not lights
                logger.warning("Skipping state of %s: %s", device.hostname, exc)
                light = None
            results.append((device, light))
    return results
