from __future__ import annotations

import asyncio
import colorsys
import logging
from dataclasses import dataclass, field
from types import TracebackType
from typing import cast

import aioesphomeapi

from esplight.config import ApiConfig
from esplight.models import Device, LightState, ResolvedColor

logger = logging.getLogger(__name__)

MIREDS_PER_KELVIN = 1_000_000


def kelvin_to_mireds(kelvin: int) -> float | None:
    if kelvin <= 0:
        return None
    return MIREDS_PER_KELVIN / kelvin


def mireds_to_kelvin(mireds: float) -> int:
    if mireds <= 0:
        return 0
    return round(MIREDS_PER_KELVIN / mireds)


def to_light_state(label: str, state: aioesphomeapi.LightState) -> LightState:
    hue, saturation, _ = colorsys.rgb_to_hsv(state.red, state.green, state.blue)
    return LightState(
        is_on=state.state,
        label=label,
        brightness=state.brightness,
        saturation=saturation,
        hue=hue * 360,
        kelvin=mireds_to_kelvin(state.color_temperature),
    )


class NoLightEntityError(aioesphomeapi.APIConnectionError):
    """The device exposes no light entity."""


@dataclass
class _LightConnection:
    client: aioesphomeapi.APIClient
    info: aioesphomeapi.LightInfo
    label: str
    latest: aioesphomeapi.LightState | None = None
    received: asyncio.Event = field(default_factory=asyncio.Event)

    def on_state(self, state: object) -> None:
        if isinstance(state, aioesphomeapi.LightState) and state.key == self.info.key:
            self.latest = state
            self.received.set()


class ESPHomeLightController:
    """Controls the first light entity of ESPHome devices over the native API.

    Connections are opened on first use and kept until the controller closes.
    Queries wait for the device's state report without a timeout.
    """

    def __init__(self, config: ApiConfig) -> None:
        self._config = config
        self._connections: dict[str, _LightConnection] = {}

    async def _connect(self, device: Device) -> _LightConnection:
        connection = self._connections.get(device.hostname)
        if connection is not None:
            return connection

        logger.debug(
            "Connecting to %s (%s:%d)", device.hostname, device.address, device.port
        )
        client = aioesphomeapi.APIClient(
            device.address,
            port=device.port,
            password=self._config.password,
            noise_psk=self._config.noise_psk,
        )
        await client.connect(login=True)
        try:
            entities, _services = await client.list_entities_services()
            lights = [e for e in entities if isinstance(e, aioesphomeapi.LightInfo)]
            if not lights:
                raise NoLightEntityError(f"No light entity on {device.hostname}")
        except BaseException:
            await client.disconnect()
            raise

        info = lights[0]
        connection = _LightConnection(
            client=client,
            info=info,
            label=info.name or device.friendly_name or device.hostname,
        )
        client.subscribe_states(connection.on_state)
        self._connections[device.hostname] = connection
        return connection

    async def query_light_state(self, device: Device) -> LightState:
        connection = await self._connect(device)
        await connection.received.wait()
        # received is only set together with latest
        latest = cast(aioesphomeapi.LightState, connection.latest)
        return to_light_state(connection.label, latest)

    async def send_power(self, device: Device, on: bool, transition: float) -> None:
        connection = await self._connect(device)
        logger.debug(
            "Power %s on %s (transition=%.3fs)", on, device.hostname, transition
        )
        connection.client.light_command(
            key=connection.info.key,
            state=on,
            transition_length=transition,
        )

    async def send_color(
        self,
        device: Device,
        color: ResolvedColor,
        kelvin: int,
        transition: float,
    ) -> None:
        connection = await self._connect(device)
        logger.debug(
            "Color %s %dK on %s (transition=%.3fs)",
            color.hex,
            kelvin,
            device.hostname,
            transition,
        )
        connection.client.light_command(
            key=connection.info.key,
            rgb=(color.red / 255, color.green / 255, color.blue / 255),
            color_temperature=kelvin_to_mireds(kelvin),
            transition_length=transition,
        )

    async def close(self) -> None:
        connections = list(self._connections.values())
        self._connections.clear()
        for connection in connections:
            await connection.client.disconnect()

    async def __aenter__(self) -> ESPHomeLightController:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.close()
