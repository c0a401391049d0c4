from __future__ import annotations

import logging
from typing import Protocol

from esplight.models import (
    Action,
    DesiredState,
    Device,
    LightState,
    Outcome,
    ResolvedColor,
)

logger = logging.getLogger(__name__)


class LightController(Protocol):
    async def query_light_state(self, device: Device) -> LightState: ...

    async def send_power(self, device: Device, on: bool, transition: float) -> None: ...

    async def send_color(
        self,
        device: Device,
        color: ResolvedColor,
        kelvin: int,
        transition: float,
    ) -> None: ...


class Dispatcher:
    """Compare desired and current state and send only the commands needed.

    Power changes are skipped when the light is already in the requested
    state, avoiding a visible flicker. Color is always sent. Controller
    errors propagate unchanged.
    """

    def __init__(self, controller: LightController) -> None:
        self._controller = controller

    async def dispatch(self, device: Device, desired: DesiredState) -> Outcome:
        try:
            action = Action(desired.action)
        except ValueError:
            return self._reject(desired)

        if action is Action.COLOR:
            # "color" is only valid with its arguments, never as a power token
            if desired.color is None or desired.kelvin is None:
                return self._reject(desired)
            state = await self._controller.query_light_state(device)
            return await self._set_color(
                device, state, desired.color, desired.kelvin, desired.transition
            )

        state = await self._controller.query_light_state(device)
        return await self._switch(device, state, action, desired.transition)

    def _reject(self, desired: DesiredState) -> Outcome:
        logger.error("Unsupported state: %s", desired.action)
        return Outcome.rejected("unsupported state")

    async def _switch(
        self, device: Device, state: LightState, action: Action, transition: float
    ) -> Outcome:
        logger.info("Request: 'Switch %s %s'", state.label, action.value)

        if action is Action.TOGGLE:
            turn_on = not state.is_on
        else:
            turn_on = action is Action.ON
            if state.is_on == turn_on:
                logger.info("Light is already %s. Doing nothing.", action.value)
                return Outcome.skipped(f"already {action.value}")

        await self._controller.send_power(device, turn_on, transition)
        logger.debug("Done")
        return Outcome.applied()

    async def _set_color(
        self,
        device: Device,
        state: LightState,
        color: ResolvedColor,
        kelvin: int,
        transition: float,
    ) -> Outcome:
        logger.info("Request: 'Color %s %s %d'", state.label, color.hex, kelvin)
        await self._controller.send_color(device, color, kelvin, transition)
        logger.debug("Done")
        return Outcome.applied()
