from __future__ import annotations

from .colors import resolve_color
from .discovery import DiscoverySession
from .dispatcher import Dispatcher, LightController
from .esphome import ESPHomeLightController
from .registry import DeviceRegistry
from .service import control_light, discover_lights
from .waiter import poll_until, wait_for_device

__all__ = [
    "DeviceRegistry",
    "DiscoverySession",
    "Dispatcher",
    "ESPHomeLightController",
    "LightController",
    "control_light",
    "discover_lights",
    "poll_until",
    "resolve_color",
    "wait_for_device",
]
