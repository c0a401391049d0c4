"""esplight - control ESPHome lights on the local network from the shell."""

from __future__ import annotations

from importlib.metadata import version

from .config import ApiConfig, DiscoveryConfig, Settings, get_settings
from .core import DeviceRegistry, Dispatcher, resolve_color
from .models import DesiredState, Device, LightState, Outcome, ResolvedColor

__all__ = [
    "ApiConfig",
    "DesiredState",
    "Device",
    "DeviceRegistry",
    "DiscoveryConfig",
    "Dispatcher",
    "LightState",
    "Outcome",
    "ResolvedColor",
    "Settings",
    "__version__",
    "get_settings",
    "resolve_color",
]

__version__ = version("esplight")
