from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from pydantic import BaseModel


class Device(BaseModel):
    model_config = {"frozen": True, "extra": "forbid"}

    hostname: str
    address: str
    mac_address: str
    service_type: str
    port: int
    friendly_name: str = ""


class LightState(BaseModel):
    model_config = {"extra": "forbid"}

    is_on: bool
    label: str
    brightness: float = 0.0
    saturation: float = 0.0
    hue: float = 0.0
    kelvin: int = 0


class EventKind(str, Enum):
    DISCOVERED = "discovered"
    LOST = "lost"


@dataclass(frozen=True)
class DiscoveryEvent:
    kind: EventKind
    hostname: str
    device: Device | None = None

    @classmethod
    def discovered(cls, device: Device) -> DiscoveryEvent:
        return cls(EventKind.DISCOVERED, device.hostname, device)

    @classmethod
    def lost(cls, hostname: str) -> DiscoveryEvent:
        return cls(EventKind.LOST, hostname)
