from __future__ import annotations

import re
from dataclasses import dataclass, field

from esplight.models import Device

# ESPHome appends the last three MAC bytes to default hostnames ("name-a1b2c3")
_MAC_SUFFIX = re.compile(r"-[0-9a-f]{6}$")


@dataclass
class Redactor:
    """Masks addresses in discovery output so it can be shared.

    Each distinct MAC gets a stable ordinal, keeping rows of the same device
    recognizable after redaction.
    """

    enabled: bool = True
    _ordinals: dict[str, int] = field(default_factory=dict)

    def _ordinal(self, mac: str) -> int:
        return self._ordinals.setdefault(mac, len(self._ordinals) + 1)

    def hostname(self, hostname: str) -> str:
        if not self.enabled:
            return hostname
        return _MAC_SUFFIX.sub("-xxxxxx", hostname)

    def endpoint(self, address: str, port: int) -> str:
        if self.enabled:
            octets = address.split(".")
            if len(octets) == 4 and all(octet.isdigit() for octet in octets):
                address = f"x.x.x.{octets[3]}"
            elif ":" in address:
                address = f"xxxx::{address.rsplit(':', 1)[-1]}"
        return f"{address}:{port}"

    def mac(self, mac: str) -> str:
        if not self.enabled or mac.count(":") != 5:
            return mac
        vendor = mac[:8]
        return f"{vendor}:xx:xx:{self._ordinal(mac):02d}"

    def device_columns(self, device: Device) -> list[str]:
        return [
            self.hostname(device.hostname),
            self.endpoint(device.address, device.port),
            self.mac(device.mac_address),
        ]
