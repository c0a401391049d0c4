from __future__ import annotations

import asyncio
import logging
import threading

from esplight.models import Device, DiscoveryEvent, EventKind

logger = logging.getLogger(__name__)

LOCAL_DOMAIN = ".local"


def normalize_hostname(hostname: str) -> str:
    """Registry key for a hostname: no trailing dot, no ``.local`` suffix."""
    cleaned = hostname.strip().rstrip(".")
    return cleaned.removesuffix(LOCAL_DOMAIN)


class DeviceRegistry:
    """Live devices keyed by hostname.

    Mutated only through discovery and loss events. All access holds the lock,
    so handlers may run on any thread and readers never see a torn entry.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._devices: dict[str, Device] = {}

    def on_discovered(self, device: Device) -> None:
        with self._lock:
            self._devices[device.hostname] = device
        logger.debug(
            "Found: %s (mac=%s, service=%s)",
            device.hostname,
            device.mac_address,
            device.service_type,
        )

    def on_lost(self, hostname: str) -> None:
        with self._lock:
            device = self._devices.pop(hostname, None)
        if device is not None:
            logger.debug(
                "Lost: %s (mac=%s, service=%s)",
                device.hostname,
                device.mac_address,
                device.service_type,
            )

    def lookup(self, hostname: str) -> Device | None:
        with self._lock:
            return self._devices.get(hostname)

    def devices(self) -> list[Device]:
        with self._lock:
            snapshot = list(self._devices.values())
        snapshot.sort(key=lambda device: device.hostname)
        return snapshot

    def __len__(self) -> int:
        with self._lock:
            return len(self._devices)

    def apply(self, event: DiscoveryEvent) -> None:
        if event.kind is EventKind.DISCOVERED and event.device is not None:
            self.on_discovered(event.device)
        elif event.kind is EventKind.LOST:
            self.on_lost(event.hostname)

    async def consume(self, channel: asyncio.Queue[DiscoveryEvent]) -> None:
        """Apply events from ``channel`` in arrival order until cancelled."""
        while True:
            event = await channel.get()
            try:
                self.apply(event)
            finally:
                channel.task_done()
