from __future__ import annotations

import asyncio
import logging
import re
import threading
from collections.abc import Callable
from types import TracebackType

from zeroconf import ServiceBrowser, ServiceInfo, ServiceListener, Zeroconf

from esplight.config import DiscoveryConfig
from esplight.core.registry import DeviceRegistry, normalize_hostname
from esplight.models import Device, DiscoveryEvent

logger = logging.getLogger(__name__)

Publish = Callable[[DiscoveryEvent], None]


def _txt_records(properties: dict[bytes, bytes | None]) -> dict[str, str]:
    return {
        key.decode(errors="replace"): (value or b"").decode(errors="replace")
        for key, value in properties.items()
    }


def _format_mac(value: str) -> str:
    """ESPHome advertises ``aabbccddeeff``; render it as ``AA:BB:CC:DD:EE:FF``."""
    digits = re.sub(r"[^0-9A-Fa-f]", "", value).upper()
    if len(digits) != 12:
        return value
    return ":".join(re.findall("..", digits))


def _preferred_address(info: ServiceInfo) -> str | None:
    # IPv4 first; link-local IPv6 needs a scope id the API client lacks
    addresses = sorted(info.parsed_addresses(), key=lambda address: ":" in address)
    return addresses[0] if addresses else None


def _instance_name(service_name: str, service_type: str) -> str:
    return service_name.removesuffix(f".{service_type}").rstrip(".")


def device_from_service_info(
    info: ServiceInfo, service_type: str, service_name: str
) -> Device | None:
    ip = _preferred_address(info)
    if ip is None or info.port is None:
        return None

    txt = _txt_records(info.properties)
    hostname = normalize_hostname(info.server) if info.server else ""
    if not hostname:
        hostname = _instance_name(service_name, service_type)

    return Device(
        hostname=hostname,
        address=ip,
        mac_address=_format_mac(txt.get("mac") or txt.get("mac_address", "")),
        service_type=service_type,
        port=info.port,
        friendly_name=txt.get("friendly_name", ""),
    )


class LightListener(ServiceListener):
    """Turns zeroconf callbacks into discovery events.

    Callbacks arrive on zeroconf's thread; ``publish`` must be safe to call
    from there.
    """

    def __init__(self, publish: Publish, info_timeout: float) -> None:
        self._publish = publish
        self._info_timeout_ms = max(int(info_timeout * 1000), 1)
        self._lock = threading.Lock()
        self._hostnames: dict[str, str] = {}

    def add_service(self, zc: Zeroconf, type_: str, name: str) -> None:
        info = zc.get_service_info(type_, name, timeout=self._info_timeout_ms)
        if not info:
            logger.debug("No service info for %s", name)
            return
        device = device_from_service_info(info, type_, name)
        if device is None:
            return
        with self._lock:
            self._hostnames[name] = device.hostname
        self._publish(DiscoveryEvent.discovered(device))

    def update_service(self, zc: Zeroconf, type_: str, name: str) -> None:
        self.add_service(zc, type_, name)

    def remove_service(self, _zc: Zeroconf, type_: str, name: str) -> None:
        with self._lock:
            hostname = self._hostnames.pop(name, None)
        if hostname is None:
            hostname = _instance_name(name, type_)
        self._publish(DiscoveryEvent.lost(hostname))


class DiscoverySession:
    """Runs mDNS discovery and feeds its events into a registry.

    Use as an async context manager; the zeroconf instance is closed exactly
    once on every exit path.
    """

    def __init__(self, registry: DeviceRegistry, config: DiscoveryConfig) -> None:
        self._registry = registry
        self._config = config
        self._channel: asyncio.Queue[DiscoveryEvent] = asyncio.Queue()
        self._zeroconf: Zeroconf | None = None
        self._browser: ServiceBrowser | None = None
        self._consumer: asyncio.Task[None] | None = None
        self._stopped = False

    @property
    def running(self) -> bool:
        return self._zeroconf is not None and not self._stopped

    def start(self) -> None:
        if self._zeroconf is not None:
            raise RuntimeError("Discovery session already started")

        loop = asyncio.get_running_loop()

        def publish(event: DiscoveryEvent) -> None:
            loop.call_soon_threadsafe(self._channel.put_nowait, event)

        logger.debug("Starting discovery for %s", self._config.service_type)
        self._zeroconf = Zeroconf()
        self._consumer = loop.create_task(self._registry.consume(self._channel))
        listener = LightListener(publish, self._config.info_timeout)
        self._browser = ServiceBrowser(
            self._zeroconf, self._config.service_type, listener
        )

    async def stop(self) -> None:
        if self._stopped or self._zeroconf is None:
            return
        self._stopped = True

        logger.debug("Stopping discovery")
        if self._browser is not None:
            self._browser.cancel()
        await asyncio.to_thread(self._zeroconf.close)

        if self._consumer is not None:
            self._consumer.cancel()
            await asyncio.gather(self._consumer, return_exceptions=True)

    async def __aenter__(self) -> DiscoverySession:
        try:
            self.start()
        except BaseException:
            await self.stop()
            raise
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.stop()
