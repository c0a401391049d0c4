from __future__ import annotations

import asyncio
from types import SimpleNamespace

import pytest

from esplight.config import DiscoveryConfig
from esplight.core import discovery as discovery_module
from esplight.core.discovery import (
    DiscoverySession,
    LightListener,
    device_from_service_info,
)
from esplight.core.registry import DeviceRegistry
from esplight.models import DiscoveryEvent, EventKind

SERVICE_TYPE = "_esphomelib._tcp.local."


def _service_info(
    server: str = "porch-light.local.",
    addresses: list[str] | None = None,
    mac: bytes = b"aabbccddeeff",
):
    return SimpleNamespace(
        server=server,
        port=6053,
        properties={b"mac": mac, b"friendly_name": b"Porch Light", b"board": None},
        parsed_addresses=lambda: addresses
        if addresses is not None
        else ["fe80::1", "192.168.1.77"],
    )


class FakeZeroconf:
    def __init__(self, infos: dict[str, object] | None = None) -> None:
        self.infos = infos or {}
        self.closed = 0

    def get_service_info(self, type_: str, name: str, timeout: int = 3000):
        return self.infos.get(name)

    def close(self) -> None:
        self.closed += 1


def test_device_from_service_info():
    device = device_from_service_info(
        _service_info(), SERVICE_TYPE, f"porch-light.{SERVICE_TYPE}"
    )

    assert device is not None
    assert device.hostname == "porch-light"
    assert device.address == "192.168.1.77"
    assert device.mac_address == "AA:BB:CC:DD:EE:FF"
    assert device.port == 6053
    assert device.service_type == SERVICE_TYPE
    assert device.friendly_name == "Porch Light"


def test_device_without_server_uses_service_name():
    device = device_from_service_info(
        _service_info(server=""), SERVICE_TYPE, f"attic.{SERVICE_TYPE}"
    )
    assert device is not None
    assert device.hostname == "attic"


@pytest.mark.parametrize(
    ("mac", "expected"),
    [
        (b"aabbccddeeff", "AA:BB:CC:DD:EE:FF"),
        (b"aa-bb-cc-dd-ee-ff", "AA:BB:CC:DD:EE:FF"),
        (b"", ""),
        (b"unknown", "unknown"),
    ],
)
def test_mac_from_txt_record(mac, expected):
    device = device_from_service_info(_service_info(mac=mac), SERVICE_TYPE, "x")
    assert device is not None
    assert device.mac_address == expected


def test_ipv6_only_device_keeps_its_address():
    info = _service_info(addresses=["fd00::42"])
    device = device_from_service_info(info, SERVICE_TYPE, "x")
    assert device is not None
    assert device.address == "fd00::42"


def test_device_without_addresses_is_ignored():
    info = _service_info(addresses=[])
    assert device_from_service_info(info, SERVICE_TYPE, "x") is None


def test_listener_publishes_discovered_and_lost():
    events: list[DiscoveryEvent] = []
    name = f"porch-light.{SERVICE_TYPE}"
    zc = FakeZeroconf({name: _service_info()})
    listener = LightListener(events.append, info_timeout=0.5)

    listener.add_service(zc, SERVICE_TYPE, name)
    listener.update_service(zc, SERVICE_TYPE, name)
    listener.remove_service(zc, SERVICE_TYPE, name)

    assert [event.kind for event in events] == [
        EventKind.DISCOVERED,
        EventKind.DISCOVERED,
        EventKind.LOST,
    ]
    assert events[-1].hostname == "porch-light"


def test_listener_ignores_unresolvable_service():
    events: list[DiscoveryEvent] = []
    listener = LightListener(events.append, info_timeout=0.5)

    listener.add_service(FakeZeroconf(), SERVICE_TYPE, f"ghost.{SERVICE_TYPE}")
    assert events == []


def test_session_feeds_registry_and_stops_once(monkeypatch: pytest.MonkeyPatch):
    name = f"porch-light.{SERVICE_TYPE}"
    zc = FakeZeroconf({name: _service_info()})
    browsers: list[SimpleNamespace] = []

    def _browser(zeroconf, type_, listener):
        browser = SimpleNamespace(cancelled=0)
        browser.cancel = lambda: setattr(browser, "cancelled", browser.cancelled + 1)
        browsers.append(browser)
        listener.add_service(zeroconf, type_, name)
        return browser

    monkeypatch.setattr(discovery_module, "Zeroconf", lambda: zc)
    monkeypatch.setattr(discovery_module, "ServiceBrowser", _browser)

    registry = DeviceRegistry()

    async def _run():
        session = DiscoverySession(registry, DiscoveryConfig(service_type=SERVICE_TYPE))
        async with session:
            assert session.running
            await asyncio.sleep(0.05)
            assert registry.lookup("porch-light") is not None
        await session.stop()
        assert not session.running

    asyncio.run(_run())

    assert zc.closed == 1
    assert browsers[0].cancelled == 1


def test_session_stops_on_error(monkeypatch: pytest.MonkeyPatch):
    zc = FakeZeroconf()
    monkeypatch.setattr(discovery_module, "Zeroconf", lambda: zc)
    monkeypatch.setattr(
        discovery_module,
        "ServiceBrowser",
        lambda *_args: SimpleNamespace(cancel=lambda: None),
    )

    async def _run():
        async with DiscoverySession(DeviceRegistry(), DiscoveryConfig()):
            raise RuntimeError("boom")

    with pytest.raises(RuntimeError):
        asyncio.run(_run())
    assert zc.closed == 1
