from __future__ import annotations

import pytest

from esplight.config import get_settings
from esplight.models import Device


@pytest.fixture(autouse=True)
def _isolate_settings_env(monkeypatch: pytest.MonkeyPatch, tmp_path):
    monkeypatch.delenv("ESPLIGHT_CONFIG", raising=False)
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "xdg"))
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


def make_device(hostname: str = "bulb1", address: str = "192.168.1.50") -> Device:
    return Device(
        hostname=hostname,
        address=address,
        mac_address="AA:BB:CC:DD:EE:FF",
        service_type="_esphomelib._tcp.local.",
        port=6053,
        friendly_name="Bulb One",
    )
