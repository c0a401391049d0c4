from __future__ import annotations

from conftest import make_device

from esplight.utils.redaction import Redactor


def test_disabled_redactor_passes_values_through():
    redactor = Redactor(enabled=False)
    device = make_device("porch-a1b2c3")

    assert redactor.device_columns(device) == [
        "porch-a1b2c3",
        "192.168.1.50:6053",
        "AA:BB:CC:DD:EE:FF",
    ]


def test_default_hostname_suffix_is_hidden():
    redactor = Redactor()
    assert redactor.hostname("porch-a1b2c3") == "porch-xxxxxx"
    assert redactor.hostname("porch-light") == "porch-light"


def test_endpoint_keeps_last_ipv4_octet_and_port():
    redactor = Redactor()
    assert redactor.endpoint("10.0.0.7", 6053) == "x.x.x.7:6053"
    assert redactor.endpoint("fe80::1:2", 6053) == "xxxx::2:6053"


def test_macs_get_stable_ordinals():
    redactor = Redactor()
    first = redactor.mac("AA:BB:CC:DD:EE:FF")
    second = redactor.mac("AA:BB:CC:00:11:22")

    assert first == "AA:BB:CC:xx:xx:01"
    assert second == "AA:BB:CC:xx:xx:02"
    assert redactor.mac("AA:BB:CC:DD:EE:FF") == first
