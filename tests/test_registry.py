from __future__ import annotations

import asyncio
import threading

from conftest import make_device

from esplight.core.registry import DeviceRegistry
from esplight.models import DiscoveryEvent


def test_lost_removes_device():
    registry = DeviceRegistry()
    device = make_device()

    registry.on_discovered(device)
    assert registry.lookup("bulb1") == device

    registry.on_lost(device.hostname)
    assert registry.lookup("bulb1") is None


def test_rediscovery_replaces_entry():
    registry = DeviceRegistry()
    registry.on_discovered(make_device(address="192.168.1.50"))
    registry.on_discovered(make_device(address="192.168.1.51"))

    found = registry.lookup("bulb1")
    assert found is not None
    assert found.address == "192.168.1.51"
    assert len(registry) == 1


def test_losing_unknown_device_is_noop():
    registry = DeviceRegistry()
    registry.on_lost("ghost")
    assert len(registry) == 0


def test_devices_snapshot_is_sorted():
    registry = DeviceRegistry()
    registry.on_discovered(make_device("porch"))
    registry.on_discovered(make_device("attic"))

    assert [device.hostname for device in registry.devices()] == ["attic", "porch"]


def test_consume_applies_events_in_order():
    registry = DeviceRegistry()

    async def _run():
        channel: asyncio.Queue[DiscoveryEvent] = asyncio.Queue()
        consumer = asyncio.create_task(registry.consume(channel))
        channel.put_nowait(DiscoveryEvent.discovered(make_device("a")))
        channel.put_nowait(DiscoveryEvent.discovered(make_device("b")))
        channel.put_nowait(DiscoveryEvent.lost("a"))
        channel.put_nowait(DiscoveryEvent.discovered(make_device("b", "10.0.0.9")))
        await channel.join()
        consumer.cancel()
        await asyncio.gather(consumer, return_exceptions=True)

    asyncio.run(_run())

    assert registry.lookup("a") is None
    found = registry.lookup("b")
    assert found is not None
    assert found.address == "10.0.0.9"


def test_mutation_from_other_threads():
    registry = DeviceRegistry()

    def _worker(prefix: str) -> None:
        for i in range(200):
            registry.on_discovered(make_device(f"{prefix}-{i}"))
            registry.lookup(f"{prefix}-{i}")
            if i % 2:
                registry.on_lost(f"{prefix}-{i}")

    threads = [threading.Thread(target=_worker, args=(p,)) for p in "abcd"]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert len(registry) == 4 * 100
