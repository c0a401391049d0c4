from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Callable
from typing import TypeVar

from esplight.core.registry import DeviceRegistry, normalize_hostname
from esplight.errors import ResolveTimeoutError
from esplight.models import Device

logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_POLL_INTERVAL = 0.1


async def poll_until(
    probe: Callable[[], T | None],
    *,
    interval: float,
    timeout: float,
    message: str = "Timed out waiting for condition.",
) -> T:
    """Call ``probe`` every ``interval`` seconds until it returns a value.

    Raises ResolveTimeoutError once ``timeout`` seconds have elapsed. Sleeps
    are the only suspension points, so cancelling the calling task aborts the
    wait promptly.
    """
    deadline = time.monotonic() + timeout
    while True:
        result = probe()
        if result is not None:
            return result

        remaining = deadline - time.monotonic()
        if remaining <= 0:
            raise ResolveTimeoutError(message)

        await asyncio.sleep(min(interval, remaining))
        logger.debug("Waiting... (%.1fs left)", max(deadline - time.monotonic(), 0))


async def wait_for_device(
    registry: DeviceRegistry,
    hostname: str,
    *,
    timeout: float,
    interval: float = DEFAULT_POLL_INTERVAL,
) -> Device:
    key = normalize_hostname(hostname)
    logger.debug("Waiting up to %.1fs to find device '%s'", timeout, key)
    return await poll_until(
        lambda: registry.lookup(key),
        interval=interval,
        timeout=timeout,
        message=f"Timed out waiting to find device '{key}'.",
    )
