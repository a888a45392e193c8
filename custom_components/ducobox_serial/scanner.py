"""Scan every discovered serial port for Ducobox controllers."""

from __future__ import annotations

import asyncio
import glob
import logging
from typing import Iterable, List

from .builder import EntityBuilder
from .exceptions import ChannelError, DucoboxError
from .models import Thing
from .uart_transport import open_channel

_LOGGER = logging.getLogger(__name__)


def discover_ports(pattern: str) -> List[str]:
    """Return serial device paths matching ``pattern``.

    Blocking; run it in the executor.
    """
    return sorted(glob.glob(pattern))


async def async_scan_port(port: str) -> List[Thing]:
    """Open ``port``, read its entity tree and close it again."""

    _LOGGER.info("[%s] Opening port", port)
    try:
        async with open_channel(port) as channel:
            things = await EntityBuilder(channel).async_build()
    except ChannelError as err:
        _LOGGER.info("[%s] Unable to open port: %s", port, err.reason)
        return []
    except (OSError, DucoboxError) as err:
        _LOGGER.warning("[%s] Scan aborted: %s", port, err)
        return []

    if things:
        _LOGGER.info("[%s] Data successfully read (%d things)", port, len(things))
    return things


async def async_scan_ports(ports: Iterable[str]) -> List[Thing]:
    """Scan all ``ports`` concurrently, each over its own channel."""

    results = await asyncio.gather(*(async_scan_port(port) for port in ports))
    return [thing for things in results for thing in things]
