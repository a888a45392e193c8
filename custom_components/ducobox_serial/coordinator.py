"""Fixed interval polling of all Ducobox serial ports."""

from __future__ import annotations

import datetime as dt
import logging
import time
from typing import List

from homeassistant.core import HomeAssistant
from homeassistant.helpers.update_coordinator import DataUpdateCoordinator

from .models import Thing
from .reporter import ThingReporter
from .scanner import async_scan_ports, discover_ports

_LOGGER = logging.getLogger(__name__)


class DucoboxScanCoordinator(DataUpdateCoordinator[List[Thing]]):
    """Rebuild the entity trees of every connected controller each cycle."""

    def __init__(
        self,
        hass: HomeAssistant,
        port_pattern: str,
        scan_interval: int,
        reporter: ThingReporter | None = None,
    ) -> None:
        self.port_pattern = port_pattern
        self.reporter = reporter
        super().__init__(
            hass,
            _LOGGER,
            name=f"ducobox_serial_{port_pattern}",
            update_interval=dt.timedelta(seconds=scan_interval),
        )

    async def _async_update_data(self) -> List[Thing]:
        started = time.monotonic()

        ports = await self.hass.async_add_executor_job(discover_ports, self.port_pattern)
        if not ports:
            _LOGGER.debug("No serial ports match %s", self.port_pattern)

        things = await async_scan_ports(ports)
        _LOGGER.info("Found %d things on %d ports", len(things), len(ports))
        _LOGGER.info("Scanning took %.2f seconds", time.monotonic() - started)

        if self.reporter is not None:
            self.hass.async_create_task(self.reporter.async_report(things))

        return things
