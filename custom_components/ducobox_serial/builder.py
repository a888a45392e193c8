"""Assemble the entity tree for one Ducobox controller."""

from __future__ import annotations

import logging
from datetime import datetime
from decimal import Decimal
from typing import Callable, Dict, List, Mapping, Protocol

from homeassistant.util import dt as dt_util

from .const import (
    CMD_BOARDINFO,
    CMD_COMMNLINFO,
    CMD_FANSPEED,
    CMD_NETWORK,
    CMD_NODEPARAGET,
    MODE_VALUES,
    PARAM_CO2,
)
from .models import Thing
from .parser import (
    extract_co2,
    extract_fanspeed,
    maybe_int,
    parse_board_serial,
    parse_signal_strengths,
    parse_table,
)

_LOGGER = logging.getLogger(__name__)

TYPE_BOX = "BOX"
TYPE_UC_PREFIX = "UC"
TYPE_UCCO2 = "UCCO2"


class SupportsExecute(Protocol):
    port: str

    async def execute(self, command: str) -> List[str]:
        ...


class EntityBuilder:
    """Issue the fixed command sequence and map the answers to things."""

    def __init__(
        self,
        channel: SupportsExecute,
        clock: Callable[[], datetime] = dt_util.now,
    ) -> None:
        self._channel = channel
        self._clock = clock

    @property
    def _port(self) -> str:
        return self._channel.port

    async def async_build(self) -> List[Thing]:
        board_lines = await self._channel.execute(CMD_BOARDINFO)
        if not board_lines:
            _LOGGER.info(
                "[%s] No response to %s, most probably no Ducobox is connected",
                self._port,
                CMD_BOARDINFO,
            )
            return []

        board_serial = parse_board_serial(board_lines)
        if board_serial is None:
            _LOGGER.info(
                "[%s] Could not read a single board serial, most probably no "
                "supported Ducobox is connected",
                self._port,
            )
            return []

        network = parse_table(await self._channel.execute(CMD_NETWORK))
        signal_strengths = parse_signal_strengths(
            await self._channel.execute(CMD_COMMNLINFO)
        )
        _LOGGER.debug(
            "[%s] Board %s reports %d nodes, %d signal readings",
            self._port,
            board_serial,
            len(network),
            len(signal_strengths),
        )

        things: List[Thing] = []
        for row in network:
            node = row.get("node")
            node_type = row.get("type")
            if not node or not node_type:
                _LOGGER.debug("[%s] Skipping incomplete network row: %s", self._port, row)
                continue

            thing = Thing(f"{board_serial}-{node}", node_type)
            if node_type == TYPE_BOX:
                await self._add_box_channels(thing, row)
            if node_type.startswith(TYPE_UC_PREFIX):
                await self._add_sensor_channels(thing, row, node, signal_strengths)
            things.append(thing)

        return things

    async def _add_box_channels(self, thing: Thing, row: Mapping[str, str]) -> None:
        mode = thing.add_child(
            Thing(
                f"{thing.id}-mode",
                "Mode",
                measurement_possible_values=list(MODE_VALUES),
            )
        )
        stat = row.get("stat")
        if stat is not None:
            mode.record(self._clock(), stat)

        fanspeed = thing.add_child(
            Thing(f"{thing.id}-fanspeed", "Fanspeed", measurement_unit="rpm")
        )
        for line in await self._channel.execute(CMD_FANSPEED):
            try:
                speed = extract_fanspeed(line)
            except ValueError:
                _LOGGER.info(
                    "[%s] Could not parse fanspeed for %s from %r",
                    self._port,
                    thing.id,
                    line,
                )
                continue
            if speed is not None:
                fanspeed.record(self._clock(), speed)

    async def _add_sensor_channels(
        self,
        thing: Thing,
        row: Mapping[str, str],
        node: str,
        signal_strengths: Dict[int, int],
    ) -> None:
        temp = thing.add_child(
            Thing(f"{thing.id}-temp", "Temp", measurement_unit="DegC")
        )
        raw_temp = maybe_int(row.get("temp"))
        if raw_temp is None:
            _LOGGER.info(
                "[%s] Could not parse temperature for %s: %r",
                self._port,
                thing.id,
                row.get("temp"),
            )
        else:
            temp.record(self._clock(), Decimal(raw_temp) / 10)

        request = thing.add_child(
            Thing(f"{thing.id}-snsr", "Sensor request", measurement_unit="%")
        )
        raw_request = maybe_int(row.get("snsr"))
        if raw_request is None:
            _LOGGER.info(
                "[%s] Could not parse sensor request for %s: %r",
                self._port,
                thing.id,
                row.get("snsr"),
            )
        else:
            request.record(self._clock(), raw_request)

        signal = thing.add_child(
            Thing(f"{thing.id}-signl", "Signal strength", measurement_unit="dBm")
        )
        node_number = maybe_int(node)
        if node_number is not None and node_number in signal_strengths:
            signal.record(self._clock(), signal_strengths[node_number])

        if thing.type == TYPE_UCCO2:
            await self._add_co2_channel(thing, node)

    async def _add_co2_channel(self, thing: Thing, node: str) -> None:
        co2 = thing.add_child(Thing(f"{thing.id}-co2", "CO2", measurement_unit="ppm"))
        command = CMD_NODEPARAGET.format(node=node, param=PARAM_CO2)
        for line in await self._channel.execute(command):
            try:
                value = extract_co2(line)
            except ValueError:
                _LOGGER.info(
                    "[%s] Could not parse CO2 for %s from %r",
                    self._port,
                    thing.id,
                    line,
                )
                continue
            if value is not None:
                co2.record(self._clock(), value)
