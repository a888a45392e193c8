"""Half-duplex command dialog with the Ducobox serial console."""

from __future__ import annotations

import asyncio
import enum
import logging
from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import AsyncIterator, List

import serial
import serial_asyncio

from .const import (
    BAUDRATE,
    LINE_TERMINATOR,
    PACING_DELAY,
    READ_IDLE_TIMEOUT,
    WRITE_TIMEOUT,
)
from .exceptions import ChannelError

_LOGGER = logging.getLogger(__name__)


class ChannelState(enum.Enum):
    IDLE = "idle"
    WRITING = "writing"
    READING = "reading"


class ReadStatus(enum.Enum):
    LINE = "line"
    END = "end"
    FAILED = "failed"


@dataclass(frozen=True)
class ReadOutcome:
    status: ReadStatus
    line: str | None = None


class CommandChannel:
    """Run one command at a time against the device console.

    The device line editor drops characters typed too quickly, so every
    character is followed by a short pause. A response ends when no line
    arrives within the read idle timeout.
    """

    def __init__(
        self,
        reader: asyncio.StreamReader,
        writer: asyncio.StreamWriter,
        port: str = "",
        *,
        read_timeout: float = READ_IDLE_TIMEOUT,
        write_timeout: float = WRITE_TIMEOUT,
        pacing_delay: float = PACING_DELAY,
    ) -> None:
        self._reader = reader
        self._writer = writer
        self.port = port
        self._read_timeout = read_timeout
        self._write_timeout = write_timeout
        self._pacing_delay = pacing_delay
        self._lock = asyncio.Lock()
        self.state = ChannelState.IDLE

    async def execute(self, command: str) -> List[str]:
        """Send ``command`` and return the raw response lines.

        An empty list means the device did not answer or the write failed.
        """

        async with self._lock:
            try:
                self._transition(ChannelState.WRITING)
                if not await self._write_command(command):
                    return []
                self._transition(ChannelState.READING)
                return await self._read_response()
            finally:
                self._transition(ChannelState.IDLE)

    async def _write_command(self, command: str) -> bool:
        _LOGGER.debug("[%s] TX: %s", self.port, command)
        try:
            await self._send("\r")
            for char in command:
                await self._send(char)
            await self._send("\r")
        except asyncio.TimeoutError:
            _LOGGER.warning("[%s] Timeout sending command %s", self.port, command)
            return False
        except OSError as err:
            _LOGGER.warning("[%s] Failed sending command %s: %s", self.port, command, err)
            return False
        return True

    async def _send(self, text: str) -> None:
        self._writer.write(text.encode("ascii", errors="ignore"))
        await asyncio.wait_for(self._writer.drain(), self._write_timeout)
        await asyncio.sleep(self._pacing_delay)

    async def _read_response(self) -> List[str]:
        lines: List[str] = []
        while True:
            outcome = await self.read_line()
            if outcome.status is ReadStatus.LINE:
                lines.append(outcome.line)
                continue
            if outcome.status is ReadStatus.FAILED:
                _LOGGER.warning(
                    "[%s] Read failed after %d lines; using partial response",
                    self.port,
                    len(lines),
                )
            return lines

    async def read_line(self) -> ReadOutcome:
        """Read one carriage return terminated line."""
        try:
            raw = await asyncio.wait_for(
                self._reader.readuntil(LINE_TERMINATOR), self._read_timeout
            )
        except asyncio.TimeoutError:
            return ReadOutcome(ReadStatus.END)
        except (asyncio.IncompleteReadError, asyncio.LimitOverrunError, OSError) as err:
            _LOGGER.debug("[%s] Read error: %s", self.port, err)
            return ReadOutcome(ReadStatus.FAILED)

        line = raw.decode("ascii", errors="ignore").strip("\r\n")
        _LOGGER.debug("[%s] RX: %s", self.port, line)
        return ReadOutcome(ReadStatus.LINE, line)

    def _transition(self, state: ChannelState) -> None:
        if state is not self.state:
            _LOGGER.debug("[%s] %s -> %s", self.port, self.state.value, state.value)
        self.state = state

    def close(self) -> None:
        self._writer.close()


@asynccontextmanager
async def open_channel(port: str, baudrate: int = BAUDRATE) -> AsyncIterator[CommandChannel]:
    """Open ``port`` and yield a CommandChannel bound to it."""

    _LOGGER.debug("Opening %s at %s baud", port, baudrate)
    try:
        reader, writer = await serial_asyncio.open_serial_connection(
            url=port, baudrate=baudrate
        )
    except (serial.SerialException, OSError) as err:
        raise ChannelError(port, str(err)) from err

    channel = CommandChannel(reader, writer, port)
    try:
        yield channel
    finally:
        channel.close()
