"""Pytest configuration and fixtures for Ducobox serial tests."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Dict, List

import pytest

BOARD_SERIAL = "PS1234567890"

BOARDINFO_LINES = [
    "boardinfo",
    "  Board    : DUCOBOX SILENT",
    f"  Serial   : {BOARD_SERIAL}",
    "  SW       : 16056",
    "> ",
]

NETWORK_LINES = [
    "network",
    "  Network:",
    "--- start list ---",
    "  node|addr|type |stat|temp|snsr|",
    "     1|   1|BOX  |AUTO|   -|   -|",
    "     2|   2|UCCO2|AUTO| 213|  10|",
    "     3|   3|UCHT |MAN1| 198|   0|",
    "--- end list ---",
    "> ",
]

COMMNLINFO_LINES = [
    "commnlinfo",
    "  4-70 stray line before the header",
    "  NL Network (3 nodes)",
    "  2-78 12 34",
    "  3-7A 00",
    "Done",
]

FANSPEED_LINES = [
    "fanspeed",
    "  FanSpeed: 1234 Filtered         1200 [rpm]",
    "> ",
]

CO2_LINES = [
    "nodeparaget 2 74",
    "  Get PARA 74 of node 2",
    "  --> 815",
    "Done",
]


class FakeChannel:
    """Scripted stand-in for a CommandChannel."""

    def __init__(self, responses: Dict[str, List[str]], port: str = "/dev/ttyUSB0") -> None:
        self.responses = responses
        self.port = port
        self.commands: List[str] = []

    async def execute(self, command: str) -> List[str]:
        self.commands.append(command)
        return list(self.responses.get(command, []))


@pytest.fixture
def console_responses() -> Dict[str, List[str]]:
    """A full transcript of a Ducobox with a box and two sensor units."""
    return {
        "boardinfo": list(BOARDINFO_LINES),
        "network": list(NETWORK_LINES),
        "commnlinfo": list(COMMNLINFO_LINES),
        "fanspeed": list(FANSPEED_LINES),
        "nodeparaget 2 74": list(CO2_LINES),
    }


@pytest.fixture
def fake_channel(console_responses) -> FakeChannel:
    return FakeChannel(console_responses)


@pytest.fixture
def fixed_clock():
    stamp = datetime(2026, 1, 1, 12, 0, tzinfo=timezone.utc)
    return lambda: stamp


@pytest.fixture
def make_channel():
    """Factory for scripted channels on arbitrary ports."""

    def _make(responses: Dict[str, List[str]], port: str = "/dev/ttyUSB0") -> FakeChannel:
        return FakeChannel(responses, port)

    return _make
