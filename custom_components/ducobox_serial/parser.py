"""Parsers for the Ducobox text console output."""

from __future__ import annotations

import logging
from typing import Dict, Iterable, List

_LOGGER = logging.getLogger(__name__)

TABLE_START = "--- start"
TABLE_END = "--- end"
SCAN_HEADER = "NL Network"
SERIAL_PREFIX = "Serial"
FANSPEED_PREFIX = "FanSpeed:"
FANSPEED_MARKER = "Filtered"
FANSPEED_OFFSET = 9
CO2_MARKER = "-->"
CO2_OFFSET = 4


def parse_table(lines: Iterable[str]) -> List[Dict[str, str]]:
    """Parse a ``--- start`` / ``--- end`` framed, pipe separated table.

    The first line inside the frame holds the headers. Rows shorter than the
    header line yield partial mappings.
    """

    headers: List[str] = []
    rows: List[Dict[str, str]] = []
    started = False

    for line in lines:
        stripped = line.lstrip()
        if not started:
            if stripped.startswith(TABLE_START):
                started = True
            continue
        if stripped.startswith(TABLE_END):
            break

        fields = [field.strip() for field in line.split("|")]
        if not headers:
            headers = fields
            continue
        rows.append(dict(zip(headers, fields)))

    return rows


def parse_signal_strengths(lines: Iterable[str]) -> Dict[int, int]:
    """Map node ids to dBm from a ``commnlinfo`` dump.

    A node listed twice keeps the last value seen.
    """

    result: Dict[int, int] = {}
    started = False

    for line in lines:
        if line.lstrip().startswith(SCAN_HEADER):
            started = True
            continue
        if not started:
            continue

        parts = [part.strip() for part in line.split("-", 1)]
        if len(parts) < 2:
            continue

        node = maybe_int(parts[0])
        if node is None:
            continue

        tokens = parts[1].split()
        if not tokens:
            continue
        try:
            raw = int(tokens[0], 16)
        except ValueError:
            _LOGGER.debug("Skipping non-hex signal value for node %s: %s", node, line)
            continue

        if node in result:
            _LOGGER.debug("Node %s listed twice in signal dump; keeping last", node)
        result[node] = to_dbm(raw)

    return result


def to_dbm(raw: int) -> int:
    """Convert the radio's raw signal byte to dBm, truncating toward zero."""
    return int((raw - 128) / 2) - 74


def parse_board_serial(lines: Iterable[str]) -> str | None:
    candidates = [line for line in lines if line.lstrip().startswith(SERIAL_PREFIX)]
    if len(candidates) != 1:
        return None

    parts = [part.strip() for part in candidates[0].split(":")]
    if len(parts) < 2:
        return None
    return parts[1]


def extract_fanspeed(line: str) -> int | None:
    """Return the filtered fan speed from a ``FanSpeed:`` line.

    Returns None for lines that do not carry a fan speed and raises
    ValueError when the line does but the value cannot be read.
    """

    if not line.lstrip().startswith(FANSPEED_PREFIX):
        return None

    index = line.find(FANSPEED_MARKER)
    if index < 0:
        raise ValueError(f"no {FANSPEED_MARKER!r} marker in {line!r}")

    start = index + FANSPEED_OFFSET
    end = line.find("[", start)
    if end < 0:
        raise ValueError(f"no unit bracket in {line!r}")
    return int(line[start:end].strip())


def extract_co2(line: str) -> int | None:
    """Return the parameter value following ``-->``.

    Returns None when the marker is absent, raises ValueError when the
    value after it is not an integer.
    """

    index = line.find(CO2_MARKER)
    if index < 0:
        return None
    return int(line[index + CO2_OFFSET :].strip())


def maybe_int(value) -> int | None:
    try:
        return int(str(value))
    except (ValueError, TypeError):
        return None
