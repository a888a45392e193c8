"""Tests for mapping scanned channels onto sensors."""

from __future__ import annotations

from custom_components.ducobox_serial.builder import EntityBuilder
from custom_components.ducobox_serial.sensor import UNIT_MAP, iter_channels


async def test_iter_channels_pairs_devices_and_channels(fake_channel, fixed_clock):
    things = await EntityBuilder(fake_channel, clock=fixed_clock).async_build()

    pairs = [(device.id, channel.type) for device, channel in iter_channels(things)]

    assert pairs[:2] == [("PS1234567890-1", "Mode"), ("PS1234567890-1", "Fanspeed")]
    assert ("PS1234567890-2", "CO2") in pairs
    assert len(pairs) == 2 + 4 + 3


def test_unit_map_covers_device_units():
    assert set(UNIT_MAP) == {"rpm", "DegC", "%", "dBm", "ppm"}
