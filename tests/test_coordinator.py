"""Tests for the fixed interval scan coordinator."""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from custom_components.ducobox_serial import _create_reporter
from custom_components.ducobox_serial.coordinator import DucoboxScanCoordinator
from custom_components.ducobox_serial.models import Thing
from custom_components.ducobox_serial.reporter import ThingReporter

COORDINATOR = "custom_components.ducobox_serial.coordinator"


@pytest.fixture
def coordinator_hass() -> MagicMock:
    """Mock Home Assistant instance that runs executor jobs inline."""
    hass = MagicMock()

    async def _run(func, *args):
        return func(*args)

    hass.async_add_executor_job = AsyncMock(side_effect=_run)
    hass.async_create_task = MagicMock()
    return hass


async def test_empty_scan_returns_empty_list(coordinator_hass):
    reporter = MagicMock()
    coordinator = DucoboxScanCoordinator(coordinator_hass, "/dev/ttyUSB*", 10, reporter)

    with patch(f"{COORDINATOR}.discover_ports", return_value=[]) as mock_discover, \
         patch(f"{COORDINATOR}.async_scan_ports", AsyncMock(return_value=[])) as mock_scan:
        result = await coordinator._async_update_data()

    assert result == []
    mock_discover.assert_called_once_with("/dev/ttyUSB*")
    mock_scan.assert_awaited_once_with([])
    reporter.async_report.assert_called_once_with([])


async def test_scan_result_is_reported_without_waiting(coordinator_hass):
    things = [Thing("PS1-1", "BOX")]
    reporter = MagicMock()
    pending = object()
    reporter.async_report = MagicMock(return_value=pending)
    coordinator = DucoboxScanCoordinator(coordinator_hass, "/dev/ttyUSB*", 10, reporter)

    with patch(f"{COORDINATOR}.discover_ports", return_value=["/dev/ttyUSB0"]), \
         patch(f"{COORDINATOR}.async_scan_ports", AsyncMock(return_value=things)) as mock_scan:
        result = await coordinator._async_update_data()

    assert result == things
    mock_scan.assert_awaited_once_with(["/dev/ttyUSB0"])
    reporter.async_report.assert_called_once_with(things)
    coordinator_hass.async_create_task.assert_called_once_with(pending)


async def test_no_reporter_skips_reporting(coordinator_hass):
    things = [Thing("PS1-1", "BOX")]
    coordinator = DucoboxScanCoordinator(coordinator_hass, "/dev/ttyUSB*", 10)

    with patch(f"{COORDINATOR}.discover_ports", return_value=["/dev/ttyUSB0"]), \
         patch(f"{COORDINATOR}.async_scan_ports", AsyncMock(return_value=things)):
        result = await coordinator._async_update_data()

    assert result == things
    coordinator_hass.async_create_task.assert_not_called()


def test_empty_sink_url_disables_reporting():
    with patch("custom_components.ducobox_serial.async_get_clientsession") as mock_session:
        assert _create_reporter(MagicMock(), "") is None

    mock_session.assert_not_called()


def test_sink_url_creates_reporter():
    with patch("custom_components.ducobox_serial.async_get_clientsession"):
        reporter = _create_reporter(MagicMock(), "http://thingify-core:80/api-rest/things")

    assert isinstance(reporter, ThingReporter)
