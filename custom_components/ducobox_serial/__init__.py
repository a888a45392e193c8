"""Ducobox serial console integration bootstrap."""

from __future__ import annotations

import logging
from typing import Any, Dict

import voluptuous as vol
from homeassistant import config_entries
from homeassistant.config_entries import ConfigEntry
from homeassistant.core import HomeAssistant, ServiceCall
import homeassistant.helpers.config_validation as cv
from homeassistant.helpers.aiohttp_client import async_get_clientsession

from .const import (
    CONF_PORT_PATTERN,
    CONF_SCAN_INTERVAL,
    CONF_SINK_URL,
    DEFAULT_PORT_PATTERN,
    DEFAULT_SCAN_INTERVAL,
    DEFAULT_SINK_URL,
    DOMAIN,
    MIN_SCAN_INTERVAL,
    SERVICE_SCAN_NOW,
)
from .coordinator import DucoboxScanCoordinator
from .reporter import ThingReporter

_LOGGER = logging.getLogger(__name__)

PLATFORMS: list[str] = ["sensor"]

CONFIG_SCHEMA = vol.Schema(
    {
        DOMAIN: vol.Schema(
            {
                vol.Optional(CONF_PORT_PATTERN, default=DEFAULT_PORT_PATTERN): cv.string,
                vol.Optional(CONF_SCAN_INTERVAL, default=DEFAULT_SCAN_INTERVAL): vol.All(
                    vol.Coerce(int), vol.Range(min=MIN_SCAN_INTERVAL)
                ),
                vol.Optional(CONF_SINK_URL, default=DEFAULT_SINK_URL): vol.Any(
                    "", cv.url
                ),
            }
        )
    },
    extra=vol.ALLOW_EXTRA,
)


async def async_setup(hass: HomeAssistant, config: dict) -> bool:
    """Handle YAML import."""

    if DOMAIN in config:
        hass.async_create_task(
            hass.config_entries.flow.async_init(
                DOMAIN,
                context={"source": config_entries.SOURCE_IMPORT},
                data=config[DOMAIN],
            )
        )

    return True


async def async_setup_entry(hass: HomeAssistant, entry: ConfigEntry) -> bool:
    """Set up Ducobox serial polling from a config entry."""

    hass.data.setdefault(DOMAIN, {})

    config = {**entry.data, **entry.options}
    port_pattern = config.get(CONF_PORT_PATTERN, DEFAULT_PORT_PATTERN)
    scan_interval = config.get(CONF_SCAN_INTERVAL, DEFAULT_SCAN_INTERVAL)
    sink_url = config.get(CONF_SINK_URL, DEFAULT_SINK_URL)

    reporter = _create_reporter(hass, sink_url)
    _LOGGER.info(
        "Starting Ducobox scan of %s every %s seconds", port_pattern, scan_interval
    )
    coordinator = DucoboxScanCoordinator(hass, port_pattern, scan_interval, reporter)
    await coordinator.async_config_entry_first_refresh()

    entry_data: Dict[str, Any] = {
        "entry": entry,
        "coordinator": coordinator,
    }
    hass.data[DOMAIN][entry.entry_id] = entry_data

    entry.async_on_unload(entry.add_update_listener(_async_update_listener))

    if not hass.data[DOMAIN].get("_scan_now_service_registered"):

        async def _async_scan_now_service(call: ServiceCall) -> None:
            for key, data in hass.data.get(DOMAIN, {}).items():
                if key.startswith("_") or not isinstance(data, dict):
                    continue
                await data["coordinator"].async_request_refresh()

        hass.services.async_register(
            DOMAIN, SERVICE_SCAN_NOW, _async_scan_now_service, vol.Schema({})
        )
        hass.data[DOMAIN]["_scan_now_service_registered"] = True

    await hass.config_entries.async_forward_entry_setups(entry, PLATFORMS)
    return True


async def async_unload_entry(hass: HomeAssistant, entry: ConfigEntry) -> bool:
    """Unload a Ducobox serial config entry."""

    unload_ok = await hass.config_entries.async_unload_platforms(entry, PLATFORMS)

    if unload_ok:
        hass.data[DOMAIN].pop(entry.entry_id, None)
        remaining = [key for key in hass.data[DOMAIN] if not key.startswith("_")]
        if not remaining and hass.data[DOMAIN].pop("_scan_now_service_registered", None):
            hass.services.async_remove(DOMAIN, SERVICE_SCAN_NOW)

    return unload_ok


def _create_reporter(hass: HomeAssistant, sink_url: str) -> ThingReporter | None:
    if not sink_url:
        _LOGGER.debug("No sink URL configured; scan results stay local")
        return None
    return ThingReporter(async_get_clientsession(hass), sink_url)


async def _async_update_listener(hass: HomeAssistant, entry: ConfigEntry) -> None:
    """Handle options updates by reloading the entry."""

    await hass.config_entries.async_reload(entry.entry_id)
