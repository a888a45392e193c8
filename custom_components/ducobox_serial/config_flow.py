"""Config flow for the Ducobox serial integration."""

from __future__ import annotations

import logging
from typing import Any, Dict

import voluptuous as vol
from homeassistant import config_entries
from homeassistant.data_entry_flow import FlowResult
import homeassistant.helpers.config_validation as cv

from .const import (
    CONF_PORT_PATTERN,
    CONF_SCAN_INTERVAL,
    CONF_SINK_URL,
    DEFAULT_PORT_PATTERN,
    DEFAULT_SCAN_INTERVAL,
    DEFAULT_SINK_URL,
    DOMAIN,
    MIN_SCAN_INTERVAL,
)

_LOGGER = logging.getLogger(__name__)


def _schema(
    default_pattern: str = DEFAULT_PORT_PATTERN,
    default_interval: int = DEFAULT_SCAN_INTERVAL,
    default_sink: str = DEFAULT_SINK_URL,
) -> vol.Schema:
    return vol.Schema(
        {
            vol.Required(CONF_PORT_PATTERN, default=default_pattern): cv.string,
            vol.Optional(CONF_SCAN_INTERVAL, default=default_interval): vol.All(
                vol.Coerce(int), vol.Range(min=MIN_SCAN_INTERVAL)
            ),
            vol.Optional(CONF_SINK_URL, default=default_sink): str,
        }
    )


def _validate(user_input: Dict[str, Any]) -> tuple[Dict[str, Any], Dict[str, str]]:
    data = {
        CONF_PORT_PATTERN: user_input[CONF_PORT_PATTERN].strip(),
        CONF_SCAN_INTERVAL: user_input.get(CONF_SCAN_INTERVAL, DEFAULT_SCAN_INTERVAL),
        CONF_SINK_URL: (user_input.get(CONF_SINK_URL) or "").strip(),
    }
    errors: Dict[str, str] = {}
    if not data[CONF_PORT_PATTERN]:
        errors[CONF_PORT_PATTERN] = "invalid_pattern"
    if data[CONF_SINK_URL]:
        try:
            cv.url(data[CONF_SINK_URL])
        except vol.Invalid:
            errors[CONF_SINK_URL] = "invalid_url"
    return data, errors


class DucoboxSerialConfigFlow(config_entries.ConfigFlow, domain=DOMAIN):
    """Handle a config flow for Ducobox serial."""

    VERSION = 1

    async def async_step_user(
        self, user_input: Dict[str, Any] | None = None
    ) -> FlowResult:
        if user_input is None:
            return self.async_show_form(step_id="user", data_schema=_schema())

        data, errors = _validate(user_input)
        if errors:
            return self.async_show_form(
                step_id="user", data_schema=_schema(), errors=errors
            )

        await self.async_set_unique_id(data[CONF_PORT_PATTERN])
        self._abort_if_unique_id_configured()

        _LOGGER.debug("Creating entry for %s", data[CONF_PORT_PATTERN])
        return self.async_create_entry(
            title=f"Ducobox ({data[CONF_PORT_PATTERN]})", data=data
        )

    async def async_step_import(self, user_input: Dict[str, Any]) -> FlowResult:
        data, errors = _validate(user_input)
        if errors:
            return self.async_abort(reason=next(iter(errors.values())))
        await self.async_set_unique_id(data[CONF_PORT_PATTERN])
        self._abort_if_unique_id_configured()
        return self.async_create_entry(
            title=f"Ducobox ({data[CONF_PORT_PATTERN]})", data=data
        )

    @staticmethod
    def async_get_options_flow(
        entry: config_entries.ConfigEntry,
    ) -> config_entries.OptionsFlow:
        return DucoboxSerialOptionsFlow(entry)


class DucoboxSerialOptionsFlow(config_entries.OptionsFlow):
    """Handle Ducobox serial options."""

    def __init__(self, entry: config_entries.ConfigEntry) -> None:
        self._entry = entry

    async def async_step_init(
        self, user_input: Dict[str, Any] | None = None
    ) -> FlowResult:
        data = {**self._entry.data, **self._entry.options}
        schema = _schema(
            default_pattern=data.get(CONF_PORT_PATTERN, DEFAULT_PORT_PATTERN),
            default_interval=data.get(CONF_SCAN_INTERVAL, DEFAULT_SCAN_INTERVAL),
            default_sink=data.get(CONF_SINK_URL, DEFAULT_SINK_URL),
        )
        if user_input is None:
            return self.async_show_form(step_id="init", data_schema=schema)

        new_data, errors = _validate(user_input)
        if errors:
            return self.async_show_form(step_id="init", data_schema=schema, errors=errors)
        return self.async_create_entry(title="", data=new_data)
