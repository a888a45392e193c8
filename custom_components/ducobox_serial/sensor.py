"""Sensor entities for the Ducobox serial integration."""

from __future__ import annotations

import logging
from decimal import Decimal
from typing import Callable, Dict, Iterator, List, Tuple

from homeassistant.components.sensor import (
    SensorDeviceClass,
    SensorEntity,
    SensorStateClass,
)
from homeassistant.config_entries import ConfigEntry
from homeassistant.const import (
    CONCENTRATION_PARTS_PER_MILLION,
    PERCENTAGE,
    REVOLUTIONS_PER_MINUTE,
    SIGNAL_STRENGTH_DECIBELS_MILLIWATT,
    UnitOfTemperature,
)
from homeassistant.core import HomeAssistant, callback
from homeassistant.helpers.entity import EntityCategory
from homeassistant.helpers.update_coordinator import CoordinatorEntity

from .const import DOMAIN, MANUFACTURER
from .coordinator import DucoboxScanCoordinator
from .models import Thing

_LOGGER = logging.getLogger(__name__)

UNIT_MAP: Dict[str, str] = {
    "rpm": REVOLUTIONS_PER_MINUTE,
    "DegC": UnitOfTemperature.CELSIUS,
    "%": PERCENTAGE,
    "dBm": SIGNAL_STRENGTH_DECIBELS_MILLIWATT,
    "ppm": CONCENTRATION_PARTS_PER_MILLION,
}

DEVICE_CLASS_MAP: Dict[str, SensorDeviceClass] = {
    "Temp": SensorDeviceClass.TEMPERATURE,
    "Signal strength": SensorDeviceClass.SIGNAL_STRENGTH,
    "CO2": SensorDeviceClass.CO2,
}


async def async_setup_entry(
    hass: HomeAssistant, entry: ConfigEntry, async_add_entities: Callable
) -> None:
    """Set up Ducobox channel sensors for a config entry."""

    entry_data = hass.data[DOMAIN][entry.entry_id]
    coordinator: DucoboxScanCoordinator = entry_data["coordinator"]

    manager = _DucoboxSensorManager(coordinator, async_add_entities)
    entry_data["sensor_manager"] = manager
    entry.async_on_unload(coordinator.async_add_listener(manager.handle_update))
    manager.handle_update()


def iter_channels(things: List[Thing]) -> Iterator[Tuple[Thing, Thing]]:
    """Yield ``(device, channel)`` pairs for every channel in ``things``."""
    for device in things:
        for channel in device.children:
            yield device, channel


class _DucoboxSensorManager:
    """Add sensor entities as channels show up in scan results."""

    def __init__(
        self, coordinator: DucoboxScanCoordinator, async_add_entities: Callable
    ) -> None:
        self._coordinator = coordinator
        self._async_add_entities = async_add_entities
        self._known: set[str] = set()

    @callback
    def handle_update(self) -> None:
        new_entities: List[DucoboxChannelSensor] = []
        for device, channel in iter_channels(self._coordinator.data or []):
            if channel.id in self._known:
                continue
            self._known.add(channel.id)
            new_entities.append(DucoboxChannelSensor(self._coordinator, device, channel))

        if new_entities:
            _LOGGER.debug("Adding %d Ducobox sensors", len(new_entities))
            self._async_add_entities(new_entities)


class DucoboxChannelSensor(CoordinatorEntity[DucoboxScanCoordinator], SensorEntity):
    """One measurable channel of a Ducobox node."""

    _attr_has_entity_name = True

    def __init__(
        self, coordinator: DucoboxScanCoordinator, device: Thing, channel: Thing
    ) -> None:
        super().__init__(coordinator)
        self._thing_id = channel.id
        self._attr_unique_id = f"{DOMAIN}_{channel.id}"
        self._attr_name = channel.type
        self._attr_device_info = {
            "identifiers": {(DOMAIN, device.id)},
            "manufacturer": MANUFACTURER,
            "name": f"Ducobox {device.type} {device.id}",
            "model": device.type,
        }

        if channel.measurement_possible_values is not None:
            self._attr_device_class = SensorDeviceClass.ENUM
            self._attr_options = list(channel.measurement_possible_values)
        else:
            self._attr_device_class = DEVICE_CLASS_MAP.get(channel.type)
            self._attr_state_class = SensorStateClass.MEASUREMENT
            unit = channel.measurement_unit
            self._attr_native_unit_of_measurement = UNIT_MAP.get(unit, unit)

        if channel.type == "Signal strength":
            self._attr_entity_category = EntityCategory.DIAGNOSTIC

        self._channel: Thing | None = channel

    @callback
    def _handle_coordinator_update(self) -> None:
        self._channel = self._find_channel()
        super()._handle_coordinator_update()

    def _find_channel(self) -> Thing | None:
        for _, channel in iter_channels(self.coordinator.data or []):
            if channel.id == self._thing_id:
                return channel
        return None

    @property
    def available(self) -> bool:
        return super().available and self._channel is not None

    @property
    def native_value(self):
        if self._channel is None:
            return None
        value = self._channel.latest
        if isinstance(value, Decimal):
            return float(value)
        if (
            value is not None
            and self._attr_device_class == SensorDeviceClass.ENUM
            and value not in self._attr_options
        ):
            _LOGGER.debug("Unknown mode %s for %s", value, self._thing_id)
            return None
        return value
