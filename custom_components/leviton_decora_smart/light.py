"""Light platform for Leviton Decora Smart integration."""

from __future__ import annotations

import logging
import math
from datetime import timedelta
from typing import Any

from homeassistant.components.light import ATTR_BRIGHTNESS, ColorMode, LightEntity
from homeassistant.config_entries import ConfigEntry
from homeassistant.core import HomeAssistant, callback
from homeassistant.exceptions import HomeAssistantError
from homeassistant.helpers.device_registry import DeviceInfo
from homeassistant.helpers.entity_platform import AddEntitiesCallback
from homeassistant.util.color import brightness_to_value, value_to_brightness

from .accessory import (
    Accessory,
    Characteristic,
    CharacteristicError,
    CharacteristicKind,
    ServiceType,
)
from .const import BRIGHTNESS_SCALE, DOMAIN

_LOGGER = logging.getLogger(__name__)

SCAN_INTERVAL = timedelta(seconds=30)


async def async_setup_entry(
    hass: HomeAssistant,
    config_entry: ConfigEntry,
    async_add_entities: AddEntitiesCallback,
) -> None:
    """Set up Leviton light platform."""
    host = config_entry.runtime_data.host
    _LOGGER.debug("Attaching light platform to %d accessories", len(host.accessories))
    host.async_attach_entity_platform(async_add_entities, LevitonLight)


class LevitonLight(LightEntity):
    """Light entity reading and writing through an accessory's characteristics."""

    _attr_has_entity_name = True
    _attr_name = None
    _attr_color_mode = ColorMode.BRIGHTNESS
    _attr_supported_color_modes = {ColorMode.BRIGHTNESS}

    def __init__(self, accessory: Accessory) -> None:
        """Initialize the light.

        Args:
            accessory: Accessory whose lightbulb service has been set up

        """
        self._accessory = accessory
        service = accessory.get_service(ServiceType.LIGHTBULB)
        if service is None:
            raise ValueError(f"Accessory {accessory.display_name} has no lightbulb service")
        self._on = service.get_characteristic(CharacteristicKind.ON)
        self._brightness = service.get_characteristic(CharacteristicKind.BRIGHTNESS)
        # Polling writes state once, after both reads
        self._polling = False

        info = accessory.information
        self._attr_unique_id = accessory.uuid
        self._attr_device_info = DeviceInfo(
            identifiers={(DOMAIN, accessory.uuid)},
            name=info.value_of(CharacteristicKind.NAME) or accessory.display_name,
            manufacturer=info.value_of(CharacteristicKind.MANUFACTURER),
            model=info.value_of(CharacteristicKind.MODEL),
            sw_version=info.value_of(CharacteristicKind.FIRMWARE_REVISION),
            serial_number=info.value_of(CharacteristicKind.SERIAL_NUMBER),
        )

    async def async_added_to_hass(self) -> None:
        """Follow values pushed into the characteristics."""
        self.async_on_remove(self._on.subscribe(self._handle_characteristic_update))
        self.async_on_remove(
            self._brightness.subscribe(self._handle_characteristic_update)
        )

    @callback
    def _handle_characteristic_update(self, characteristic: Characteristic) -> None:
        """Write state when a handler pushed a new value."""
        self._attr_available = True
        if not self._polling:
            self.async_write_ha_state()

    @property
    def is_on(self) -> bool | None:
        """Return True if the light is on."""
        return self._on.value

    @property
    def brightness(self) -> int | None:
        """Return the brightness on Home Assistant's 1..255 scale."""
        level = self._brightness.value
        if not level:
            return None
        return value_to_brightness(BRIGHTNESS_SCALE, level)

    def _level_from_brightness(self, brightness: int) -> int:
        """Convert 1..255 brightness to a device level within its bounds."""
        level = math.ceil(brightness_to_value(BRIGHTNESS_SCALE, brightness))
        if self._brightness.min_value is not None:
            level = max(level, self._brightness.min_value)
        if self._brightness.max_value is not None:
            level = min(level, self._brightness.max_value)
        return level

    async def async_update(self) -> None:
        """Read power and brightness from the device."""
        self._polling = True
        try:
            await self._on.async_get()
            await self._brightness.async_get()
        except CharacteristicError as err:
            if self._attr_available:
                _LOGGER.warning("%s is unavailable: %s", self._accessory.display_name, err)
            self._attr_available = False
            return
        finally:
            self._polling = False
        self._attr_available = True

    async def async_turn_on(self, **kwargs: Any) -> None:
        """Turn the light on, optionally at a brightness."""
        try:
            if not self.is_on:
                await self._on.async_set(True)
            if ATTR_BRIGHTNESS in kwargs:
                await self._brightness.async_set(
                    self._level_from_brightness(kwargs[ATTR_BRIGHTNESS])
                )
        except CharacteristicError as err:
            raise HomeAssistantError(str(err)) from err

    async def async_turn_off(self, **kwargs: Any) -> None:
        """Turn the light off."""
        try:
            await self._on.async_set(False)
        except CharacteristicError as err:
            raise HomeAssistantError(str(err)) from err
