"""Power and brightness capabilities bound to accessory characteristics."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from .accessory import Characteristic, CharacteristicError
from .helpers import log_debug, log_error
from .leviton_client.client import LevitonClient
from .leviton_client.exceptions import LevitonClientError
from .leviton_client.models import LevitonDevice

_LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class _SwitchControl:
    """Device identity and session token captured for one accessory."""

    client: LevitonClient
    device_id: str
    device_name: str
    token: str
    characteristic: Characteristic

    async def _fetch(self, context: str) -> LevitonDevice:
        try:
            return await self.client.get_iot_switch(self.device_id, self.token)
        except LevitonClientError as err:
            log_error(_LOGGER, context, "Read failed", device=self.device_name, error=err)
            raise CharacteristicError(
                f"Cannot read {self.device_name}: {err}"
            ) from err

    async def _write(
        self, context: str, power: bool | None = None, brightness: int | None = None
    ) -> LevitonDevice:
        try:
            return await self.client.set_iot_switch(
                self.device_id, self.token, power=power, brightness=brightness
            )
        except LevitonClientError as err:
            log_error(_LOGGER, context, "Write failed", device=self.device_name, error=err)
            raise CharacteristicError(
                f"Cannot write {self.device_name}: {err}"
            ) from err


class PowerControl(_SwitchControl):
    """On/off capability of a switch."""

    async def async_get(self) -> bool:
        """Fetch the power state and push it into the On characteristic."""
        log_debug(_LOGGER, "on_get_power", "Reading", device=self.device_name)
        status = await self._fetch("on_get_power")
        log_debug(_LOGGER, "on_get_power", "Result", power=status.power)
        self.characteristic.update_value(status.is_on)
        return status.is_on

    async def async_set(self, value: bool) -> None:
        """Switch the device on or off and push the resulting state."""
        log_debug(_LOGGER, "on_set_power", "Writing", device=self.device_name, value=value)
        status = await self._write("on_set_power", power=bool(value))
        log_debug(_LOGGER, "on_set_power", "Result", power=status.power)
        self.characteristic.update_value(status.is_on)


class BrightnessControl(_SwitchControl):
    """Brightness capability of a dimmer."""

    async def async_get(self) -> int:
        """Fetch the brightness and push it into the Brightness characteristic."""
        log_debug(_LOGGER, "on_get_brightness", "Reading", device=self.device_name)
        status = await self._fetch("on_get_brightness")
        log_debug(_LOGGER, "on_get_brightness", "Result", brightness=status.brightness)
        self.characteristic.update_value(status.brightness)
        return status.brightness

    async def async_set(self, value: int) -> None:
        """Set the brightness and push the resulting level."""
        log_debug(
            _LOGGER, "on_set_brightness", "Writing", device=self.device_name, value=value
        )
        status = await self._write("on_set_brightness", brightness=int(value))
        log_debug(_LOGGER, "on_set_brightness", "Result", brightness=status.brightness)
        self.characteristic.update_value(status.brightness)
