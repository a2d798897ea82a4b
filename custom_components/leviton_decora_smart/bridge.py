"""Platform adapter between the Leviton API and the accessory host.

The host calls configure_accessory() for every accessory it restored from
storage, then did_finish_launching() once it is ready. Discovery registers
one accessory per switch whose serial is not known yet.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from .accessory import (
    Accessory,
    CharacteristicKind,
    HostRuntime,
    Service,
    ServiceType,
)
from .const import CONF_EMAIL, CONF_PASSWORD, CONTEXT_DEVICE, CONTEXT_TOKEN
from .controls import BrightnessControl, PowerControl
from .helpers import log_debug, log_error, log_info
from .leviton_client.client import LevitonClient
from .leviton_client.discovery import discover_leviton_devices
from .leviton_client.exceptions import LevitonClientError
from .leviton_client.models import LevitonDevice

_LOGGER = logging.getLogger(__name__)


def set_accessory_information(accessory: Accessory, device: LevitonDevice) -> None:
    """Populate the static identification characteristics."""
    (
        accessory.information.set_characteristic(CharacteristicKind.NAME, device.name)
        .set_characteristic(CharacteristicKind.SERIAL_NUMBER, device.serial)
        .set_characteristic(CharacteristicKind.MANUFACTURER, device.manufacturer)
        .set_characteristic(CharacteristicKind.MODEL, device.model)
        .set_characteristic(CharacteristicKind.FIRMWARE_REVISION, device.version)
    )


class LevitonPlatform:
    """Expose Leviton switches as lightbulb accessories."""

    def __init__(
        self,
        config: Mapping[str, Any] | None,
        client: LevitonClient,
        runtime: HostRuntime,
    ) -> None:
        """Initialize the platform.

        Args:
            config: Configuration with "email" and "password"
            client: Leviton REST client
            runtime: Host runtime context

        """
        self.config: Mapping[str, Any] = config or {}
        self.client = client
        self.runtime = runtime
        self.accessories: list[Accessory] = []
        self.configured = False

        if config is None:
            _LOGGER.error("No config defined")
            return
        if not config.get(CONF_EMAIL) or not config.get(CONF_PASSWORD):
            _LOGGER.error("email and password are required in the configuration")
            return
        self.configured = True

    async def initialize(
        self, config: Mapping[str, Any]
    ) -> tuple[list[LevitonDevice], str]:
        """Log in and return the switches of the primary residence with the token.

        Raises:
            LevitonAuthenticationError: If the credentials are rejected
            LevitonDiscoveryError: If a discovery stage fails

        """
        log_debug(_LOGGER, "initialize", "Starting discovery")
        result = await discover_leviton_devices(
            self.client, config[CONF_EMAIL], config[CONF_PASSWORD]
        )
        return result.devices, result.token

    async def did_finish_launching(self) -> None:
        """Discover switches and register the ones not known yet.

        Known accessories holding an older session token are re-bound to the
        new one. Nothing is added when any discovery stage fails; the error is
        logged and re-raised for the host.
        """
        if not self.configured:
            _LOGGER.debug("Platform not configured, skipping discovery")
            return

        try:
            devices, token = await self.initialize(self.config)
        except LevitonClientError as err:
            log_error(_LOGGER, "did_finish_launching", "Discovery failed", error=err)
            raise

        for device in devices:
            accessory = self.find_accessory(device.serial)
            if accessory is None:
                await self.add_accessory(device, token)
            elif accessory.context[CONTEXT_TOKEN] != token:
                await self.refresh_accessory(accessory, token)

    def find_accessory(self, serial: str) -> Accessory | None:
        """Return the known accessory for a device serial."""
        for accessory in self.accessories:
            device: LevitonDevice = accessory.context[CONTEXT_DEVICE]
            if device.serial == serial:
                return accessory
        return None

    async def add_accessory(self, device: LevitonDevice, token: str) -> Accessory:
        """Create, set up and register the accessory for a new device."""
        log_info(_LOGGER, "add_accessory", "Adding", device=device.name)

        accessory = Accessory(
            display_name=device.name,
            uuid=self.runtime.generate_uuid(device.serial),
        )
        accessory.context[CONTEXT_DEVICE] = device
        accessory.context[CONTEXT_TOKEN] = token
        set_accessory_information(accessory, device)

        await self.setup_service(accessory)
        self.runtime.host.register_accessory(accessory)
        self.accessories.append(accessory)

        log_debug(_LOGGER, "add_accessory", "Finished", device=device.name)
        return accessory

    async def refresh_accessory(self, accessory: Accessory, token: str) -> None:
        """Re-bind a known accessory to the session token of the last login."""
        log_debug(
            _LOGGER, "refresh_accessory", "New session", name=accessory.display_name
        )
        accessory.context[CONTEXT_TOKEN] = token
        await self.setup_service(accessory)
        self.runtime.host.update_accessory(accessory)

    async def configure_accessory(self, accessory: Accessory) -> None:
        """Re-bind a restored accessory and track it."""
        log_debug(_LOGGER, "configure_accessory", "Restoring", name=accessory.display_name)
        await self.setup_service(accessory)
        self.accessories.append(accessory)

    async def get_status(self, device: LevitonDevice, token: str) -> LevitonDevice:
        """Fetch the live status of a device."""
        log_debug(_LOGGER, "get_status", "Fetching", device=device.name)
        return await self.client.get_iot_switch(device.id, token)

    async def setup_service(self, accessory: Accessory) -> Service:
        """Bind the lightbulb service of an accessory to the device.

        Handlers are bound even if the initial status fetch fails, so later
        reads and writes still reach the device.
        """
        log_debug(_LOGGER, "setup_service", "Setting up", name=accessory.display_name)
        device: LevitonDevice = accessory.context[CONTEXT_DEVICE]
        token: str = accessory.context[CONTEXT_TOKEN]
        host = self.runtime.host

        service = accessory.get_service(
            ServiceType.LIGHTBULB, device.name
        ) or accessory.add_service(ServiceType.LIGHTBULB, device.name)

        power = PowerControl(
            client=self.client,
            device_id=device.id,
            device_name=device.name,
            token=token,
            characteristic=service.get_characteristic(CharacteristicKind.ON),
        )
        brightness = BrightnessControl(
            client=self.client,
            device_id=device.id,
            device_name=device.name,
            token=token,
            characteristic=service.get_characteristic(CharacteristicKind.BRIGHTNESS),
        )
        on_characteristic = host.bind_characteristic(
            service, CharacteristicKind.ON, power.async_get, power.async_set
        )
        brightness_characteristic = host.bind_characteristic(
            service,
            CharacteristicKind.BRIGHTNESS,
            brightness.async_get,
            brightness.async_set,
        )

        try:
            status = await self.get_status(device, token)
        except LevitonClientError as err:
            log_error(
                _LOGGER, "setup_service", "Status fetch failed", device=device.name, error=err
            )
            return service

        on_characteristic.update_value(status.is_on)
        brightness_characteristic.set_props(
            min_value=status.min_level,
            max_value=status.max_level,
            min_step=1,
        ).update_value(status.brightness)
        return service

    def remove_accessories(self) -> None:
        """Unregister every known accessory."""
        _LOGGER.info("Removing all accessories")
        for accessory in self.accessories:
            self.runtime.host.unregister_accessory(accessory)
        self.accessories.clear()
