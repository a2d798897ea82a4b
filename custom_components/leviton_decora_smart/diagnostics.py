"""Diagnostics support for Leviton Decora Smart."""

from typing import Any

from homeassistant.components.diagnostics import async_redact_data
from homeassistant.core import HomeAssistant

from . import LevitonConfigEntry
from .accessory import CharacteristicKind, ServiceType
from .const import CONF_EMAIL, CONF_PASSWORD, CONTEXT_TOKEN, DOMAIN, VERSION

# Keys to redact from diagnostics output
TO_REDACT = {
    CONF_EMAIL,
    CONF_PASSWORD,
    CONTEXT_TOKEN,
    "serial",
    "serial_number",
}


async def async_get_config_entry_diagnostics(
    hass: HomeAssistant, config_entry: LevitonConfigEntry
) -> dict[str, Any]:
    """Return diagnostics for a config entry."""
    platform = config_entry.runtime_data.platform

    config_data = {
        "entry_id": config_entry.entry_id,
        "version": config_entry.version,
        "domain": DOMAIN,
        "integration_version": VERSION,
        "data": async_redact_data(dict(config_entry.data), TO_REDACT),
    }

    accessories = []
    for accessory in platform.accessories:
        info = accessory.information
        lightbulb = accessory.get_service(ServiceType.LIGHTBULB)
        accessories.append(
            async_redact_data(
                {
                    "uuid": accessory.uuid,
                    "display_name": accessory.display_name,
                    "model": info.value_of(CharacteristicKind.MODEL),
                    "firmware_version": info.value_of(
                        CharacteristicKind.FIRMWARE_REVISION
                    ),
                    "serial_number": info.value_of(CharacteristicKind.SERIAL_NUMBER),
                    "on": lightbulb.value_of(CharacteristicKind.ON)
                    if lightbulb
                    else None,
                    "brightness": lightbulb.value_of(CharacteristicKind.BRIGHTNESS)
                    if lightbulb
                    else None,
                },
                TO_REDACT,
            )
        )

    return {
        "config": config_data,
        "accessory_count": len(accessories),
        "accessories": accessories,
    }
