"""Leviton Decora Smart Integration.

Exposes Leviton cloud-connected dimmers and switches as lights.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from homeassistant.config_entries import ConfigEntry, ConfigEntryState
from homeassistant.const import Platform
from homeassistant.core import HomeAssistant, ServiceCall
from homeassistant.exceptions import ConfigEntryAuthFailed, ConfigEntryNotReady
from homeassistant.helpers import config_validation as cv
from homeassistant.helpers.aiohttp_client import async_get_clientsession
from homeassistant.helpers.typing import ConfigType

from .accessory import HostRuntime
from .bridge import LevitonPlatform
from .const import DOMAIN, SERVICE_REMOVE_ACCESSORIES, STARTUP_MESSAGE
from .host import HomeAssistantHost
from .leviton_client.client import LevitonClient
from .leviton_client.exceptions import LevitonAuthenticationError, LevitonClientError

_LOGGER = logging.getLogger(__name__)

PLATFORMS: list[Platform] = [Platform.LIGHT]

CONFIG_SCHEMA = cv.config_entry_only_config_schema(DOMAIN)

type LevitonConfigEntry = ConfigEntry[RuntimeData]


@dataclass
class RuntimeData:
    """Runtime data for the integration."""

    client: LevitonClient
    host: HomeAssistantHost
    platform: LevitonPlatform


async def async_setup(hass: HomeAssistant, config: ConfigType) -> bool:
    """Register integration services."""

    async def _async_remove_accessories(call: ServiceCall) -> None:
        """Unregister the accessories of every loaded entry."""
        for entry in hass.config_entries.async_entries(DOMAIN):
            if entry.state is ConfigEntryState.LOADED:
                entry.runtime_data.platform.remove_accessories()

    hass.services.async_register(
        DOMAIN, SERVICE_REMOVE_ACCESSORIES, _async_remove_accessories
    )
    return True


async def async_setup_entry(hass: HomeAssistant, config_entry: LevitonConfigEntry) -> bool:
    """Set up Leviton Decora Smart from a config entry."""
    _LOGGER.info(STARTUP_MESSAGE)

    client = LevitonClient(session=async_get_clientsession(hass))
    host = HomeAssistantHost(hass, config_entry.entry_id)
    platform = LevitonPlatform(
        config=config_entry.data,
        client=client,
        runtime=HostRuntime(host=host),
    )

    if not platform.configured:
        # Missing credentials: stay inert, no network call
        return False

    # Replay accessories persisted by previous runs
    restored = await host.async_restore(platform)
    _LOGGER.debug("Restored %d accessories from storage", restored)

    try:
        await platform.did_finish_launching()
    except LevitonAuthenticationError as err:
        raise ConfigEntryAuthFailed(f"Authentication failed: {err}") from err
    except LevitonClientError as err:
        if not restored:
            raise ConfigEntryNotReady(f"Discovery failed: {err}") from err
        # Known accessories stay usable, new switches wait for the next start
        _LOGGER.warning(
            "Discovery failed, continuing with %d stored accessories: %s", restored, err
        )

    config_entry.runtime_data = RuntimeData(client=client, host=host, platform=platform)

    await hass.config_entries.async_forward_entry_setups(config_entry, PLATFORMS)

    _LOGGER.info(
        "Successfully set up %s integration with %d accessories",
        DOMAIN,
        len(platform.accessories),
    )
    return True


async def async_unload_entry(hass: HomeAssistant, config_entry: LevitonConfigEntry) -> bool:
    """Unload a config entry."""
    _LOGGER.debug("Unloading config entry")

    unload_ok = await hass.config_entries.async_unload_platforms(config_entry, PLATFORMS)
    if unload_ok:
        _LOGGER.info("Successfully unloaded %s integration", DOMAIN)
    return unload_ok


async def async_remove_entry(hass: HomeAssistant, config_entry: LevitonConfigEntry) -> None:
    """Delete persisted accessories when the entry is removed."""
    await HomeAssistantHost(hass, config_entry.entry_id).async_remove_storage()
