"""Home Assistant implementation of the accessory host."""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any

from homeassistant.components.light import DOMAIN as LIGHT_DOMAIN
from homeassistant.core import HomeAssistant, callback
from homeassistant.helpers import device_registry as dr, entity_registry as er
from homeassistant.helpers.entity import Entity
from homeassistant.helpers.entity_platform import AddEntitiesCallback
from homeassistant.helpers.storage import Store

from .accessory import (
    Accessory,
    Characteristic,
    CharacteristicKind,
    GetHandler,
    Service,
    SetHandler,
)
from .bridge import LevitonPlatform, set_accessory_information
from .const import CONTEXT_DEVICE, CONTEXT_TOKEN, DOMAIN, STORAGE_KEY, STORAGE_VERSION
from .leviton_client.models import LevitonDevice

_LOGGER = logging.getLogger(__name__)

SAVE_DELAY = 1


def accessory_to_stored(accessory: Accessory) -> dict[str, Any]:
    """Serialize an accessory for persistence."""
    device: LevitonDevice = accessory.context[CONTEXT_DEVICE]
    return {
        "uuid": accessory.uuid,
        "display_name": accessory.display_name,
        CONTEXT_DEVICE: device.as_dict(),
        CONTEXT_TOKEN: accessory.context[CONTEXT_TOKEN],
    }


def accessory_from_stored(data: dict[str, Any]) -> Accessory:
    """Rebuild a persisted accessory with its information service."""
    device = LevitonDevice.from_stored(data[CONTEXT_DEVICE])
    accessory = Accessory(
        display_name=data["display_name"],
        uuid=data["uuid"],
        context={CONTEXT_DEVICE: device, CONTEXT_TOKEN: data[CONTEXT_TOKEN]},
    )
    set_accessory_information(accessory, device)
    return accessory


class HomeAssistantHost:
    """Accessory host backed by HA storage and the entity/device registries.

    Registered accessories are persisted per config entry and replayed
    through the platform's configure_accessory() on the next start. Each
    accessory becomes one entity once the entity platform is attached.
    """

    def __init__(self, hass: HomeAssistant, entry_id: str) -> None:
        """Initialize the host.

        Args:
            hass: Home Assistant instance
            entry_id: Config entry the accessories belong to

        """
        self.hass = hass
        self.entry_id = entry_id
        self.accessories: dict[str, Accessory] = {}
        self._store: Store[dict[str, Any]] = Store(
            hass, STORAGE_VERSION, f"{STORAGE_KEY}.{entry_id}"
        )
        self._add_entities: AddEntitiesCallback | None = None
        self._entity_factory: Callable[[Accessory], Entity] | None = None

    async def async_restore(self, platform: LevitonPlatform) -> int:
        """Load persisted accessories and hand each to configure_accessory().

        Returns:
            Number of restored accessories

        """
        data = await self._store.async_load() or {}
        for item in data.get("accessories", []):
            try:
                accessory = accessory_from_stored(item)
            except (KeyError, TypeError) as err:
                _LOGGER.warning("Skipping malformed stored accessory: %s", err)
                continue
            self.accessories[accessory.uuid] = accessory
            await platform.configure_accessory(accessory)

        _LOGGER.debug("Restored %d accessories", len(self.accessories))
        return len(self.accessories)

    @callback
    def async_attach_entity_platform(
        self,
        async_add_entities: AddEntitiesCallback,
        entity_factory: Callable[[Accessory], Entity],
    ) -> None:
        """Create entities for known accessories and for later registrations."""
        self._add_entities = async_add_entities
        self._entity_factory = entity_factory
        async_add_entities(
            [entity_factory(accessory) for accessory in self.accessories.values()]
        )

    @callback
    def register_accessory(self, accessory: Accessory) -> None:
        """Track, persist and publish an accessory."""
        _LOGGER.debug("Registering accessory %s (%s)", accessory.display_name, accessory.uuid)
        self.accessories[accessory.uuid] = accessory
        self._async_schedule_save()
        if self._add_entities is not None and self._entity_factory is not None:
            self._add_entities([self._entity_factory(accessory)])

    @callback
    def update_accessory(self, accessory: Accessory) -> None:
        """Persist the changed context of a known accessory."""
        self.accessories[accessory.uuid] = accessory
        self._async_schedule_save()

    @callback
    def unregister_accessory(self, accessory: Accessory) -> None:
        """Forget an accessory and remove its entity and device."""
        _LOGGER.debug("Unregistering accessory %s (%s)", accessory.display_name, accessory.uuid)
        self.accessories.pop(accessory.uuid, None)
        self._async_schedule_save()

        entity_registry = er.async_get(self.hass)
        entity_id = entity_registry.async_get_entity_id(
            LIGHT_DOMAIN, DOMAIN, accessory.uuid
        )
        if entity_id is not None:
            entity_registry.async_remove(entity_id)

        device_registry = dr.async_get(self.hass)
        device = device_registry.async_get_device(identifiers={(DOMAIN, accessory.uuid)})
        if device is not None:
            device_registry.async_remove_device(device.id)

    def bind_characteristic(
        self,
        service: Service,
        kind: CharacteristicKind,
        get_handler: GetHandler,
        set_handler: SetHandler,
    ) -> Characteristic:
        """Route entity reads/writes of a characteristic to the handlers."""
        return service.get_characteristic(kind).bind(get_handler, set_handler)

    async def async_remove_storage(self) -> None:
        """Delete the persisted accessories."""
        await self._store.async_remove()

    @callback
    def _async_schedule_save(self) -> None:
        self._store.async_delay_save(self._data_to_save, SAVE_DELAY)

    @callback
    def _data_to_save(self) -> dict[str, Any]:
        return {
            "accessories": [
                accessory_to_stored(accessory)
                for accessory in self.accessories.values()
            ]
        }
