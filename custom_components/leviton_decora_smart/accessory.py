"""Accessory model shared by the platform adapter and the host runtime.

An accessory groups services, a service groups characteristics, and a
characteristic is one readable/writable property (On, Brightness, ...).
Reads and writes coming from the host are forwarded to the handlers bound
to a characteristic; handlers push the value they observe back with
update_value() so subscribers (entities) can refresh their state.
"""

from __future__ import annotations

import logging
import uuid
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any, Protocol

_LOGGER = logging.getLogger(__name__)

# Fixed namespace so the same serial always maps to the same accessory
ACCESSORY_UUID_NAMESPACE = uuid.UUID("5c1d3b8e-2f0a-4f4e-9d47-6c7a1e0b3f21")

GetHandler = Callable[[], Awaitable[Any]]
SetHandler = Callable[[Any], Awaitable[None]]
Listener = Callable[["Characteristic"], None]


class ServiceType(StrEnum):
    """Service types exposed by accessories."""

    ACCESSORY_INFORMATION = "accessory_information"
    LIGHTBULB = "lightbulb"


class CharacteristicKind(StrEnum):
    """Characteristic kinds used by the services above."""

    NAME = "name"
    SERIAL_NUMBER = "serial_number"
    MANUFACTURER = "manufacturer"
    MODEL = "model"
    FIRMWARE_REVISION = "firmware_revision"
    ON = "on"
    BRIGHTNESS = "brightness"


class CharacteristicError(Exception):
    """A characteristic read or write could not be completed."""


def generate_uuid(data: str) -> str:
    """Return a stable accessory UUID for the given identity string."""
    return str(uuid.uuid5(ACCESSORY_UUID_NAMESPACE, data))


class Characteristic:
    """A single readable/writable property of a service."""

    def __init__(self, kind: CharacteristicKind, value: Any = None) -> None:
        """Initialize the characteristic."""
        self.kind = kind
        self.value = value
        self.min_value: int | None = None
        self.max_value: int | None = None
        self.min_step: int | None = None
        self._get_handler: GetHandler | None = None
        self._set_handler: SetHandler | None = None
        self._listeners: list[Listener] = []

    def __repr__(self) -> str:
        """Return a debug representation."""
        return f"<Characteristic {self.kind}={self.value!r}>"

    @property
    def is_bound(self) -> bool:
        """Return True if read/write handlers are attached."""
        return self._get_handler is not None or self._set_handler is not None

    def bind(
        self, get_handler: GetHandler | None, set_handler: SetHandler | None
    ) -> Characteristic:
        """Attach read/write handlers, replacing any previous ones."""
        self._get_handler = get_handler
        self._set_handler = set_handler
        return self

    def set_props(
        self,
        min_value: int | None = None,
        max_value: int | None = None,
        min_step: int | None = None,
    ) -> Characteristic:
        """Set value bounds."""
        if min_value is not None:
            self.min_value = min_value
        if max_value is not None:
            self.max_value = max_value
        if min_step is not None:
            self.min_step = min_step
        return self

    def update_value(self, value: Any) -> Characteristic:
        """Store a value observed on the device and notify subscribers."""
        self.value = value
        for listener in list(self._listeners):
            listener(self)
        return self

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Call listener on every update_value(); returns an unsubscribe callable."""
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    def validate(self, value: Any) -> None:
        """Raise ValueError if value lies outside the characteristic bounds."""
        if self.min_value is not None and value < self.min_value:
            raise ValueError(f"{self.kind} value {value} below minimum {self.min_value}")
        if self.max_value is not None and value > self.max_value:
            raise ValueError(f"{self.kind} value {value} above maximum {self.max_value}")

    async def async_get(self) -> Any:
        """Read the value through the bound handler.

        Raises:
            CharacteristicError: If the handler could not read the device

        """
        if self._get_handler is None:
            return self.value
        return await self._get_handler()

    async def async_set(self, value: Any) -> None:
        """Write the value through the bound handler.

        Raises:
            ValueError: If value is out of bounds
            CharacteristicError: If the handler could not write the device

        """
        self.validate(value)
        if self._set_handler is None:
            self.update_value(value)
            return
        await self._set_handler(value)


class Service:
    """A group of characteristics representing one function of an accessory."""

    def __init__(self, service_type: ServiceType, subtype: str | None = None) -> None:
        """Initialize the service."""
        self.service_type = service_type
        self.subtype = subtype
        self.characteristics: dict[CharacteristicKind, Characteristic] = {}

    def get_characteristic(self, kind: CharacteristicKind) -> Characteristic:
        """Return the characteristic of the given kind, creating it if needed."""
        if kind not in self.characteristics:
            self.characteristics[kind] = Characteristic(kind)
        return self.characteristics[kind]

    def set_characteristic(self, kind: CharacteristicKind, value: Any) -> Service:
        """Set a static characteristic value."""
        self.get_characteristic(kind).update_value(value)
        return self

    def value_of(self, kind: CharacteristicKind) -> Any:
        """Return the current value of a characteristic, or None if absent."""
        characteristic = self.characteristics.get(kind)
        return characteristic.value if characteristic else None


@dataclass
class Accessory:
    """Host-managed representation of one device."""

    display_name: str
    uuid: str
    context: dict[str, Any] = field(default_factory=dict)
    services: list[Service] = field(default_factory=list)

    def __post_init__(self) -> None:
        """Every accessory carries an information service."""
        if self.get_service(ServiceType.ACCESSORY_INFORMATION) is None:
            self.services.append(Service(ServiceType.ACCESSORY_INFORMATION))

    @property
    def information(self) -> Service:
        """Return the accessory information service."""
        service = self.get_service(ServiceType.ACCESSORY_INFORMATION)
        if service is None:
            raise LookupError(f"{self.display_name} has no accessory information service")
        return service

    def get_service(
        self, service_type: ServiceType, subtype: str | None = None
    ) -> Service | None:
        """Return the matching service, or None."""
        for service in self.services:
            if service.service_type != service_type:
                continue
            if subtype is None or service.subtype == subtype:
                return service
        return None

    def add_service(self, service_type: ServiceType, subtype: str | None = None) -> Service:
        """Create and attach a new service."""
        service = Service(service_type, subtype)
        self.services.append(service)
        return service


class AccessoryHost(Protocol):
    """Operations the host runtime offers to the platform adapter."""

    def register_accessory(self, accessory: Accessory) -> None:
        """Publish a new accessory and persist it across restarts."""

    def update_accessory(self, accessory: Accessory) -> None:
        """Persist changes made to a registered accessory."""

    def unregister_accessory(self, accessory: Accessory) -> None:
        """Withdraw an accessory and forget it."""

    def bind_characteristic(
        self,
        service: Service,
        kind: CharacteristicKind,
        get_handler: GetHandler,
        set_handler: SetHandler,
    ) -> Characteristic:
        """Route host reads/writes of a characteristic to the given handlers."""


@dataclass(frozen=True)
class HostRuntime:
    """Host runtime context injected into the platform adapter."""

    host: AccessoryHost
    generate_uuid: Callable[[str], str] = generate_uuid
