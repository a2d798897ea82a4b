"""Common fixtures for Leviton Decora Smart tests."""

from __future__ import annotations

from collections.abc import Generator
from typing import Any
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from pytest_homeassistant_custom_component.common import MockConfigEntry

from custom_components.leviton_decora_smart.accessory import (
    Accessory,
    Characteristic,
    CharacteristicKind,
    GetHandler,
    HostRuntime,
    Service,
    SetHandler,
)
from custom_components.leviton_decora_smart.bridge import LevitonPlatform
from custom_components.leviton_decora_smart.const import (
    CONF_EMAIL,
    CONF_PASSWORD,
    DOMAIN,
)
from custom_components.leviton_decora_smart.leviton_client.client import LevitonClient
from custom_components.leviton_decora_smart.leviton_client.discovery import (
    DiscoveryResult,
)
from custom_components.leviton_decora_smart.leviton_client.models import LevitonDevice

# Test configuration values
TEST_EMAIL = "user@example.com"
TEST_PASSWORD = "secret"  # noqa: S105
TEST_TOKEN = "session-token-1"  # noqa: S105
TEST_PERSON_ID = "1001"
TEST_ACCOUNT_ID = "2002"
TEST_RESIDENCE_ID = "3003"
TEST_KITCHEN_SERIAL = "1000_1A2B_3C4D"
TEST_PORCH_SERIAL = "1000_5E6F_7A8B"


def make_device(**overrides: Any) -> LevitonDevice:
    """Build a LevitonDevice with sensible defaults."""
    values: dict[str, Any] = {
        "id": "101",
        "serial": TEST_KITCHEN_SERIAL,
        "name": "Kitchen",
        "manufacturer": "Leviton",
        "model": "DW6HD",
        "version": "1.6.40",
        "power": "ON",
        "brightness": 42,
        "min_level": 1,
        "max_level": 100,
    }
    values.update(overrides)
    return LevitonDevice(**values)


class FakeHost:
    """In-memory accessory host recording registrations."""

    def __init__(self) -> None:
        """Initialize the fake host."""
        self.registered: list[Accessory] = []
        self.unregistered: list[Accessory] = []
        self.updated: list[Accessory] = []
        self.bindings: list[tuple[Service, CharacteristicKind]] = []

    def register_accessory(self, accessory: Accessory) -> None:
        """Record a registration."""
        self.registered.append(accessory)

    def update_accessory(self, accessory: Accessory) -> None:
        """Record an update."""
        self.updated.append(accessory)

    def unregister_accessory(self, accessory: Accessory) -> None:
        """Record an unregistration."""
        self.unregistered.append(accessory)

    def bind_characteristic(
        self,
        service: Service,
        kind: CharacteristicKind,
        get_handler: GetHandler,
        set_handler: SetHandler,
    ) -> Characteristic:
        """Bind the handlers and record the binding."""
        self.bindings.append((service, kind))
        return service.get_characteristic(kind).bind(get_handler, set_handler)


@pytest.fixture
def mock_config() -> dict[str, str]:
    """Return mock configuration."""
    return {CONF_EMAIL: TEST_EMAIL, CONF_PASSWORD: TEST_PASSWORD}


@pytest.fixture
def mock_config_entry(mock_config: dict[str, str]) -> MockConfigEntry:
    """Return a config entry for the test account."""
    return MockConfigEntry(
        domain=DOMAIN,
        title=f"Leviton ({TEST_EMAIL})",
        data=mock_config,
        unique_id=TEST_EMAIL,
        entry_id="test_entry",
    )


@pytest.fixture
def mock_devices() -> list[LevitonDevice]:
    """Return the switches of the test residence."""
    return [
        make_device(),
        make_device(
            id="102",
            serial=TEST_PORCH_SERIAL,
            name="Porch",
            model="DW15S",
            power="OFF",
            brightness=100,
        ),
    ]


@pytest.fixture
def mock_discovery_result(mock_devices: list[LevitonDevice]) -> DiscoveryResult:
    """Return mock discovery result."""
    return DiscoveryResult(
        token=TEST_TOKEN,
        person_id=TEST_PERSON_ID,
        account_id=TEST_ACCOUNT_ID,
        residence_id=TEST_RESIDENCE_ID,
        devices=mock_devices,
    )


@pytest.fixture
def mock_client(mock_devices: list[LevitonDevice]) -> MagicMock:
    """Mock LevitonClient answering every discovery stage."""
    devices_by_id = {device.id: device for device in mock_devices}

    client = MagicMock(spec=LevitonClient)
    client.login = AsyncMock(
        return_value={"token": TEST_TOKEN, "user_id": TEST_PERSON_ID}
    )
    client.get_person_residential_permissions = AsyncMock(
        return_value=[{"id": 1, "residentialAccountId": TEST_ACCOUNT_ID}]
    )
    client.get_residential_account = AsyncMock(
        return_value={"id": TEST_ACCOUNT_ID, "primaryResidenceId": TEST_RESIDENCE_ID}
    )
    client.get_residence_iot_switches = AsyncMock(return_value=mock_devices)
    client.get_iot_switch = AsyncMock(
        side_effect=lambda switch_id, token: devices_by_id[switch_id]
    )
    client.set_iot_switch = AsyncMock()
    return client


@pytest.fixture
def fake_host() -> FakeHost:
    """Return an in-memory host."""
    return FakeHost()


@pytest.fixture
def platform(
    mock_config: dict[str, str], mock_client: MagicMock, fake_host: FakeHost
) -> LevitonPlatform:
    """Create a platform wired to the mock client and fake host."""
    return LevitonPlatform(
        config=mock_config,
        client=mock_client,
        runtime=HostRuntime(host=fake_host),
    )


@pytest.fixture
def mock_setup_entry() -> Generator[AsyncMock]:
    """Override async_setup_entry."""
    with patch(
        "custom_components.leviton_decora_smart.async_setup_entry",
        return_value=True,
    ) as mock_setup:
        yield mock_setup


@pytest.fixture(autouse=True)
def auto_enable_custom_integrations(
    enable_custom_integrations: None,
) -> None:
    """Enable custom integrations in Home Assistant."""
