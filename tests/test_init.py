"""Tests for Leviton Decora Smart integration setup."""

from __future__ import annotations

from collections.abc import Generator
from datetime import timedelta
from typing import Any
from unittest.mock import MagicMock, patch

import pytest
from homeassistant.config_entries import ConfigEntryState
from homeassistant.const import STATE_OFF, STATE_ON
from homeassistant.core import HomeAssistant
from homeassistant.helpers import entity_registry as er
from homeassistant.util import dt as dt_util
from pytest_homeassistant_custom_component.common import (
    MockConfigEntry,
    async_fire_time_changed,
)

from custom_components.leviton_decora_smart.accessory import generate_uuid
from custom_components.leviton_decora_smart.const import (
    CONF_EMAIL,
    CONTEXT_DEVICE,
    CONTEXT_TOKEN,
    DOMAIN,
    SERVICE_REMOVE_ACCESSORIES,
    STORAGE_KEY,
    STORAGE_VERSION,
)
from custom_components.leviton_decora_smart.leviton_client.exceptions import (
    LevitonAuthenticationError,
    LevitonConnectionError,
)

from .conftest import TEST_KITCHEN_SERIAL, TEST_TOKEN, make_device

STORE_KEY = f"{STORAGE_KEY}.test_entry"


@pytest.fixture
def patch_client(mock_client: MagicMock) -> Generator[MagicMock]:
    """Make the integration use the mock client."""
    with patch(
        "custom_components.leviton_decora_smart.LevitonClient",
        return_value=mock_client,
    ):
        yield mock_client


async def _flush_store(hass: HomeAssistant) -> None:
    async_fire_time_changed(hass, dt_util.utcnow() + timedelta(seconds=10))
    await hass.async_block_till_done()


def _store_kitchen(hass_storage: dict[str, Any]) -> None:
    kitchen = make_device()
    hass_storage[STORE_KEY] = {
        "version": STORAGE_VERSION,
        "key": STORE_KEY,
        "data": {
            "accessories": [
                {
                    "uuid": generate_uuid(kitchen.serial),
                    "display_name": kitchen.name,
                    CONTEXT_DEVICE: kitchen.as_dict(),
                    CONTEXT_TOKEN: TEST_TOKEN,
                }
            ]
        },
    }


class TestSetupEntry:
    """Tests for async_setup_entry."""

    async def test_setup_creates_lights(
        self,
        hass: HomeAssistant,
        mock_config_entry: MockConfigEntry,
        patch_client: MagicMock,
    ) -> None:
        """Test every discovered switch becomes a light."""
        mock_config_entry.add_to_hass(hass)

        assert await hass.config_entries.async_setup(mock_config_entry.entry_id)
        await hass.async_block_till_done()

        assert mock_config_entry.state is ConfigEntryState.LOADED
        kitchen = hass.states.get("light.kitchen")
        assert kitchen is not None
        assert kitchen.state == STATE_ON
        porch = hass.states.get("light.porch")
        assert porch is not None
        assert porch.state == STATE_OFF

        entity_registry = er.async_get(hass)
        assert entity_registry.async_get_entity_id(
            "light", DOMAIN, generate_uuid(TEST_KITCHEN_SERIAL)
        ) == "light.kitchen"

    async def test_setup_persists_accessories(
        self,
        hass: HomeAssistant,
        hass_storage: dict[str, Any],
        mock_config_entry: MockConfigEntry,
        patch_client: MagicMock,
    ) -> None:
        """Test registered accessories are written to storage."""
        mock_config_entry.add_to_hass(hass)
        await hass.config_entries.async_setup(mock_config_entry.entry_id)
        await _flush_store(hass)

        stored = hass_storage[STORE_KEY]["data"]["accessories"]
        assert sorted(item["display_name"] for item in stored) == ["Kitchen", "Porch"]

    async def test_restart_does_not_duplicate(
        self,
        hass: HomeAssistant,
        hass_storage: dict[str, Any],
        mock_config_entry: MockConfigEntry,
        patch_client: MagicMock,
    ) -> None:
        """Test restored accessories are reused on the next start."""
        _store_kitchen(hass_storage)
        mock_config_entry.add_to_hass(hass)

        assert await hass.config_entries.async_setup(mock_config_entry.entry_id)
        await _flush_store(hass)

        platform = mock_config_entry.runtime_data.platform
        assert len(platform.accessories) == 2
        stored = hass_storage[STORE_KEY]["data"]["accessories"]
        assert len(stored) == 2
        assert len(hass.states.async_entity_ids("light")) == 2

    async def test_setup_auth_failure(
        self,
        hass: HomeAssistant,
        mock_config_entry: MockConfigEntry,
        patch_client: MagicMock,
    ) -> None:
        """Test rejected credentials start reauthentication."""
        patch_client.login.side_effect = LevitonAuthenticationError("HTTP 401")
        mock_config_entry.add_to_hass(hass)

        assert not await hass.config_entries.async_setup(mock_config_entry.entry_id)
        await hass.async_block_till_done()

        assert mock_config_entry.state is ConfigEntryState.SETUP_ERROR
        flows = hass.config_entries.flow.async_progress_by_handler(DOMAIN)
        assert [flow["context"]["source"] for flow in flows] == ["reauth"]

    async def test_setup_discovery_failure_retries(
        self,
        hass: HomeAssistant,
        mock_config_entry: MockConfigEntry,
        patch_client: MagicMock,
    ) -> None:
        """Test an unreachable API schedules a retry."""
        patch_client.get_residential_account.side_effect = LevitonConnectionError(
            "HTTP 500"
        )
        mock_config_entry.add_to_hass(hass)

        assert not await hass.config_entries.async_setup(mock_config_entry.entry_id)

        assert mock_config_entry.state is ConfigEntryState.SETUP_RETRY
        assert hass.states.async_entity_ids("light") == []

    async def test_discovery_failure_keeps_restored_accessories(
        self,
        hass: HomeAssistant,
        hass_storage: dict[str, Any],
        mock_config_entry: MockConfigEntry,
        patch_client: MagicMock,
    ) -> None:
        """Test stored accessories stay usable while the cloud is unreachable."""
        _store_kitchen(hass_storage)
        patch_client.login.side_effect = LevitonConnectionError("HTTP 503")
        mock_config_entry.add_to_hass(hass)

        assert await hass.config_entries.async_setup(mock_config_entry.entry_id)
        await hass.async_block_till_done()

        assert mock_config_entry.state is ConfigEntryState.LOADED
        assert hass.states.async_entity_ids("light") == ["light.kitchen"]
        assert len(mock_config_entry.runtime_data.platform.accessories) == 1

    async def test_setup_missing_credentials(
        self, hass: HomeAssistant, patch_client: MagicMock
    ) -> None:
        """Test an entry without a password stays inert."""
        entry = MockConfigEntry(domain=DOMAIN, data={CONF_EMAIL: "user@example.com"})
        entry.add_to_hass(hass)

        assert not await hass.config_entries.async_setup(entry.entry_id)

        assert entry.state is ConfigEntryState.SETUP_ERROR
        patch_client.login.assert_not_called()


class TestUnloadEntry:
    """Tests for unload and removal."""

    async def test_unload(
        self,
        hass: HomeAssistant,
        mock_config_entry: MockConfigEntry,
        patch_client: MagicMock,
    ) -> None:
        """Test unloading a loaded entry."""
        mock_config_entry.add_to_hass(hass)
        await hass.config_entries.async_setup(mock_config_entry.entry_id)
        await hass.async_block_till_done()

        assert await hass.config_entries.async_unload(mock_config_entry.entry_id)
        await hass.async_block_till_done()

        assert mock_config_entry.state is ConfigEntryState.NOT_LOADED

    async def test_remove_deletes_storage(
        self,
        hass: HomeAssistant,
        hass_storage: dict[str, Any],
        mock_config_entry: MockConfigEntry,
        patch_client: MagicMock,
    ) -> None:
        """Test removing the entry deletes persisted accessories."""
        mock_config_entry.add_to_hass(hass)
        await hass.config_entries.async_setup(mock_config_entry.entry_id)
        await _flush_store(hass)
        assert STORE_KEY in hass_storage

        await hass.config_entries.async_remove(mock_config_entry.entry_id)
        await hass.async_block_till_done()

        assert STORE_KEY not in hass_storage


class TestRemoveAccessoriesService:
    """Tests for the remove_accessories service."""

    async def test_service_removes_everything(
        self,
        hass: HomeAssistant,
        hass_storage: dict[str, Any],
        mock_config_entry: MockConfigEntry,
        patch_client: MagicMock,
    ) -> None:
        """Test the service unregisters all accessories of loaded entries."""
        mock_config_entry.add_to_hass(hass)
        await hass.config_entries.async_setup(mock_config_entry.entry_id)
        await hass.async_block_till_done()

        await hass.services.async_call(DOMAIN, SERVICE_REMOVE_ACCESSORIES, blocking=True)
        await _flush_store(hass)

        assert mock_config_entry.runtime_data.platform.accessories == []
        entity_registry = er.async_get(hass)
        assert (
            er.async_entries_for_config_entry(
                entity_registry, mock_config_entry.entry_id
            )
            == []
        )
        assert hass_storage[STORE_KEY]["data"]["accessories"] == []
