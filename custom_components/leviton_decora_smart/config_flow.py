"""Config flow for Leviton Decora Smart integration."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

import voluptuous as vol
from homeassistant import config_entries
from homeassistant.config_entries import ConfigFlowResult
from homeassistant.core import HomeAssistant
from homeassistant.helpers.aiohttp_client import async_get_clientsession

from .const import CONF_EMAIL, CONF_PASSWORD, DOMAIN
from .leviton_client.client import LevitonClient
from .leviton_client.discovery import DiscoveryResult, discover_leviton_devices
from .leviton_client.exceptions import (
    LevitonAuthenticationError,
    LevitonClientError,
    LevitonConnectionError,
    LevitonNoResidenceError,
)

_LOGGER = logging.getLogger(__name__)

# Error messages for user feedback
ERROR_CANNOT_CONNECT = "cannot_connect"
ERROR_INVALID_AUTH = "invalid_auth"
ERROR_NO_RESIDENCE = "no_residence"
ERROR_UNKNOWN = "unknown"

STEP_USER_DATA_SCHEMA = vol.Schema(
    {
        vol.Required(CONF_EMAIL): str,
        vol.Required(CONF_PASSWORD): str,
    }
)


async def validate_credentials(
    hass: HomeAssistant, email: str, password: str
) -> DiscoveryResult:
    """Validate credentials by running a full discovery.

    Raises:
        LevitonAuthenticationError: If the credentials are rejected
        LevitonDiscoveryError: If a discovery stage fails

    """
    client = LevitonClient(session=async_get_clientsession(hass))
    result = await discover_leviton_devices(client, email, password)
    _LOGGER.info(
        "Credentials valid: residence %s with %d switches",
        result.residence_id,
        len(result.devices),
    )
    return result


def _error_for(err: Exception) -> str:
    """Map a validation failure to a form error key."""
    if isinstance(err, LevitonAuthenticationError):
        return ERROR_INVALID_AUTH
    if isinstance(err, LevitonNoResidenceError):
        return ERROR_NO_RESIDENCE
    # Discovery wraps transport failures; the cause tells them apart
    if isinstance(err, LevitonConnectionError) or isinstance(
        err.__cause__, LevitonConnectionError
    ):
        return ERROR_CANNOT_CONNECT
    return ERROR_UNKNOWN


class LevitonConfigFlow(config_entries.ConfigFlow, domain=DOMAIN):  # type: ignore  # noqa: PGH003
    """Handle a config flow for Leviton Decora Smart."""

    VERSION = 1

    async def _async_validate(
        self, user_input: dict[str, Any], errors: dict[str, str]
    ) -> DiscoveryResult | None:
        """Run validation, filling errors on failure."""
        try:
            return await validate_credentials(
                self.hass, user_input[CONF_EMAIL], user_input[CONF_PASSWORD]
            )
        except LevitonClientError as err:
            _LOGGER.error("Validation failed: %s", err)
            errors["base"] = _error_for(err)
        except Exception:  # pylint: disable=broad-except
            _LOGGER.exception("Unexpected exception in config flow")
            errors["base"] = ERROR_UNKNOWN
        return None

    async def async_step_user(
        self, user_input: dict[str, Any] | None = None
    ) -> ConfigFlowResult:
        """Handle the initial user step."""
        errors: dict[str, str] = {}

        if user_input is not None:
            email = user_input[CONF_EMAIL].strip()
            user_input = {**user_input, CONF_EMAIL: email}
            _LOGGER.debug("User input: email=%s", email)

            await self.async_set_unique_id(email.lower())
            self._abort_if_unique_id_configured()

            result = await self._async_validate(user_input, errors)
            if result is not None:
                return self.async_create_entry(
                    title=result.get_title(email),
                    data={CONF_EMAIL: email, CONF_PASSWORD: user_input[CONF_PASSWORD]},
                )

        return self.async_show_form(
            step_id="user",
            data_schema=STEP_USER_DATA_SCHEMA,
            errors=errors,
        )

    async def async_step_reauth(
        self, entry_data: Mapping[str, Any]
    ) -> ConfigFlowResult:
        """Handle re-authentication after the API rejected the credentials."""
        return await self.async_step_reauth_confirm()

    async def async_step_reauth_confirm(
        self, user_input: dict[str, Any] | None = None
    ) -> ConfigFlowResult:
        """Ask for a new password."""
        entry = self._get_reauth_entry()
        errors: dict[str, str] = {}

        if user_input is not None:
            data = {**entry.data, CONF_PASSWORD: user_input[CONF_PASSWORD]}
            if await self._async_validate(data, errors) is not None:
                return self.async_update_reload_and_abort(entry, data=data)

        return self.async_show_form(
            step_id="reauth_confirm",
            data_schema=vol.Schema({vol.Required(CONF_PASSWORD): str}),
            errors=errors,
            description_placeholders={"email": entry.data.get(CONF_EMAIL, "")},
        )

    async def async_step_reconfigure(
        self, user_input: dict[str, Any] | None = None
    ) -> ConfigFlowResult:
        """Handle reconfiguration of the integration."""
        entry = self._get_reconfigure_entry()
        errors: dict[str, str] = {}

        if user_input is not None:
            email = user_input[CONF_EMAIL].strip()
            data = {CONF_EMAIL: email, CONF_PASSWORD: user_input[CONF_PASSWORD]}
            _LOGGER.debug("Reconfigure: email=%s", email)

            await self.async_set_unique_id(email.lower())
            self._abort_if_unique_id_mismatch(reason="wrong_account")

            if await self._async_validate(data, errors) is not None:
                return self.async_update_reload_and_abort(entry, data=data)

        return self.async_show_form(
            step_id="reconfigure",
            data_schema=vol.Schema(
                {
                    vol.Required(CONF_EMAIL, default=entry.data.get(CONF_EMAIL)): str,
                    vol.Required(CONF_PASSWORD): str,
                }
            ),
            errors=errors,
        )
