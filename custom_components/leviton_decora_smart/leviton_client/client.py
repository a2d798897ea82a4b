"""Leviton REST API client."""

from __future__ import annotations

import logging
from typing import Any

import aiohttp

from .const import (
    DEFAULT_BASE_URL,
    ENDPOINT_IOT_SWITCH,
    ENDPOINT_LOGIN,
    ENDPOINT_RESIDENCE_IOT_SWITCHES,
    ENDPOINT_RESIDENTIAL_ACCOUNT,
    ENDPOINT_RESIDENTIAL_PERMISSIONS,
)
from .exceptions import LevitonAuthenticationError, LevitonConnectionError
from .models import POWER_OFF, POWER_ON, LevitonDevice

_LOGGER = logging.getLogger(__name__)


class LevitonClient:
    """Leviton cloud REST API client.

    Every call is a single attempt: no caching, no retry.
    """

    def __init__(
        self,
        session: aiohttp.ClientSession,
        base_url: str = DEFAULT_BASE_URL,
        timeout: int = 10,
    ):
        """Initialize the Leviton client.

        Args:
            session: aiohttp client session
            base_url: Base URL of the Leviton API
            timeout: Request timeout in seconds

        """
        self.session = session
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout

    async def _request(
        self,
        method: str,
        path: str,
        token: str | None = None,
        payload: dict[str, Any] | None = None,
    ) -> Any:
        """Perform a request and return the decoded JSON body.

        Raises:
            LevitonAuthenticationError: On HTTP 401/403
            LevitonConnectionError: On any other failure

        """
        url = f"{self.base_url}{path}"
        headers = {"Authorization": token} if token else {}

        _LOGGER.debug("%s %s", method, url)

        try:
            async with self.session.request(
                method,
                url,
                headers=headers,
                json=payload,
                timeout=aiohttp.ClientTimeout(total=self.timeout),
            ) as response:
                if response.status in (401, 403):
                    raise LevitonAuthenticationError(
                        f"Authentication failed: HTTP {response.status}. "
                        "Check email and password."
                    )
                if response.status >= 400:
                    raise LevitonConnectionError(
                        f"{method} {path} failed: HTTP {response.status}"
                    )
                try:
                    return await response.json()
                except ValueError as err:
                    raise LevitonConnectionError(
                        f"{method} {path} returned invalid JSON: {err}"
                    ) from err
        except TimeoutError as err:
            raise LevitonConnectionError(f"{method} {path} timed out") from err
        except aiohttp.ClientError as err:
            raise LevitonConnectionError(f"{method} {path} error: {err}") from err

    async def login(self, email: str, password: str) -> dict[str, Any]:
        """Log in and return the session record.

        Returns:
            Dict with "token" (session token) and "user_id" (person id)

        """
        data = await self._request(
            "POST", ENDPOINT_LOGIN, payload={"email": email, "password": password}
        )
        try:
            session = {"token": data["id"], "user_id": str(data["userId"])}
        except (KeyError, TypeError) as err:
            raise LevitonAuthenticationError(
                f"Unexpected login response: missing {err}"
            ) from err
        _LOGGER.debug("Logged in as person %s", session["user_id"])
        return session

    async def get_person_residential_permissions(
        self, person_id: str, token: str
    ) -> list[dict[str, Any]]:
        """Return the residential permission records of a person."""
        path = ENDPOINT_RESIDENTIAL_PERMISSIONS.format(person_id=person_id)
        data = await self._request("GET", path, token=token)
        return _expect(data, list, path)

    async def get_residential_account(
        self, account_id: str, token: str
    ) -> dict[str, Any]:
        """Return a residential account record."""
        path = ENDPOINT_RESIDENTIAL_ACCOUNT.format(account_id=account_id)
        data = await self._request("GET", path, token=token)
        return _expect(data, dict, path)

    async def get_residence_iot_switches(
        self, residence_id: str, token: str
    ) -> list[LevitonDevice]:
        """Return all IoT switches of a residence."""
        path = ENDPOINT_RESIDENCE_IOT_SWITCHES.format(residence_id=residence_id)
        data = await self._request("GET", path, token=token)
        devices = [_parse_device(item, path) for item in _expect(data, list, path)]
        _LOGGER.debug(
            "Residence %s has %d switches", residence_id, len(devices)
        )
        return devices

    async def get_iot_switch(self, switch_id: str, token: str) -> LevitonDevice:
        """Return the current status of a switch."""
        path = ENDPOINT_IOT_SWITCH.format(switch_id=switch_id)
        data = await self._request("GET", path, token=token)
        return _parse_device(data, path)

    async def set_iot_switch(
        self,
        switch_id: str,
        token: str,
        power: bool | None = None,
        brightness: int | None = None,
    ) -> LevitonDevice:
        """Update power and/or brightness of a switch.

        Returns:
            The switch status reported after the update

        """
        payload: dict[str, Any] = {}
        if power is not None:
            payload["power"] = POWER_ON if power else POWER_OFF
        if brightness is not None:
            payload["brightness"] = brightness

        path = ENDPOINT_IOT_SWITCH.format(switch_id=switch_id)
        data = await self._request("PUT", path, token=token, payload=payload)
        return _parse_device(data, path)


def _expect(data: Any, kind: type, path: str) -> Any:
    """Return data if it has the expected JSON type."""
    if not isinstance(data, kind):
        raise LevitonConnectionError(
            f"Unexpected response from {path}: expected {kind.__name__}, "
            f"got {type(data).__name__}"
        )
    return data


def _parse_device(data: Any, path: str) -> LevitonDevice:
    """Parse a switch record, reporting malformed bodies as client errors."""
    try:
        return LevitonDevice.from_dict(data)
    except (KeyError, TypeError, ValueError) as err:
        raise LevitonConnectionError(
            f"Malformed switch record from {path}: {err!r}"
        ) from err
