"""Discovery functionality for Leviton residences.

Resolves the devices reachable with a set of credentials in four ordered
stages:

1. Login (session token and person id)
2. Residential permissions (first residential account id)
3. Residential account (primary residence id)
4. Residence IoT switches (device list)

A failing stage is reported as LevitonDiscoveryError tagged with the stage.
Authentication failures keep their own type so callers can tell bad
credentials apart from an unreachable API.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import StrEnum
from typing import Any

from .client import LevitonClient
from .exceptions import (
    LevitonAuthenticationError,
    LevitonClientError,
    LevitonDiscoveryError,
    LevitonNoResidenceError,
)
from .models import LevitonDevice

_LOGGER = logging.getLogger(__name__)


class DiscoveryStage(StrEnum):
    """Ordered stages of the discovery pipeline."""

    LOGIN = "login"
    PERMISSIONS = "permissions"
    ACCOUNT = "account"
    DEVICES = "devices"


@dataclass
class DiscoveryResult:
    """Complete discovery result for a Leviton account."""

    token: str  # Session token
    person_id: str
    account_id: str
    residence_id: str
    devices: list[LevitonDevice]

    def get_title(self, email: str) -> str:
        """Generate a suitable title for config entry."""
        return f"Leviton ({email})"


async def discover_leviton_devices(
    client: LevitonClient,
    email: str,
    password: str,
) -> DiscoveryResult:
    """Log in and list the switches of the primary residence.

    Args:
        client: Leviton REST client
        email: Account email
        password: Account password

    Returns:
        DiscoveryResult with the token and all discovered switches

    Raises:
        LevitonAuthenticationError: If the credentials or token are rejected
        LevitonDiscoveryError: If any stage fails for another reason

    """
    _LOGGER.debug("Starting Leviton discovery for %s", email)

    session = await _run_stage(
        DiscoveryStage.LOGIN, client.login(email, password)
    )
    token: str = session["token"]
    person_id: str = session["user_id"]

    permissions = await _run_stage(
        DiscoveryStage.PERMISSIONS,
        client.get_person_residential_permissions(person_id, token),
    )
    account_id = _first_residential_account(permissions)

    account = await _run_stage(
        DiscoveryStage.ACCOUNT, client.get_residential_account(account_id, token)
    )
    residence_id = account.get("primaryResidenceId")
    if residence_id is None:
        raise LevitonNoResidenceError(
            DiscoveryStage.ACCOUNT,
            f"Account {account_id} has no primary residence",
        )
    residence_id = str(residence_id)

    devices = await _run_stage(
        DiscoveryStage.DEVICES,
        client.get_residence_iot_switches(residence_id, token),
    )

    _LOGGER.info(
        "Discovery complete: residence %s with %d switches",
        residence_id,
        len(devices),
    )

    return DiscoveryResult(
        token=token,
        person_id=person_id,
        account_id=account_id,
        residence_id=residence_id,
        devices=devices,
    )


async def _run_stage(stage: DiscoveryStage, request: Any) -> Any:
    """Await one stage, tagging client failures with the stage."""
    try:
        return await request
    except LevitonAuthenticationError:
        _LOGGER.debug("Discovery stage %s rejected credentials", stage)
        raise
    except LevitonClientError as err:
        raise LevitonDiscoveryError(stage, str(err)) from err


def _first_residential_account(permissions: list[dict[str, Any]]) -> str:
    """Return the residential account id of the first permission record."""
    for permission in permissions:
        if not isinstance(permission, dict):
            continue
        account_id = permission.get("residentialAccountId")
        if account_id is not None:
            return str(account_id)
    raise LevitonNoResidenceError(
        DiscoveryStage.PERMISSIONS, "No residential permission found"
    )
