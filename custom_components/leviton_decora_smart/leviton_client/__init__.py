"""Leviton Decora Smart REST Client Library."""

from .client import LevitonClient
from .discovery import DiscoveryResult, DiscoveryStage, discover_leviton_devices
from .exceptions import (
    LevitonAuthenticationError,
    LevitonClientError,
    LevitonConnectionError,
    LevitonDiscoveryError,
    LevitonNoResidenceError,
)
from .models import LevitonDevice

__all__ = [
    # Client
    "LevitonClient",
    "LevitonDevice",
    # Discovery
    "DiscoveryResult",
    "DiscoveryStage",
    "discover_leviton_devices",
    # Exceptions
    "LevitonAuthenticationError",
    "LevitonClientError",
    "LevitonConnectionError",
    "LevitonDiscoveryError",
    "LevitonNoResidenceError",
]
