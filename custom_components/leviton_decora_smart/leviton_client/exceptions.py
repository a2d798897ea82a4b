"""Exceptions for leviton-client."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .discovery import DiscoveryStage


class LevitonClientError(Exception):
    """Base exception for Leviton client."""


class LevitonConnectionError(LevitonClientError):
    """Connection error."""


class LevitonAuthenticationError(LevitonClientError):
    """Authentication error."""


class LevitonDiscoveryError(LevitonClientError):
    """Discovery failed at a specific stage."""

    def __init__(self, stage: DiscoveryStage, message: str) -> None:
        """Initialize with the failing discovery stage."""
        super().__init__(f"{stage.value}: {message}")
        self.stage = stage


class LevitonNoResidenceError(LevitonDiscoveryError):
    """Account has no residential permission to discover devices from."""
