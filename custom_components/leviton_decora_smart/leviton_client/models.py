"""Data models."""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any

POWER_ON = "ON"
POWER_OFF = "OFF"


def _as_int(value: Any, default: int) -> int:
    """Return value as int, or default when the API omits it."""
    return default if value is None else int(value)


@dataclass(frozen=True)
class LevitonDevice:
    """Snapshot of an IoT switch as reported by the Leviton API."""

    id: str
    serial: str
    name: str
    manufacturer: str
    model: str | None
    version: str | None
    power: str
    brightness: int
    min_level: int
    max_level: int

    @property
    def is_on(self) -> bool:
        """Return True if the switch reports power ON."""
        return self.power == POWER_ON

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> LevitonDevice:
        """Create a device from an API response body."""
        return cls(
            id=str(data["id"]),
            serial=str(data.get("serial") or data["id"]),
            name=data.get("name") or str(data["id"]),
            manufacturer=data.get("manufacturer") or "Leviton",
            model=data.get("model"),
            version=data.get("version"),
            power=data.get("power") or POWER_OFF,
            brightness=_as_int(data.get("brightness"), 0),
            min_level=_as_int(data.get("minLevel"), 1),
            max_level=_as_int(data.get("maxLevel"), 100),
        )

    def as_dict(self) -> dict[str, Any]:
        """Return a JSON-serializable representation."""
        return asdict(self)

    @classmethod
    def from_stored(cls, data: dict[str, Any]) -> LevitonDevice:
        """Rebuild a device from as_dict() output."""
        return cls(**data)
