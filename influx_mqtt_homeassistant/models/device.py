"""
Home Assistant device model for MQTT Discovery.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from ..config.schema import DeviceConfig


@dataclass(frozen=True)
class Device:
    """
    Represents a Home Assistant device for MQTT Discovery.

    Devices group related sensors together in the HA UI. Every metric
    published by this bridge hangs off the same device.
    """

    # Required: at least one identifier
    identifiers: tuple[str, ...] = field(default_factory=tuple)

    # Device information
    name: str | None = None
    manufacturer: str | None = None
    model: str | None = None
    sw_version: str | None = None

    # Optional
    suggested_area: str | None = None

    def to_discovery_dict(self) -> dict[str, Any]:
        """
        Convert to dictionary for Home Assistant MQTT Discovery.

        Returns:
            Dictionary suitable for inclusion in discovery payload
        """
        result: dict[str, Any] = {}

        if self.identifiers:
            result["identifiers"] = list(self.identifiers)

        if self.name:
            result["name"] = self.name

        if self.manufacturer:
            result["manufacturer"] = self.manufacturer

        if self.model:
            result["model"] = self.model

        if self.sw_version:
            result["sw_version"] = self.sw_version

        if self.suggested_area:
            result["suggested_area"] = self.suggested_area

        return result


def create_device(sensor_id: str, config: DeviceConfig | None = None) -> Device:
    """
    Factory function to create the bridge device.

    Args:
        sensor_id: Logical sensor id, used as the device identifier
        config: Device metadata (defaults when None)

    Returns:
        Configured Device instance
    """
    if config is None:
        config = DeviceConfig()

    return Device(
        identifiers=(sensor_id,),
        name=config.name,
        manufacturer=config.manufacturer,
        model=config.model,
        sw_version=config.sw_version,
        suggested_area=config.suggested_area,
    )
