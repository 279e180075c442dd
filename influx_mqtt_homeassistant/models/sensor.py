"""
Home Assistant sensor model for MQTT Discovery.
"""

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Any

from ..const import PAYLOAD_OFFLINE, PAYLOAD_ONLINE, VALUE_TEMPLATE
from .device import Device

if TYPE_CHECKING:
    from .metric import MetricDefinition


class DeviceClass(Enum):
    """Home Assistant sensor device classes used by weather metrics."""
    TEMPERATURE = "temperature"
    HUMIDITY = "humidity"
    PRESSURE = "pressure"
    PRECIPITATION = "precipitation"
    WIND_SPEED = "wind_speed"


class StateClass(Enum):
    """Home Assistant sensor state classes."""
    MEASUREMENT = "measurement"
    TOTAL_INCREASING = "total_increasing"


def _enum_value(value: Enum | str | None) -> str | None:
    if isinstance(value, Enum):
        return value.value
    return value


@dataclass(frozen=True)
class Sensor:
    """
    A metric definition bound to a sensor id and device.

    Renders the discovery payload Home Assistant uses to create the
    entity. The payload is a pure function of the fields, so repeated
    renders are identical.
    """

    metric: "MetricDefinition"
    sensor_id: str
    availability_topic: str
    device: Device | None = None
    value_template: str = VALUE_TEMPLATE
    payload_available: str = PAYLOAD_ONLINE
    payload_not_available: str = PAYLOAD_OFFLINE

    @property
    def unique_id(self) -> str:
        return self.metric.unique_id(self.sensor_id)

    @property
    def state_topic(self) -> str:
        return self.metric.state_topic(self.sensor_id)

    @property
    def discovery_topic(self) -> str:
        return self.metric.config_topic(self.sensor_id)

    def to_discovery_dict(self) -> dict[str, Any]:
        """
        Convert to dictionary for Home Assistant MQTT Discovery.

        Returns:
            Dictionary for discovery payload
        """
        result: dict[str, Any] = {}

        device_class = _enum_value(self.metric.device_class)
        if device_class:
            result["device_class"] = device_class

        result["name"] = self.metric.name
        result["state_topic"] = self.state_topic

        state_class = _enum_value(self.metric.state_class)
        if state_class:
            result["state_class"] = state_class

        if self.metric.unit is not None:
            result["unit_of_measurement"] = self.metric.unit

        result["value_template"] = self.value_template
        result["unique_id"] = self.unique_id
        result["availability_topic"] = self.availability_topic
        result["payload_available"] = self.payload_available
        result["payload_not_available"] = self.payload_not_available

        if self.device:
            result["device"] = self.device.to_discovery_dict()

        return result


@dataclass(frozen=True)
class SensorReading:
    """A single value queried for a metric during one polling cycle."""

    metric: "MetricDefinition"
    topic: str
    value: float
    error: str | None = None

    @property
    def failed(self) -> bool:
        """True when the value is a stand-in for a failed query."""
        return self.error is not None

    def format_state(self) -> str:
        """
        Format the value for MQTT publishing.

        Returns:
            Fixed two-decimal string, e.g. 3.14159 -> "3.14"
        """
        return format_state(self.value)


def format_state(value: float) -> str:
    """Format a numeric state with two decimal places."""
    return f"{float(value):.2f}"
