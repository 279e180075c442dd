"""
Static definitions of the metrics bridged from InfluxDB to MQTT.
"""

from dataclasses import dataclass
from enum import Enum

from ..const import DEFAULT_DISCOVERY_PREFIX, DEFAULT_MEASUREMENT
from .sensor import DeviceClass, StateClass


class Aggregation(Enum):
    """Flux aggregation applied to the points since local midnight."""
    SUM = "sum"
    MIN = "min"
    MAX = "max"


@dataclass(frozen=True)
class MetricDefinition:
    """
    One tracked metric.

    Topic templates carry a single ``%s`` placeholder for the sensor id.
    """

    key: str
    measurement: str
    field: str
    aggregation: Aggregation
    state_topic_template: str
    config_topic_template: str
    device_class: DeviceClass | str | None
    unit: str | None
    name: str
    state_class: StateClass | str | None = None

    def state_topic(self, sensor_id: str) -> str:
        """State topic rendered for a sensor id."""
        return render_topic(self.state_topic_template, sensor_id)

    def config_topic(self, sensor_id: str) -> str:
        """Discovery config topic rendered for a sensor id."""
        return render_topic(self.config_topic_template, sensor_id)

    def unique_id(self, sensor_id: str) -> str:
        """Home Assistant unique_id, stable across restarts."""
        return f"{sensor_id}-sensor-{self.key}"


def render_topic(template: str, sensor_id: str) -> str:
    """
    Substitute the sensor id into a topic template.

    Example:
        render_topic("homeassistant/sensor/%s/rain/state", "weather-import")
        -> "homeassistant/sensor/weather-import/rain/state"
    """
    return template % sensor_id


def metric(
    key: str,
    field: str,
    aggregation: Aggregation,
    name: str,
    device_class: DeviceClass | str | None,
    unit: str | None,
    state_class: StateClass | str | None = StateClass.MEASUREMENT,
    measurement: str = DEFAULT_MEASUREMENT,
    discovery_prefix: str = DEFAULT_DISCOVERY_PREFIX,
) -> MetricDefinition:
    """
    Factory function to create a metric with the standard topic layout.

    Topics:
        {prefix}/sensor/{sensor_id}/{key}/state
        {prefix}/sensor/{sensor_id}/{key}/config
    """
    # A literal % in the prefix or key must not act as a format directive
    prefix = discovery_prefix.replace("%", "%%")
    escaped_key = key.replace("%", "%%")

    return MetricDefinition(
        key=key,
        measurement=measurement,
        field=field,
        aggregation=aggregation,
        state_topic_template=f"{prefix}/sensor/%s/{escaped_key}/state",
        config_topic_template=f"{prefix}/sensor/%s/{escaped_key}/config",
        device_class=device_class,
        unit=unit,
        name=name,
        state_class=state_class,
    )


def default_metrics(
    measurement: str = DEFAULT_MEASUREMENT,
    discovery_prefix: str = DEFAULT_DISCOVERY_PREFIX,
) -> tuple[MetricDefinition, ...]:
    """
    The weather station metric set: daily rain total plus min/max
    of wind, gust, temperature, humidity and pressure.
    """
    common = {"measurement": measurement, "discovery_prefix": discovery_prefix}

    return (
        metric("rain", "rain", Aggregation.SUM, "Rainfall Sensor",
               DeviceClass.PRECIPITATION, "mm", StateClass.TOTAL_INCREASING, **common),
        metric("wind-max", "wind", Aggregation.MAX, "Max Wind Speed",
               DeviceClass.WIND_SPEED, "km/h", **common),
        metric("wind-gust-max", "wind-gust", Aggregation.MAX, "Max Wind Gust Speed",
               DeviceClass.WIND_SPEED, "km/h", **common),
        metric("temperature-min", "temperature", Aggregation.MIN, "Minimum Temperature",
               DeviceClass.TEMPERATURE, "°C", **common),
        metric("temperature-max", "temperature", Aggregation.MAX, "Maximum Temperature",
               DeviceClass.TEMPERATURE, "°C", **common),
        metric("humidity-min", "humidity", Aggregation.MIN, "Minimum Humidity",
               DeviceClass.HUMIDITY, "%", **common),
        metric("humidity-max", "humidity", Aggregation.MAX, "Maximum Humidity",
               DeviceClass.HUMIDITY, "%", **common),
        metric("pressure-min", "pressure", Aggregation.MIN, "Minimum Pressure",
               DeviceClass.PRESSURE, "hPa", **common),
        metric("pressure-max", "pressure", Aggregation.MAX, "Maximum Pressure",
               DeviceClass.PRESSURE, "hPa", **common),
    )
