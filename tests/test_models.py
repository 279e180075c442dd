"""
Tests for metric, sensor and device models.
"""

import dataclasses

import pytest

from influx_mqtt_homeassistant.models.device import create_device
from influx_mqtt_homeassistant.models.metric import Aggregation, default_metrics, render_topic
from influx_mqtt_homeassistant.models.sensor import Sensor, SensorReading, format_state


def test_render_topic() -> None:
    topic = render_topic("homeassistant/sensor/%s/rain/state", "weather-import")

    assert topic == "homeassistant/sensor/weather-import/rain/state"


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        (3.14159, "3.14"),
        (5.0, "5.00"),
        (0, "0.00"),
        (-2.345, "-2.35"),
        (1013.256, "1013.26"),
    ],
)
def test_format_state(value: float, expected: str) -> None:
    assert format_state(value) == expected


def test_default_metrics_layout() -> None:
    metrics = default_metrics()
    keys = [m.key for m in metrics]

    assert keys == [
        "rain",
        "wind-max",
        "wind-gust-max",
        "temperature-min",
        "temperature-max",
        "humidity-min",
        "humidity-max",
        "pressure-min",
        "pressure-max",
    ]
    assert all(m.measurement == "sensor-data" for m in metrics)

    rain = metrics[0]
    assert (rain.field, rain.aggregation) == ("rain", Aggregation.SUM)
    assert rain.state_topic("weather-import") == "homeassistant/sensor/weather-import/rain/state"
    assert rain.config_topic("weather-import") == "homeassistant/sensor/weather-import/rain/config"
    assert rain.unique_id("weather-import") == "weather-import-sensor-rain"


def test_default_metric_units() -> None:
    units = {m.key: m.unit for m in default_metrics()}

    assert units["rain"] == "mm"
    assert units["wind-max"] == units["wind-gust-max"] == "km/h"
    # Home Assistant's own temperature unit string, not U+2103
    assert units["temperature-min"] == units["temperature-max"] == "\u00b0C"
    assert units["humidity-max"] == "%"
    assert units["pressure-min"] == "hPa"


def test_default_metrics_custom_measurement_and_prefix() -> None:
    metrics = default_metrics(measurement="station", discovery_prefix="ha")

    assert {m.measurement for m in metrics} == {"station"}
    assert metrics[1].state_topic("x") == "ha/sensor/x/wind-max/state"


@pytest.mark.parametrize("prefix", ["ha%", "ha%s", "%d/ha"])
def test_percent_in_prefix_is_literal(prefix: str) -> None:
    rain = default_metrics(discovery_prefix=prefix)[0]

    assert rain.state_topic("x") == f"{prefix}/sensor/x/rain/state"
    assert rain.config_topic("x") == f"{prefix}/sensor/x/rain/config"


def test_sensor_discovery_dict() -> None:
    rain = default_metrics()[0]
    device = create_device("weather-import")
    sensor = Sensor(
        metric=rain,
        sensor_id="weather-import",
        availability_topic="homeassistant/sensor/weather-import/availability",
        device=device,
    )

    payload = sensor.to_discovery_dict()

    assert list(payload) == [
        "device_class",
        "name",
        "state_topic",
        "state_class",
        "unit_of_measurement",
        "value_template",
        "unique_id",
        "availability_topic",
        "payload_available",
        "payload_not_available",
        "device",
    ]
    assert payload["device_class"] == "precipitation"
    assert payload["name"] == "Rainfall Sensor"
    assert payload["state_topic"] == "homeassistant/sensor/weather-import/rain/state"
    assert payload["state_class"] == "total_increasing"
    assert payload["unit_of_measurement"] == "mm"
    assert payload["value_template"] == "{{ value | float }}"
    assert payload["unique_id"] == "weather-import-sensor-rain"
    assert payload["payload_available"] == "online"
    assert payload["payload_not_available"] == "offline"
    assert payload["device"]["identifiers"] == ["weather-import"]
    assert payload["device"]["name"] == "Influx Import"
    assert payload["device"]["suggested_area"] == "Garage"


def test_sensor_without_device_or_state_class() -> None:
    metric = default_metrics()[0]
    metric = dataclasses.replace(metric, state_class=None)
    sensor = Sensor(metric=metric, sensor_id="s", availability_topic="a")

    payload = sensor.to_discovery_dict()

    assert "state_class" not in payload
    assert "device" not in payload


def test_sensor_reading() -> None:
    rain = default_metrics()[0]
    reading = SensorReading(metric=rain, topic="t", value=3.14159)
    failed = SensorReading(metric=rain, topic="t", value=0.0, error="down")

    assert reading.format_state() == "3.14"
    assert not reading.failed
    assert failed.failed
