"""
Pytest configuration and fixtures.
"""

from dataclasses import dataclass
from typing import Any

import pytest

from influx_mqtt_homeassistant.config.schema import Config, HomeAssistantConfig
from influx_mqtt_homeassistant.models.metric import Aggregation


@dataclass
class Published:
    """One captured MQTT message."""
    topic: str
    payload: str
    retain: bool


class CapturingMQTT:
    """Stands in for MQTTClient, recording every publish in order."""

    def __init__(self) -> None:
        self.messages: list[Published] = []
        self.connected = False
        self.disconnected = False

    async def connect(self) -> None:
        self.connected = True

    async def disconnect(self) -> None:
        self.disconnected = True

    async def publish(self, topic: str, payload: str, qos: int | None = None, retain: bool = False) -> None:
        self.messages.append(Published(topic, payload, retain))

    def topics(self) -> list[str]:
        return [m.topic for m in self.messages]


class StubQueryClient:
    """Returns canned values keyed by (field, aggregation)."""

    def __init__(self, values: dict[tuple[str, Aggregation], Any]) -> None:
        self.values = values
        self.calls: list[tuple[str, str, Aggregation]] = []

    async def query(self, measurement: str, field: str, aggregation: Aggregation) -> float:
        self.calls.append((measurement, field, aggregation))
        value = self.values.get((field, aggregation), 0.0)
        if isinstance(value, BaseException):
            raise value
        return value


class FakeSleep:
    """Records requested delays instead of waiting."""

    def __init__(self) -> None:
        self.delays: list[float] = []

    async def __call__(self, delay: float) -> None:
        self.delays.append(delay)


@pytest.fixture
def mqtt() -> CapturingMQTT:
    return CapturingMQTT()


@pytest.fixture
def fake_sleep() -> FakeSleep:
    return FakeSleep()


@pytest.fixture
def ha_config() -> HomeAssistantConfig:
    return HomeAssistantConfig(sensor_id="weather-import")


@pytest.fixture
def config(ha_config: HomeAssistantConfig) -> Config:
    return Config(homeassistant=ha_config)
