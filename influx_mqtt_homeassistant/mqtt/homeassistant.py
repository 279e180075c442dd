"""
Home Assistant MQTT Discovery integration.

Handles:
- Discovery message generation
- Entity registration (retained config topics)
- Availability and state publishing
"""

import json
from collections.abc import Iterable, Sequence
from typing import Any

from ..config.schema import HomeAssistantConfig
from ..const import PAYLOAD_ONLINE
from ..logging import get_logger
from ..models.device import Device, create_device
from ..models.metric import MetricDefinition
from ..models.sensor import Sensor, SensorReading
from .client import MQTTClient


logger = get_logger("homeassistant")


class HomeAssistantDiscovery:
    """
    Home Assistant MQTT Discovery handler.

    Publishes discovery messages to register one sensor per metric with
    Home Assistant, and the availability/state messages those sensors
    read from.
    """

    def __init__(
        self,
        mqtt_client: MQTTClient,
        config: HomeAssistantConfig,
        metrics: Sequence[MetricDefinition],
    ):
        """
        Initialize Home Assistant Discovery.

        Args:
            mqtt_client: MQTT client for publishing
            config: Home Assistant configuration
            metrics: Metric definitions to expose as sensors
        """
        self.mqtt = mqtt_client
        self.config = config
        self.metrics = tuple(metrics)
        self.device: Device = create_device(config.sensor_id, config.device)

    @property
    def availability_topic(self) -> str:
        return self.config.availability_topic

    @property
    def sensors(self) -> list[Sensor]:
        """Sensors for every metric, bound to the configured sensor id."""
        return [
            Sensor(
                metric=metric,
                sensor_id=self.config.sensor_id,
                availability_topic=self.availability_topic,
                device=self.device,
            )
            for metric in self.metrics
        ]

    async def publish_discovery(self) -> int:
        """
        Publish the retained discovery config of every sensor.

        A payload that fails to serialize is logged and skipped; the
        remaining sensors are still registered.

        Returns:
            Number of configs published
        """
        if not self.config.discovery:
            logger.debug("Discovery disabled, not publishing configs")
            return 0

        logger.info("Publishing Home Assistant discovery config")
        published = 0

        for sensor in self.sensors:
            try:
                topic, payload = build_sensor_discovery(sensor)
            except (TypeError, ValueError) as e:
                logger.error(f"Error serializing discovery config for {sensor.metric.name}: {e}")
                continue

            await self.mqtt.publish(topic, payload, retain=True)
            published += 1
            logger.debug(f"Discovery config sent for {sensor.metric.name} ({sensor.unique_id})")

        logger.info(f"Published {published}/{len(self.metrics)} discovery configs")
        return published

    async def publish_states(self, readings: Iterable[SensorReading]) -> None:
        """
        Publish one polling cycle.

        The availability heartbeat goes out first (retained), then each
        reading to its state topic (not retained).

        Args:
            readings: Readings in publish order
        """
        await self.mqtt.publish(self.availability_topic, PAYLOAD_ONLINE, retain=True)

        for reading in readings:
            payload = reading.format_state()
            await self.mqtt.publish(reading.topic, payload, retain=False)
            logger.info(f"Published to {reading.topic}: {payload}")


def build_sensor_discovery(sensor: Sensor) -> tuple[str, str]:
    """
    Build discovery topic and serialized payload for a sensor.

    Args:
        sensor: Sensor to build discovery for

    Returns:
        Tuple of (topic, JSON payload)

    Raises:
        TypeError: If the payload holds a value JSON cannot encode
    """
    payload: dict[str, Any] = sensor.to_discovery_dict()
    return sensor.discovery_topic, json.dumps(payload, ensure_ascii=False)
