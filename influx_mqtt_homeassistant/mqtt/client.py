"""
MQTT client wrapper using aiomqtt.

Features:
- Bounded connection retries at startup
- Last Will and Testament (LWT) for availability
- Reconnection when a publish hits a dropped connection
- Publishes awaited until the broker acknowledges them
"""

import asyncio
import ssl
import uuid
from collections.abc import Callable

import aiomqtt

from ..config.schema import MQTTConfig
from ..const import PAYLOAD_OFFLINE, PAYLOAD_ONLINE
from ..logging import get_logger
from ..utils.retry import RetryError, RetryPolicy


logger = get_logger("mqtt.client")

ClientFactory = Callable[[aiomqtt.Will], aiomqtt.Client]


class MQTTConnectError(Exception):
    """Raised when the broker stays unreachable after every attempt."""

    pass


class MQTTClient:
    """
    Async MQTT client wrapper with reconnection support.

    One instance is shared by the discovery and polling tasks. Each
    publish is awaited individually, so callers never batch.
    """

    def __init__(
        self,
        config: MQTTConfig,
        availability_topic: str,
        retry: RetryPolicy | None = None,
        client_factory: ClientFactory | None = None,
    ):
        """
        Initialize MQTT client.

        Args:
            config: MQTT configuration
            availability_topic: Topic for availability messages (LWT)
            retry: Connect retry policy (defaults to the shared constants)
            client_factory: Builds an aiomqtt.Client from the will message
        """
        self.config = config
        self.availability_topic = availability_topic
        self.retry = retry or RetryPolicy()

        # Connection state
        self._client: aiomqtt.Client | None = None
        self._connected = False
        self._generation = 0
        self._reconnect_lock = asyncio.Lock()

        self._client_id = config.client_id or f"influx_mqtt_{uuid.uuid4().hex[:8]}"
        self._client_factory = client_factory or self._create_client

    @property
    def connected(self) -> bool:
        """Check if client is connected."""
        return self._connected

    def _will(self) -> aiomqtt.Will:
        """Will message marking the device offline on unclean disconnect."""
        return aiomqtt.Will(
            topic=self.availability_topic,
            payload=PAYLOAD_OFFLINE,
            qos=self.config.qos,
            retain=True,
        )

    def _create_client(self, will: aiomqtt.Will) -> aiomqtt.Client:
        """Create a new aiomqtt client instance."""
        tls_context = ssl.create_default_context() if self.config.tls else None

        return aiomqtt.Client(
            hostname=self.config.host,
            port=self.config.port,
            username=self.config.username,
            password=self.config.password,
            identifier=self._client_id,
            keepalive=self.config.keepalive,
            will=will,
            tls_context=tls_context,
            transport=self.config.transport,
        )

    async def _connect_once(self) -> None:
        """Open one connection and announce availability."""
        client = self._client_factory(self._will())
        await client.__aenter__()

        self._client = client
        self._connected = True
        self._generation += 1

        try:
            await client.publish(
                self.availability_topic,
                PAYLOAD_ONLINE,
                qos=self.config.qos,
                retain=True,
            )
        except aiomqtt.MqttError:
            await self._drop_client()
            raise

    async def connect(self) -> None:
        """
        Connect to MQTT broker.

        Raises:
            MQTTConnectError: If every attempt failed
        """
        logger.debug(f"Connecting to MQTT broker {self.config.host}:{self.config.port}")
        logger.debug(f"Client ID: {self._client_id}")

        try:
            await self.retry.call(
                self._connect_once,
                f"MQTT connect to {self.config.host}:{self.config.port}",
                retry_on=(aiomqtt.MqttError, OSError),
            )
        except RetryError as e:
            raise MQTTConnectError(
                f"Could not connect to MQTT broker {self.config.host}:{self.config.port} "
                f"after {e.attempts} attempts: {e.last_error}"
            ) from e.last_error

        logger.info(f"Connected to MQTT broker at {self.config.host}:{self.config.port}")
        logger.debug(f"Availability topic: {self.availability_topic}")

    async def _drop_client(self) -> None:
        """Forget the current connection without announcing anything."""
        client = self._client
        self._client = None
        self._connected = False

        if client is not None:
            try:
                await client.__aexit__(None, None, None)
            except aiomqtt.MqttError as e:
                logger.debug(f"Ignoring error while closing dead connection: {e}")

    async def reconnect(self, generation: int | None = None) -> None:
        """
        Replace a dropped connection.

        Args:
            generation: Connection generation the caller saw fail. If
                another task already reconnected since then, nothing
                happens.

        Raises:
            MQTTConnectError: If every attempt failed
        """
        async with self._reconnect_lock:
            if generation is not None and generation != self._generation and self._connected:
                return

            logger.warning("MQTT connection lost, reconnecting")
            await self._drop_client()
            await self.connect()

    async def disconnect(self) -> None:
        """Publish offline status and disconnect from the broker."""
        if self._client and self._connected:
            try:
                await self._client.publish(
                    self.availability_topic,
                    PAYLOAD_OFFLINE,
                    qos=self.config.qos,
                    retain=True,
                )
            except aiomqtt.MqttError as e:
                logger.warning(f"Failed to publish offline status: {e}")

            await self._drop_client()
            logger.info("Disconnected from MQTT broker")

    async def publish(
        self,
        topic: str,
        payload: str,
        qos: int | None = None,
        retain: bool = False,
    ) -> None:
        """
        Publish a message and wait for the broker to take it.

        A publish that fails on a dropped connection is retried once
        after reconnecting.

        Args:
            topic: MQTT topic
            payload: Message payload
            qos: QoS level (default from config)
            retain: Retain flag

        Raises:
            MQTTConnectError: If the connection could not be restored
            aiomqtt.MqttError: If the retried publish fails too
        """
        if qos is None:
            qos = self.config.qos

        generation = self._generation
        try:
            await self._publish_raw(topic, payload, qos, retain)
            return
        except aiomqtt.MqttError as e:
            logger.error(f"MQTT publish to {topic} failed: {e}")

        await self.reconnect(generation)
        await self._publish_raw(topic, payload, qos, retain)

    async def _publish_raw(self, topic: str, payload: str, qos: int, retain: bool) -> None:
        """Publish a message directly (internal use)."""
        if self._client is None or not self._connected:
            raise aiomqtt.MqttError("Not connected to MQTT broker")

        logger.debug(f"Publishing to {topic}: {payload[:100]}{'...' if len(payload) > 100 else ''}")
        await self._client.publish(topic, payload, qos=qos, retain=retain)
