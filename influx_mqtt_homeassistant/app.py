"""
Main application orchestrator.

Handles:
- Configuration loading
- MQTT connection and Home Assistant discovery
- The polling and discovery republish loops
- Graceful shutdown
"""

import asyncio
import signal
from collections.abc import Sequence

from .collectors.influx import CollectorResult, InfluxCollector, QueryClient
from .config.loader import ConfigLoader
from .config.schema import Config
from .const import DISCOVERY_INTERVAL
from .influx.client import InfluxQueryClient
from .logging import get_logger, setup_logging
from .models.metric import MetricDefinition, default_metrics
from .mqtt.client import MQTTClient
from .mqtt.homeassistant import HomeAssistantDiscovery


logger = get_logger("app")


class Application:
    """
    Main application class.

    Owns the shared MQTT connection and the two timers that use it:
    discovery republish and state polling.
    """

    def __init__(
        self,
        config: Config,
        mqtt: MQTTClient | None = None,
        query_client: QueryClient | None = None,
        metrics: Sequence[MetricDefinition] | None = None,
    ):
        """
        Initialize application.

        Args:
            config: Application configuration
            mqtt: MQTT client (built from config when None)
            query_client: InfluxDB query client (built from config when None)
            metrics: Tracked metrics (the weather set when None)
        """
        self.config = config
        ha_config = config.homeassistant

        if metrics is None:
            metrics = default_metrics(config.influx.measurement, ha_config.discovery_prefix)
        self.metrics = tuple(metrics)

        self.mqtt = mqtt or MQTTClient(
            config.mqtt,
            availability_topic=ha_config.availability_topic,
        )
        self.ha = HomeAssistantDiscovery(self.mqtt, ha_config, self.metrics)
        self.collector = InfluxCollector(
            query_client or InfluxQueryClient(config.influx),
            self.metrics,
            sensor_id=ha_config.sensor_id,
            failure_policy=config.failure_policy,
        )

        self._tasks: list[asyncio.Task] = []
        self._shutdown_event = asyncio.Event()

    async def poll_once(self) -> CollectorResult:
        """Query every metric, then publish availability and states."""
        result = await self.collector.collect()
        await self.ha.publish_states(result.readings)

        if not result.ok:
            logger.warning(f"{len(result.errors)} of {len(self.metrics)} metrics failed this cycle")

        return result

    async def _polling_loop(self) -> None:
        interval = self.collector.update_interval
        logger.info(f"Entering MQTT publishing loop (interval: {interval}s)")

        while True:
            try:
                await self.poll_once()
            except asyncio.CancelledError:
                raise
            except Exception as e:
                logger.exception(f"Error in polling cycle: {e}")

            await asyncio.sleep(interval)

    async def _discovery_loop(self) -> None:
        while True:
            await asyncio.sleep(DISCOVERY_INTERVAL)
            logger.info("Republishing MQTT discovery config")
            try:
                await self.ha.publish_discovery()
            except asyncio.CancelledError:
                raise
            except Exception as e:
                logger.error(f"Error republishing discovery config: {e}")

    def _setup_signal_handlers(self) -> None:
        """Setup signal handlers for graceful shutdown."""
        loop = asyncio.get_running_loop()

        for sig in (signal.SIGTERM, signal.SIGINT):
            loop.add_signal_handler(sig, self._signal_handler)

    def _signal_handler(self) -> None:
        """Handle shutdown signals."""
        logger.info("Received shutdown signal")
        self._shutdown_event.set()

    def request_shutdown(self) -> None:
        """Ask a running application to stop."""
        self._shutdown_event.set()

    async def start(self) -> None:
        """
        Start the application and block until shutdown.

        Raises:
            MQTTConnectError: If the broker is unreachable at startup
        """
        logger.info("Starting Weather Sensor MQTT Publisher")
        logger.info(
            f"InfluxDB at {self.config.influx.url} "
            f"(org: {self.config.influx.org}, bucket: {self.config.influx.bucket})"
        )
        logger.info(f"MQTT broker at {self.config.mqtt.host}:{self.config.mqtt.port}")

        await self.mqtt.connect()

        # Registration happens before the first state is published
        await self.ha.publish_discovery()

        self._setup_signal_handlers()

        self._tasks = [
            asyncio.create_task(self._discovery_loop(), name="discovery"),
            asyncio.create_task(self._polling_loop(), name="polling"),
        ]

        await self._shutdown_event.wait()
        await self.stop()

    async def stop(self) -> None:
        """Stop the timers and disconnect."""
        logger.info("Stopping")

        for task in self._tasks:
            task.cancel()

        if self._tasks:
            await asyncio.gather(*self._tasks, return_exceptions=True)

        self._tasks.clear()

        await self.mqtt.disconnect()

        logger.info("Stopped")


async def run_app() -> None:
    """
    Load configuration from the environment and run the application.

    Raises:
        ConfigError: If the environment holds invalid values
        MQTTConnectError: If the broker is unreachable at startup
    """
    loader = ConfigLoader()
    config = loader.load_env()

    setup_logging(config.logging)

    for warning in loader.validate(config):
        logger.warning(f"Config warning: {warning}")

    app = Application(config)
    await app.start()
