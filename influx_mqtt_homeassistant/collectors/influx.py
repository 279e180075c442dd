"""
Collector reading daily weather aggregates from InfluxDB.
"""

from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Protocol

from ..config.schema import FailurePolicy
from ..const import PUBLISH_INTERVAL
from ..influx.client import QueryError
from ..logging import get_logger
from ..models.metric import Aggregation, MetricDefinition
from ..models.sensor import SensorReading


logger = get_logger("collectors.influx")


class QueryClient(Protocol):
    """Anything that can aggregate a field since local midnight."""

    async def query(self, measurement: str, field: str, aggregation: Aggregation) -> float:
        ...


@dataclass
class CollectorResult:
    """Result of a collection cycle."""

    # Readings in publish order
    readings: list[SensorReading] = field(default_factory=list)

    # Metric key -> error message for queries that failed
    errors: dict[str, str] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        """True when every metric was queried successfully."""
        return not self.errors

    def __repr__(self) -> str:
        status = "OK" if self.ok else f"{len(self.errors)} failed"
        return f"CollectorResult({len(self.readings)} readings, {status})"


class InfluxCollector:
    """
    Queries every tracked metric, one after another.

    A failed metric never blocks the others. Depending on the failure
    policy it is published as 0.0 or left out of the cycle.
    """

    def __init__(
        self,
        query_client: QueryClient,
        metrics: Sequence[MetricDefinition],
        sensor_id: str,
        failure_policy: FailurePolicy = FailurePolicy.ZERO,
        update_interval: float = PUBLISH_INTERVAL,
    ):
        """
        Initialize collector.

        Args:
            query_client: Source of aggregated values
            metrics: Metrics queried each cycle, in publish order
            sensor_id: Sensor id rendered into state topics
            failure_policy: What to do with a metric whose query failed
            update_interval: Seconds between cycles
        """
        self.query_client = query_client
        self.metrics = tuple(metrics)
        self.sensor_id = sensor_id
        self.failure_policy = failure_policy
        self.update_interval = update_interval

    def _record_failure(
        self,
        result: CollectorResult,
        metric: MetricDefinition,
        topic: str,
        error: str,
    ) -> None:
        result.errors[metric.key] = error
        if self.failure_policy is FailurePolicy.ZERO:
            result.readings.append(SensorReading(metric=metric, topic=topic, value=0.0, error=error))

    async def collect(self) -> CollectorResult:
        """
        Query one cycle of readings.

        Returns:
            CollectorResult with the readings to publish
        """
        result = CollectorResult()

        for metric in self.metrics:
            topic = metric.state_topic(self.sensor_id)
            try:
                value = await self.query_client.query(
                    metric.measurement, metric.field, metric.aggregation
                )
            except QueryError as e:
                logger.error(f"Error querying {metric.aggregation.value} of {metric.field}: {e}")
                self._record_failure(result, metric, topic, str(e))
                continue
            except Exception as e:
                logger.exception(
                    f"Unexpected error querying {metric.aggregation.value} of {metric.field}: {e}"
                )
                self._record_failure(result, metric, topic, f"{type(e).__name__}: {e}")
                continue

            result.readings.append(SensorReading(metric=metric, topic=topic, value=value))

        logger.debug(f"Collected {result!r}")
        return result
