"""
InfluxDB query client with bounded retries.

Each query opens its own client and closes it when done; at one query
per metric every couple of minutes there is nothing to pool.
"""

import asyncio
from collections.abc import Callable
from contextlib import AbstractAsyncContextManager
from datetime import datetime
from typing import Any

import aiohttp
from influxdb_client.client.exceptions import InfluxDBError
from influxdb_client.client.flux_csv_parser import FluxCsvParserException, FluxQueryException
from influxdb_client.client.influxdb_client_async import InfluxDBClientAsync

from ..config.schema import InfluxConfig
from ..logging import get_logger
from ..models.metric import Aggregation
from ..utils.retry import RetryError, RetryPolicy
from .query import build_flux_query, local_midnight


logger = get_logger("influx.client")

# Transport failures and errors raised while reading the result stream
RETRYABLE_ERRORS: tuple[type[BaseException], ...] = (
    InfluxDBError,
    FluxQueryException,
    FluxCsvParserException,
    aiohttp.ClientError,
    asyncio.TimeoutError,
    OSError,
)

ClientFactory = Callable[[], AbstractAsyncContextManager[Any]]


class QueryError(Exception):
    """Raised when a query still fails after every retry."""

    def __init__(self, measurement: str, field: str, attempts: int):
        self.measurement = measurement
        self.field = field
        self.attempts = attempts
        super().__init__(
            f"failed to retrieve {measurement}/{field} from InfluxDB after {attempts} attempts"
        )


class InfluxQueryClient:
    """
    Issues daily aggregate queries against InfluxDB.

    Results are never cached; every call reaches the database.
    """

    def __init__(
        self,
        config: InfluxConfig,
        retry: RetryPolicy | None = None,
        client_factory: ClientFactory | None = None,
        now: Callable[[], datetime] = datetime.now,
    ):
        """
        Initialize the query client.

        Args:
            config: InfluxDB connection settings
            retry: Retry policy (defaults to the shared constants)
            client_factory: Returns an async context manager exposing
                query_api(); defaults to InfluxDBClientAsync
            now: Clock used to find local midnight
        """
        self.config = config
        self.retry = retry or RetryPolicy()
        self._client_factory = client_factory or self._create_client
        self._now = now

    def _create_client(self) -> InfluxDBClientAsync:
        """Create a new async InfluxDB client."""
        return InfluxDBClientAsync(
            url=self.config.url,
            token=self.config.token,
            org=self.config.org,
            timeout=self.config.timeout,
        )

    def build_query(self, measurement: str, field: str, aggregation: Aggregation) -> str:
        """Flux text for an aggregate since local midnight."""
        start = local_midnight(self._now())
        return build_flux_query(self.config.bucket, measurement, field, aggregation, start)

    async def _execute(self, query: str) -> float:
        """Run a query once and extract its value."""
        async with self._client_factory() as client:
            tables = await client.query_api().query(query, org=self.config.org)

        value = 0.0
        for table in tables:
            for record in table.records:
                raw = record.get_value()
                if isinstance(raw, (int, float)) and not isinstance(raw, bool):
                    value = float(raw)
        return value

    async def query(self, measurement: str, field: str, aggregation: Aggregation) -> float:
        """
        Aggregate a field since local midnight.

        Args:
            measurement: InfluxDB measurement
            field: Field within the measurement
            aggregation: sum, min or max

        Returns:
            The aggregated value (0.0 when no points exist yet today)

        Raises:
            QueryError: If every attempt failed
        """
        logger.debug(f"Querying InfluxDB for {aggregation.value} of {measurement}/{field}")
        query = self.build_query(measurement, field, aggregation)

        try:
            value = await self.retry.call(
                lambda: self._execute(query),
                f"InfluxDB query {measurement}/{field}",
                retry_on=RETRYABLE_ERRORS,
            )
        except RetryError as e:
            raise QueryError(measurement, field, e.attempts) from e.last_error

        logger.debug(f"InfluxDB query successful: {measurement}/{field} = {value:.2f}")
        return value
