"""
Flux query construction for daily aggregates.
"""

from datetime import datetime

from ..models.metric import Aggregation


def local_midnight(now: datetime | None = None) -> datetime:
    """
    Start of the current local day.

    Args:
        now: Reference time (naive values are taken as local time)

    Returns:
        Timezone-aware datetime at 00:00 of the same local date
    """
    if now is None:
        now = datetime.now()
    now = now.astimezone()
    return now.replace(hour=0, minute=0, second=0, microsecond=0)


def flux_string(value: str) -> str:
    """Quote a value as a Flux string literal."""
    escaped = value.replace("\\", "\\\\").replace('"', '\\"').replace("${", "\\${")
    return f'"{escaped}"'


def build_flux_query(
    bucket: str,
    measurement: str,
    field: str,
    aggregation: Aggregation,
    start: datetime,
) -> str:
    """
    Build a query aggregating one field over [start, now).

    Args:
        bucket: InfluxDB bucket
        measurement: _measurement to filter on
        field: _field to filter on
        aggregation: Aggregate function applied last
        start: Range start (rendered as RFC3339 with offset)

    Returns:
        Flux query text
    """
    return (
        f"from(bucket: {flux_string(bucket)})\n"
        f"  |> range(start: {start.isoformat(timespec='seconds')})\n"
        f"  |> filter(fn: (r) => r._measurement == {flux_string(measurement)})\n"
        f"  |> filter(fn: (r) => r._field == {flux_string(field)})\n"
        f"  |> {aggregation.value}()"
    )
