"""
InfluxDB aggregate queries.
"""

from .client import InfluxQueryClient, QueryError
from .query import build_flux_query, local_midnight

__all__ = [
    "InfluxQueryClient",
    "QueryError",
    "build_flux_query",
    "local_midnight",
]
