"""
Metric collectors.
"""

from .influx import CollectorResult, InfluxCollector

__all__ = [
    "CollectorResult",
    "InfluxCollector",
]
