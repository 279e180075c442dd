"""
Data models for metrics, sensors and devices.
"""

from .device import Device, create_device
from .metric import Aggregation, MetricDefinition, default_metrics, render_topic
from .sensor import DeviceClass, Sensor, SensorReading, StateClass, format_state

__all__ = [
    "Aggregation",
    "Device",
    "DeviceClass",
    "MetricDefinition",
    "Sensor",
    "SensorReading",
    "StateClass",
    "create_device",
    "default_metrics",
    "format_state",
    "render_topic",
]
