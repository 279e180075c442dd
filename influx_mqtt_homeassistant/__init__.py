"""
InfluxDB to Home Assistant MQTT bridge.

Publishes daily weather aggregates from InfluxDB as Home Assistant
MQTT sensors.
"""

from .const import APP_VERSION as __version__

__all__ = ["__version__"]
