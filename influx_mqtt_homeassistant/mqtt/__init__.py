"""
MQTT client and Home Assistant discovery integration.
"""

from .client import MQTTClient, MQTTConnectError
from .homeassistant import HomeAssistantDiscovery

__all__ = [
    "MQTTClient",
    "MQTTConnectError",
    "HomeAssistantDiscovery",
]
