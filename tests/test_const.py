"""
Tests for constants.
"""

from influx_mqtt_homeassistant import __version__
from influx_mqtt_homeassistant.const import (
    APP_VERSION,
    DISCOVERY_INTERVAL,
    MAX_ATTEMPTS,
    PUBLISH_INTERVAL,
    RETRY_DELAY,
)


def test_constants():
    """Test that schedule and retry constants match the deployment."""
    assert PUBLISH_INTERVAL == 120
    assert DISCOVERY_INTERVAL == 12 * 3600
    assert MAX_ATTEMPTS == 5
    assert RETRY_DELAY == 5.0


def test_version_exported():
    assert __version__ == APP_VERSION
