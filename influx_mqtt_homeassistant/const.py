"""
Application constants and metadata.
"""

# Application info
APP_NAME = "Influx MQTT Home Assistant"
APP_VERSION = "1.0.0"

# Schedule (seconds)
PUBLISH_INTERVAL = 2 * 60  # sensor states
DISCOVERY_INTERVAL = 12 * 60 * 60  # discovery config republish

# Retry policy shared by InfluxDB queries and MQTT connects
MAX_ATTEMPTS = 5
RETRY_DELAY = 5.0

# Default values
DEFAULT_MQTT_PORT = 1883
DEFAULT_MQTTS_PORT = 8883
DEFAULT_MQTT_KEEPALIVE = 60
DEFAULT_QOS = 1
DEFAULT_SENSOR_ID = "influx-import"
DEFAULT_MEASUREMENT = "sensor-data"
DEFAULT_DISCOVERY_PREFIX = "homeassistant"

# Availability payloads
PAYLOAD_ONLINE = "online"
PAYLOAD_OFFLINE = "offline"

# Renders the numeric state as a float in Home Assistant
VALUE_TEMPLATE = "{{ value | float }}"
