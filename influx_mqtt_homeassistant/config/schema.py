"""
Configuration schema with dataclasses for validation and type safety.

Every section is immutable and built once from the process environment.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from urllib.parse import urlsplit

from ..const import (
    APP_NAME,
    APP_VERSION,
    DEFAULT_DISCOVERY_PREFIX,
    DEFAULT_MEASUREMENT,
    DEFAULT_MQTT_KEEPALIVE,
    DEFAULT_MQTT_PORT,
    DEFAULT_MQTTS_PORT,
    DEFAULT_QOS,
    DEFAULT_SENSOR_ID,
)


class ConfigError(Exception):
    """Exception raised for configuration errors."""

    pass


class FailurePolicy(Enum):
    """What a polling cycle does with a metric whose query failed."""
    ZERO = "zero"  # Publish 0.0 in its place
    SKIP = "skip"  # Leave the metric out of the cycle


# Broker URL scheme -> (tls, transport)
BROKER_SCHEMES = {
    "tcp": (False, "tcp"),
    "mqtt": (False, "tcp"),
    "ssl": (True, "tcp"),
    "tls": (True, "tcp"),
    "mqtts": (True, "tcp"),
    "ws": (False, "websockets"),
    "wss": (True, "websockets"),
}

TRUE_VALUES = {"1", "true", "yes", "on"}
FALSE_VALUES = {"0", "false", "no", "off"}


def _get(env: Mapping[str, str], key: str, default: str) -> str:
    """Return an environment value, falling back to default when unset."""
    value = env.get(key)
    return default if value is None else value


def _get_optional(env: Mapping[str, str], key: str) -> str | None:
    """Return an environment value, treating unset and empty alike."""
    value = env.get(key)
    return value or None


def _get_int(env: Mapping[str, str], key: str, default: int) -> int:
    raw = env.get(key)
    if raw is None or raw == "":
        return default
    try:
        return int(raw)
    except ValueError:
        raise ConfigError(f"{key} must be an integer, got '{raw}'") from None


def _get_bool(env: Mapping[str, str], key: str, default: bool) -> bool:
    raw = env.get(key)
    if raw is None or raw == "":
        return default
    value = raw.strip().lower()
    if value in TRUE_VALUES:
        return True
    if value in FALSE_VALUES:
        return False
    raise ConfigError(f"{key} must be a boolean, got '{raw}'")


@dataclass(frozen=True)
class InfluxConfig:
    """InfluxDB connection configuration."""
    url: str = "http://localhost:8086"
    token: str = ""
    org: str = "your-org"
    bucket: str = "your-bucket"
    measurement: str = DEFAULT_MEASUREMENT
    timeout: int = 10_000  # milliseconds

    @classmethod
    def from_env(cls, env: Mapping[str, str]) -> "InfluxConfig":
        """Create InfluxConfig from INFLUX_* variables."""
        return cls(
            url=_get(env, "INFLUX_URL", "http://localhost:8086"),
            token=_get(env, "INFLUX_TOKEN", ""),
            org=_get(env, "INFLUX_ORG", "your-org"),
            bucket=_get(env, "INFLUX_BUCKET", "your-bucket"),
            measurement=_get(env, "INFLUX_MEASUREMENT", DEFAULT_MEASUREMENT),
            timeout=_get_int(env, "INFLUX_TIMEOUT", 10_000),
        )


@dataclass(frozen=True)
class MQTTConfig:
    """MQTT connection configuration."""
    host: str = "homeassistant.local"
    port: int = DEFAULT_MQTT_PORT
    tls: bool = False
    transport: str = "tcp"
    username: str | None = None
    password: str | None = None
    client_id: str | None = None
    qos: int = DEFAULT_QOS
    keepalive: int = DEFAULT_MQTT_KEEPALIVE

    @classmethod
    def from_env(cls, env: Mapping[str, str]) -> "MQTTConfig":
        """Create MQTTConfig from MQTT_* variables."""
        host, port, tls, transport = parse_broker_url(
            _get(env, "MQTT_BROKER", "tcp://homeassistant.local:1883")
        )

        qos = _get_int(env, "MQTT_QOS", DEFAULT_QOS)
        if qos not in (0, 1, 2):
            raise ConfigError(f"MQTT_QOS must be 0, 1 or 2, got {qos}")

        keepalive = _get_int(env, "MQTT_KEEPALIVE", DEFAULT_MQTT_KEEPALIVE)
        if keepalive <= 0:
            raise ConfigError(f"MQTT_KEEPALIVE must be positive, got {keepalive}")

        return cls(
            host=host,
            port=port,
            tls=tls,
            transport=transport,
            username=_get_optional(env, "MQTT_USERNAME"),
            password=_get_optional(env, "MQTT_PASSWORD"),
            client_id=_get_optional(env, "MQTT_CLIENT_ID"),
            qos=qos,
            keepalive=keepalive,
        )


def parse_broker_url(url: str) -> tuple[str, int, bool, str]:
    """
    Split a broker address into its connection parameters.

    Accepts ``scheme://host[:port]`` as well as a bare ``host[:port]``,
    which is treated as plain TCP.

    Returns:
        Tuple of (host, port, tls, transport)

    Raises:
        ConfigError: If the scheme is unknown or the host is missing
    """
    if "://" not in url:
        url = f"tcp://{url}"

    parts = urlsplit(url)
    scheme = parts.scheme.lower()
    if scheme not in BROKER_SCHEMES:
        raise ConfigError(f"Unsupported MQTT broker scheme '{scheme}' in '{url}'")

    if not parts.hostname:
        raise ConfigError(f"MQTT broker address '{url}' has no host")

    tls, transport = BROKER_SCHEMES[scheme]
    try:
        port = parts.port
    except ValueError:
        raise ConfigError(f"MQTT broker address '{url}' has an invalid port") from None
    if port is None:
        port = DEFAULT_MQTTS_PORT if tls else DEFAULT_MQTT_PORT

    return parts.hostname, port, tls, transport


@dataclass(frozen=True)
class DeviceConfig:
    """Home Assistant device configuration."""
    name: str = "Influx Import"
    suggested_area: str | None = "Garage"
    manufacturer: str = APP_NAME
    model: str = "InfluxDB Import"
    sw_version: str = APP_VERSION


@dataclass(frozen=True)
class HomeAssistantConfig:
    """Home Assistant integration configuration."""
    discovery: bool = True
    discovery_prefix: str = DEFAULT_DISCOVERY_PREFIX
    sensor_id: str = DEFAULT_SENSOR_ID
    device: DeviceConfig = field(default_factory=DeviceConfig)

    @classmethod
    def from_env(cls, env: Mapping[str, str]) -> "HomeAssistantConfig":
        """Create HomeAssistantConfig from HA_* variables and MQTT_SENSOR."""
        # An empty HA_SUGGESTED_AREA drops the area from the device block
        area = _get(env, "HA_SUGGESTED_AREA", "Garage")

        return cls(
            discovery=_get_bool(env, "HA_DISCOVERY", True),
            discovery_prefix=_get(env, "HA_DISCOVERY_PREFIX", DEFAULT_DISCOVERY_PREFIX).rstrip("/"),
            sensor_id=_get(env, "MQTT_SENSOR", DEFAULT_SENSOR_ID),
            device=DeviceConfig(
                name=_get(env, "HA_DEVICE_NAME", "Influx Import"),
                suggested_area=area or None,
            ),
        )

    @property
    def availability_topic(self) -> str:
        """Shared availability topic for every sensor of this device."""
        return f"{self.discovery_prefix}/sensor/{self.sensor_id}/availability"


@dataclass(frozen=True)
class LoggingConfig:
    """Logging configuration."""
    level: str = "info"  # debug, info, warning, error
    file: str | None = None  # Log file path
    colors: bool = True  # Colored console output

    @classmethod
    def from_env(cls, env: Mapping[str, str]) -> "LoggingConfig":
        """Create LoggingConfig from LOG_* variables."""
        return cls(
            level=_get(env, "LOG_LEVEL", "info"),
            file=_get_optional(env, "LOG_FILE"),
            colors=_get_bool(env, "LOG_COLORS", True),
        )


@dataclass(frozen=True)
class Config:
    """Root configuration object."""
    influx: InfluxConfig = field(default_factory=InfluxConfig)
    mqtt: MQTTConfig = field(default_factory=MQTTConfig)
    homeassistant: HomeAssistantConfig = field(default_factory=HomeAssistantConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    failure_policy: FailurePolicy = FailurePolicy.ZERO

    @classmethod
    def from_env(cls, env: Mapping[str, str]) -> "Config":
        """Create the full configuration from an environment mapping."""
        policy_str = _get(env, "FAILED_METRIC_POLICY", "zero").strip().lower()
        try:
            policy = FailurePolicy(policy_str)
        except ValueError:
            raise ConfigError(
                f"FAILED_METRIC_POLICY must be 'zero' or 'skip', got '{policy_str}'"
            ) from None

        return cls(
            influx=InfluxConfig.from_env(env),
            mqtt=MQTTConfig.from_env(env),
            homeassistant=HomeAssistantConfig.from_env(env),
            logging=LoggingConfig.from_env(env),
            failure_policy=policy,
        )
