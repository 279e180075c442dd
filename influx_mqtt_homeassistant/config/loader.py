"""
Configuration loader.

Builds the immutable Config from the process environment, optionally
seeded from a .env file.
"""

import os
from collections.abc import Mapping
from pathlib import Path

from dotenv import load_dotenv

from .schema import Config, ConfigError


class ConfigLoader:
    """
    Loads and validates configuration from the environment.

    Usage:
        loader = ConfigLoader()
        config = loader.load_env()
        # or
        config = loader.load_mapping({"MQTT_SENSOR": "weather"})
    """

    def load_env(self, dotenv_path: str | Path | None = None) -> Config:
        """
        Load configuration from os.environ.

        Variables from a .env file are added first without overriding
        anything already set in the environment.

        Args:
            dotenv_path: Explicit .env path (searched for when None)

        Returns:
            Validated Config object

        Raises:
            ConfigError: If a variable has an invalid value
        """
        load_dotenv(dotenv_path, override=False)
        return self.load_mapping(os.environ)

    def load_mapping(self, env: Mapping[str, str]) -> Config:
        """
        Load configuration from an arbitrary mapping.

        Args:
            env: Variable name -> value

        Returns:
            Validated Config object

        Raises:
            ConfigError: If a variable has an invalid value
        """
        try:
            return Config.from_env(env)
        except ConfigError:
            raise
        except Exception as e:
            raise ConfigError(f"Failed to load configuration: {e}") from e

    def validate(self, config: Config) -> list[str]:
        """
        Validate configuration and return list of warnings.

        Args:
            config: Configuration to validate

        Returns:
            List of warning messages (empty if no issues)
        """
        warnings = []

        if not config.influx.token:
            warnings.append("INFLUX_TOKEN is empty, queries will be unauthenticated")

        if not config.influx.url.startswith(("http://", "https://")):
            warnings.append(f"INFLUX_URL '{config.influx.url}' is not an http(s) URL")

        if not config.homeassistant.sensor_id:
            warnings.append("MQTT_SENSOR is empty, topics will contain an empty segment")
        elif "/" in config.homeassistant.sensor_id:
            warnings.append(
                f"MQTT_SENSOR '{config.homeassistant.sensor_id}' contains '/', "
                "topics will gain extra levels"
            )

        if config.mqtt.username and not config.mqtt.password:
            warnings.append("MQTT_USERNAME is set without MQTT_PASSWORD")

        if not config.homeassistant.discovery:
            warnings.append("Home Assistant discovery is disabled (HA_DISCOVERY=false)")

        return warnings
