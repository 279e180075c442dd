"""
Entry point for the InfluxDB to Home Assistant MQTT bridge.

Usage:
    python -m influx_mqtt_homeassistant

All settings come from environment variables (or a .env file).
"""

import asyncio
import sys

from .app import run_app
from .config.schema import ConfigError
from .logging import get_logger, setup_logging
from .mqtt.client import MQTTConnectError


logger = get_logger("main")


def main() -> int:
    """Main entry point."""
    # Replaced once the configuration is loaded
    setup_logging()

    try:
        asyncio.run(run_app())
        return 0
    except ConfigError as e:
        logger.error(f"Configuration error: {e}")
        return 1
    except MQTTConnectError as e:
        logger.critical(str(e))
        return 1
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        return 0
    except Exception as e:
        logger.exception(f"Fatal error: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
