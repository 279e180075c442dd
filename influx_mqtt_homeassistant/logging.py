"""
Logging setup for the InfluxDB to MQTT bridge.

Every module logs through get_logger(), so all records land under the
``influx_mqtt_homeassistant`` logger. The first name segment below it
(``app``, ``influx``, ``mqtt``...) is the component and picks the
console color.
"""

import logging
import logging.handlers
import sys
from pathlib import Path

from .config.schema import LoggingConfig


ROOT_LOGGER = "influx_mqtt_homeassistant"

LOG_FORMAT = "%(asctime)s [%(levelname)-8s] %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

FILE_MAX_BYTES = 10 * 1024 * 1024
FILE_BACKUP_COUNT = 5

RESET = "\033[0m"

LEVEL_COLORS = {
    logging.DEBUG: "\033[2;36m",
    logging.INFO: "\033[32m",
    logging.WARNING: "\033[33m",
    logging.ERROR: "\033[31m",
    logging.CRITICAL: "\033[1;91m",
}

COMPONENT_COLORS = {
    "app": "\033[32m",
    "main": "\033[32m",
    "retry": "\033[35m",
    "influx": "\033[36m",
    "collectors": "\033[96m",
    "mqtt": "\033[34m",
    "homeassistant": "\033[94m",
}

# Loggers of libraries that are chatty at DEBUG
QUIET_LOGGERS = ("aiomqtt", "paho", "influxdb_client")


def component_of(logger_name: str) -> str | None:
    """
    Component a logger belongs to.

    Example:
        component_of("influx_mqtt_homeassistant.collectors.influx") -> "collectors"
    """
    prefix = f"{ROOT_LOGGER}."
    if not logger_name.startswith(prefix):
        return None
    return logger_name[len(prefix):].split(".", 1)[0]


class ConsoleFormatter(logging.Formatter):
    """Formatter that colors the level, component and warning/error text."""

    def __init__(self, use_colors: bool = True):
        super().__init__(LOG_FORMAT, DATE_FORMAT)
        self.use_colors = use_colors

    def format(self, record: logging.LogRecord) -> str:
        if not self.use_colors:
            return super().format(record)

        # Work on a copy so other handlers get the record untouched
        colored = logging.makeLogRecord(record.__dict__)
        level_color = LEVEL_COLORS.get(record.levelno, "")
        colored.levelname = f"{level_color}{record.levelname:8}{RESET}"

        component_color = COMPONENT_COLORS.get(component_of(record.name) or "")
        if component_color:
            colored.name = f"{component_color}{record.name}{RESET}"

        if record.levelno >= logging.WARNING:
            colored.msg = f"{level_color}{record.getMessage()}{RESET}"
            colored.args = None

        return super().format(colored)


def _console_handler(config: LoggingConfig) -> logging.Handler:
    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(get_log_level(config.level))

    use_colors = config.colors and sys.stdout.isatty()
    handler.setFormatter(ConsoleFormatter(use_colors=use_colors))
    return handler


def _file_handler(path: str) -> logging.Handler:
    Path(path).parent.mkdir(parents=True, exist_ok=True)

    handler = logging.handlers.RotatingFileHandler(
        path,
        maxBytes=FILE_MAX_BYTES,
        backupCount=FILE_BACKUP_COUNT,
    )
    handler.setLevel(logging.DEBUG)
    handler.setFormatter(logging.Formatter(LOG_FORMAT, DATE_FORMAT))
    return handler


def get_log_level(level_str: str) -> int:
    """Convert a level name to its logging constant (INFO if unknown)."""
    level = logging.getLevelName(level_str.strip().upper())
    return level if isinstance(level, int) else logging.INFO


def setup_logging(config: LoggingConfig | None = None) -> None:
    """
    Configure the package's loggers.

    Safe to call more than once; handlers from a previous call are
    replaced.

    Args:
        config: Logging configuration (defaults when None)
    """
    if config is None:
        config = LoggingConfig()

    root_logger = logging.getLogger(ROOT_LOGGER)
    root_logger.setLevel(logging.DEBUG)
    for handler in list(root_logger.handlers):
        root_logger.removeHandler(handler)
        handler.close()

    root_logger.addHandler(_console_handler(config))

    if config.file:
        root_logger.addHandler(_file_handler(config.file))

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger for a component.

    Args:
        name: Dotted component name, prefixed with the package logger

    Returns:
        Logger instance
    """
    if name == ROOT_LOGGER or name.startswith(f"{ROOT_LOGGER}."):
        return logging.getLogger(name)
    return logging.getLogger(f"{ROOT_LOGGER}.{name}")
