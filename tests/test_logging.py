"""
Tests for logger naming and console formatting.
"""

import logging

import pytest

from influx_mqtt_homeassistant.config.schema import LoggingConfig
from influx_mqtt_homeassistant.logging import (
    ROOT_LOGGER,
    ConsoleFormatter,
    component_of,
    get_log_level,
    get_logger,
    setup_logging,
)


@pytest.fixture
def package_logger():
    logger = logging.getLogger(ROOT_LOGGER)
    saved = (logger.level, list(logger.handlers))
    yield logger
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.setLevel(saved[0])
    for handler in saved[1]:
        logger.addHandler(handler)


def make_record(name: str, level: int, msg: str, *args) -> logging.LogRecord:
    return logging.LogRecord(name, level, __file__, 1, msg, args, None)


def test_get_logger_prefixes_package_name() -> None:
    assert get_logger("mqtt.client").name == f"{ROOT_LOGGER}.mqtt.client"
    assert get_logger(f"{ROOT_LOGGER}.app").name == f"{ROOT_LOGGER}.app"


@pytest.mark.parametrize("name,expected", [
    (f"{ROOT_LOGGER}.collectors.influx", "collectors"),
    (f"{ROOT_LOGGER}.influx.client", "influx"),
    (f"{ROOT_LOGGER}.homeassistant", "homeassistant"),
    ("aiomqtt", None),
    (ROOT_LOGGER, None),
])
def test_component_of(name: str, expected: str | None) -> None:
    assert component_of(name) == expected


@pytest.mark.parametrize("level,expected", [
    ("debug", logging.DEBUG),
    ("WARN", logging.WARNING),
    (" error ", logging.ERROR),
    ("verbose", logging.INFO),
])
def test_get_log_level(level: str, expected: int) -> None:
    assert get_log_level(level) == expected


def test_collector_records_get_their_own_color() -> None:
    formatter = ConsoleFormatter(use_colors=True)

    collector = formatter.format(make_record(f"{ROOT_LOGGER}.collectors.influx", logging.INFO, "x"))
    influx = formatter.format(make_record(f"{ROOT_LOGGER}.influx.client", logging.INFO, "x"))

    assert f"\033[96m{ROOT_LOGGER}.collectors.influx\033[0m" in collector
    assert f"\033[36m{ROOT_LOGGER}.influx.client\033[0m" in influx


def test_colored_format_leaves_record_untouched() -> None:
    formatter = ConsoleFormatter(use_colors=True)
    record = make_record(f"{ROOT_LOGGER}.app", logging.ERROR, "failed %d times", 3)

    output = formatter.format(record)

    assert "\033[31mfailed 3 times\033[0m" in output
    assert record.name == f"{ROOT_LOGGER}.app"
    assert record.levelname == "ERROR"
    assert record.getMessage() == "failed 3 times"


def test_plain_format_without_colors() -> None:
    formatter = ConsoleFormatter(use_colors=False)

    output = formatter.format(make_record(f"{ROOT_LOGGER}.app", logging.INFO, "started"))

    assert "\033[" not in output
    assert output.endswith(f"[INFO    ] {ROOT_LOGGER}.app: started")


def test_setup_logging_console_and_file(package_logger, tmp_path) -> None:
    log_file = tmp_path / "logs" / "bridge.log"

    setup_logging(LoggingConfig(level="warning", file=str(log_file), colors=False))
    setup_logging(LoggingConfig(level="warning", file=str(log_file), colors=False))
    get_logger("app").info("written to file only")

    handlers = package_logger.handlers
    assert len(handlers) == 2
    assert handlers[0].level == logging.WARNING
    assert handlers[1].level == logging.DEBUG
    assert logging.getLogger("aiomqtt").level == logging.WARNING

    handlers[1].flush()
    assert "written to file only" in log_file.read_text()
