"""Logging utilities."""
from __future__ import annotations

import logging
from logging.handlers import RotatingFileHandler

from .config import AppConfig

WIRE_LOGGER_NAME = "treemon.telemetry.wire"

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def resolve_level(name: str) -> int:
    """Translate a configured level name into a logging level.

    Raises:
        ValueError: if ``name`` is not a known level.
    """

    level = logging.getLevelName(name.strip().upper())
    if not isinstance(level, int):
        raise ValueError(f"Unknown log level: {name!r}")
    return level


def configure_logging(config: AppConfig) -> None:
    """Configure the logging subsystem based on configuration.

    Raw request/response bytes go to ``wire.log`` only.
    """
    level = resolve_level(config.logging.level)
    wire_level = resolve_level(config.logging.wire_level)

    log_dir = config.logging.log_dir
    log_dir.mkdir(parents=True, exist_ok=True)
    log_path = log_dir / "treemon.log"

    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)

    rotating_handler = RotatingFileHandler(log_path, maxBytes=5_000_000, backupCount=5)
    rotating_handler.setFormatter(formatter)

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)

    logging.basicConfig(level=level, handlers=[rotating_handler, console_handler])

    wire_handler = RotatingFileHandler(log_dir / "wire.log", maxBytes=1_000_000, backupCount=2)
    wire_handler.setFormatter(formatter)
    wire_logger = logging.getLogger(WIRE_LOGGER_NAME)
    for handler in list(wire_logger.handlers):
        wire_logger.removeHandler(handler)
        handler.close()
    wire_logger.addHandler(wire_handler)
    wire_logger.setLevel(wire_level)
    wire_logger.propagate = False

    logging.getLogger(__name__).debug(
        "Logging configured with path %s (wire level %s)", log_path, config.logging.wire_level
    )
