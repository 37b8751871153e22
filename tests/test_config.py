"""Tests for configuration loading."""
from __future__ import annotations

import logging
from pathlib import Path

import pytest
import yaml

from treemon.config import AppConfig, assign_instance_id, load_config, persist_instance_id
from treemon.logging_config import WIRE_LOGGER_NAME, configure_logging, resolve_level


def test_default_config_loads() -> None:
    config = load_config()

    assert config.telemetry.timeout_sec == 4.0
    assert config.instance.software_name == "treemon"


def test_overrides_are_merged(tmp_path: Path) -> None:
    (tmp_path / "main.yaml").write_text(
        yaml.safe_dump({"telemetry": {"endpoint": "http://a", "timeout_sec": 2.0}}),
        encoding="utf-8",
    )
    (tmp_path / "overrides.yaml").write_text(
        yaml.safe_dump({"telemetry": {"endpoint": "http://b"}}), encoding="utf-8"
    )

    config = load_config(tmp_path / "main.yaml")

    assert config.telemetry.endpoint == "http://b"
    assert config.telemetry.timeout_sec == 2.0


def test_valid_instance_id_is_kept() -> None:
    config = AppConfig()
    config.instance.id = "0123456789abcdef0123456789abcdef01234567"

    assert assign_instance_id(config) is False
    assert config.instance.id == "0123456789abcdef0123456789abcdef01234567"


def test_invalid_instance_id_is_replaced(tmp_path: Path) -> None:
    config = AppConfig()
    config.instance.id = "short"

    assert assign_instance_id(config) is True
    assert len(config.instance.id) == 40

    main = tmp_path / "main.yaml"
    main.write_text(yaml.safe_dump({"instance": {"id": "short"}}), encoding="utf-8")
    (tmp_path / "overrides.yaml").write_text(
        yaml.safe_dump({"telemetry": {"timeout_sec": 1.5}}), encoding="utf-8"
    )

    persist_instance_id(config, main)

    reloaded = load_config(main)
    assert reloaded.instance.id == config.instance.id
    assert reloaded.telemetry.timeout_sec == 1.5
    assert "short" in main.read_text(encoding="utf-8")


def test_log_levels_are_validated() -> None:
    assert resolve_level("debug") == logging.DEBUG
    assert resolve_level(" WARNING ") == logging.WARNING

    with pytest.raises(ValueError):
        resolve_level("chatty")


def test_wire_log_is_kept_out_of_main_log(tmp_path: Path) -> None:
    config = AppConfig()
    config.logging.log_dir = tmp_path
    config.logging.wire_level = "DEBUG"
    wire_logger = logging.getLogger(WIRE_LOGGER_NAME)
    root_handlers = list(logging.getLogger().handlers)
    try:
        configure_logging(config)
        wire_logger.debug("client --> collector: {}")
        for handler in wire_logger.handlers:
            handler.flush()

        assert wire_logger.propagate is False
        assert wire_logger.level == logging.DEBUG
        assert "client --> collector" in (tmp_path / "wire.log").read_text(encoding="utf-8")
    finally:
        for handler in list(wire_logger.handlers):
            wire_logger.removeHandler(handler)
            handler.close()
        wire_logger.propagate = True
        wire_logger.setLevel(logging.NOTSET)
        root = logging.getLogger()
        for handler in list(root.handlers):
            if handler not in root_handlers:
                root.removeHandler(handler)
                handler.close()
