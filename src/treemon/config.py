"""Configuration utilities for treemon."""
from __future__ import annotations

import hashlib
import logging
import os
import re
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from pydantic import BaseModel, Field

LOGGER = logging.getLogger(__name__)

INSTANCE_ID_LENGTH = 40
_INSTANCE_ID_PATTERN = re.compile(r"^[0-9a-f]{40}$")


class InstanceConfig(BaseModel):
    """Identity and behaviour of this monitor instance."""

    id: str = Field("", description="40 character hex identity reported to the collector.")
    software_name: str = Field("treemon", description="Name used in the User-Agent header.")
    allow_suspend: bool = Field(
        False, description="Whether the managed server may be suspended instead of stopped."
    )
    listen_host: str = Field("0.0.0.0", description="Address the monitor listens on.")
    listen_port: int = Field(25555, ge=1, le=65535, description="Port the monitor listens on.")


class ServerConfig(BaseModel):
    """Facts about the managed server, supplied by the process controller."""

    version: str = Field("", description="Managed server version string.")
    protocol: int = Field(0, ge=0, description="Managed server protocol number.")
    java_version: str = Field("", description="Runtime version used by the managed server.")


class TelemetryConfig(BaseModel):
    """Settings for the outbound telemetry exchange."""

    enabled: bool = Field(True, description="Whether reports are sent at all.")
    endpoint: str = Field(
        "https://telemetry.example.invalid/api/v2",
        description="Collector URL receiving the POSTed reports.",
    )
    timeout_sec: float = Field(4.0, gt=0.0, description="Client timeout for one report.")
    sample_interval_sec: float = Field(
        1.0, gt=0.0, description="Delay between tree samples when run from the CLI."
    )
    report_interval_sec: float = Field(
        600.0, gt=0.0, description="Delay between reports when run from the CLI."
    )


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: str = Field("INFO", description="Root logging level.")
    log_dir: Path = Field(Path("logs"), description="Directory for log files.")
    wire_level: str = Field(
        "INFO", description="Level of the wire logger; DEBUG records raw request/response bytes."
    )


class AppConfig(BaseModel):
    """Top-level configuration object."""

    instance: InstanceConfig = InstanceConfig()
    server: ServerConfig = ServerConfig()
    telemetry: TelemetryConfig = TelemetryConfig()
    logging: LoggingConfig = LoggingConfig()

    class Config:
        arbitrary_types_allowed = True


def default_config_path() -> Path:
    """Location of the configuration bundled with the project."""

    return Path(__file__).resolve().parents[2] / "config" / "default.yaml"


def load_config(path: Optional[os.PathLike[str]] = None) -> AppConfig:
    """Load configuration from a YAML file.

    Args:
        path: Optional path to a configuration file. If not provided, the default
            configuration bundled with the project is used.

    Returns:
        AppConfig: Parsed configuration model.
    """

    config_path = Path(path) if path else default_config_path()

    if not config_path.exists():
        raise FileNotFoundError(f"Configuration file not found: {config_path}")

    with config_path.open("r", encoding="utf-8") as handle:
        data: Dict[str, Any] = yaml.safe_load(handle) or {}

    overrides_path = _overrides_path(config_path)
    if overrides_path.exists():
        with overrides_path.open("r", encoding="utf-8") as handle:
            overrides: Dict[str, Any] = yaml.safe_load(handle) or {}
        data = _deep_update(data, overrides)

    return AppConfig(**data)


def assign_instance_id(config: AppConfig) -> bool:
    """Make sure ``config`` carries a valid instance id.

    A well formed id is kept. Otherwise a new one is derived from random bytes.

    Returns:
        bool: True when a new id was generated and the config should be saved.
    """

    current = config.instance.id
    if len(current) == INSTANCE_ID_LENGTH and _INSTANCE_ID_PATTERN.match(current):
        LOGGER.debug("Instance id in config is valid, keeping it")
        return False

    config.instance.id = hashlib.sha1(os.urandom(64)).hexdigest()
    LOGGER.info("Instance id in config is not valid, new one is: %s", config.instance.id)
    return True


def persist_instance_id(config: AppConfig, path: Optional[os.PathLike[str]] = None) -> Path:
    """Record the instance id in the overrides file next to ``path``.

    The main configuration file is not rewritten; :func:`load_config` merges
    the overrides back in.
    """

    overrides_path = _overrides_path(Path(path) if path else default_config_path())
    overrides: Dict[str, Any] = {}
    if overrides_path.exists():
        with overrides_path.open("r", encoding="utf-8") as handle:
            overrides = yaml.safe_load(handle) or {}

    overrides = _deep_update(overrides, {"instance": {"id": config.instance.id}})
    with overrides_path.open("w", encoding="utf-8") as handle:
        yaml.safe_dump(overrides, handle, sort_keys=False)

    LOGGER.info("Instance id saved to %s", overrides_path)
    return overrides_path


def _overrides_path(config_path: Path) -> Path:
    return config_path.parent / "overrides.yaml"


def _deep_update(base: Dict[str, Any], updates: Dict[str, Any]) -> Dict[str, Any]:
    """Recursively merge update mapping into base mapping."""

    merged = dict(base)
    for key, value in updates.items():
        if (
            key in merged
            and isinstance(merged[key], dict)
            and isinstance(value, dict)
        ):
            merged[key] = _deep_update(merged[key], value)
        else:
            merged[key] = value
    return merged
