"""
Configuration Module

Architectural Intent:
- Centralized configuration loading from a JSON file
- Provides typed access to file paths, OTRS endpoint and ticket defaults
- Falls back to the historical defaults when the config file is absent
- Environment variables override file-based config

Design Decisions:
- Config is a frozen dataclass for immutability after load
- Nested config sections map to sub-dataclasses
- state_by_event_type is a mapping and can only come from the file
- A missing or unparsable file means defaults; a parsable file with an
  unusable value raises ConfigError
"""

from __future__ import annotations
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Mapping, Optional
import dataclasses
import json
import logging
import os

from otrs_bridge.domain.errors import ConfigError
from otrs_bridge.domain.services.option_normalizer import DEFAULT_STATE_BY_EVENT_TYPE
from otrs_bridge.domain.services.reconciliation_policy import TicketDefaults
from otrs_bridge.infrastructure.adapters.otrs_soap_adapter import DEFAULT_WEBSERVICE_PATH
from otrs_bridge.infrastructure.adapters.soap_codec import TICKET_CONNECTOR_NS
from otrs_bridge.infrastructure.logging import level_from_name

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_FILE = "otrs-bridge.json"
ENV_PREFIX = "OTRS_BRIDGE"


@dataclass(frozen=True)
class PathsConfig:
    """Local files written by every invocation."""
    log_file: str = "/var/tmp/otrs-ticket.log"
    history_file: str = "/var/tmp/otrs-ticket.csv"
    ledger_file: str = "/var/tmp/otrs-ticket.sqlite"


@dataclass(frozen=True)
class OTRSConfig:
    """OTRS GenericTicketConnector endpoint."""
    scheme: str = "http"
    webservice_path: str = DEFAULT_WEBSERVICE_PATH
    namespace: str = TICKET_CONNECTOR_NS
    timeout_seconds: float = 30.0

    def __post_init__(self) -> None:
        if self.timeout_seconds <= 0:
            raise ValueError(
                f"otrs.timeout_seconds must be positive, got {self.timeout_seconds}"
            )


@dataclass(frozen=True)
class BridgeConfig:
    """Root configuration for otrs-bridge."""
    paths: PathsConfig = field(default_factory=PathsConfig)
    otrs: OTRSConfig = field(default_factory=OTRSConfig)
    ticket_defaults: TicketDefaults = field(default_factory=TicketDefaults)
    state_by_event_type: Mapping[str, str] = field(
        default_factory=lambda: MappingProxyType(dict(DEFAULT_STATE_BY_EVENT_TYPE))
    )
    log_level: str = "INFO"


_SECTIONS = ("paths", "otrs", "ticket_defaults")


def _env_override(data: dict, prefix: str = ENV_PREFIX) -> dict:
    """Override config values with environment variables.

    Environment variables follow the pattern OTRS_BRIDGE_SECTION_KEY.
    For example: OTRS_BRIDGE_OTRS_TIMEOUT_SECONDS=10,
    OTRS_BRIDGE_TICKET_DEFAULTS_QUEUE=Monitoring, OTRS_BRIDGE_LOG_LEVEL=DEBUG
    """
    for key, value in os.environ.items():
        if not key.startswith(f"{prefix}_"):
            continue
        name = key[len(prefix) + 1:].lower()
        for section in _SECTIONS:
            if name.startswith(f"{section}_"):
                data.setdefault(section, {})
                data[section][name[len(section) + 1:]] = value
                break
        else:
            data[name] = value
    return data


def _parse_config_file(path: Path) -> dict:
    """Parse a JSON config file. Returns empty dict on failure."""
    try:
        with open(path) as f:
            data = json.load(f)
    except FileNotFoundError:
        logger.debug("Config file not found: %s", path)
        return {}
    except json.JSONDecodeError as e:
        logger.warning("Invalid config file %s: %s", path, e)
        return {}
    if not isinstance(data, dict):
        logger.warning("Invalid config file %s: top level must be an object", path)
        return {}
    return data


def _build_sub_config(cls, data: dict):
    """Build a sub-config dataclass from a dict, ignoring unknown keys."""
    valid_fields = {f.name for f in dataclasses.fields(cls)}
    filtered = {k: v for k, v in data.items() if k in valid_fields}

    # Convert string numbers from the environment to int/float
    for f in dataclasses.fields(cls):
        if f.name in filtered and isinstance(filtered[f.name], str):
            if f.type == "int":
                filtered[f.name] = int(filtered[f.name])
            elif f.type == "float":
                filtered[f.name] = float(filtered[f.name])
        elif f.name in filtered and f.type == "str":
            filtered[f.name] = str(filtered[f.name])

    return cls(**filtered)


def _build_state_map(data) -> Mapping[str, str]:
    if not isinstance(data, dict):
        return MappingProxyType(dict(DEFAULT_STATE_BY_EVENT_TYPE))
    return MappingProxyType({str(k): str(v) for k, v in data.items()})


def _section(data: dict, name: str) -> dict:
    section = data.get(name, {})
    if not isinstance(section, dict):
        raise ValueError(f"section {name!r} must be an object")
    return section


def load_config(
    path: Optional[str] = None,
    env_prefix: str = ENV_PREFIX,
) -> BridgeConfig:
    """Load configuration from file and environment variables.

    Priority (highest to lowest):
    1. Environment variables (OTRS_BRIDGE_SECTION_KEY)
    2. Config file values
    3. Defaults

    Args:
        path: Path to config file (JSON). Defaults to otrs-bridge.json in CWD.
        env_prefix: Environment variable prefix. Defaults to OTRS_BRIDGE.

    Raises:
        ConfigError: a section is not an object, or a value has the wrong
            type or is out of range.
    """
    config_path = Path(path) if path else Path(DEFAULT_CONFIG_FILE)
    data = _parse_config_file(config_path)

    try:
        for section in _SECTIONS:
            _section(data, section)
        data = _env_override(data, env_prefix)
        config = BridgeConfig(
            paths=_build_sub_config(PathsConfig, _section(data, "paths")),
            otrs=_build_sub_config(OTRSConfig, _section(data, "otrs")),
            ticket_defaults=_build_sub_config(
                TicketDefaults, _section(data, "ticket_defaults")
            ),
            state_by_event_type=_build_state_map(
                data.get("state_by_event_type", DEFAULT_STATE_BY_EVENT_TYPE)
            ),
            log_level=str(data.get("log_level", "INFO")).upper(),
        )
        level_from_name(config.log_level)
    except (TypeError, ValueError) as e:
        raise ConfigError(f"Invalid configuration in {config_path}: {e}") from e
    return config
