from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

import jsonschema
import yaml
from jsonschema.exceptions import ValidationError

"""Config loader for the normalizer CLI.

Responsibilities:
- Load the YAML config (``config/normalizer.yml`` by default)
- Validate it against the JSON schema shipped with the package
- Apply defaults (timezone=UTC, output_directory=./output, placeholder
  birth date 01/01/1990)

The core engine only needs ``NormalizerSettings``; everything else is used by
the command-line shell.
"""

__all__ = [
    "ConfigError",
    "NormalizerSettings",
    "NormalizerConfig",
    "DEFAULT_CONFIG_PATH",
    "load_config",
    "default_config",
]

SCHEMA_PATH = Path(__file__).with_name("config_schema.json")
DEFAULT_CONFIG_PATH = Path("config/normalizer.yml")

DEFAULT_TIMEZONE = "UTC"
DEFAULT_PLACEHOLDER_BIRTH_DATE = "01/01/1990"


class ConfigError(Exception):
    pass


@dataclass(frozen=True)
class NormalizerSettings:
    """Settings consumed by rule sets during one processing invocation."""
    timezone: str = DEFAULT_TIMEZONE
    placeholder_birth_date: str = DEFAULT_PLACEHOLDER_BIRTH_DATE


@dataclass(frozen=True)
class NormalizerConfig:
    source_directory: str = "./data"
    output_directory: str = "./output"
    keep_na_strings: tuple[str, ...] = ()
    default_system: str | None = None
    settings: NormalizerSettings = field(default_factory=NormalizerSettings)


def _validate_config_schema(data: dict[str, Any]) -> None:
    """Validate config data against the packaged JSON schema.

    Raises:
        ConfigError: if the schema file is missing or unreadable, or the data
            fails validation (unknown keys, wrong types, bad date pattern)
    """
    if not SCHEMA_PATH.exists():
        raise ConfigError(f"config schema not found: {SCHEMA_PATH}")

    try:
        schema = json.loads(SCHEMA_PATH.read_text(encoding="utf-8"))
        jsonschema.validate(data, schema)
    except json.JSONDecodeError as e:
        raise ConfigError(f"invalid schema file: {e}") from e
    except ValidationError as e:
        raise ConfigError(f"config validation failed: {e.message}") from e


def _validate_timezone(name: str) -> None:
    try:
        ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError) as e:
        raise ConfigError(f"unknown timezone: {name}") from e


def default_config() -> NormalizerConfig:
    return NormalizerConfig()


def load_config(path: Path) -> NormalizerConfig:
    if not path.exists():
        raise ConfigError(f"config file not found: {path}")
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"invalid yaml: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError(f"config root must be a mapping, got {type(data).__name__}")

    _validate_config_schema(data)

    tz = data.get("timezone", DEFAULT_TIMEZONE)
    _validate_timezone(tz)

    settings = NormalizerSettings(
        timezone=tz,
        placeholder_birth_date=data.get("placeholder_birth_date", DEFAULT_PLACEHOLDER_BIRTH_DATE),
    )
    return NormalizerConfig(
        source_directory=data.get("source_directory", "./data"),
        output_directory=data.get("output_directory", "./output"),
        keep_na_strings=tuple(data.get("keep_na_strings", ())),
        default_system=data.get("default_system"),
        settings=settings,
    )
