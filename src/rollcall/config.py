"""Configuration loading for Rollcall."""

from __future__ import annotations

import os
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any

import yaml

ENV_PREFIX = "ROLLCALL_"


class ConfigError(Exception):
    """Raised when configuration is invalid or missing."""


@dataclass
class Settings:
    """Runtime settings.

    Attributes:
        db_path: Path to the SQLite database file, or ":memory:".
        provisional_window_seconds: Validity window given to a freshly generated
            session so students can discover it before the teacher starts timing.
        max_duration_seconds: Upper bound applied to every committed duration.
        access_code_bytes: Entropy of generated access codes, in bytes.
        location_radius_m: Distance under which a location is accepted outright.
        location_tolerance_m: Distance under which a location is accepted with
            a GPS accuracy warning.
        log_dir: Directory for rotating log files.
        log_level: Log level name.
    """

    db_path: str = "rollcall.db"
    provisional_window_seconds: int = 600
    max_duration_seconds: int = 120
    access_code_bytes: int = 16
    location_radius_m: float = 100.0
    location_tolerance_m: float = 500.0
    log_dir: str = "logs"
    log_level: str = "INFO"

    def __post_init__(self) -> None:
        if self.max_duration_seconds < 1:
            raise ConfigError("max_duration_seconds must be at least 1")
        if self.provisional_window_seconds < 1:
            raise ConfigError("provisional_window_seconds must be at least 1")
        if self.access_code_bytes < 8:
            raise ConfigError("access_code_bytes must be at least 8")
        if self.location_tolerance_m < self.location_radius_m:
            raise ConfigError("location_tolerance_m must not be smaller than location_radius_m")

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Settings:
        """Create settings from a dictionary.

        Unknown keys are rejected so typos do not silently fall back to defaults.

        Args:
            data: Mapping of setting names to values.

        Returns:
            Parsed settings object.

        Raises:
            ConfigError: If a key is unknown or a value has the wrong type.
        """
        known = {f.name: f for f in fields(cls)}
        unknown = sorted(set(data) - set(known))
        if unknown:
            raise ConfigError(f"Unknown settings: {', '.join(unknown)}")

        values: dict[str, Any] = {}
        for name, value in data.items():
            values[name] = _coerce(name, value, known[name].type)
        return cls(**values)


def _coerce(name: str, value: Any, type_name: Any) -> Any:
    """Convert a raw config value to the declared field type."""
    converters = {"int": int, "float": float, "str": str}
    converter = converters.get(str(type_name), str)
    try:
        return converter(value)
    except (TypeError, ValueError) as e:
        raise ConfigError(f"Invalid value for {name}: {value!r}") from e


def _env_overrides() -> dict[str, str]:
    """Collect ROLLCALL_* environment variables that name a known setting."""
    names = {f.name for f in fields(Settings)}
    overrides = {}
    for key, value in os.environ.items():
        if not key.startswith(ENV_PREFIX):
            continue
        name = key[len(ENV_PREFIX) :].lower()
        if name in names:
            overrides[name] = value
    return overrides


def load_settings(config_path: Path | str | None = None) -> Settings:
    """Load settings from an optional YAML file and the environment.

    Environment variables (ROLLCALL_DB_PATH, ROLLCALL_MAX_DURATION_SECONDS, ...)
    take precedence over values from the file.

    Args:
        config_path: Path to a YAML mapping. Defaults to $ROLLCALL_CONFIG if set.

    Returns:
        Parsed settings object.

    Raises:
        ConfigError: If the file is missing or invalid, or a value is invalid.
    """
    if config_path is None:
        config_path = os.environ.get("ROLLCALL_CONFIG")

    data: dict[str, Any] = {}
    if config_path:
        config_path = Path(config_path)
        if not config_path.exists():
            raise ConfigError(f"Configuration file not found: {config_path}")
        try:
            with open(config_path) as f:
                loaded = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML in {config_path}: {e}") from e

        if loaded is None:
            loaded = {}
        if not isinstance(loaded, dict):
            raise ConfigError(f"Configuration must be a YAML mapping, got {type(loaded).__name__}")
        data.update(loaded)

    data.update(_env_overrides())
    return Settings.from_dict(data)
