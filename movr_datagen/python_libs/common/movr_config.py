"""
MovR Generation Configuration

This module provides the immutable configuration shared by every row generator,
together with validation and YAML loading. The configuration is fixed before
generation starts and never mutated afterwards; overrides produce a new object.
"""

from __future__ import annotations

import logging
import os
from dataclasses import asdict, dataclass, fields
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import yaml

from movr_datagen.python_libs.common.exceptions import ConfigurationError
from movr_datagen.python_libs.common import movr_schema
from movr_datagen.python_libs.common.movr_schema import NUM_CITIES

logger = logging.getLogger(__name__)

CONFIG_ENV_VAR = "MOVR_DATAGEN_CONFIG"
CONFIG_FILE_NAME = "movr.yml"

DEFAULT_CREATION_TIME = datetime(2019, 1, 2, 3, 4, 5, tzinfo=timezone.utc)
MAX_SEED = 2**64 - 1

# Tables partitioned by city, keyed by the config field holding their row count.
PARTITIONED_COUNTS = {
    "num_users": "users",
    "num_vehicles": "vehicles",
    "num_rides": "rides",
    "num_histories": "histories",
}


@dataclass(frozen=True)
class MovrConfig:
    """Generation parameters for the MovR workload."""

    seed: int = 1
    num_users: int = 50
    num_vehicles: int = 15
    num_rides: int = 500
    num_histories: int = 1000
    num_promo_codes: int = 1000
    creation_time: datetime = DEFAULT_CREATION_TIME
    locale: str = "en_US"

    def __post_init__(self):
        # Accept the ISO string written by to_dict().
        if isinstance(self.creation_time, str):
            object.__setattr__(
                self, "creation_time", _parse_creation_time(self.creation_time)
            )

    @classmethod
    def from_dict(cls, config_dict: Dict[str, Any]) -> "MovrConfig":
        """Create configuration from a dictionary (YAML file or CLI overrides).

        Keys may use dashes as on the command line (``num-users``).
        """
        known = {f.name for f in fields(cls)}
        values: Dict[str, Any] = {}
        for raw_key, value in (config_dict or {}).items():
            key = str(raw_key).replace("-", "_")
            if key not in known:
                raise ConfigurationError(f"Unknown configuration option '{raw_key}'")
            values[key] = value

        if "creation_time" in values:
            values["creation_time"] = _parse_creation_time(values["creation_time"])
        return cls(**values)

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to a YAML-friendly dictionary."""
        result = asdict(self)
        result["creation_time"] = self.creation_time.isoformat()
        return result

    def with_overrides(self, overrides: Dict[str, Any]) -> "MovrConfig":
        """Return a copy with the non-None overrides applied."""
        applied = {k: v for k, v in overrides.items() if v is not None}
        if not applied:
            return self
        merged = self.to_dict()
        merged.update(applied)
        return MovrConfig.from_dict(merged)

    def validation_issues(self) -> List[str]:
        """Validate the configuration and return any issues."""
        issues = []

        integer_fields = [
            f.name for f in fields(self) if f.name == "seed" or f.name.startswith("num_")
        ]
        for name in integer_fields:
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int):
                issues.append(f"{name} must be an integer, got {value!r}")
            elif value < 0:
                issues.append(f"{name} must be non-negative, got {value}")
            elif name == "seed" and value > MAX_SEED:
                issues.append(f"seed must fit in an unsigned 64-bit integer, got {value}")

        # Every city needs at least one row, otherwise foreign keys into an empty
        # city bucket cannot be constructed.
        for name, noun in PARTITIONED_COUNTS.items():
            value = getattr(self, name)
            if isinstance(value, int) and not isinstance(value, bool) and value >= 0:
                if value < NUM_CITIES:
                    issues.append(f"at least {NUM_CITIES} {noun} are required")

        if not isinstance(self.creation_time, datetime):
            issues.append(f"creation_time must be a datetime, got {self.creation_time!r}")

        return issues

    def validate(self) -> "MovrConfig":
        """Raise ``ConfigurationError`` on the first problem, return self otherwise."""
        issues = self.validation_issues()
        if issues:
            for issue in issues:
                logger.debug(f"Configuration issue: {issue}")
            raise ConfigurationError(issues[0])
        return self

    def row_count(self, table_name: str) -> int:
        """Number of rows generated for a table."""
        counts = {
            movr_schema.USERS: self.num_users,
            movr_schema.VEHICLES: self.num_vehicles,
            movr_schema.RIDES: self.num_rides,
            movr_schema.VEHICLE_LOCATION_HISTORIES: self.num_histories,
            movr_schema.PROMO_CODES: self.num_promo_codes,
            movr_schema.USER_PROMO_CODES: 0,
        }
        if table_name not in counts:
            raise ConfigurationError(f"Unknown table '{table_name}'")
        return counts[table_name]


def _parse_creation_time(value: Union[str, datetime]) -> datetime:
    if isinstance(value, datetime):
        parsed = value
    else:
        try:
            parsed = datetime.fromisoformat(str(value))
        except ValueError as e:
            raise ConfigurationError(f"Invalid creation_time '{value}': {e}") from e
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def load_config_dict(config_path: Optional[Path] = None) -> Dict[str, Any]:
    """Load raw configuration values from YAML.

    The search order is:
    1. The ``config_path`` parameter if provided.
    2. The path specified in the ``MOVR_DATAGEN_CONFIG`` environment variable.
    3. ``movr.yml`` in the current working directory.
    Returns an empty dictionary if no configuration file is found.
    """
    search_paths = []
    if config_path:
        explicit = Path(config_path)
        if not explicit.exists():
            raise ConfigurationError(f"Configuration file not found: {explicit}")
        search_paths.append(explicit)
    env_path = os.getenv(CONFIG_ENV_VAR)
    if env_path:
        search_paths.append(Path(env_path))
    search_paths.append(Path.cwd())

    for path in search_paths:
        config_file = path
        if config_file.is_dir():
            config_file = config_file / CONFIG_FILE_NAME
        if config_file.is_file():
            logger.info(f"Loading configuration from {config_file}")
            with config_file.open("r", encoding="utf-8") as f:
                try:
                    data = yaml.safe_load(f) or {}
                except yaml.YAMLError as e:
                    raise ConfigurationError(f"Invalid YAML in {config_file}: {e}") from e
            if not isinstance(data, dict):
                raise ConfigurationError(
                    f"Configuration file {config_file} must contain a mapping"
                )
            return data
    return {}


def load_config(
    config_path: Optional[Path] = None, overrides: Optional[Dict[str, Any]] = None
) -> MovrConfig:
    """Load, override and validate the generation configuration."""
    config = MovrConfig.from_dict(load_config_dict(config_path))
    if overrides:
        config = config.with_overrides(overrides)
    return config.validate()
