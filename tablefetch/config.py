"""Configuration management and validation for tablefetch.

Global settings live in a YAML file and are parsed into small dataclasses
that validate themselves in ``__post_init__``. Environment variables
override individual values, which keeps secrets and per-machine paths out
of the checked-in file.
"""
from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Dict, List, Optional, Type, get_type_hints

import yaml

from .exceptions import ConfigurationError, ValidationError

log = logging.getLogger(__name__)

DEFAULT_FIELDS = ["Title", "MD", "SubFolder", "UpdatedIn"]
VALID_PROVIDERS = ["airtable", "vika"]


@dataclass
class LoggingConfig:
    """Configuration for logging settings."""
    level: str = "INFO"
    console_level: str = "INFO"
    log_dir: str = "logs"

    def __post_init__(self):
        """Validate logging configuration."""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if self.level.upper() not in valid_levels:
            raise ValidationError(f"Invalid log level: {self.level}. Must be one of {valid_levels}")
        if self.console_level.upper() not in valid_levels:
            raise ValidationError(f"Invalid console log level: {self.console_level}. Must be one of {valid_levels}")


@dataclass
class HttpConfig:
    """Configuration for provider requests."""
    timeout: int = 30
    user_agent: str = "tablefetch/0.1 (requests)"

    def __post_init__(self):
        if self.timeout < 1:
            raise ValidationError("timeout must be at least 1 second")


@dataclass
class FetchConfig:
    """Which provider to assume and which record fields to request."""
    default_provider: str = "airtable"
    fields: List[str] = field(default_factory=lambda: list(DEFAULT_FIELDS))

    def __post_init__(self):
        if self.default_provider not in VALID_PROVIDERS:
            raise ValidationError(
                f"Invalid default_provider: {self.default_provider}. Must be one of {VALID_PROVIDERS}"
            )
        if not self.fields:
            raise ValidationError("fields must name at least one record field")


@dataclass
class MaterializeConfig:
    """Configuration for writing notes."""
    batch_size: int = 10
    settle_delay: float = 0.1

    def __post_init__(self):
        if self.batch_size < 1:
            raise ValidationError("batch_size must be at least 1")
        if self.settle_delay < 0:
            raise ValidationError("settle_delay must be non-negative")


@dataclass
class PathsConfig:
    """Configuration for file paths."""
    vault: str = "."
    settings: str = "data/settings.json"

    def __post_init__(self):
        """Normalize paths to absolute ones."""
        for field_name in ["vault", "settings"]:
            path_value = getattr(self, field_name)
            setattr(self, field_name, str(Path(path_value).expanduser().resolve()))


@dataclass
class GlobalConfig:
    """Main configuration container."""
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    http: HttpConfig = field(default_factory=HttpConfig)
    fetch: FetchConfig = field(default_factory=FetchConfig)
    materialize: MaterializeConfig = field(default_factory=MaterializeConfig)
    paths: PathsConfig = field(default_factory=PathsConfig)


_SECTIONS: Dict[str, Type] = {
    "logging": LoggingConfig,
    "http": HttpConfig,
    "fetch": FetchConfig,
    "materialize": MaterializeConfig,
    "paths": PathsConfig,
}


class ConfigManager:
    """Loads the YAML configuration and applies environment overrides."""

    ENV_MAPPINGS = {
        "TABLEFETCH_LOG_LEVEL": ("logging", "level"),
        "TABLEFETCH_VAULT": ("paths", "vault"),
        "TABLEFETCH_SETTINGS": ("paths", "settings"),
        "TABLEFETCH_TIMEOUT": ("http", "timeout"),
        "TABLEFETCH_BATCH_SIZE": ("materialize", "batch_size"),
    }
    INT_KEYS = {"timeout", "batch_size"}

    def load_global_config(self, config_path: Optional[Path] = None) -> GlobalConfig:
        """Load and validate global configuration.

        Without an explicit *config_path* the standard locations are searched;
        when none holds a file the defaults (plus environment overrides) are used.
        """
        if config_path is None:
            config_path = self._find_config_file("config.yaml")

        try:
            config_dict = self._load_yaml_file(config_path) if config_path else {}
            config_dict = self._apply_environment_variables(config_dict)
            return self._create_global_config(config_dict)
        except (ConfigurationError, ValidationError):
            raise
        except Exception as e:
            raise ConfigurationError(
                f"Failed to load configuration from {config_path}: {e}",
                config_file=str(config_path),
            ) from e

    def _find_config_file(self, filename: str) -> Optional[Path]:
        """Find configuration file in standard locations."""
        search_paths = [
            Path.cwd() / "config" / filename,
            Path.cwd() / filename,
            Path.home() / ".tablefetch" / filename,
        ]
        for path in search_paths:
            if path.exists():
                return path

        log.debug("No %s found in %s, using defaults", filename, search_paths)
        return None

    def _load_yaml_file(self, path: Path) -> Dict[str, Any]:
        """Load YAML file with error handling."""
        path = Path(path)
        if not path.exists():
            raise ConfigurationError(f"Configuration file not found: {path}", config_file=str(path))

        try:
            with path.open("r", encoding="utf-8") as f:
                content = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Invalid YAML in {path}: {e}", config_file=str(path)) from e

        if content is None:
            return {}

        if not isinstance(content, dict):
            raise ConfigurationError(
                f"Configuration file must contain a YAML dictionary: {path}",
                config_file=str(path),
            )

        log.info("🛠  Using config %s", path)
        return content

    def _apply_environment_variables(self, config_dict: Dict[str, Any]) -> Dict[str, Any]:
        """Apply environment variable overrides."""
        for env_var, (section, key) in self.ENV_MAPPINGS.items():
            env_value = os.getenv(env_var)
            if env_value is None:
                continue

            current = config_dict.setdefault(section, {})
            if key in self.INT_KEYS:
                try:
                    current[key] = int(env_value)
                except ValueError as e:
                    raise ValidationError(f"{env_var} must be an integer, got {env_value!r}") from e
            else:
                current[key] = env_value

        return config_dict

    def _create_global_config(self, config_dict: Dict[str, Any]) -> GlobalConfig:
        """Create GlobalConfig from dictionary with validation."""
        config_sections = {}

        for name, cls in _SECTIONS.items():
            section = config_dict.get(name)
            if section is None:
                continue
            if not isinstance(section, dict):
                raise ConfigurationError(f"Section '{name}' must be a mapping")
            config_sections[name] = self._create_dataclass_from_dict(cls, section)

        return GlobalConfig(**config_sections)

    def _create_dataclass_from_dict(self, cls: Type, data: Dict[str, Any]):
        """Create dataclass instance from dictionary, handling type conversion."""
        field_types = get_type_hints(cls)
        kwargs = {}

        for field_info in fields(cls):
            field_name = field_info.name
            if field_name not in data:
                continue

            field_type = field_types.get(field_name)
            value = data[field_name]

            if getattr(field_type, "__origin__", None) is list and isinstance(value, str):
                value = [item.strip() for item in value.split(",") if item.strip()]

            kwargs[field_name] = value

        unknown = set(data) - set(kwargs)
        if unknown:
            log.warning("⚠️ Ignoring unknown %s keys: %s", cls.__name__, sorted(unknown))

        return cls(**kwargs)
