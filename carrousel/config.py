"""
Configuration management for Carrousel.

Handles loading, validation, and access to application configuration.
"""

import os
from pathlib import Path
from typing import Any, Optional

import yaml
from pydantic import BaseModel, Field, ValidationError

from carrousel.content import Content, ContentType
from carrousel.errors import ConfigurationError

# Global configuration instance
_config: Optional["CarrouselConfig"] = None


class ContentConfig(BaseModel):
    """A catalog item as written in the config file."""
    type: ContentType
    url: str
    duration: float = Field(gt=0, allow_inf_nan=False)  # Seconds on screen per play
    weight: float = Field(default=1.0, gt=0, allow_inf_nan=False)  # Relative share of screen time

    def to_content(self) -> Content:
        """Convert to the immutable Content used by the scheduler."""
        return Content(
            type=self.type,
            url=self.url,
            duration=self.duration,
            weight=self.weight,
        )


class SchedulingConfig(BaseModel):
    """Scheduling configuration."""
    seed: Optional[int] = None  # Fixed random seed, None = system entropy
    strict_distribution: bool = False  # Raise instead of falling back when nothing is eligible


class DisplayConfig(BaseModel):
    """Display driver configuration."""
    refresh_interval_hours: float = Field(default=4.0, gt=0)
    preload_timeout_seconds: float = Field(default=30.0, gt=0)


class LoggingConfig(BaseModel):
    """Logging configuration."""
    level: str = "INFO"
    file: str = "logs/carrousel.log"
    max_size: str = "10MB"
    backup_count: int = 5
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


class CarrouselConfig(BaseModel):
    """Main Carrousel configuration."""
    catalog: list[ContentConfig] = Field(default_factory=list)
    scheduling: SchedulingConfig = Field(default_factory=SchedulingConfig)
    display: DisplayConfig = Field(default_factory=DisplayConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


def load_config(config_path: Optional[str] = None) -> CarrouselConfig:
    """
    Load configuration from file.

    Args:
        config_path: Path to config file. Defaults to config.yaml in project root.

    Returns:
        Loaded and validated configuration.

    Raises:
        ConfigurationError: If the file is not valid YAML or fails validation.
    """
    global _config

    if config_path is None:
        # Look for config.yaml in current directory or project root
        possible_paths = [
            Path("config.yaml"),
            Path(__file__).parent.parent / "config.yaml",
        ]
        for path in possible_paths:
            if path.exists():
                config_path = str(path)
                break

    config_data: dict[str, Any] = {}

    if config_path and Path(config_path).exists():
        with open(config_path) as f:
            try:
                config_data = yaml.safe_load(f) or {}
            except yaml.YAMLError as e:
                raise ConfigurationError(
                    f"Cannot parse {config_path}: {e}", original_error=e
                ) from e

    # Apply environment variable overrides
    env_overrides = _get_env_overrides()
    _deep_merge(config_data, env_overrides)

    try:
        _config = CarrouselConfig(**config_data)
    except ValidationError as e:
        raise ConfigurationError(
            f"Invalid configuration{f' in {config_path}' if config_path else ''}: {e}",
            original_error=e,
        ) from e
    return _config


def get_config() -> CarrouselConfig:
    """
    Get the current configuration.

    Returns:
        Current configuration (loads default if not yet loaded).
    """
    global _config
    if _config is None:
        _config = load_config()
    return _config


def reload_config() -> CarrouselConfig:
    """
    Reload configuration from disk.

    Use this after config.yaml has been modified to pick up changes.

    Returns:
        Freshly loaded configuration.
    """
    global _config
    _config = None
    return load_config()


def load_catalog(config: Optional[CarrouselConfig] = None) -> tuple[Content, ...]:
    """
    Get the content catalog from configuration.

    Args:
        config: Configuration to read. Defaults to the current configuration.

    Returns:
        Catalog items in configured order.
    """
    config = config or get_config()
    return tuple(item.to_content() for item in config.catalog)


def _get_env_overrides() -> dict[str, Any]:
    """Get configuration overrides from environment variables."""
    overrides: dict[str, Any] = {}

    # Map of environment variables to config paths
    env_map = {
        "CARROUSEL_LOG_LEVEL": ("logging", "level"),
        "CARROUSEL_LOG_FILE": ("logging", "file"),
        "CARROUSEL_SEED": ("scheduling", "seed"),
        "CARROUSEL_STRICT_DISTRIBUTION": ("scheduling", "strict_distribution"),
        "CARROUSEL_REFRESH_INTERVAL_HOURS": ("display", "refresh_interval_hours"),
    }

    for env_var, path in env_map.items():
        value = os.environ.get(env_var)
        if value is not None:
            _set_nested(overrides, path, _parse_env_value(value))

    return overrides


def _parse_env_value(value: str) -> Any:
    """Parse environment variable value to appropriate type."""
    # Boolean
    if value.lower() in ("true", "yes"):
        return True
    if value.lower() in ("false", "no"):
        return False

    # Integer
    try:
        return int(value)
    except ValueError:
        pass

    # Float
    try:
        return float(value)
    except ValueError:
        pass

    return value


def _set_nested(d: dict[str, Any], path: tuple[str, ...], value: Any) -> None:
    """Set a nested dictionary value from a path tuple."""
    for key in path[:-1]:
        d = d.setdefault(key, {})
    d[path[-1]] = value


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> None:
    """Deep merge override into base dictionary."""
    for key, value in override.items():
        if key in base and isinstance(base[key], dict) and isinstance(value, dict):
            _deep_merge(base[key], value)
        else:
            base[key] = value
