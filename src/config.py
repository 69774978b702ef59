"""
Configuration for the kilter heatmap application.

Two layers of configuration are provided:

- ``Settings``: application settings read from ``KH_``-prefixed
  environment variables (or a ``.env`` file), such as the log level and
  the locations of the two board datasets.
- Board configuration: board geometry and the heatmap colours, loaded
  from a YAML file and cached per resolved path.
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Any, Optional
import logging
import threading

import yaml
from pydantic import Field, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from src.heatmap.classifier import Palette
from src.heatmap.geometry import BoardGeometry

logger = logging.getLogger(__name__)

DEFAULT_BOARD_CONFIG = "src/cfg/board_config.yaml"

# Parsed board configurations keyed by resolved file path
_config_cache: dict[Path, dict[str, Any]] = {}

# Lock for thread-safe access to the configuration cache
_config_lock = threading.Lock()

# Project root directory (parent of src/)
PROJECT_ROOT = Path(__file__).parent.parent


class ConfigurationError(Exception):
    """Raised when there are issues with configuration loading or validation."""


class Settings(BaseSettings):
    """Application settings.

    Every field can be set through an environment variable named after
    the field with the ``KH_`` prefix, e.g. ``KH_LOG_LEVEL=DEBUG``.

    Attributes:
        app_name: Application title.
        app_version: Application version string.
        debug: Enables human-readable logs and the API docs.
        testing: Enables the API docs for test runs.
        log_level: Minimum log level.
        cors_origins: Origins allowed to call the API from a browser.
        hold_map_path: Hold layout JSON file.
        usage_map_path: Angle/hold/grade usage JSON file.
        board_config_path: Board geometry and palette YAML file.
    """

    model_config = SettingsConfigDict(
        env_prefix="KH_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    app_name: str = "kilter-heatmap"
    app_version: str = "0.1.0"
    debug: bool = False
    testing: bool = False
    log_level: str = "INFO"
    cors_origins: list[str] = Field(default_factory=lambda: ["http://localhost:8000"])
    hold_map_path: str = "data/full-hold-map.json"
    usage_map_path: str = "data/angle-hold-boulder-grade-map.json"
    board_config_path: str = DEFAULT_BOARD_CONFIG


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return the process-wide settings, read from the environment once."""
    return Settings()


def get_settings_override(overrides: dict[str, Any]) -> Settings:
    """Build a fresh Settings instance with explicit overrides.

    Args:
        overrides: Field values taking precedence over the environment.

    Returns:
        A new, uncached Settings instance.
    """
    return Settings(**overrides)


def get_project_root() -> Path:
    """
    Get the project root directory.

    Returns:
        Path: The absolute path to the project root directory.
    """
    return PROJECT_ROOT


def resolve_path(path_str: str, relative_to: Optional[Path] = None) -> Path:
    """
    Resolve a path string to an absolute path.

    Relative paths are resolved against the project root (or
    ``relative_to``); absolute paths are returned unchanged.

    Examples:
        >>> resolve_path('data/full-hold-map.json')
        Path('/path/to/project/data/full-hold-map.json')
        >>> resolve_path('/absolute/path')
        Path('/absolute/path')
    """
    path = Path(path_str)

    if path.is_absolute():
        return path

    base_dir = relative_to if relative_to is not None else PROJECT_ROOT
    return (base_dir / path).resolve()


def load_config(
    config_path: str = DEFAULT_BOARD_CONFIG, force_reload: bool = False
) -> dict[str, Any]:
    """
    Load the board configuration from a YAML file with caching.

    Each file is parsed once; use force_reload=True to read it again.

    Args:
        config_path: Path to the YAML file, relative to the project root.
        force_reload: If True, bypass the cache and reload from disk.

    Returns:
        Dict[str, Any]: The parsed configuration dictionary.

    Raises:
        ConfigurationError: If the file cannot be found, read, parsed, or
                           lacks a required section.

    Examples:
        >>> config = load_config()
        >>> config['board']['image_width']
        1080
    """
    config_file = resolve_path(config_path)

    with _config_lock:
        if config_file in _config_cache and not force_reload:
            logger.debug("Returning cached configuration for %s", config_file)
            return _config_cache[config_file]

        if not config_file.exists():
            raise ConfigurationError(
                f"Configuration file not found: {config_file}\n"
                f"Expected location: {config_path} (relative to project root)"
            )

        try:
            with open(config_file, "r", encoding="utf-8") as f:
                config = yaml.safe_load(f)
        except yaml.YAMLError as exc:
            raise ConfigurationError(
                f"Error parsing YAML configuration file {config_file}: {exc}"
            ) from exc
        except OSError as exc:
            raise ConfigurationError(  # pragma: no cover
                f"Error reading configuration file {config_file}: {exc}"
            ) from exc

        if config is None:
            raise ConfigurationError(f"Configuration file is empty: {config_file}")

        if not isinstance(config, dict):
            raise ConfigurationError(
                f"Configuration must be a dictionary, got {type(config).__name__}"
            )

        _validate_config(config)

        _config_cache[config_file] = config
        logger.info("Configuration loaded successfully from %s", config_file)

        return config


def _validate_config(config: dict[str, Any]) -> None:
    """
    Ensure the required sections and keys exist.

    Raises:
        ConfigurationError: If a required section or key is missing.
    """
    required_sections = {
        "board": [
            "image_width",
            "image_height",
            "edge_left",
            "edge_right",
            "edge_bottom",
            "edge_top",
        ],
        "palette": ["colors"],
    }

    for section, keys in required_sections.items():
        if section not in config:
            raise ConfigurationError(
                f"Missing required configuration section: '{section}'"
            )

        if not isinstance(config[section], dict):
            raise ConfigurationError(
                f"Configuration section '{section}' must be a dictionary"
            )

        for key in keys:
            if key not in config[section]:
                raise ConfigurationError(
                    f"Missing required configuration key: '{section}.{key}'"
                )


def get_config_value(
    key_path: str, default: Any = None, config_path: str = DEFAULT_BOARD_CONFIG
) -> Any:
    """
    Get a configuration value using dot notation.

    Examples:
        >>> get_config_value('board.edge_top')
        180
        >>> get_config_value('board.missing', default=0)
        0
    """
    value: Any = load_config(config_path)
    for key in key_path.split("."):
        if isinstance(value, dict) and key in value:
            value = value[key]
        else:
            return default

    return value


def clear_config_cache() -> None:
    """
    Clear every cached configuration.

    The next call to load_config() reads from disk again.
    """
    with _config_lock:
        _config_cache.clear()
        logger.debug("Configuration cache cleared")


def load_board_geometry(config_path: str = DEFAULT_BOARD_CONFIG) -> BoardGeometry:
    """
    Build the board geometry from the ``board`` section.

    Raises:
        ConfigurationError: If the section holds invalid values.
    """
    board = load_config(config_path)["board"]
    try:
        return BoardGeometry(**board)
    except ValidationError as exc:
        raise ConfigurationError(f"Invalid board configuration: {exc}") from exc


def load_palette(config_path: str = DEFAULT_BOARD_CONFIG) -> Palette:
    """
    Build the colour palette from ``palette.colors`` (top bucket first).

    Raises:
        ConfigurationError: If the list does not hold five colour strings.
    """
    colors = load_config(config_path)["palette"]["colors"]
    if not isinstance(colors, list) or not all(isinstance(c, str) for c in colors):
        raise ConfigurationError("'palette.colors' must be a list of colour strings")
    try:
        return Palette.from_colors(colors)
    except ValueError as exc:
        raise ConfigurationError(str(exc)) from exc
