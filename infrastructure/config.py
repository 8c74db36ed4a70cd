"""
SUBISO CONFIG - Search Settings from TOML

Settings are loaded once from config/subiso.toml ([search] section),
merged with explicit overrides, and converted into a frozen SearchSettings
struct via msgspec.

Lookup order for the file:
1. explicit path argument
2. SUBISO_CONFIG environment variable
3. config/subiso.toml next to the package

A missing or unreadable file is not fatal: it warns and falls back to the
SearchSettings defaults.

Usage:
    from infrastructure.config import load_settings, configure_logging

    settings = load_settings(overrides={"strategy": "iterative"})
    configure_logging(settings.log_level)
"""
import logging
import os
import tomllib
import warnings
from pathlib import Path
from typing import Any, Dict, Optional, Union

import msgspec

from core.errors import ConfigError
from core.schemas import SearchSettings

DEFAULT_CONFIG_PATH = Path(__file__).parent.parent / "config" / "subiso.toml"
CONFIG_ENV_VAR = "SUBISO_CONFIG"
LOGGER_NAMESPACES = ("core", "infrastructure", "forge", "benchmarks")


def resolve_config_path(path: Optional[Union[str, Path]] = None) -> Path:
    if path is not None:
        return Path(path)
    env_path = os.environ.get(CONFIG_ENV_VAR)
    if env_path:
        return Path(env_path)
    return DEFAULT_CONFIG_PATH


def load_toml_config(path: Optional[Union[str, Path]] = None) -> Dict[str, Any]:
    """
    Load the raw TOML configuration.

    Returns:
        Dict with all configuration sections, or {} if the file cannot be read
    """
    config_path = resolve_config_path(path)
    try:
        with open(config_path, "rb") as f:
            return tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError) as e:
        warnings.warn(f"Failed to load config from {config_path}: {e}")
        return {}


def settings_from_dict(data: Dict[str, Any]) -> SearchSettings:
    """
    Convert a plain dict into validated SearchSettings.

    Raises:
        ConfigError: On unknown keys, wrong types or invalid values
    """
    try:
        settings = msgspec.convert(data, SearchSettings, strict=False)
    except msgspec.ValidationError as e:
        raise ConfigError(f"Invalid search settings: {e}") from e
    return settings.validate()


def load_settings(
    path: Optional[Union[str, Path]] = None,
    overrides: Optional[Dict[str, Any]] = None,
) -> SearchSettings:
    """
    Load SearchSettings from the [search] section, then apply overrides.

    Args:
        path: Optional config file path
        overrides: Keys that win over the file (None values are ignored)

    Returns:
        Validated SearchSettings
    """
    section = dict(load_toml_config(path).get("search", {}))
    if overrides:
        section.update({key: value for key, value in overrides.items() if value is not None})
    return settings_from_dict(section)


def configure_logging(level: Union[str, int] = "WARNING") -> None:
    """Set the level of every subiso package logger."""
    if isinstance(level, str):
        level = level.upper()
    for namespace in LOGGER_NAMESPACES:
        logging.getLogger(namespace).setLevel(level)
