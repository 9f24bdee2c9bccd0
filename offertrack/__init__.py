"""Configuration tooling for the offer tracker."""
from __future__ import annotations

from .config_manager import ConfigError, load_config, save_config
from .config_schema import DEFAULT_CONFIG, Config

__all__ = [
    "Config",
    "ConfigError",
    "DEFAULT_CONFIG",
    "load_config",
    "save_config",
]
