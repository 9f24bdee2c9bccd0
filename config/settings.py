"""Loaded configuration exposed as plain values and dicts."""
from __future__ import annotations

from typing import Any, Dict

from offertrack.config_manager import Config, load_config

CONFIG: Config = load_config()

ENVIRONMENT = CONFIG.app.environment
DEBUG = CONFIG.app.debug
IS_PRODUCTION = ENVIRONMENT == "production"
TIMEZONE = CONFIG.app.timezone

SCORING_CONFIG: Dict[str, Any] = CONFIG.scoring.model_dump(mode="python")
TREND_CONFIG: Dict[str, Any] = CONFIG.trend.model_dump(mode="python")

LOGGING_CONFIG: Dict[str, Any] = {
    "level": CONFIG.logging.level,
    "file_path": str(CONFIG.logging.file_path) if CONFIG.logging.file_path else None,
    "max_file_size": f"{CONFIG.logging.max_file_size_mb} MB",
    "retention": f"{CONFIG.logging.retention_days} days",
    "format": CONFIG.logging.format,
}

__all__ = [
    "CONFIG",
    "ENVIRONMENT",
    "DEBUG",
    "IS_PRODUCTION",
    "TIMEZONE",
    "SCORING_CONFIG",
    "TREND_CONFIG",
    "LOGGING_CONFIG",
]
