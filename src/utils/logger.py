# src/utils/logger.py
# Logging setup for the offer tracker
# ===================================

"""
Central loguru configuration.

Library modules simply ``from loguru import logger`` and log; this module
decides where those records go: a console sink whose verbosity follows
``DEBUG`` and, when ``logging.file_path`` is configured, a rotating file sink.
"""

import sys
from pathlib import Path
from typing import Any, Dict, Optional

from loguru import logger

from config.settings import DEBUG, LOGGING_CONFIG


class OfferTrackerLogger:
    """Configures loguru sinks once per process."""

    def __init__(self):
        self.is_configured = False
        self.log_file_path: Optional[Path] = None
        self._handler_ids: list[int] = []

    def configure_logging(self, config: Optional[Dict[str, Any]] = None, force: bool = False):
        """
        Install the console sink and, if configured, the file sink.

        Args:
            config: Logging settings; defaults to ``LOGGING_CONFIG``.
            force: Replace sinks installed by a previous call.
        """
        if self.is_configured and not force:
            logger.debug("Logging already configured, skipping")
            return

        config = config or LOGGING_CONFIG

        # Drop loguru's default stderr sink and anything we added before
        logger.remove()
        self._handler_ids = []
        self.log_file_path = None

        self._configure_console_handler(config)
        if config.get("file_path"):
            self._configure_file_handler(config)

        self.is_configured = True
        logger.debug("Logging configured: {}", config)

    def _configure_console_handler(self, config: Dict[str, Any]):
        if DEBUG:
            console_format = (
                "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | "
                "<level>{level: <8}</level> | "
                "<cyan>{name}</cyan>:<cyan>{line}</cyan> | "
                "<level>{message}</level>"
            )
            console_level = "DEBUG"
        else:
            console_format = config.get(
                "format", "{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {message}"
            )
            console_level = config.get("level", "INFO")

        self._handler_ids.append(
            logger.add(
                sys.stderr,
                format=console_format,
                level=console_level,
                colorize=DEBUG,
                backtrace=DEBUG,
                diagnose=DEBUG,
            )
        )

    def _configure_file_handler(self, config: Dict[str, Any]):
        """Rotating, compressed file sink with a parseable line format."""
        self.log_file_path = Path(config["file_path"])
        self.log_file_path.parent.mkdir(parents=True, exist_ok=True)

        file_format = (
            "{time:YYYY-MM-DD HH:mm:ss.SSS} | "
            "{level: <8} | "
            "{process.id: <6} | "
            "{name}:{function}:{line} | "
            "{message}"
        )

        self._handler_ids.append(
            logger.add(
                str(self.log_file_path),
                format=file_format,
                level=config.get("level", "INFO"),
                rotation=config.get("max_file_size", "10 MB"),
                retention=config.get("retention", "30 days"),
                compression="gz",
                enqueue=True,
                backtrace=True,
                diagnose=False,
            )
        )

    def log_startup(self, version: str, config_summary: Optional[Dict[str, Any]] = None):
        logger.info("Offer tracker {} starting (debug={})", version, DEBUG)
        for key, value in (config_summary or {}).items():
            logger.info("  {}: {}", key, value)
        if self.log_file_path:
            logger.info("Writing logs to {}", self.log_file_path)


_logger_instance = None


def get_logger() -> OfferTrackerLogger:
    """Return the process-wide logging configurator, configuring it on first call."""
    global _logger_instance
    if _logger_instance is None:
        _logger_instance = OfferTrackerLogger()
        _logger_instance.configure_logging()
    return _logger_instance


def setup_logging(config: Optional[Dict[str, Any]] = None) -> OfferTrackerLogger:
    """
    Configure logging at program start.

    Args:
        config: Optional override of ``LOGGING_CONFIG``; replaces existing sinks.

    Returns:
        The configured logger instance
    """
    logger_instance = get_logger()
    if config:
        logger_instance.configure_logging(config, force=True)
    return logger_instance
