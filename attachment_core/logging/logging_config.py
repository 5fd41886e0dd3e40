"""Logging configuration for Attachment Core.

@public

Loggers are obtained through Prefect's get_logger so that attachment logs
share Prefect's formatting and handlers. Configuration is read from a YAML
file in logging.config.dictConfig format, or built from DEFAULT_LOG_LEVELS.

Usage:
    >>> from attachment_core.logging import get_pipeline_logger
    >>> logger = get_pipeline_logger(__name__)
    >>> logger.info("Uploaded attachment")

Environment variables:
    ATTACHMENT_CORE_LOGGING_CONFIG: Path to a YAML logging configuration
    ATTACHMENT_CORE_LOG_LEVEL: Level applied to every attachment_core logger
    PREFECT_LOGGING_SETTINGS_PATH: Fallback configuration path
"""

import logging.config
import os
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from prefect.logging import get_logger

# Per-component levels used when no configuration file is found
DEFAULT_LOG_LEVELS = {
    "attachment_core": "INFO",
    "attachment_core.attachments": "INFO",
    "attachment_core.blob_store": "WARNING",
    "attachment_core.documents": "WARNING",
}

LOG_FORMAT = "%(asctime)s.%(msecs)03d | %(levelname)-7s | %(name)s - %(message)s"


class LoggingConfig:
    """Resolves and applies the logging configuration.

    @public

    The configuration file is looked up in this order:
        1. Explicit config_path parameter
        2. ATTACHMENT_CORE_LOGGING_CONFIG environment variable
        3. PREFECT_LOGGING_SETTINGS_PATH environment variable

    If none of these points to an existing file, the built-in configuration
    is used.

    Example:
        >>> LoggingConfig().apply()
        >>> LoggingConfig(Path("logging.yml")).apply()
    """

    def __init__(self, config_path: Optional[Path] = None):
        self.config_path = config_path or self._config_path_from_env()
        self._config: Optional[Dict[str, Any]] = None

    @staticmethod
    def _config_path_from_env() -> Optional[Path]:
        for variable in ("ATTACHMENT_CORE_LOGGING_CONFIG", "PREFECT_LOGGING_SETTINGS_PATH"):
            if value := os.environ.get(variable):
                return Path(value)
        return None

    @property
    def from_file(self) -> bool:
        return self.config_path is not None and self.config_path.exists()

    def load_config(self) -> Dict[str, Any]:
        """Return the dictConfig mapping, reading the YAML file on first call."""
        if self._config is None:
            if self.from_file:
                assert self.config_path is not None
                with open(self.config_path, "r") as f:
                    self._config = yaml.safe_load(f) or {"version": 1}
            else:
                self._config = self.default_config(os.environ.get("ATTACHMENT_CORE_LOG_LEVEL"))
        return self._config

    @staticmethod
    def default_config(level: Optional[str] = None) -> Dict[str, Any]:
        """Built-in configuration: one console handler, one logger per component.

        Args:
            level: When set, overrides every level in DEFAULT_LOG_LEVELS.
        """
        loggers = {
            name: {"level": (level or default).upper(), "handlers": [], "propagate": True}
            for name, default in DEFAULT_LOG_LEVELS.items()
        }
        # Only the package root owns a handler; components propagate to it
        loggers["attachment_core"].update(handlers=["console"], propagate=False)
        return {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {"standard": {"format": LOG_FORMAT, "datefmt": "%H:%M:%S"}},
            "handlers": {
                "console": {
                    "class": "logging.StreamHandler",
                    "formatter": "standard",
                    "stream": "ext://sys.stdout",
                },
            },
            "loggers": loggers,
            "root": {"level": "WARNING", "handlers": ["console"]},
        }

    def apply(self):
        """Apply the configuration with logging.config.dictConfig.

        A ``prefect`` logger entry in the configuration also seeds
        PREFECT_LOGGING_LEVEL when it is not already set.
        """
        config = self.load_config()
        logging.config.dictConfig(config)

        if prefect_logger := config.get("loggers", {}).get("prefect"):
            os.environ.setdefault("PREFECT_LOGGING_LEVEL", prefect_logger.get("level", "INFO"))


_logging_config: Optional[LoggingConfig] = None


def setup_logging(config_path: Optional[Path] = None, level: Optional[str] = None):
    """Configure logging for Attachment Core.

    @public

    Args:
        config_path: Optional path to a YAML logging configuration file.
        level: Optional level forced onto every attachment_core logger.

    Example:
        >>> setup_logging(level="DEBUG")
    """
    global _logging_config

    _logging_config = LoggingConfig(config_path)
    _logging_config.apply()

    if level:
        for logger_name in DEFAULT_LOG_LEVELS:
            get_logger(logger_name).setLevel(level.upper())


def reset_logging() -> None:
    """Forget the applied configuration so the next logger request re-applies it."""
    global _logging_config
    _logging_config = None


def get_pipeline_logger(name: str):
    """Get a logger for a library component, configuring logging on first use.

    @public

    Args:
        name: Logger name, typically __name__.

    Returns:
        Prefect logger instance.
    """
    if _logging_config is None:
        setup_logging()

    return get_logger(name)
