"""Logging infrastructure for Attachment Core.

@public

Key components:
    get_pipeline_logger: Factory function for component loggers
    setup_logging: Apply a YAML or built-in logging configuration
    LoggingConfig: Resolves which configuration applies

Example:
    >>> from attachment_core.logging import get_pipeline_logger
    >>>
    >>> logger = get_pipeline_logger(__name__)
    >>> logger.info("Uploading attachment")

Note:
    Library code obtains loggers through get_pipeline_logger() rather than
    Python's logging module so that output goes through Prefect's loggers.
"""

from .logging_config import LoggingConfig, get_pipeline_logger, reset_logging, setup_logging

__all__ = [
    "LoggingConfig",
    "get_pipeline_logger",
    "reset_logging",
    "setup_logging",
]
