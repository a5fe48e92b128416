"""
Centralized Logger Service Module.

Usage:
    from media_gallery.services.logger import get_service_logger
    from media_gallery.enums import LoggerName, LogSource

    logger = get_service_logger(LoggerName.DELETION_PIPELINE, LogSource.PIPELINE)
    logger.info("Deleted image beach.jpg")
"""

# Re-export commonly used enums for convenience
from ...enums import LogEmoji, LoggerName, LogLevel, LogSource
from .logger_service import configure_logging, get_service_logger, is_configured

__all__ = [
    "configure_logging",
    "get_service_logger",
    "is_configured",
    # Enums
    "LogLevel",
    "LogSource",
    "LoggerName",
    "LogEmoji",
]
