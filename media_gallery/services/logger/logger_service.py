"""
loguru wiring for the media gallery.

``configure_logging`` installs the sinks once at startup (stderr, plus an
optional rotating file). Modules never touch loguru directly: they ask
``get_service_logger`` for a logger pre-bound to a ``LoggerName`` and a
``LogSource`` and log through its ``error/warning/info/debug`` methods,
which prefix an emoji and carry a structured ``context`` dict.
"""

import sys
from typing import Any, Dict, Optional

from loguru import logger

from ...enums import LogEmoji, LoggerName, LogLevel, LogSource

CONSOLE_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{extra[source]}</cyan>:<cyan>{extra[logger_name]}</cyan> - "
    "<level>{message}</level>"
)
FILE_FORMAT = (
    "{time:YYYY-MM-DD HH:mm:ss.SSS} | {level: <8} | "
    "{extra[source]}:{extra[logger_name]} - {message} | {extra[context]}"
)

_configured = False


def configure_logging(
    level: LogLevel = LogLevel.INFO,
    log_file: Optional[str] = None,
    enable_console: bool = True,
) -> None:
    """
    Install the loguru sinks used by every service logger.

    Safe to call more than once; the previous sinks are removed first.

    Args:
        level: Minimum level written to the sinks
        log_file: Optional path of a rotating log file
        enable_console: Whether to log to stderr
    """
    global _configured

    logger.remove()
    logger.configure(
        extra={"source": LogSource.SYSTEM.value, "logger_name": "root", "context": {}}
    )

    if enable_console:
        logger.add(
            sys.stderr,
            level=level.value,
            format=CONSOLE_FORMAT,
            colorize=sys.stderr.isatty(),
            backtrace=False,
            diagnose=False,
        )

    if log_file:
        logger.add(
            log_file,
            level=level.value,
            format=FILE_FORMAT,
            rotation="10 MB",
            retention=5,
            enqueue=True,
        )

    _configured = True


def is_configured() -> bool:
    return _configured


def _format_message(emoji: LogEmoji, message: str) -> str:
    return f"{emoji.value} {message}"


def get_service_logger(
    logger_name: LoggerName,
    source: LogSource = LogSource.SYSTEM,
    default_emoji: Optional[LogEmoji] = None,
):
    """
    Logger bound to ``logger_name`` and ``source`` for one module.

    The emoji prefix is the one passed to the call, else ``default_emoji``,
    else the level's own emoji.

    Example:
        logger = get_service_logger(LoggerName.UPLOAD_PIPELINE, LogSource.PIPELINE)
        logger.info("Uploaded beach.jpg", extra_context={"media_id": "beach.jpg"})
        logger.error("Upload failed", exception=e)
    """

    bound = logger.bind(source=source.value, logger_name=logger_name.value)

    def _resolve_emoji(
        method_emoji: Optional[LogEmoji], fallback_emoji: LogEmoji
    ) -> LogEmoji:
        if method_emoji is not None:
            return method_emoji
        if default_emoji is not None:
            return default_emoji
        return fallback_emoji

    class ServiceLogger:
        name = logger_name
        log_source = source

        @staticmethod
        def error(
            message: str,
            exception: Optional[BaseException] = None,
            error_context: Optional[Dict[str, Any]] = None,
            emoji: Optional[LogEmoji] = None,
            **kwargs,
        ):
            """Log an error, attaching the exception traceback when given."""
            context = dict(error_context or {})
            if exception is not None:
                context.setdefault("error_type", type(exception).__name__)
                context.setdefault("error", str(exception))
            text = _format_message(_resolve_emoji(emoji, LogEmoji.ERROR), message)
            target = bound.bind(context=context)
            if exception is not None:
                target.opt(exception=exception).error(text)
            else:
                target.error(text)

        @staticmethod
        def warning(
            message: str,
            extra_context: Optional[Dict[str, Any]] = None,
            emoji: Optional[LogEmoji] = None,
            **kwargs,
        ):
            text = _format_message(_resolve_emoji(emoji, LogEmoji.WARNING), message)
            bound.bind(context=extra_context or {}).warning(text)

        @staticmethod
        def info(
            message: str,
            extra_context: Optional[Dict[str, Any]] = None,
            emoji: Optional[LogEmoji] = None,
            **kwargs,
        ):
            text = _format_message(_resolve_emoji(emoji, LogEmoji.INFO), message)
            bound.bind(context=extra_context or {}).info(text)

        @staticmethod
        def debug(
            message: str,
            extra_context: Optional[Dict[str, Any]] = None,
            emoji: Optional[LogEmoji] = None,
            **kwargs,
        ):
            text = _format_message(_resolve_emoji(emoji, LogEmoji.DEBUG), message)
            bound.bind(context=extra_context or {}).debug(text)

    return ServiceLogger()
