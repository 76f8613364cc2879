"""Core utilities."""

import logging
import sys
from logging.handlers import TimedRotatingFileHandler
from pathlib import Path

from patch_extractor.core.settings.app_settings import LoggingSettings

logger = logging.getLogger(__name__)

# Named so repeated setup replaces our handlers instead of stacking them
APP_STREAM_HANDLER_NAME = "pex_app_stream_handler"
APP_FILE_HANDLER_NAME = "pex_app_file_handler"


def _level_number(level: str) -> int:
    """
    Convert a level name such as "debug" or "INFO" to its numeric value.

    Args:
        level (str): Level name, case-insensitive.

        int: Numeric log level.
    """
    return logging.getLevelNamesMapping()[level.upper()]


def _drop_app_handlers(root_logger: logging.Logger) -> None:
    """
    Detach and close handlers installed by a previous setup_logging call.

    Args:
        root_logger (logging.Logger): Logger to clean up.

    """
    for handler in list(root_logger.handlers):
        if handler.get_name() in (APP_STREAM_HANDLER_NAME, APP_FILE_HANDLER_NAME):
            root_logger.removeHandler(handler)
            handler.close()


def _build_handler(settings: LoggingSettings) -> logging.Handler:
    """
    Create the output handler for the configured destination.

    Args:
        settings (LoggingSettings): Logging settings.

        logging.Handler: File handler when a log file is set, stderr otherwise.
    """
    if not settings.log_file:
        # stdout carries the extraction summary
        handler: logging.Handler = logging.StreamHandler(sys.stderr)
        handler.set_name(APP_STREAM_HANDLER_NAME)
        return handler

    log_path = Path(settings.log_file)
    log_path.parent.mkdir(parents=True, exist_ok=True)
    if settings.rotate_logs:
        handler = TimedRotatingFileHandler(filename=log_path, when="midnight", encoding="utf-8")
    else:
        handler = logging.FileHandler(log_path, encoding="utf-8")
    handler.set_name(APP_FILE_HANDLER_NAME)
    return handler


def setup_logging(settings: LoggingSettings, level: str | None = None) -> None:
    """
    Configure the root logger for the application.

    The handler level is the lowest of the root level and every per-logger
    level, so a logger configured more verbosely than root still gets its
    records written.

    Args:
        settings (LoggingSettings): Logging settings to configure logging.
        level (str | None): Root level overriding `settings.log_level`
            (None = use the settings).

    """
    root_level = level or settings.log_level
    handler_level = min(
        [_level_number(root_level)] + [_level_number(name) for name in settings.loggers.values()]
    )

    root_logger = logging.getLogger()
    root_logger.setLevel(_level_number(root_level))
    _drop_app_handlers(root_logger=root_logger)

    handler = _build_handler(settings=settings)
    handler.setFormatter(logging.Formatter(fmt=settings.log_format, datefmt=settings.date_format))
    handler.setLevel(handler_level)
    root_logger.addHandler(handler)

    for logger_name, logger_level in settings.loggers.items():
        logging.getLogger(logger_name).setLevel(_level_number(logger_level))

    logger.debug(f"Logging configured at level {root_level.upper()}")
