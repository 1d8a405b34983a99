"""
Logging Configuration

Centralized logging configuration for the deep-space package.
All modules should use this logger for consistent, structured output.

Usage:
    from deep_space.logging_config import get_logger

    logger = get_logger(__name__)
    logger.info("context_initialized", regime="synchronous")
    logger.debug("integrator_restart", t=-50.0)
"""

import logging
import sys
from typing import Optional

import structlog

from deep_space.config import DeepSpaceSettings

# Default logging format
LOG_FORMAT = "%(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def _processors(json: bool) -> list:
    renderer = structlog.processors.JSONRenderer() if json else structlog.dev.ConsoleRenderer(colors=False)
    return [
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        renderer,
    ]


def _configure_structlog(json: bool) -> None:
    structlog.configure(
        processors=_processors(json),
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def configure_logging(level: int = logging.INFO, log_file: Optional[str] = None, json: bool = False) -> None:
    """
    Configure logging for the entire application.

    Parameters
    ----------
    level : int
        Logging level (e.g., logging.DEBUG, logging.INFO)
    log_file : str, optional
        Path to log file. If None, logs only to console.
    json : bool
        Render events as JSON lines instead of console key=value text.
    """
    handlers = [logging.StreamHandler(sys.stdout)]

    if log_file:
        handlers.append(logging.FileHandler(log_file))

    logging.basicConfig(
        level=level,
        format=LOG_FORMAT,
        datefmt=DATE_FORMAT,
        handlers=handlers,
        force=True,
    )
    _configure_structlog(json)


def configure_from_settings(settings: DeepSpaceSettings, log_file: Optional[str] = None) -> None:
    """Configure logging from the log_level and log_json runtime settings."""
    configure_logging(level=logging.getLevelName(settings.log_level), log_file=log_file, json=settings.log_json)


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """
    Get a configured logger instance.

    Parameters
    ----------
    name : str
        Name of the logger (typically __name__)

    Returns
    -------
    structlog.stdlib.BoundLogger
        Structured logger routed through the stdlib logger of that name
    """
    return structlog.get_logger(name)


# Route structlog through stdlib levels unless the application already did
if not structlog.is_configured():
    _configure_structlog(json=False)
