"""Logging configuration for reasoning-gate.

The engines emit structured events through ``structlog.get_logger(__name__)``
and the registry and settings modules log through the standard library.
``setup_logging`` routes both through the stdlib ``reasoning_gate`` logger,
so a single level and a single set of handlers govern every record the
package produces.

Example:
    >>> setup_logging(log_level="WARNING")
    >>> await PlanEngine(registry).create_plan("Read the config file")
    # plan_created is an info event and is dropped
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import TYPE_CHECKING, Any

import structlog

if TYPE_CHECKING:
    from reasoning_gate.config import Settings


PACKAGE_LOGGER = "reasoning_gate"

# Package logger
logger = logging.getLogger(PACKAGE_LOGGER)

# Run on structlog events before they are handed to the stdlib logger, and on
# plain stdlib records before rendering.
SHARED_PROCESSORS: list[Any] = [
    structlog.contextvars.merge_contextvars,
    structlog.processors.StackInfoRenderer(),
    structlog.processors.format_exc_info,
]


def _formatter(log_format: str, json_format: bool) -> logging.Formatter:
    if json_format:
        processors: list[Any] = [
            structlog.stdlib.add_log_level,
            structlog.stdlib.add_logger_name,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            structlog.processors.JSONRenderer(),
        ]
        log_format = "%(message)s"
    else:
        processors = [
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            structlog.dev.ConsoleRenderer(colors=False),
        ]
    return structlog.stdlib.ProcessorFormatter(
        processors=processors,
        foreign_pre_chain=SHARED_PROCESSORS,
        fmt=log_format,
    )


def setup_logging(
    settings: Settings | None = None,
    *,
    log_level: str | None = None,
    log_format: str | None = None,
    log_file: Path | None = None,
    json_format: bool | None = None,
) -> logging.Logger:
    """Route structlog and stdlib records through the package logger.

    structlog is configured to hand events to stdlib loggers named after the
    emitting module, all children of ``reasoning_gate``. The package logger
    carries the level and the handlers; each handler renders records with a
    ``ProcessorFormatter`` so structured events keep their key/value context.

    Args:
        settings: Optional Settings instance. If not provided,
            uses get_settings().
        log_level: Override log level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        log_format: Override the stdlib format string wrapped around each
            rendered event. Ignored for JSON output.
        log_file: Optional path to log file for file logging.
        json_format: Override ``Settings.log_json``.

    Returns:
        The configured package logger.
    """
    if settings is None:
        from reasoning_gate.config import get_settings

        settings = get_settings()

    effective_level = log_level or settings.log_level
    effective_format = log_format or settings.log_format
    as_json = settings.log_json if json_format is None else json_format

    numeric_level = getattr(logging, effective_level.upper(), logging.INFO)

    structlog.configure(
        processors=[*SHARED_PROCESSORS, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )

    logger.setLevel(numeric_level)

    # Remove existing handlers to avoid duplicates
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    formatter = _formatter(effective_format, as_json)

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(numeric_level)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if log_file is not None:
        log_file = Path(log_file)
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(numeric_level)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    logger.propagate = False

    return logger


def get_logger(name: str) -> logging.Logger:
    """Get a stdlib child logger of the package logger.

    Example:
        >>> get_logger("planning").name
        'reasoning_gate.planning'
    """
    if name == PACKAGE_LOGGER or name.startswith(f"{PACKAGE_LOGGER}."):
        return logging.getLogger(name)
    return logging.getLogger(f"{PACKAGE_LOGGER}.{name}")


class LogContext:
    """Temporarily change the level of a logger.

    Because engine events go through stdlib loggers once ``setup_logging``
    has run, this also opens or closes the tap on structlog events.

    Example:
        >>> with LogContext(level="DEBUG"):
        ...     await validator.validate_response(response)
    """

    def __init__(
        self,
        level: str = "DEBUG",
        logger_name: str = PACKAGE_LOGGER,
    ) -> None:
        self.level = level
        self.logger_name = logger_name
        self._original_level: int | None = None
        self._handler_levels: list[tuple[logging.Handler, int]] = []
        self._logger: logging.Logger | None = None

    def __enter__(self) -> logging.Logger:
        self._logger = logging.getLogger(self.logger_name)
        numeric_level = getattr(logging, self.level.upper(), logging.DEBUG)
        self._original_level = self._logger.level
        self._logger.setLevel(numeric_level)
        # Handlers installed by setup_logging filter on level too
        self._handler_levels = [(handler, handler.level) for handler in self._logger.handlers]
        for handler, _ in self._handler_levels:
            handler.setLevel(numeric_level)
        return self._logger

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        if self._logger is not None and self._original_level is not None:
            self._logger.setLevel(self._original_level)
        for handler, level in self._handler_levels:
            handler.setLevel(level)


__all__ = [
    "PACKAGE_LOGGER",
    "LogContext",
    "get_logger",
    "logger",
    "setup_logging",
]
