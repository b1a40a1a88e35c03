"""Logging utilities for reflectdoc commands."""

from __future__ import annotations

import logging
from pathlib import Path

_LOGGER_NAME = "reflectdoc"
_CONSOLE_FORMAT = "[reflectdoc] %(levelname)s %(message)s"
_VERBOSE_CONSOLE_FORMAT = "[%(name)s] %(levelname)s %(message)s"
_FILE_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def get_logger(name: str | None = None) -> logging.Logger:
    """Return a module-scoped logger under the reflectdoc hierarchy."""
    full_name = f"{_LOGGER_NAME}.{name}" if name else _LOGGER_NAME
    return logging.getLogger(full_name)


def configure_logging(
    *, verbose: bool = False, log_file: Path | None = None
) -> logging.Logger:
    """Attach console and optional file handlers to the reflectdoc logger.

    The console follows ``verbose``. A log file always records debug output,
    so a failed run can be inspected without re-running it with ``--verbose``.
    """
    console_level = logging.DEBUG if verbose else logging.INFO
    logger = logging.getLogger(_LOGGER_NAME)
    logger.propagate = False
    _reset_handlers(logger)

    console = logging.StreamHandler()
    console.setLevel(console_level)
    console.setFormatter(logging.Formatter(_VERBOSE_CONSOLE_FORMAT if verbose else _CONSOLE_FORMAT))
    logger.addHandler(console)

    if log_file is None:
        logger.setLevel(console_level)
        return logger

    log_file = log_file.expanduser()
    log_file.parent.mkdir(parents=True, exist_ok=True)
    sink = logging.FileHandler(log_file, encoding="utf-8")
    sink.setLevel(logging.DEBUG)
    sink.setFormatter(logging.Formatter(_FILE_FORMAT))
    logger.addHandler(sink)
    logger.setLevel(logging.DEBUG)
    return logger


def _reset_handlers(logger: logging.Logger) -> None:
    # Repeated CLI invocations in one process must not duplicate output or leak files.
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()


__all__ = ["configure_logging", "get_logger"]
