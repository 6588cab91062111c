"""Logging configuration and logger access."""

import logging
from pathlib import Path
from typing import Optional

LOGGER_NAME = "testthat"

_configured = False
_log_file_path: Optional[Path] = None
_file_handler: Optional[logging.Handler] = None
_stream_handler: Optional[logging.Handler] = None


def configure_logging(level: str = "WARNING", log_file: Optional[Path] = None) -> None:
    """Attach handlers to the package logger.

    Library code only creates loggers; applications (the CLI) call this.

    Args:
        level: Log level name
        log_file: Also write log records to this file
    """
    global _configured, _stream_handler

    package_logger = logging.getLogger(LOGGER_NAME)
    package_logger.setLevel(level.upper())

    if not _configured:
        _stream_handler = logging.StreamHandler()
        _stream_handler.setFormatter(_build_formatter())
        package_logger.addHandler(_stream_handler)
        _configured = True

    _configure_file_handler(package_logger, log_file)


def _configure_file_handler(package_logger: logging.Logger, log_file: Optional[Path]) -> None:
    """Add, swap or remove the file handler."""
    global _log_file_path, _file_handler

    if log_file is None:
        if _file_handler:
            package_logger.removeHandler(_file_handler)
            _file_handler.close()
            _file_handler = None
            _log_file_path = None
        return

    log_file = Path(log_file).expanduser()
    if _file_handler and _log_file_path == log_file:
        return

    if _file_handler:
        package_logger.removeHandler(_file_handler)
        _file_handler.close()

    log_file.parent.mkdir(parents=True, exist_ok=True)
    handler = logging.FileHandler(log_file, encoding="utf-8")
    handler.setFormatter(_build_formatter())
    package_logger.addHandler(handler)

    _file_handler = handler
    _log_file_path = log_file


def _build_formatter() -> logging.Formatter:
    return logging.Formatter(
        fmt="%(asctime)s [%(levelname)s] %(name)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


def get_logger(name: str) -> logging.Logger:
    """Return the logger for a module of this package."""
    return logging.getLogger(name)
