"""Logging configuration for neocities-sync."""

import logging
import sys
from pathlib import Path

LOGGER_NAME = "neocities_sync"

# httpx logs one INFO line per request on its own logger
HTTP_LOGGER_NAME = "httpx"

CONSOLE_LEVELS = {-1: logging.WARNING, 0: logging.INFO, 1: logging.DEBUG}


def _build_handlers(verbosity: int, log_file: Path | None) -> list[logging.Handler]:
    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(CONSOLE_LEVELS[max(-1, min(1, verbosity))])
    if verbosity > 0:
        console_handler.setFormatter(logging.Formatter("%(levelname)s [%(name)s]: %(message)s"))
    else:
        console_handler.setFormatter(logging.Formatter("%(message)s"))
    handlers: list[logging.Handler] = [console_handler]

    if log_file:
        file_handler = logging.FileHandler(log_file, mode="a")
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(logging.Formatter(
            "%(asctime)s %(levelname)s [%(name)s] %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        ))
        handlers.append(file_handler)

    return handlers


def setup_logging(
    verbosity: int = 0,
    log_file: Path | None = None,
) -> logging.Logger:
    """Configure and return the logger for neocities-sync.

    Library modules log to children of this logger (``neocities_sync.catalog``,
    ``neocities_sync.gateway``, ...). API request lines from httpx are only
    wired in when verbose or when writing a log file, and never reach a
    quiet or normal console.

    Args:
        verbosity: -1 for quiet (WARNING+), 0 for normal (INFO), 1 for verbose (DEBUG)
        log_file: Optional path to write logs to file

    Returns:
        Configured logger instance
    """
    handlers = _build_handlers(verbosity, log_file)

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(logging.DEBUG)
    logger.handlers.clear()
    for handler in handlers:
        logger.addHandler(handler)

    http_logger = logging.getLogger(HTTP_LOGGER_NAME)
    http_logger.handlers.clear()
    if verbosity > 0 or log_file:
        http_logger.setLevel(logging.INFO)
        http_logger.propagate = False
        for handler in handlers:
            if verbosity > 0 or isinstance(handler, logging.FileHandler):
                http_logger.addHandler(handler)
    else:
        http_logger.setLevel(logging.WARNING)
        http_logger.propagate = True

    return logger


def get_logger() -> logging.Logger:
    """Get the neocities_sync logger instance."""
    return logging.getLogger(LOGGER_NAME)


def write_progress(message: str) -> None:
    """Write a progress update in place, bypassing logging."""
    sys.stdout.write(f"\r{message}")
    sys.stdout.flush()
