"""Logging setup for the chat server."""

import logging
import os
import sys
import time
from contextlib import contextmanager
from typing import Iterator

LOG_LEVEL_ENV = "LOG_LEVEL"
DEFAULT_LOG_LEVEL = "INFO"

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
DEBUG_LOG_FORMAT = (
    "%(asctime)s | %(levelname)-8s | %(name)s:%(funcName)s:%(lineno)d | %(message)s"
)
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Provider SDKs log every HTTP request at INFO
QUIET_LOGGERS = {
    "httpx": logging.WARNING,
    "httpcore": logging.WARNING,
    "openai": logging.WARNING,
    "uvicorn.access": logging.WARNING,
    "uvicorn.error": logging.INFO,
}


def resolve_log_level(level: str | None = None) -> int:
    """Map a level name (or LOG_LEVEL) to a logging level, defaulting to INFO."""
    name = (level or os.environ.get(LOG_LEVEL_ENV) or DEFAULT_LOG_LEVEL).upper()
    resolved = logging.getLevelName(name)
    return resolved if isinstance(resolved, int) else logging.INFO


def setup_logging(level: str | None = None) -> None:
    """Configure root logging for the server process.

    Args:
        level: Level name overriding the LOG_LEVEL environment variable.
    """
    log_level = resolve_log_level(level)

    logging.basicConfig(
        level=log_level,
        format=DEBUG_LOG_FORMAT if log_level <= logging.DEBUG else LOG_FORMAT,
        datefmt=DATE_FORMAT,
        stream=sys.stdout,
        force=True,
    )

    for name, quiet_level in QUIET_LOGGERS.items():
        logging.getLogger(name).setLevel(quiet_level)


@contextmanager
def log_timing(
    logger: logging.Logger, operation: str, level: int = logging.DEBUG
) -> Iterator[None]:
    """Log how long the enclosed block took.

    Example:
        with log_timing(logger, "Pricing fetch", logging.INFO):
            remote = await fetch_openrouter_pricing()
    """
    started = time.perf_counter()
    try:
        yield
    finally:
        elapsed_ms = (time.perf_counter() - started) * 1000
        logger.log(level, "%s took %.1fms", operation, elapsed_ms)
