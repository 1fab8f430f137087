"""Logging configuration for mdboard."""

import logging
import sys
from datetime import UTC, datetime
from pathlib import Path

LOGGER_NAME = "mdboard"
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Marks handlers installed here so a repeated setup replaces them
_OWNED = "_mdboard_handler"


def setup_logging(verbose: int = 0, log_file: Path | None = None) -> None:
    """Configure the ``mdboard`` logger from CLI verbosity and an optional file.

    Library code only calls ``logging.getLogger(__name__)``; nothing is
    emitted until a host calls this (or configures logging itself).

    Args:
        verbose: Verbosity level (0=off, 1=INFO, 2+=DEBUG)
        log_file: Optional path to write logs to file
    """
    logger = logging.getLogger(LOGGER_NAME)
    _remove_owned_handlers(logger)

    if verbose == 0 and log_file is None:
        return

    level = logging.DEBUG if verbose >= 2 else logging.INFO
    logger.setLevel(level)
    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)

    if verbose > 0:
        _install(logger, logging.StreamHandler(sys.stderr), level, formatter)

    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        _install(logger, logging.FileHandler(log_file, encoding="utf-8"), level, formatter)

    timestamp = datetime.now(UTC).strftime("%Y-%m-%d %H:%M:%S UTC")
    logger.info("=" * 60)
    logger.info("mdboard starting | %s | level=%s", timestamp, logging.getLevelName(level))
    logger.info("=" * 60)


def _install(
    logger: logging.Logger,
    handler: logging.Handler,
    level: int,
    formatter: logging.Formatter,
) -> None:
    handler.setLevel(level)
    handler.setFormatter(formatter)
    setattr(handler, _OWNED, True)
    logger.addHandler(handler)


def _remove_owned_handlers(logger: logging.Logger) -> None:
    for handler in list(logger.handlers):
        if getattr(handler, _OWNED, False):
            logger.removeHandler(handler)
            handler.close()
