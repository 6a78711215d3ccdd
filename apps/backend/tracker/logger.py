"""Logging setup for the tracker API and client."""

import logging
import sys

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def configure_logging(level: str = "INFO", name: str = "tracker") -> logging.Logger:
    """Attach a console handler to the package logger.

    Calling this again replaces the handler instead of stacking a second one.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        name: Logger to configure; module loggers under it inherit the handler

    Returns:
        The configured logger
    """
    logger = logging.getLogger(name)
    logger.setLevel(getattr(logging, level.upper()))
    logger.handlers.clear()

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT))
    logger.addHandler(handler)
    logger.propagate = False
    return logger
