"""Logging configuration helpers."""

import logging

# stdout carries the JSON payload for batch workers, so logs go to stderr.
_FORMAT = "%(asctime)s %(levelname)s: %(name)s: %(message)s"


def configure_logging(level: int | str = logging.INFO) -> None:
    """Configure application logging with a single stderr stream handler."""
    logger = logging.getLogger("asken_sync")
    logger.setLevel(level.upper() if isinstance(level, str) else level)
    if logger.handlers:
        return
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(_FORMAT))
    logger.addHandler(handler)
    logger.propagate = False
