"""Console logging for the tracker's single named logger."""

import logging
import sys
from typing import Optional, TextIO

LOGGER_NAME = "tiktok-tracker"
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def _is_tracker_handler(handler: logging.Handler, stream: TextIO) -> bool:
    return (
        getattr(handler, "stream", None) is stream
        and handler.formatter is not None
        and handler.formatter._fmt == LOG_FORMAT
    )


def setup_logging(level: str = "INFO", stream: Optional[TextIO] = None) -> logging.Logger:
    """Set the tracker logger's level and attach one console handler.

    Repeated calls only adjust the level; a handler writing somewhere else
    (or with another format) does not count as ours.
    """
    stream = stream or sys.stdout
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level.upper())

    if not any(_is_tracker_handler(h, stream) for h in logger.handlers):
        handler = logging.StreamHandler(stream)
        handler.setFormatter(logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT))
        logger.addHandler(handler)
    return logger
