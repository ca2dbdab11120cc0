"""Console logging for the CLI and the web app."""

import logging
import sys
from typing import Union

LOGGER_NAME = "syllabus_calendar"
LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s - %(message)s"


def setup_logging(level: Union[int, str] = logging.INFO) -> logging.Logger:
    """Attach a stdout handler to the package logger.

    Calling this more than once only updates the level.

    Args:
        level: Logging level name or number

    Returns:
        The package logger
    """
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)

    if not any(getattr(h, "_syllabus_calendar", False) for h in logger.handlers):
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        handler._syllabus_calendar = True
        logger.addHandler(handler)

    return logger
