#!/usr/bin/env python3

"""Module which sets up logging for dockvault."""

import logging
import sys
from pathlib import Path
from typing import Union

LOG_FORMAT = "[%(asctime)s][%(name)s][%(levelname)-7s] %(message)s"
DEFAULT_LOG_LEVEL = logging.DEBUG

stdout_handler = logging.StreamHandler(stream=sys.stdout)
formatter = logging.Formatter(LOG_FORMAT)

stdout_handler.setFormatter(formatter)
stdout_handler.setLevel(DEFAULT_LOG_LEVEL)

logger = logging.getLogger(__name__)

logger.setLevel(DEFAULT_LOG_LEVEL)
logger.addHandler(stdout_handler)


def set_log_level(level: Union[int, str]) -> None:
    """Sets the level of the dockvault logger and all of its handlers.

    Args:
        level (Union[int, str]): Logging level, e.g. 'INFO' or logging.INFO.
    """
    if isinstance(level, str):
        level = level.upper()

    logger.setLevel(level)
    for handler in logger.handlers:
        handler.setLevel(level)


def add_file_handler(path: Path) -> logging.Handler:
    """Additionally writes log messages to the specified file.

    Args:
        path (Path): Log file path. Parent directories are created if necessary.

    Returns:
        logging.Handler: The attached handler.
    """
    if not path.parent.is_dir():
        path.parent.mkdir(parents=True)

    file_handler = logging.FileHandler(path)
    file_handler.setFormatter(formatter)
    file_handler.setLevel(logger.level)
    logger.addHandler(file_handler)

    return file_handler
