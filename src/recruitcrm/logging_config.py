"""Logging configuration for recruitcrm.

Modules log through ``logging.getLogger(__name__)``; this module wires
those loggers to the console and, optionally, a log file.
"""

import logging
from pathlib import Path
from typing import Optional, Union

# Standard log format with module name and line number
LOG_FORMAT = "%(asctime)s - %(name)s:%(lineno)d - %(levelname)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

ROOT_LOGGER = "recruitcrm"


def setup_logging(
    verbose: bool = False,
    log_file: Optional[Union[str, Path]] = None,
) -> logging.Logger:
    """Configure the package logger.

    Calling this again replaces the handlers installed by a previous call.

    Args:
        verbose: If True, log DEBUG messages; otherwise WARNING and above
            go to the console.
        log_file: Optional file that receives INFO and above (DEBUG when
            verbose).

    Returns:
        The configured package logger.
    """
    logger = logging.getLogger(ROOT_LOGGER)
    level = logging.DEBUG if verbose else logging.INFO
    logger.setLevel(level)

    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)

    console = logging.StreamHandler()
    console.setLevel(logging.DEBUG if verbose else logging.WARNING)
    console.setFormatter(formatter)
    logger.addHandler(console)

    if log_file is not None:
        path = Path(log_file)
        path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(path, encoding="utf-8")
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    return logger
