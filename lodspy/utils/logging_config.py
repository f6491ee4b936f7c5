"""
Centralized logging configuration for lodspy.

Library modules only ever call :func:`get_logger`; handlers are attached by
:func:`setup_logging`, which scripts and notebooks call once at startup.
"""

import logging
import sys
from pathlib import Path
from typing import Optional, Union

ROOT_LOGGER_NAME = 'lodspy'

_CONSOLE_FORMAT = '%(message)s'
_FILE_FORMAT = '%(asctime)s | %(levelname)s | %(name)s | %(message)s'
_DATE_FORMAT = '%Y-%m-%d %H:%M:%S'


def get_logger(name: str) -> logging.Logger:
    """
    Return a logger namespaced under the package root logger.

    Parameters
    ----------
    name : str
        Dotted module path relative to the package, e.g. 'utils.lods.core'.

    Returns
    -------
    logging.Logger
        Logger named 'lodspy.<name>'.
    """
    if name.startswith(ROOT_LOGGER_NAME):
        return logging.getLogger(name)
    return logging.getLogger(f'{ROOT_LOGGER_NAME}.{name}')


def setup_logging(
    level: Union[int, str] = logging.INFO,
    log_file: Optional[Union[str, Path]] = None,
) -> logging.Logger:
    """
    Attach console (and optionally file) handlers to the package logger.

    Calling this again replaces previously attached handlers, so notebooks can
    re-run the setup cell without duplicating output.

    Parameters
    ----------
    level : int or str, default logging.INFO
        Log level for the package logger and its handlers.
    log_file : str or Path, optional
        If given, also write records to this file. Parent directories are
        created as needed.

    Returns
    -------
    logging.Logger
        The configured package root logger.
    """
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())

    logger = logging.getLogger(ROOT_LOGGER_NAME)
    logger.setLevel(level)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(level)
    console_handler.setFormatter(logging.Formatter(_CONSOLE_FORMAT))
    logger.addHandler(console_handler)

    if log_file is not None:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_path, encoding='utf-8')
        file_handler.setLevel(level)
        file_handler.setFormatter(logging.Formatter(_FILE_FORMAT, datefmt=_DATE_FORMAT))
        logger.addHandler(file_handler)

    logger.debug(f"Logging configured at level {logging.getLevelName(level)}")
    return logger
