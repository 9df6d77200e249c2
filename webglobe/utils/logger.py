"""
Logging for the webglobe package: colored console output via colorlog,
plus an opt-in daily log file under logs/
"""

import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import Optional

import colorlog


LOGS_DIR = Path("logs")

CONSOLE_FORMAT = "%(log_color)s%(levelname)-8s%(reset)s %(blue)s[%(name)s]%(reset)s %(message)s"
FILE_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"

LEVEL_COLORS = {
    "DEBUG": "cyan",
    "INFO": "green",
    "WARNING": "yellow",
    "ERROR": "red",
    "CRITICAL": "red,bg_white",
}


def _level(name: str) -> int:
    return getattr(logging, name.upper())


def _console_handler(level: int) -> logging.Handler:
    handler = colorlog.StreamHandler(sys.stdout)
    handler.setLevel(level)
    handler.setFormatter(colorlog.ColoredFormatter(CONSOLE_FORMAT, reset=True, log_colors=LEVEL_COLORS))
    return handler


def _file_handler(file_name: str) -> logging.Handler:
    LOGS_DIR.mkdir(exist_ok=True)
    handler = logging.FileHandler(LOGS_DIR / file_name, encoding="utf-8")
    # The file keeps DEBUG exchanges even when the console is quieter
    handler.setLevel(logging.DEBUG)
    handler.setFormatter(logging.Formatter(FILE_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
    return handler


def setup_logger(
    name: str,
    level: str = "INFO",
    log_file: Optional[str] = None,
    console: bool = True
) -> logging.Logger:
    """
    Configure a named logger once; later calls only adjust its level.

    Args:
        name: Logger name, usually the module's __name__
        level: DEBUG, INFO, WARNING, ERROR or CRITICAL
        log_file: File name inside logs/, created on first use
        console: Attach the colored stdout handler

    Returns:
        The configured logger
    """
    logger = logging.getLogger(name)
    logger.setLevel(_level(level))

    if logger.handlers:
        return logger

    if console:
        logger.addHandler(_console_handler(_level(level)))
    if log_file:
        logger.addHandler(_file_handler(log_file))

    return logger


def get_logger(name: str, level: str = "INFO", log_to_file: bool = False) -> logging.Logger:
    """
    Module-level entry point: `logger = get_logger(__name__)`.

    Args:
        name: Logger name
        level: Initial level
        log_to_file: Also write to logs/webglobe_<date>.log
    """
    log_file = None
    if log_to_file:
        log_file = f"webglobe_{datetime.now():%Y-%m-%d}.log"

    return setup_logger(name=name, level=level, log_file=log_file)


def set_level(level: str, prefix: str = "webglobe") -> None:
    """
    Change the level of every already created logger under a package prefix.

    Args:
        level: New logging level name
        prefix: Logger name prefix
    """
    numeric = _level(level)
    for name, logger in logging.root.manager.loggerDict.items():
        if isinstance(logger, logging.Logger) and (name == prefix or name.startswith(f"{prefix}.")):
            logger.setLevel(numeric)
            for handler in logger.handlers:
                if not isinstance(handler, logging.FileHandler):
                    handler.setLevel(numeric)
