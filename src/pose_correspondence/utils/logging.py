"""
Logging Utilities

This module sets up logging for the project. Every module obtains its logger
through setup_logger(__name__) so console and file output share one format.
"""

import logging
import sys
from pathlib import Path
from typing import Optional, Union


def _resolve_level(level: Union[int, str]) -> int:
    if isinstance(level, str):
        return getattr(logging, level.upper(), logging.INFO)
    return int(level)


def setup_logger(name: str,
                 level: Union[int, str] = logging.INFO,
                 log_file: Optional[str] = None) -> logging.Logger:
    """
    Set up a logger with consistent formatting.

    Args:
        name: Logger name (usually __name__)
        level: Logging level, either a logging constant or its name (default: INFO)
        log_file: Optional log file path. If provided, logs are also written to this file

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger(name)
    level = _resolve_level(level)

    # Avoid adding multiple handlers; still honour a new level
    if logger.handlers:
        logger.setLevel(level)
        for handler in logger.handlers:
            handler.setLevel(level)
        return logger

    logger.setLevel(level)

    console_formatter = logging.Formatter(
        '%(asctime)s | %(levelname)s | %(name)s | %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )
    file_formatter = logging.Formatter(
        '%(asctime)s | %(levelname)s | %(processName)s[%(process)d] | %(name)s | %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(level)
    console_handler.setFormatter(console_formatter)
    logger.addHandler(console_handler)

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)

        file_handler = logging.FileHandler(log_file)
        file_handler.setLevel(level)
        file_handler.setFormatter(file_formatter)
        logger.addHandler(file_handler)

    return logger


def set_package_level(level: Union[int, str], log_file: Optional[str] = None) -> None:
    """
    Apply a level (and optional log file) to every logger already created
    under the pose_correspondence package.
    """
    resolved = _resolve_level(level)
    manager = logging.root.manager
    for name in list(manager.loggerDict):
        if not name.startswith("pose_correspondence"):
            continue
        logger = logging.getLogger(name)
        if not logger.handlers:
            continue
        logger.setLevel(resolved)
        for handler in logger.handlers:
            handler.setLevel(resolved)
        if log_file and not any(isinstance(h, logging.FileHandler) for h in logger.handlers):
            Path(log_file).parent.mkdir(parents=True, exist_ok=True)
            file_handler = logging.FileHandler(log_file)
            file_handler.setLevel(resolved)
            file_handler.setFormatter(logging.Formatter(
                '%(asctime)s | %(levelname)s | %(processName)s[%(process)d] | %(name)s | %(message)s',
                datefmt='%Y-%m-%d %H:%M:%S'
            ))
            logger.addHandler(file_handler)
