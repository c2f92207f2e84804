"""Logging configuration for nlisp.

The library only creates loggers; applications embedding it call
setup_logging() once if they want the output.
"""
import logging
import os
import sys
from typing import Optional

from nlisp.config import get_log_level


def setup_logging(level: Optional[str] = None, log_file: Optional[str] = None) -> None:
    """
    Configure logging for an nlisp session.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
               Defaults to NLISP_LOG_LEVEL, or WARNING.
        log_file: Optional path to log file. If None, logs to stdout.
    """
    level = level or get_log_level()
    numeric_level = getattr(logging, level.upper(), logging.WARNING)

    config = {
        'level': numeric_level,
        'format': '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    }

    if log_file:
        log_dir = os.path.dirname(log_file)
        if log_dir and not os.path.exists(log_dir):
            os.makedirs(log_dir)
        config['filename'] = log_file
    else:
        config['stream'] = sys.stdout

    logging.basicConfig(**config)
    logging.getLogger('nlisp').info("Logging initialized at %s level", level.upper())


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger with the specified name.

    Args:
        name: Logger name, typically __name__ from the calling module

    Returns:
        Logger instance
    """
    return logging.getLogger(name)
