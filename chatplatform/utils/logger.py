# chatplatform/utils/logger.py
"""
Logging configuration and utilities.
"""

import logging
import sys


def setup_logger(name: str, level: str = None, log_format: str = None) -> logging.Logger:
    """
    Configure and return a logger instance.

    Args:
        name: Logger name (usually __name__)
        level: Log level (DEBUG, INFO, WARNING, ERROR)
        log_format: Custom log format string
    """
    # Config may still be importing when the config package itself asks for a logger
    try:
        from chatplatform.config import SERVER
        default_level = SERVER.log_level
        default_format = SERVER.log_format
    except ImportError:
        default_level = "INFO"
        default_format = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    level = (level or default_level).upper()
    log_format = log_format or default_format

    logger = logging.getLogger(name)

    # Avoid duplicate handlers
    if logger.handlers:
        return logger

    logger.setLevel(getattr(logging, level, logging.INFO))

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(getattr(logging, level, logging.INFO))
    handler.setFormatter(logging.Formatter(log_format))

    logger.addHandler(handler)

    return logger
