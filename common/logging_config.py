import logging
import os
import sys
from typing import Optional

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
DATE_FORMAT = '%Y-%m-%d %H:%M:%S'

# Library packages whose records share the entry point's handler.
LIBRARY_LOGGERS = ('common', 'chunkstore', 'server', 'cli')


def _resolve_level(log_level: Optional[str]) -> int:
    if log_level is None:
        log_level = os.getenv('LOG_LEVEL', 'INFO')
    return getattr(logging, str(log_level).upper(), logging.INFO)


def setup_logging(
    component_name: str,
    log_level: Optional[str] = None,
) -> logging.Logger:
    """
    Set up logging configuration for a component.

    Installs a single stdout handler on the component logger and on the
    library package loggers, so records from `chunkstore.*` or `server.*`
    modules come out in the same format as the entry point's own.

    Args:
        component_name: Name of the component (e.g., 'server', 'cli')
        log_level: Log level (DEBUG, INFO, WARNING, ERROR). Defaults to LOG_LEVEL env var or INFO

    Returns:
        Configured logger instance
    """
    level = _resolve_level(log_level)

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))

    names = (component_name,) + tuple(n for n in LIBRARY_LOGGERS if n != component_name)
    for name in names:
        logger = logging.getLogger(name)
        logger.setLevel(level)
        if not logger.handlers:
            logger.addHandler(handler)
        else:
            for existing in logger.handlers:
                existing.setLevel(level)
        logger.propagate = False

    return logging.getLogger(component_name)


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger with the given name.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Logger instance
    """
    return logging.getLogger(name)
