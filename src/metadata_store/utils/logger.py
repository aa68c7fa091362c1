"""
Table Metadata Store - Structured Logging
Provides JSON-formatted logging for the metadata extension.
"""

import logging
import sys
from pythonjsonlogger import jsonlogger

from .config import LOG_LEVEL


def setup_logger(name: str = __name__) -> logging.Logger:
    """
    Configure structured JSON logger.

    Args:
        name: Logger name (typically __name__ from calling module)

    Returns:
        Configured logger instance

    Example:
        >>> logger = setup_logger(__name__)
        >>> logger.info("Metadata maintained", extra={
        ...     "app_id": "app1",
        ...     "database": "db1",
        ...     "table": "orders"
        ... })
    """
    logger = logging.getLogger(name)

    # Prevent duplicate handlers
    if logger.handlers:
        return logger

    level = getattr(logging, LOG_LEVEL.upper(), logging.INFO)
    logger.setLevel(level)

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(level)

    formatter = jsonlogger.JsonFormatter(
        '%(asctime)s %(name)s %(levelname)s %(message)s',
        datefmt='%Y-%m-%dT%H:%M:%S'
    )
    handler.setFormatter(formatter)

    logger.addHandler(handler)

    # Don't propagate to root logger
    logger.propagate = False

    return logger


# Global logger instance
logger = setup_logger('table_metadata')


def log_metadata_maintained(key_token: str, backend: str):
    """Log a successful metadata write."""
    logger.info("Table metadata maintained", extra={
        "event_type": "metadata_maintained",
        "key": key_token,
        "backend": backend
    })


def log_metadata_cache_hit(key_token: str):
    """Log a read served from the in-memory cache."""
    logger.debug("Table metadata cache hit", extra={
        "event_type": "metadata_cache_hit",
        "key": key_token
    })


def log_codec_error(error: Exception, key_token: str = None):
    """Log a metadata (de)serialization failure."""
    logger.error("Metadata codec error", extra={
        "event_type": "codec_error",
        "error_type": type(error).__name__,
        "error_message": str(error),
        "key": key_token
    }, exc_info=error)


def log_database_error(error: Exception, query_context: str = None):
    """Log database error with context."""
    logger.error("Database error", extra={
        "event_type": "database_error",
        "error_type": type(error).__name__,
        "error_message": str(error),
        "query_context": query_context
    }, exc_info=error)
