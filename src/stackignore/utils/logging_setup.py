"""
Logging configuration for stackignore.

The library never configures logging on import; hosting applications call
configure_logging() once if they want stackignore's records routed somewhere.

Provides:
- stderr output, JSON formatted when STACKIGNORE_LOG_JSON=true
- optional rotating file output
- a custom TRACE level for per-query detail
"""

import sys
import logging
import json
import os
from datetime import datetime, timezone
from logging.handlers import RotatingFileHandler
from typing import Optional, Any

# Define TRACE level (lower number = more detailed)
TRACE_LEVEL = 5
logging.addLevelName(TRACE_LEVEL, "TRACE")


def trace(self, message, *args, **kwargs):
    if self.isEnabledFor(TRACE_LEVEL):
        self._log(TRACE_LEVEL, message, args, **kwargs)


logging.Logger.trace = trace


def add_trace_to_logger():
    """Ensure trace method is available on all logger instances"""
    if not hasattr(logging.Logger, 'trace'):
        logging.Logger.trace = trace


class JsonFormatter(logging.Formatter):
    """One JSON object per record"""

    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            'timestamp': datetime.now(timezone.utc).isoformat(),
            'level': record.levelname,
            'component': record.name,
            'message': record.getMessage(),
            'pid': os.getpid(),
        }

        if hasattr(record, 'extra'):
            log_data.update(record.extra)

        if record.exc_info:
            log_data['exception'] = self.formatException(record.exc_info)

        return json.dumps(log_data)


def _resolve_level(level_str: str) -> int:
    if level_str.upper() == 'TRACE':
        return TRACE_LEVEL
    return getattr(logging, level_str.upper(), logging.INFO)


def configure_logging(
    log_level: Optional[str] = None,
    log_file: Optional[str] = None,
    enable_rotation: bool = True,
    max_bytes: int = 10 * 1024 * 1024,  # 10MB
    backup_count: int = 5,
) -> None:
    """
    Configure the 'stackignore' logger hierarchy.

    Args:
        log_level: Override log level (defaults to STACKIGNORE_LOG_LEVEL, then LOG_LEVEL, then INFO)
        log_file: Write to this file instead of stderr
        enable_rotation: Enable log rotation for file handler
        max_bytes: Maximum size of log file before rotation
        backup_count: Number of backup files to keep
    """
    add_trace_to_logger()
    level_str = (
        log_level
        or os.environ.get('STACKIGNORE_LOG_LEVEL')
        or os.environ.get('LOG_LEVEL', 'INFO')
    )
    level = _resolve_level(level_str)

    package_logger = logging.getLogger('stackignore')
    for existing in list(package_logger.handlers):
        package_logger.removeHandler(existing)
        existing.close()

    if log_file:
        if enable_rotation:
            handler = RotatingFileHandler(
                log_file,
                maxBytes=max_bytes,
                backupCount=backup_count
            )
        else:
            handler = logging.FileHandler(log_file)
    else:
        handler = logging.StreamHandler(sys.stderr)

    if os.environ.get('STACKIGNORE_LOG_JSON', '').lower() == 'true':
        handler.setFormatter(JsonFormatter())
    else:
        handler.setFormatter(logging.Formatter(
            '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
        ))

    package_logger.addHandler(handler)
    package_logger.setLevel(level)
    package_logger.propagate = False

    package_logger.debug(f"Logging configured - Level: {level_str.upper()}")


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger instance with the given name.

    Args:
        name: Logger name (usually __name__)

    Returns:
        Logger instance with a trace() method
    """
    add_trace_to_logger()
    return logging.getLogger(name)


def log_with_context(
    logger: logging.Logger,
    level: int,
    message: str,
    **context: Any
) -> None:
    """
    Log a message with additional context fields.

    Args:
        logger: Logger instance
        level: Log level (e.g., logging.INFO)
        message: Log message
        **context: Additional fields to include in structured logs
    """
    extra = {'extra': context} if context else {}
    logger.log(level, message, extra=extra)
