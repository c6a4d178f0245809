"""Utility modules for stackignore"""

from .logging_setup import configure_logging, get_logger, log_with_context

__all__ = ['configure_logging', 'get_logger', 'log_with_context']
