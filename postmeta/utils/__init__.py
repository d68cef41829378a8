"""
Utilities module for postmeta.
"""

from postmeta.utils.logging import get_logger, log_with_context, setup_logging

__all__ = [
    "get_logger",
    "log_with_context",
    "setup_logging",
]
