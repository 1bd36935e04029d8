"""Utility functions for deploykit."""

from deploykit.utils.logging import configure_logging, get_logger
from deploykit.utils.timing import eastern_timestamp

__all__ = [
    "configure_logging",
    "eastern_timestamp",
    "get_logger",
]
