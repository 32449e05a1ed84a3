"""Logging configuration and utilities."""

from tripgenie.shared.logging.config import setup_logging, log_pipeline_event, StructuredFormatter
from tripgenie.shared.logging.debug_logger import (
    DebugLogger,
    get_or_create_logger,
    get_logger,
    remove_logger,
)

__all__ = [
    "setup_logging",
    "log_pipeline_event",
    "StructuredFormatter",
    "DebugLogger",
    "get_or_create_logger",
    "get_logger",
    "remove_logger",
]
