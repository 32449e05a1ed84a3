"""
Shared infrastructure.

Modules:
- config: process-wide settings
- errors: pipeline error taxonomy
- llm: text-generation backends
- logging: structured logging and per-request debug logs
- contracts: request and result shapes
"""

from tripgenie.shared.config import get_settings
from tripgenie.shared.llm.client import get_cached_backend
from tripgenie.shared.logging.config import setup_logging, log_pipeline_event

__all__ = [
    "get_settings",
    "get_cached_backend",
    "setup_logging",
    "log_pipeline_event",
]
