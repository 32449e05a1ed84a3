"""Sanitization and resilient JSON parsing of model replies."""

from tripgenie.parsing.sanitizer import sanitize
from tripgenie.parsing.parser import (
    ParseAttempt,
    ParseOutcome,
    ParseStage,
    parse_model_response,
)

__all__ = [
    "sanitize",
    "ParseAttempt",
    "ParseOutcome",
    "ParseStage",
    "parse_model_response",
]
