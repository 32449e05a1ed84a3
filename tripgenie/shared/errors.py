"""
Error taxonomy for the AI pipeline.

Every failure a request can hit is one of these. The API layer turns them
into `{"success": false, "error": ...}` responses with the matching status.
"""

from typing import Any, Dict, Optional


class PipelineError(Exception):
    """Base class for errors surfaced to the caller as an error response."""

    status_code = 500

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class BackendUnavailable(PipelineError):
    """No credential is configured for the active text-generation backend."""


class BackendError(PipelineError):
    """The backend call failed or returned empty content."""


class NoJsonFound(PipelineError):
    """No JSON object could be located in the model reply."""


class ParseFailure(PipelineError):
    """Every parse stage failed on the model reply."""


class InvalidShape(PipelineError):
    """The reply parsed, but mandatory fields are missing or invalid."""

    def __init__(
        self,
        message: str,
        field: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message, details)
        self.field = field


class RequestValidationFailed(PipelineError):
    """The caller's request is missing required fields."""

    status_code = 400
