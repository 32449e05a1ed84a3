"""HTTP surface of the AI service."""

from tripgenie.api.ai_api import router
from tripgenie.api.errors import register_exception_handlers
from tripgenie.api.rate_limit import limiter

__all__ = ["router", "register_exception_handlers", "limiter"]
