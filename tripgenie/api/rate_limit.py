"""Per-client rate limits for the AI endpoints."""

from slowapi import Limiter
from slowapi.util import get_remote_address

from tripgenie.shared.config import get_settings


def ai_rate_limit() -> str:
    """Limit for the generation endpoints (trip plan, shuffle, adjustment)."""
    return get_settings().rate_limit_ai


def chat_rate_limit() -> str:
    return get_settings().rate_limit_chat


# Initialize rate limiter
limiter = Limiter(
    key_func=get_remote_address,
    enabled=get_settings().rate_limit_enabled,
)
