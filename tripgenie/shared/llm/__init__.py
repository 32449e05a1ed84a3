"""LLM backend utilities."""

from tripgenie.shared.llm.client import (
    TextBackend,
    OpenAICompatibleBackend,
    create_backend,
    get_cached_backend,
)

__all__ = [
    "TextBackend",
    "OpenAICompatibleBackend",
    "create_backend",
    "get_cached_backend",
]
