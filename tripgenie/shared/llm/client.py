"""
Text-generation backends.

Every vendor is reached through the OpenAI-compatible chat completions API,
so one backend class covers them all; vendors differ only in base URL,
credential and default model. Exactly one backend is active per process.
No retries happen here; a failed call surfaces as BackendError.
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Dict, Optional

from openai import OpenAI, OpenAIError

from tripgenie.shared.config import Settings, get_settings
from tripgenie.shared.errors import BackendError, BackendUnavailable


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ProviderSpec:
    """Connection details for one OpenAI-compatible vendor."""

    name: str
    api_key_env: str
    default_model: str
    base_url: Optional[str] = None


PROVIDERS: Dict[str, ProviderSpec] = {
    "openai": ProviderSpec(
        name="openai",
        api_key_env="OPENAI_API_KEY",
        default_model="gpt-4.1-mini",
    ),
    "groq": ProviderSpec(
        name="groq",
        api_key_env="GROQ_API_KEY",
        default_model="llama-3.3-70b-versatile",
        base_url="https://api.groq.com/openai/v1",
    ),
    "gemini": ProviderSpec(
        name="gemini",
        api_key_env="GEMINI_API_KEY",
        default_model="gemini-2.0-flash",
        base_url="https://generativelanguage.googleapis.com/v1beta/openai/",
    ),
}


class TextBackend(ABC):
    """A service that turns one prompt into free-form text."""

    name: str = "backend"

    @abstractmethod
    def generate(self, prompt: str) -> str:
        """Return the raw, unmodified reply for `prompt`."""


class OpenAICompatibleBackend(TextBackend):
    """
    Backend speaking the OpenAI chat completions protocol.

    Args:
        client: Configured OpenAI SDK client
        model: Model identifier
        temperature: Sampling temperature
        max_tokens: Completion token ceiling
        name: Vendor name used in logs and errors
    """

    def __init__(
        self,
        client: OpenAI,
        model: str,
        temperature: float = 0.2,
        max_tokens: int = 8192,
        name: str = "openai",
    ):
        self.client = client
        self.model = model
        self.temperature = temperature
        self.max_tokens = max_tokens
        self.name = name

    def generate(self, prompt: str) -> str:
        logger.info(
            f"Calling {self.name} | model={self.model}, prompt_chars={len(prompt)}"
        )
        try:
            response = self.client.chat.completions.create(
                model=self.model,
                messages=[{"role": "user", "content": prompt}],
                temperature=self.temperature,
                max_tokens=self.max_tokens,
            )
        except OpenAIError as e:
            raise BackendError(f"{self.name} API error: {e}") from e

        content = ""
        if response.choices:
            content = response.choices[0].message.content or ""

        if not content.strip():
            raise BackendError(f"{self.name} returned an empty response")

        logger.info(f"{self.name} responded | response_chars={len(content)}")
        return content


def create_backend(settings: Settings) -> TextBackend:
    """
    Build the backend selected by configuration.

    Raises:
        ValueError: If the configured provider is unknown
        BackendUnavailable: If the provider's credential is not set
    """
    spec = PROVIDERS.get(settings.llm_provider)
    if spec is None:
        raise ValueError(
            f"Unknown LLM_PROVIDER '{settings.llm_provider}'. "
            f"Expected one of: {', '.join(sorted(PROVIDERS))}"
        )

    api_key = settings.api_key_for(spec.name)
    if not api_key:
        raise BackendUnavailable(
            f"{spec.api_key_env} is not configured. "
            f"Please set it in your environment or .env file."
        )

    # The SDK retries twice by default; failed calls must surface once
    client = OpenAI(
        api_key=api_key,
        base_url=spec.base_url,
        timeout=settings.llm_timeout,
        max_retries=0,
    )
    return OpenAICompatibleBackend(
        client=client,
        model=settings.llm_model or spec.default_model,
        temperature=settings.llm_temperature,
        max_tokens=settings.llm_max_tokens,
        name=spec.name,
    )


# Module-level cache for the active backend
_backend: Optional[TextBackend] = None


def get_cached_backend() -> TextBackend:
    """
    Return the process-wide backend, creating it on first use.

    A missing credential therefore surfaces on the first request, not at startup.
    """
    global _backend
    if _backend is None:
        _backend = create_backend(get_settings())
    return _backend
