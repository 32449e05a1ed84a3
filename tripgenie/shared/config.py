"""
Process-wide settings.

Values are read once from the environment (and an optional .env file) and
shared read-only by every request.
"""

import os
from dataclasses import dataclass, field
from functools import lru_cache
from typing import List, Optional

from dotenv import load_dotenv

load_dotenv()


def _env_bool(name: str, default: bool) -> bool:
    value = os.environ.get(name)
    if value is None or value.strip() == "":
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


def _env_optional(name: str) -> Optional[str]:
    value = os.environ.get(name, "").strip()
    return value or None


@dataclass
class Settings:
    """
    Application settings.

    Attributes:
        llm_provider: Active text-generation vendor ("openai", "groq", "gemini")
        llm_model: Optional model override; vendor default when None
        llm_temperature: Sampling temperature, kept low for repeatable output
        llm_max_tokens: Completion token ceiling
        llm_timeout: Transport timeout for the vendor call, in seconds
        api_keys: Credentials per vendor (None when not configured)
        app_env: Deployment environment; "production" hides diagnostics
        rate_limit_enabled: Whether the slowapi limiter is active
        rate_limit_ai: Limit for the generation endpoints
        rate_limit_chat: Limit for the chat endpoint
        geocoding_enabled: Whether trip plans are enriched with coordinates
        google_maps_api_key: Optional Google Geocoding credential
        geocoding_timeout: Timeout for geocoding requests, in seconds
        debug_log_dir: Directory for per-request debug logs (disabled when None)
        log_level: Root level for the tripgenie logger
        log_json: Emit JSON log records instead of plain text
        cors_origins: Allowed CORS origins
    """

    llm_provider: str = "openai"
    llm_model: Optional[str] = None
    llm_temperature: float = 0.2
    llm_max_tokens: int = 8192
    llm_timeout: float = 60.0
    api_keys: dict = field(default_factory=dict)

    app_env: str = "development"

    rate_limit_enabled: bool = True
    rate_limit_ai: str = "10/minute"
    rate_limit_chat: str = "30/minute"

    geocoding_enabled: bool = True
    google_maps_api_key: Optional[str] = None
    geocoding_timeout: float = 10.0

    debug_log_dir: Optional[str] = None
    log_level: str = "INFO"
    log_json: bool = False
    cors_origins: List[str] = field(default_factory=lambda: ["*"])

    @property
    def is_production(self) -> bool:
        return self.app_env.lower() == "production"

    def api_key_for(self, provider: str) -> Optional[str]:
        return self.api_keys.get(provider)

    @classmethod
    def from_env(cls) -> "Settings":
        """Build settings from environment variables."""
        origins = os.environ.get("CORS_ORIGINS", "*")
        return cls(
            llm_provider=os.environ.get("LLM_PROVIDER", "openai").strip().lower(),
            llm_model=_env_optional("LLM_MODEL"),
            llm_temperature=float(os.environ.get("LLM_TEMPERATURE", "0.2")),
            llm_max_tokens=int(os.environ.get("LLM_MAX_TOKENS", "8192")),
            llm_timeout=float(os.environ.get("LLM_TIMEOUT", "60")),
            api_keys={
                "openai": _env_optional("OPENAI_API_KEY"),
                "groq": _env_optional("GROQ_API_KEY"),
                "gemini": _env_optional("GEMINI_API_KEY"),
            },
            app_env=os.environ.get("APP_ENV", "development").strip(),
            rate_limit_enabled=_env_bool("RATE_LIMIT_ENABLED", True),
            rate_limit_ai=os.environ.get("RATE_LIMIT_AI", "10/minute"),
            rate_limit_chat=os.environ.get("RATE_LIMIT_CHAT", "30/minute"),
            geocoding_enabled=_env_bool("GEOCODING_ENABLED", True),
            google_maps_api_key=_env_optional("GOOGLE_MAPS_API_KEY"),
            geocoding_timeout=float(os.environ.get("GEOCODING_TIMEOUT", "10")),
            debug_log_dir=_env_optional("DEBUG_LOG_DIR"),
            log_level=os.environ.get("LOG_LEVEL", "INFO").upper(),
            log_json=_env_bool("LOG_JSON", False),
            cors_origins=[o.strip() for o in origins.split(",") if o.strip()],
        )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return the process-wide settings, loading them on first use."""
    return Settings.from_env()
