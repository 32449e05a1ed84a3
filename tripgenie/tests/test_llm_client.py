"""
Tests for the text-generation backends.

The OpenAI SDK client is replaced by a small fake exposing
`chat.completions.create`, so no request leaves the process.
"""

from types import SimpleNamespace

import httpx
import pytest
from openai import APIConnectionError

from tripgenie.shared.config import Settings
from tripgenie.shared.errors import BackendError, BackendUnavailable
from tripgenie.shared.llm.client import (
    PROVIDERS,
    OpenAICompatibleBackend,
    create_backend,
)


class FakeCompletions:
    def __init__(self, content=None, error=None):
        self.content = content
        self.error = error
        self.calls = []

    def create(self, **kwargs):
        self.calls.append(kwargs)
        if self.error is not None:
            raise self.error
        message = SimpleNamespace(content=self.content)
        return SimpleNamespace(choices=[SimpleNamespace(message=message)])


def _make_client(content=None, error=None):
    completions = FakeCompletions(content=content, error=error)
    return SimpleNamespace(chat=SimpleNamespace(completions=completions)), completions


class TestOpenAICompatibleBackend:
    """Tests for the shared backend implementation."""

    def test_returns_raw_text(self):
        """The reply is returned unmodified."""
        raw = 'Sure! ```json\n{"days": []}\n```'
        client, _ = _make_client(content=raw)
        backend = OpenAICompatibleBackend(client, model="gpt-4.1-mini")
        assert backend.generate("plan a trip") == raw

    def test_sends_generation_parameters(self):
        """Model, prompt, temperature and token ceiling are passed through."""
        client, completions = _make_client(content="ok")
        backend = OpenAICompatibleBackend(client, model="m", temperature=0.2, max_tokens=100)
        backend.generate("hello")

        call = completions.calls[0]
        assert call["model"] == "m"
        assert call["messages"] == [{"role": "user", "content": "hello"}]
        assert call["temperature"] == 0.2
        assert call["max_tokens"] == 100

    @pytest.mark.parametrize("content", [None, "", "   \n"])
    def test_empty_reply_raises(self, content):
        """Empty content is a BackendError."""
        client, _ = _make_client(content=content)
        backend = OpenAICompatibleBackend(client, model="m", name="groq")
        with pytest.raises(BackendError) as exc_info:
            backend.generate("hello")
        assert "groq" in exc_info.value.message

    def test_sdk_error_raises_backend_error(self):
        """SDK failures are wrapped and not retried."""
        request = httpx.Request("POST", "https://api.openai.com/v1/chat/completions")
        client, completions = _make_client(error=APIConnectionError(request=request))
        backend = OpenAICompatibleBackend(client, model="m")

        with pytest.raises(BackendError):
            backend.generate("hello")
        assert len(completions.calls) == 1


class TestCreateBackend:
    """Tests for backend selection from settings."""

    def test_missing_credential(self):
        """No key for the active provider raises BackendUnavailable."""
        settings = Settings(llm_provider="openai", api_keys={"openai": None})
        with pytest.raises(BackendUnavailable) as exc_info:
            create_backend(settings)
        assert "OPENAI_API_KEY" in exc_info.value.message

    def test_unknown_provider(self):
        with pytest.raises(ValueError):
            create_backend(Settings(llm_provider="mystery"))

    @pytest.mark.parametrize("provider", sorted(PROVIDERS))
    def test_builds_each_provider(self, provider):
        """Each vendor gets its default model and name."""
        settings = Settings(llm_provider=provider, api_keys={provider: "test-key"})
        backend = create_backend(settings)

        assert backend.name == provider
        assert backend.model == PROVIDERS[provider].default_model
        assert backend.temperature == 0.2

    def test_model_override(self):
        settings = Settings(llm_provider="groq", llm_model="llama-3.1-8b-instant", api_keys={"groq": "k"})
        assert create_backend(settings).model == "llama-3.1-8b-instant"

    def test_sdk_retries_disabled(self):
        """The SDK client must not retry: a failed call surfaces as one BackendError."""
        settings = Settings(llm_provider="openai", api_keys={"openai": "sk-test"})
        assert create_backend(settings).client.max_retries == 0

    def test_failed_call_sent_once(self):
        """A 503 from the vendor produces exactly one HTTP request."""
        requests_seen = []

        def handler(request):
            requests_seen.append(request.url.path)
            return httpx.Response(503, json={"error": {"message": "overloaded"}})

        settings = Settings(llm_provider="openai", api_keys={"openai": "sk-test"})
        backend = create_backend(settings)
        backend.client = backend.client.with_options(
            http_client=httpx.Client(transport=httpx.MockTransport(handler)),
        )

        with pytest.raises(BackendError):
            backend.generate("hi")
        assert requests_seen == ["/v1/chat/completions"]
