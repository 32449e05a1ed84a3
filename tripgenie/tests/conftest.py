"""
Shared fixtures.

No test reaches a real model or geocoder: a StubBackend replays canned
replies and is injected through `app.dependency_overrides`.
"""

from typing import List, Optional

import pytest
from fastapi.testclient import TestClient

from tripgenie.api.ai_api import get_backend, get_geocoder
from tripgenie.api.rate_limit import limiter
from tripgenie.main import app
from tripgenie.shared.errors import BackendError
from tripgenie.shared.llm.client import TextBackend


class StubBackend(TextBackend):
    """Backend that returns a fixed reply and records every prompt."""

    name = "stub"

    def __init__(self, reply: str = "{}", error: Optional[Exception] = None):
        self.reply = reply
        self.error = error
        self.prompts: List[str] = []

    def generate(self, prompt: str) -> str:
        self.prompts.append(prompt)
        if self.error is not None:
            raise self.error
        if not self.reply.strip():
            raise BackendError("stub returned an empty response")
        return self.reply


class StubGeocoder:
    """Geocoder returning fixed coordinates, or raising the given error."""

    def __init__(self, error: Optional[Exception] = None):
        self.error = error
        self.calls: List[str] = []

    def geocode(self, address: str) -> dict:
        self.calls.append(address)
        if self.error is not None:
            raise self.error
        return {"coordinates": {"lat": 48.8566, "lng": 2.3522}, "address": f"{address}, France"}


@pytest.fixture(autouse=True)
def reset_rate_limits():
    limiter.reset()
    yield
    limiter.reset()


@pytest.fixture
def stub_backend():
    return StubBackend()


@pytest.fixture
def client(stub_backend):
    app.dependency_overrides[get_backend] = lambda: stub_backend
    app.dependency_overrides[get_geocoder] = lambda: None
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()
