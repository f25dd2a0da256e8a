"""Shared fixtures for tests."""

import json
import os
from typing import Callable, Optional, Sequence

import httpx
import pytest

from archflow.config import ProviderCredential, ProviderKind, ProviderSettings
from archflow.errors import ProviderError
from archflow.models import DesignArtifact, Graph, Message, Role
from archflow.providers.base import ProviderAdapter
from archflow.providers.mock import SAMPLE_DESIGN, SAMPLE_GRAPH


# ============================================================================
# Pytest Configuration
# ============================================================================

def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "integration: marks tests as integration tests (may require external services)"
    )
    config.addinivalue_line(
        "markers", "slow: marks tests as slow running"
    )


# ============================================================================
# Environment Detection Fixtures
# ============================================================================

@pytest.fixture(scope="session")
def openai_available() -> bool:
    """Check if an OpenAI API key is configured."""
    api_key = os.environ.get("OPENAI_API_KEY", "")
    return api_key.startswith("sk-") and len(api_key) > 20


@pytest.fixture(scope="session")
def gemini_available() -> bool:
    """Check if a Gemini API key is configured."""
    return len(os.environ.get("GEMINI_API_KEY", "")) > 20


@pytest.fixture
def require_openai(openai_available):
    """Skip test if OpenAI is not configured."""
    if not openai_available:
        pytest.skip("OpenAI API key not configured")


@pytest.fixture
def require_gemini(gemini_available):
    """Skip test if Gemini is not configured."""
    if not gemini_available:
        pytest.skip("Gemini API key not configured")


@pytest.fixture
def clean_env(monkeypatch):
    """Remove every environment variable archflow reads."""
    for name in (
        "ARCHFLOW_PROVIDER", "ARCHFLOW_TIMEOUT",
        "OPENAI_API_KEY", "OPENAI_MODEL", "OPENAI_GENERATION_MODEL",
        "GEMINI_API_KEY", "GEMINI_MODEL", "GEMINI_GENERATION_MODEL",
    ):
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


# ============================================================================
# Settings Fixtures
# ============================================================================

@pytest.fixture
def openai_settings() -> ProviderSettings:
    return ProviderSettings(
        credential=ProviderCredential(kind=ProviderKind.OPENAI, key="sk-test-key-1234567890"),
        chat_model="gpt-4o",
        generation_model="gpt-4o",
        timeout=5.0,
    )


@pytest.fixture
def gemini_settings() -> ProviderSettings:
    return ProviderSettings(
        credential=ProviderCredential(kind=ProviderKind.GEMINI, key="gemini-test-key-123"),
        chat_model="gemini-2.0-flash",
        generation_model="gemini-2.5-pro",
        timeout=5.0,
    )


# ============================================================================
# HTTP Fixtures
# ============================================================================

class RecordingTransport:
    """Collects requests and answers each with the configured handler."""

    def __init__(self, handler: Callable[[httpx.Request], httpx.Response]):
        self.handler = handler
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self.handler(request)

    @property
    def last_json(self) -> dict:
        return json.loads(self.requests[-1].content)

    def client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(self))


@pytest.fixture
def transport_factory():
    """Build a recording transport from a handler function."""
    return RecordingTransport


def _openai_reply(content: str) -> dict:
    return {"choices": [{"index": 0, "message": {"role": "assistant", "content": content}}]}


def _gemini_reply(content: str) -> dict:
    return {"candidates": [{"content": {"role": "model", "parts": [{"text": content}]}}]}


@pytest.fixture
def openai_reply():
    """Wrap text in a chat-completions response body."""
    return _openai_reply


@pytest.fixture
def gemini_reply():
    """Wrap text in a generateContent response body."""
    return _gemini_reply


# ============================================================================
# Data Fixtures
# ============================================================================

@pytest.fixture
def sample_graph_data() -> dict:
    return json.loads(json.dumps(SAMPLE_GRAPH))


@pytest.fixture
def sample_design_data() -> dict:
    return json.loads(json.dumps(SAMPLE_DESIGN))


@pytest.fixture
def sample_graph(sample_graph_data) -> Graph:
    return Graph.model_validate(sample_graph_data)


@pytest.fixture
def conversation() -> list[Message]:
    return [
        Message(role=Role.USER, content="I'm building a marketplace for used bikes."),
        Message(role=Role.ASSISTANT, content="Nice! How many users do you expect?"),
        Message(role=Role.USER, content="About 50k monthly users."),
        Message(role=Role.ASSISTANT, content="Which core features do you need?"),
    ]


# ============================================================================
# Fake Adapter
# ============================================================================

class ScriptedAdapter(ProviderAdapter):
    """Replays canned replies; an Exception in the script is raised instead."""

    name = "scripted"

    def __init__(self, replies: Sequence = (), artifact: Optional[DesignArtifact] = None,
                 graph: Optional[Graph] = None, diagram_text: str = "graph TD\n    A --> B"):
        self.replies = list(replies)
        self.artifact = artifact
        self.graph = graph
        self.diagram_text = diagram_text
        self.calls: list[tuple] = []

    async def converse(self, history, new_user_message):
        self.calls.append(("converse", tuple(history), new_user_message))
        reply = self.replies.pop(0) if self.replies else "Tell me more."
        if isinstance(reply, Exception):
            raise reply
        return Message(role=Role.ASSISTANT, content=reply)

    async def synthesize_design(self, history):
        self.calls.append(("synthesize_design", tuple(history)))
        if self.artifact is None:
            raise ProviderError("no artifact scripted", provider=self.name)
        return self.artifact

    async def describe_image(self, image, mime_type):
        self.calls.append(("describe_image", image, mime_type))
        return self.diagram_text

    async def convert_description_to_graph(self, diagram_text):
        self.calls.append(("convert_description_to_graph", diagram_text))
        if self.graph is None:
            raise ProviderError("no graph scripted", provider=self.name)
        return self.graph


@pytest.fixture
def scripted_adapter_factory():
    return ScriptedAdapter
