"""Provider adapters."""

from typing import Optional

import httpx

from ..config import ProviderKind, ProviderSettings
from .base import HTTPProviderAdapter, ProviderAdapter
from .gemini import GeminiAdapter
from .mock import MockAdapter
from .openai_chat import OpenAIAdapter

ADAPTERS = {
    ProviderKind.OPENAI: OpenAIAdapter,
    ProviderKind.GEMINI: GeminiAdapter,
}


def create_adapter(
    settings: Optional[ProviderSettings] = None,
    client: Optional[httpx.AsyncClient] = None,
) -> ProviderAdapter:
    """Build the adapter for the configured provider."""
    if settings is None:
        settings = ProviderSettings.from_env()
    if settings.kind == ProviderKind.MOCK:
        return MockAdapter(settings)
    return ADAPTERS[settings.kind](settings, client=client)


__all__ = [
    "ProviderAdapter",
    "HTTPProviderAdapter",
    "OpenAIAdapter",
    "GeminiAdapter",
    "MockAdapter",
    "create_adapter",
]
