"""Provider configuration."""

import os
from dataclasses import dataclass
from enum import Enum
from typing import Optional


class ProviderKind(str, Enum):
    """Supported model providers."""
    OPENAI = "openai"
    GEMINI = "gemini"
    MOCK = "mock"

    @classmethod
    def from_env(cls) -> "ProviderKind":
        """Detect provider from environment."""
        explicit = os.getenv("ARCHFLOW_PROVIDER", "").lower()
        for kind in cls:
            if explicit == kind.value:
                return kind
        if os.getenv("OPENAI_API_KEY"):
            return cls.OPENAI
        if os.getenv("GEMINI_API_KEY"):
            return cls.GEMINI
        return cls.MOCK


API_KEY_ENV_VARS = {
    ProviderKind.OPENAI: "OPENAI_API_KEY",
    ProviderKind.GEMINI: "GEMINI_API_KEY",
}

# Chat turns are short; generation, vision and conversion use the stronger model
DEFAULT_CHAT_MODELS = {
    ProviderKind.OPENAI: "gpt-4o",
    ProviderKind.GEMINI: "gemini-2.0-flash",
    ProviderKind.MOCK: "mock",
}

DEFAULT_GENERATION_MODELS = {
    ProviderKind.OPENAI: "gpt-4o",
    ProviderKind.GEMINI: "gemini-2.5-pro",
    ProviderKind.MOCK: "mock",
}

DEFAULT_TIMEOUT = 60.0


def _mask(key: str) -> str:
    if not key:
        return "NOT SET"
    if len(key) <= 8:
        return "****"
    return f"{key[:4]}...{key[-4:]}"


@dataclass(frozen=True)
class ProviderCredential:
    """API key for one provider."""
    kind: ProviderKind
    key: str = ""

    @classmethod
    def from_env(cls, kind: ProviderKind) -> "ProviderCredential":
        env_var = API_KEY_ENV_VARS.get(kind)
        return cls(kind=kind, key=os.getenv(env_var, "") if env_var else "")

    @property
    def masked_key(self) -> str:
        return _mask(self.key)

    def __repr__(self) -> str:
        return f"ProviderCredential(kind={self.kind.value!r}, key={self.masked_key!r})"


@dataclass(frozen=True)
class ModelConfig:
    """Model names used for one provider."""
    provider: ProviderKind
    chat_model: str
    generation_model: str

    def __str__(self) -> str:
        return f"{self.provider.value}/{self.chat_model}+{self.generation_model}"


def get_model_config(kind: Optional[ProviderKind] = None) -> ModelConfig:
    """Get chat and generation models, honoring environment overrides.

    ``<PROVIDER>_MODEL`` overrides both models, ``<PROVIDER>_GENERATION_MODEL``
    overrides the generation model only.
    """
    if kind is None:
        kind = ProviderKind.from_env()

    prefix = kind.value.upper()
    shared = os.getenv(f"{prefix}_MODEL")
    chat_model = shared or DEFAULT_CHAT_MODELS[kind]
    generation_model = (
        os.getenv(f"{prefix}_GENERATION_MODEL")
        or shared
        or DEFAULT_GENERATION_MODELS[kind]
    )
    return ModelConfig(provider=kind, chat_model=chat_model, generation_model=generation_model)


def get_timeout() -> float:
    """Per-request timeout in seconds."""
    raw = os.getenv("ARCHFLOW_TIMEOUT")
    if not raw:
        return DEFAULT_TIMEOUT
    try:
        timeout = float(raw)
    except ValueError:
        raise ValueError(f"ARCHFLOW_TIMEOUT must be a number, got {raw!r}")
    if timeout <= 0:
        raise ValueError("ARCHFLOW_TIMEOUT must be positive")
    return timeout


@dataclass(frozen=True)
class ProviderSettings:
    """Everything an adapter needs, resolved once and passed in explicitly."""
    credential: ProviderCredential
    chat_model: str
    generation_model: str
    timeout: float = DEFAULT_TIMEOUT

    @property
    def kind(self) -> ProviderKind:
        return self.credential.kind

    @classmethod
    def from_env(cls, kind: Optional[ProviderKind] = None) -> "ProviderSettings":
        if kind is None:
            kind = ProviderKind.from_env()
        models = get_model_config(kind)
        return cls(
            credential=ProviderCredential.from_env(kind),
            chat_model=models.chat_model,
            generation_model=models.generation_model,
            timeout=get_timeout(),
        )


def get_current_config(kind: Optional[ProviderKind] = None) -> dict:
    """Get current configuration as a dictionary."""
    settings = ProviderSettings.from_env(kind)
    config = {
        "provider": settings.kind.value,
        "chat_model": settings.chat_model,
        "generation_model": settings.generation_model,
        "timeout": settings.timeout,
    }
    if settings.kind != ProviderKind.MOCK:
        config["api_key"] = settings.credential.masked_key
    return config


def print_config(kind: Optional[ProviderKind] = None):
    """Print current configuration."""
    config = get_current_config(kind)
    print(f"Provider: {config['provider']}")
    print(f"Chat model: {config['chat_model']}")
    print(f"Generation model: {config['generation_model']}")
    print(f"Timeout: {config['timeout']:.0f}s")
    if "api_key" in config:
        print(f"API Key: {config['api_key']}")
