"""Provider adapter interface and the shared HTTP plumbing."""

import base64
import logging
from abc import ABC, abstractmethod
from typing import Any, Optional, Sequence

import httpx

from ..config import ProviderSettings
from ..errors import MalformedArtifactError, ProviderError
from ..models import DesignArtifact, Graph, Message, Role
from ..parsing import parse_design_artifact, parse_graph, strip_code_fences
from ..prompts import (
    CHAT_SYSTEM_PROMPT,
    GENERATION_PROMPT,
    IMAGE_TO_MERMAID_PROMPT,
    IMAGE_USER_INSTRUCTION,
    MERMAID_TO_GRAPH_PROMPT,
    design_request,
    graph_request,
)

logger = logging.getLogger(__name__)

CHAT_MAX_TOKENS = 500
CHAT_TEMPERATURE = 0.7
VISION_MAX_TOKENS = 4000
CONVERSION_MAX_TOKENS = 4000


class ProviderAdapter(ABC):
    """Uniform access to a hosted model.

    Each operation is a single remote call with no retry. Implementations
    raise ``ProviderError`` for transport and envelope problems and
    ``MalformedArtifactError`` when structured output cannot be parsed.
    """

    name: str = "provider"

    @abstractmethod
    async def converse(self, history: Sequence[Message], new_user_message: str) -> Message:
        """Produce the assistant's reply to ``new_user_message`` given ``history``."""

    @abstractmethod
    async def synthesize_design(self, history: Sequence[Message]) -> DesignArtifact:
        """Produce a design artifact from a whole conversation."""

    @abstractmethod
    async def describe_image(self, image: bytes, mime_type: str) -> str:
        """Describe a diagram image as Mermaid source."""

    @abstractmethod
    async def convert_description_to_graph(self, diagram_text: str) -> Graph:
        """Turn Mermaid source into a typed graph."""


class HTTPProviderAdapter(ProviderAdapter):
    """Base for adapters that talk to a JSON-over-HTTPS API.

    Subclasses only shape requests and unwrap responses; prompts, parsing
    and error mapping live here.
    """

    design_max_tokens: int = 4000

    def __init__(self, settings: ProviderSettings, client: Optional[httpx.AsyncClient] = None):
        if not settings.credential.key:
            raise ValueError(f"No API key configured for {settings.kind.value}")
        self.settings = settings
        self._client = client

    # ------------------------------------------------------------------
    # Uniform operations
    # ------------------------------------------------------------------

    async def converse(self, history: Sequence[Message], new_user_message: str) -> Message:
        turns = [*history, Message(role=Role.USER, content=new_user_message)]
        text = await self._complete(
            CHAT_SYSTEM_PROMPT,
            turns,
            model=self.settings.chat_model,
            max_tokens=CHAT_MAX_TOKENS,
            temperature=CHAT_TEMPERATURE,
        )
        if not text.strip():
            raise ProviderError("empty reply", provider=self.name)
        return Message(role=Role.ASSISTANT, content=text.strip())

    async def synthesize_design(self, history: Sequence[Message]) -> DesignArtifact:
        text = await self._complete(
            GENERATION_PROMPT,
            [Message(role=Role.USER, content=design_request(history))],
            model=self.settings.generation_model,
            max_tokens=self.design_max_tokens,
            json_output=True,
        )
        return parse_design_artifact(text)

    async def describe_image(self, image: bytes, mime_type: str) -> str:
        text = await self._complete_with_image(
            IMAGE_TO_MERMAID_PROMPT,
            IMAGE_USER_INSTRUCTION,
            base64.b64encode(image).decode("ascii"),
            mime_type,
            model=self.settings.generation_model,
            max_tokens=VISION_MAX_TOKENS,
        )
        diagram = strip_code_fences(text)
        if not diagram:
            raise MalformedArtifactError("model returned no diagram text", raw_text=text)
        return diagram

    async def convert_description_to_graph(self, diagram_text: str) -> Graph:
        text = await self._complete(
            MERMAID_TO_GRAPH_PROMPT,
            [Message(role=Role.USER, content=graph_request(diagram_text))],
            model=self.settings.generation_model,
            max_tokens=CONVERSION_MAX_TOKENS,
            json_output=True,
        )
        return parse_graph(text)

    # ------------------------------------------------------------------
    # Provider-specific request shaping
    # ------------------------------------------------------------------

    @abstractmethod
    async def _complete(
        self,
        system_prompt: str,
        turns: Sequence[Message],
        *,
        model: str,
        max_tokens: int,
        temperature: Optional[float] = None,
        json_output: bool = False,
    ) -> str:
        """Send a text conversation and return the reply text."""

    @abstractmethod
    async def _complete_with_image(
        self,
        system_prompt: str,
        instruction: str,
        image_b64: str,
        mime_type: str,
        *,
        model: str,
        max_tokens: int,
    ) -> str:
        """Send one image with an instruction and return the reply text."""

    # ------------------------------------------------------------------
    # Transport
    # ------------------------------------------------------------------

    @staticmethod
    def _error_message(data: Any) -> Optional[str]:
        """Pull a provider-reported error message out of a response body."""
        if not isinstance(data, dict) or not data.get("error"):
            return None
        error = data["error"]
        if isinstance(error, dict):
            return str(error.get("message") or error.get("status") or error)
        return str(error)

    async def _post_json(
        self,
        url: str,
        payload: dict,
        *,
        headers: Optional[dict] = None,
        params: Optional[dict] = None,
    ) -> dict:
        timeout = self.settings.timeout
        logger.debug("POST %s (provider=%s, model=%s)", url, self.name, payload.get("model", "-"))
        try:
            if self._client is not None:
                response = await self._client.post(
                    url, json=payload, headers=headers, params=params, timeout=timeout
                )
            else:
                async with httpx.AsyncClient(timeout=timeout) as client:
                    response = await client.post(url, json=payload, headers=headers, params=params)
        except httpx.TimeoutException as e:
            raise ProviderError(f"request timed out after {timeout:g}s", provider=self.name) from e
        except httpx.HTTPError as e:
            raise ProviderError(f"request failed: {e}", provider=self.name) from e

        try:
            data = response.json()
        except ValueError:
            data = None

        message = self._error_message(data)
        if response.is_error:
            raise ProviderError(
                message or response.reason_phrase or "request failed",
                provider=self.name,
                status_code=response.status_code,
            )
        if message:
            raise ProviderError(message, provider=self.name)
        if not isinstance(data, dict):
            raise ProviderError("response body is not a JSON object", provider=self.name)
        return data
