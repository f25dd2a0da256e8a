"""Google Gemini generateContent adapter."""

from typing import Optional, Sequence

from ..errors import ProviderError
from ..models import Message, Role
from .base import HTTPProviderAdapter

GEMINI_URL_TEMPLATE = "https://generativelanguage.googleapis.com/v1beta/models/{model}:generateContent"

# Gemini calls the assistant side of a conversation "model"
_ROLE_NAMES = {Role.USER: "user", Role.ASSISTANT: "model"}


class GeminiAdapter(HTTPProviderAdapter):
    """Turns of content parts, key as a query parameter, answer under ``candidates``."""

    name = "gemini"
    design_max_tokens = 8192

    def _url(self, model: str) -> str:
        return GEMINI_URL_TEMPLATE.format(model=model)

    def _params(self) -> dict:
        return {"key": self.settings.credential.key}

    def _extract_text(self, data: dict) -> str:
        candidates = data.get("candidates")
        if not candidates:
            feedback = data.get("promptFeedback") or {}
            reason = feedback.get("blockReason") if isinstance(feedback, dict) else None
            detail = f"prompt blocked ({reason})" if reason else "response has no candidates"
            raise ProviderError(detail, provider=self.name)
        try:
            parts = candidates[0]["content"]["parts"]
            texts = [part["text"] for part in parts if "text" in part]
        except (KeyError, IndexError, TypeError) as e:
            raise ProviderError(
                "unexpected response shape: missing candidates[0].content.parts",
                provider=self.name,
            ) from e
        if not texts:
            raise ProviderError("reply has no text content", provider=self.name)
        return "".join(texts)

    async def _generate(self, model: str, contents: list, system_prompt: str, config: dict) -> str:
        payload = {
            "contents": contents,
            "systemInstruction": {"parts": [{"text": system_prompt}]},
            "generationConfig": config,
        }
        data = await self._post_json(self._url(model), payload, params=self._params())
        return self._extract_text(data)

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
        contents = [
            {"role": _ROLE_NAMES[m.role], "parts": [{"text": m.content}]} for m in turns
        ]
        config = {"maxOutputTokens": max_tokens}
        if temperature is not None:
            config["temperature"] = temperature
        if json_output:
            config["responseMimeType"] = "application/json"
        return await self._generate(model, contents, system_prompt, config)

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
        contents = [
            {
                "role": "user",
                "parts": [
                    {"text": instruction},
                    {"inline_data": {"mime_type": mime_type, "data": image_b64}},
                ],
            }
        ]
        return await self._generate(model, contents, system_prompt, {"maxOutputTokens": max_tokens})
