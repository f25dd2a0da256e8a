"""OpenAI chat-completions adapter."""

from typing import Optional, Sequence

from ..errors import ProviderError
from ..models import Message
from .base import HTTPProviderAdapter

OPENAI_CHAT_URL = "https://api.openai.com/v1/chat/completions"


class OpenAIAdapter(HTTPProviderAdapter):
    """Flat role-tagged message list, bearer auth, answer under ``choices``."""

    name = "openai"
    endpoint = OPENAI_CHAT_URL
    design_max_tokens = 4000

    def _headers(self) -> dict:
        return {"Authorization": f"Bearer {self.settings.credential.key}"}

    def _extract_text(self, data: dict) -> str:
        try:
            content = data["choices"][0]["message"]["content"]
        except (KeyError, IndexError, TypeError) as e:
            raise ProviderError(
                "unexpected response shape: missing choices[0].message.content",
                provider=self.name,
            ) from e
        if not isinstance(content, str):
            raise ProviderError("reply has no text content", provider=self.name)
        return content

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
        messages = [{"role": "system", "content": system_prompt}]
        messages.extend({"role": m.role.value, "content": m.content} for m in turns)

        payload = {"model": model, "messages": messages, "max_tokens": max_tokens}
        if temperature is not None:
            payload["temperature"] = temperature
        if json_output:
            payload["response_format"] = {"type": "json_object"}

        data = await self._post_json(self.endpoint, payload, headers=self._headers())
        return self._extract_text(data)

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
        payload = {
            "model": model,
            "messages": [
                {"role": "system", "content": system_prompt},
                {
                    "role": "user",
                    "content": [
                        {"type": "text", "text": instruction},
                        {
                            "type": "image_url",
                            "image_url": {"url": f"data:{mime_type};base64,{image_b64}"},
                        },
                    ],
                },
            ],
            "max_tokens": max_tokens,
        }
        data = await self._post_json(self.endpoint, payload, headers=self._headers())
        return self._extract_text(data)
