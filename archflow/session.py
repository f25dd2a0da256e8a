"""Conversation session: the append-only message log of one chat."""

import asyncio
import logging
from dataclasses import dataclass
from typing import Optional

from .errors import MalformedArtifactError, ProviderError, SessionBusyError
from .models import Message, Role
from .prompts import FALLBACK_REPLY, INITIAL_GREETING
from .providers.base import ProviderAdapter
from .readiness import ReadinessPolicy

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TurnResult:
    """Outcome of one user turn."""
    message: Message
    ready_to_generate: bool
    fallback: bool = False


class ConversationSession:
    """Holds the message log and asks the adapter for each assistant turn.

    The log only grows. A failed remote call still leaves the log
    alternating user/assistant, with a fixed apology in place of the reply,
    so the session can always continue.
    """

    def __init__(self, adapter: ProviderAdapter, policy: Optional[ReadinessPolicy] = None):
        self.adapter = adapter
        self.policy = policy or ReadinessPolicy()
        self.ready_to_generate = False
        self._messages: list[Message] = []
        self._pending = False

    @property
    def messages(self) -> tuple[Message, ...]:
        return tuple(self._messages)

    @property
    def busy(self) -> bool:
        """True while a turn is waiting on the provider."""
        return self._pending

    @staticmethod
    def greeting() -> Message:
        """Opening assistant message for display. Not part of the log."""
        return Message(role=Role.ASSISTANT, content=INITIAL_GREETING)

    def _add_message(self, role: Role, content: str) -> Message:
        message = Message(role=role, content=content)
        self._messages.append(message)
        return message

    async def send(self, text: str) -> TurnResult:
        """Append a user turn and the assistant's answer to it.

        Provider failures become a fallback reply with readiness unchanged.
        If the awaiting task is cancelled, the fallback reply is appended
        before the cancellation propagates.
        """
        text = text.strip()
        if not text:
            raise ValueError("Message must not be empty")
        if self._pending:
            raise SessionBusyError("A previous message is still waiting for a reply")

        history = tuple(self._messages)
        self._add_message(Role.USER, text)
        self._pending = True
        try:
            reply = await self.adapter.converse(history, text)
        except (ProviderError, MalformedArtifactError) as e:
            logger.warning("Chat turn failed, using fallback reply: %s", e)
            message = self._add_message(Role.ASSISTANT, FALLBACK_REPLY)
            return TurnResult(message=message, ready_to_generate=self.ready_to_generate, fallback=True)
        except asyncio.CancelledError:
            logger.debug("Chat turn cancelled after %d messages", len(self._messages))
            self._add_message(Role.ASSISTANT, FALLBACK_REPLY)
            raise
        finally:
            self._pending = False

        message = self._add_message(Role.ASSISTANT, reply.content)
        self.ready_to_generate = self.policy(message.content, len(self._messages))
        return TurnResult(message=message, ready_to_generate=self.ready_to_generate)
