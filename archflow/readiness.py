"""Heuristic for when a conversation has gathered enough to generate a design.

The check is cheap on purpose: false positives and negatives are acceptable
because the user can always ask for generation directly.
"""

from dataclasses import dataclass

# 4 user + 4 assistant turns
READY_TURN_THRESHOLD = 8

TRIGGER_PHRASES = (
    "generate",
    "create the design",
    "ready to build",
    "shall i generate",
    "want me to generate",
    "create your architecture",
)


def is_ready(
    assistant_message: str,
    history_length: int,
    *,
    turn_threshold: int = READY_TURN_THRESHOLD,
    trigger_phrases: tuple[str, ...] = TRIGGER_PHRASES,
) -> bool:
    """Return True if the session has enough turns or the assistant offers to generate."""
    if history_length >= turn_threshold:
        return True
    lowered = assistant_message.lower()
    return any(phrase.lower() in lowered for phrase in trigger_phrases)


@dataclass(frozen=True)
class ReadinessPolicy:
    """Configurable thresholds for ``is_ready``."""
    turn_threshold: int = READY_TURN_THRESHOLD
    trigger_phrases: tuple[str, ...] = TRIGGER_PHRASES

    def __call__(self, assistant_message: str, history_length: int) -> bool:
        return is_ready(
            assistant_message,
            history_length,
            turn_threshold=self.turn_threshold,
            trigger_phrases=self.trigger_phrases,
        )
