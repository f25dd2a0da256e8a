"""Design synthesis from a finished conversation."""

import logging
from typing import Sequence

from .models import DesignArtifact, Message
from .providers.base import ProviderAdapter

logger = logging.getLogger(__name__)


class DesignSynthesizer:
    """Turns a message log into a design artifact.

    Provider and parse errors propagate so the caller can offer a retry.
    """

    def __init__(self, adapter: ProviderAdapter):
        self.adapter = adapter

    async def generate(self, history: Sequence[Message]) -> DesignArtifact:
        if not history:
            raise ValueError("Cannot generate a design from an empty conversation")
        artifact = await self.adapter.synthesize_design(tuple(history))
        logger.debug(
            "Generated design with %d nodes and %d edges",
            len(artifact.graph.nodes),
            len(artifact.graph.edges),
        )
        return artifact
