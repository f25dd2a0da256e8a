"""Import of existing diagram images.

Importing is two separate steps. ``import_from_image`` returns Mermaid text
for the user to check; ``materialize_graph`` runs only once they accept it.
"""

import logging
from pathlib import Path
from typing import Optional, Union

from .models import Graph
from .providers.base import ProviderAdapter

logger = logging.getLogger(__name__)

SUPPORTED_MIME_TYPES = ("image/png", "image/jpeg", "image/gif", "image/webp")


def detect_mime_type(image: bytes) -> Optional[str]:
    """Guess an image MIME type from its magic bytes."""
    if image.startswith(b"\x89PNG\r\n\x1a\n"):
        return "image/png"
    if image.startswith(b"\xff\xd8\xff"):
        return "image/jpeg"
    if image[:6] in (b"GIF87a", b"GIF89a"):
        return "image/gif"
    if image[:4] == b"RIFF" and image[8:12] == b"WEBP":
        return "image/webp"
    return None


class DiagramImportPipeline:
    """Image to Mermaid text, then Mermaid text to graph."""

    def __init__(self, adapter: ProviderAdapter):
        self.adapter = adapter

    async def import_from_image(self, image: bytes, mime_type: Optional[str] = None) -> str:
        """Describe a diagram image as Mermaid text.

        Args:
            image: Raw image bytes
            mime_type: Image MIME type; detected from the bytes if omitted

        Returns:
            Mermaid source with any code fences removed
        """
        if not image:
            raise ValueError("Image is empty")
        mime_type = mime_type or detect_mime_type(image)
        if mime_type not in SUPPORTED_MIME_TYPES:
            raise ValueError(
                f"Unsupported image type: {mime_type or 'unknown'} "
                f"(expected one of {', '.join(SUPPORTED_MIME_TYPES)})"
            )
        logger.debug("Describing %s image of %d bytes", mime_type, len(image))
        return await self.adapter.describe_image(image, mime_type)

    async def import_from_path(self, image_path: Union[str, Path]) -> str:
        """Read an image file and describe it as Mermaid text."""
        path = Path(image_path)
        if not path.exists():
            raise FileNotFoundError(f"Image not found: {image_path}")
        return await self.import_from_image(path.read_bytes())

    async def materialize_graph(self, diagram_text: str) -> Graph:
        """Convert accepted Mermaid text into a graph."""
        if not diagram_text or not diagram_text.strip():
            raise ValueError("Diagram text is empty")
        return await self.adapter.convert_description_to_graph(diagram_text.strip())
