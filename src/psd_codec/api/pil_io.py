"""
PIL IO module.
"""

import logging
from typing import Optional

from PIL import Image

logger = logging.getLogger(__name__)


def convert_rgba_to_pil(data: bytes, width: int, height: int) -> Optional[Image.Image]:
    """Convert straight-alpha RGBA bytes to PIL Image, None when empty."""
    if width == 0 or height == 0:
        return None
    return Image.frombytes("RGBA", (width, height), data)


def convert_pil_to_rgba(image: Image.Image) -> bytes:
    """Convert any PIL Image to straight-alpha RGBA bytes."""
    if image.mode != "RGBA":
        logger.debug("Converting %s image to RGBA" % image.mode)
        image = image.convert("RGBA")
    return image.tobytes()
