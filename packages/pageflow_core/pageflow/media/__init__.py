"""Image resolution and decoding."""

from .image_resolver import (
    DefaultImageResolver,
    ImageResolver,
    PhysicalImage,
    decode_image,
)

__all__ = ["DefaultImageResolver", "ImageResolver", "PhysicalImage", "decode_image"]
