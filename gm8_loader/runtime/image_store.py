"""
Image storage contract.

Sprite frames, backgrounds and font bitmaps are handed over as raw RGBA
buffers; packing them into texture atlases is the renderer's business.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, List


class ImageStore(ABC):
    """Interface of the renderer's image registration."""

    @abstractmethod
    def make_image(self, width: int, height: int, origin_x: int, origin_y: int, pixels: bytes) -> Any:
        """
        Register an RGBA image.

        Args:
            width: Width in pixels
            height: Height in pixels
            origin_x: Horizontal origin used when drawing
            origin_y: Vertical origin used when drawing
            pixels: ``width * height * 4`` bytes, RGBA, rows top to bottom

        Returns:
            Opaque image handle
        """
        pass


@dataclass
class StoredImage:
    width: int = 0
    height: int = 0
    origin_x: int = 0
    origin_y: int = 0
    pixels: bytes = b""


@dataclass
class MemoryImageStore(ImageStore):
    """Image store that keeps every image in a list; handles are indices."""
    images: List[StoredImage] = field(default_factory=list)

    def make_image(self, width: int, height: int, origin_x: int, origin_y: int, pixels: bytes) -> int:
        self.images.append(StoredImage(width, height, origin_x, origin_y, bytes(pixels)))
        return len(self.images) - 1
