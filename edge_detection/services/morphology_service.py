from __future__ import annotations
from typing import Callable, Sequence, Union
import logging
import numpy as np

from ..models.grayscale_image import GrayscaleImage
from ..models.structuring_element import StructuringElement

logger = logging.getLogger(__name__)

ElementLike = Union[StructuringElement, np.ndarray, Sequence[Sequence[int]]]


class MorphologyService:
    """
    Grey-level dilation and erosion driven by a structuring element.
    Offsets that fall outside the grid are skipped, not padded: a pixel
    whose active offsets are all out of bounds gets the identity value
    (0 for dilation, 255 for erosion).
    """

    @staticmethod
    def as_element(se: ElementLike) -> StructuringElement:
        return se if isinstance(se, StructuringElement) else StructuringElement(se)

    @staticmethod
    def _extremal_filter(
        image: GrayscaleImage,
        se: StructuringElement,
        reduce: Callable[[np.ndarray, np.ndarray], np.ndarray],
        identity: int,
    ) -> GrayscaleImage:
        h, w = image.shape
        result = np.full((h, w), identity, dtype=np.uint8)
        if image.pixels.size == 0:
            return GrayscaleImage(result)

        # Padding with the identity of the reduction is the same as skipping
        # out-of-bounds offsets: it can never win max/min against a real pixel.
        pad = se.offset
        padded = np.pad(image.pixels, pad, mode="constant", constant_values=identity)
        for dy, dx in se.active_offsets():
            view = padded[pad + dy:pad + dy + h, pad + dx:pad + dx + w]
            result = reduce(result, view)
        return GrayscaleImage(result)

    def dilation(self, image: GrayscaleImage, se: ElementLike) -> GrayscaleImage:
        """
        Args:
            image (GrayscaleImage): Source grid.
            se: StructuringElement or square boolean/0-1 mask.

        Returns:
            GrayscaleImage: max over in-bounds active neighbours.
        """
        se = self.as_element(se)
        logger.debug(f"Dilation {image.width}x{image.height} with {se.size}x{se.size} element")
        return self._extremal_filter(image, se, np.maximum, 0)

    def erosion(self, image: GrayscaleImage, se: ElementLike) -> GrayscaleImage:
        """Min over in-bounds active neighbours; 255 when none are in bounds."""
        se = self.as_element(se)
        logger.debug(f"Erosion {image.width}x{image.height} with {se.size}x{se.size} element")
        return self._extremal_filter(image, se, np.minimum, 255)
