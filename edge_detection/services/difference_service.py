import numpy as np

from ..models.grayscale_image import GrayscaleImage
from ..errors import DimensionMismatch


class DifferenceService:
    """Pointwise grid arithmetic used to combine two filter branches."""

    @staticmethod
    def subtract(a: GrayscaleImage, b: GrayscaleImage) -> GrayscaleImage:
        """
        Saturating difference: result[y, x] = max(0, a[y, x] - b[y, x]).

        Raises:
            DimensionMismatch: if a and b differ in width or height.
        """
        if not a.same_size(b):
            raise DimensionMismatch(
                f"Cannot subtract {b.width}x{b.height} grid from {a.width}x{a.height} grid"
            )
        diff = a.pixels.astype(np.int16) - b.pixels.astype(np.int16)
        return GrayscaleImage(np.maximum(diff, 0))
