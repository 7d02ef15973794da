from __future__ import annotations
import logging
import numpy as np

from ..models.grayscale_image import GrayscaleImage
from ..models.gradient_field import GradientField
from ..models.kernel import Kernel
from .convolution_service import ConvolutionService

logger = logging.getLogger(__name__)

# ─── Fixed 3x3 operator kernels ──────────────────────────────────────
SOBEL_X = Kernel([[-1, 0, 1], [-2, 0, 2], [-1, 0, 1]])
SOBEL_Y = Kernel([[-1, -2, -1], [0, 0, 0], [1, 2, 1]])
PREWITT_X = Kernel([[-1, 0, 1], [-1, 0, 1], [-1, 0, 1]])
PREWITT_Y = Kernel([[-1, -1, -1], [0, 0, 0], [1, 1, 1]])
LAPLACIAN = Kernel([[0, 1, 0], [1, -4, 1], [0, 1, 0]])


def _interior(grid: np.ndarray) -> np.ndarray:
    """Copy of grid with the outermost 1-pixel ring set to zero."""
    out = np.zeros_like(grid)
    if grid.shape[0] >= 3 and grid.shape[1] >= 3:
        out[1:-1, 1:-1] = grid[1:-1, 1:-1]
    return out


class GradientService:
    """
    First- and second-derivative edge operators.
    Only interior pixels are computed; the border ring of every result
    stays 0 rather than being filled from clamped neighbours.
    """

    def __init__(self, convolution_service: ConvolutionService | None = None):
        self.convolution_service = convolution_service or ConvolutionService()

    def gradient_field(self, image: GrayscaleImage, kernel_x: Kernel, kernel_y: Kernel) -> GradientField:
        """
        Args:
            image (GrayscaleImage): Source grid.
            kernel_x, kernel_y (Kernel): Horizontal / vertical derivative kernels.

        Returns:
            GradientField: rounded, unclipped magnitude and atan2(gy, gx) angle
            on interior pixels; border cells 0 / 0.0.
        """
        gx = self.convolution_service.convolve(image, kernel_x)
        gy = self.convolution_service.convolve(image, kernel_y)
        magnitude = _interior(np.rint(np.sqrt(gx ** 2 + gy ** 2)).astype(np.int64))
        angle = _interior(np.arctan2(gy, gx))
        return GradientField(magnitude=magnitude, angle=angle)

    def _magnitude_image(self, image: GrayscaleImage, kernel_x: Kernel, kernel_y: Kernel) -> GrayscaleImage:
        field = self.gradient_field(image, kernel_x, kernel_y)
        return GrayscaleImage(np.minimum(field.magnitude, 255))

    def sobel(self, image: GrayscaleImage) -> GrayscaleImage:
        logger.debug(f"Sobel on {image.width}x{image.height}")
        return self._magnitude_image(image, SOBEL_X, SOBEL_Y)

    def prewitt(self, image: GrayscaleImage) -> GrayscaleImage:
        logger.debug(f"Prewitt on {image.width}x{image.height}")
        return self._magnitude_image(image, PREWITT_X, PREWITT_Y)

    def laplacian(self, image: GrayscaleImage) -> GrayscaleImage:
        """|Laplacian| clipped to 255 on interior pixels."""
        logger.debug(f"Laplacian on {image.width}x{image.height}")
        raw = self.convolution_service.convolve(image, LAPLACIAN)
        return GrayscaleImage(_interior(np.clip(np.abs(raw), 0, 255)))
