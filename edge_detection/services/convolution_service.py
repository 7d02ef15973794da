from __future__ import annotations
from typing import Sequence, Union
import logging
import numpy as np

from ..models.grayscale_image import GrayscaleImage
from ..models.kernel import Kernel
from ..errors import OutOfRange

logger = logging.getLogger(__name__)

KernelLike = Union[Kernel, np.ndarray, Sequence[Sequence[float]]]


class ConvolutionService:
    """
    Square-kernel filtering with a clamp-to-edge boundary.
    *   Works only on GrayscaleImage objects, never mutates them.
    *   The kernel is applied as written (correlation, no flip).
    """

    @staticmethod
    def as_kernel(kernel: KernelLike) -> Kernel:
        return kernel if isinstance(kernel, Kernel) else Kernel(kernel)

    def convolve(self, image: GrayscaleImage, kernel: KernelLike) -> np.ndarray:
        """
        Raw accumulated values, before any clipping.

        Args:
            image (GrayscaleImage): Source grid.
            kernel: Kernel or square odd-sized weight matrix.

        Returns:
            np.ndarray: (H, W) float64, out[y, x] = Σ k[ky, kx] * I[clamp(y+ky-o), clamp(x+kx-o)].
        """
        kernel = self.as_kernel(kernel)
        h, w = image.shape
        out = np.zeros((h, w), dtype=np.float64)
        if image.pixels.size == 0:
            return out

        # mode="edge" repeats the outermost pixel, i.e. clamps the coordinate
        padded = np.pad(image.pixels.astype(np.float64), kernel.offset, mode="edge")
        for ky in range(kernel.size):
            for kx in range(kernel.size):
                weight = kernel.weights[ky, kx]
                if weight != 0:
                    out += padded[ky:ky + h, kx:kx + w] * weight
        logger.debug(f"Convolved {w}x{h} grid with {kernel.size}x{kernel.size} kernel")
        return out

    def apply(self, image: GrayscaleImage, kernel: KernelLike) -> GrayscaleImage:
        """Convolve, clip to [0, 255] and truncate to a new GrayscaleImage."""
        raw = self.convolve(image, kernel)
        return GrayscaleImage(np.clip(raw, 0, 255).astype(np.uint8))

    def convolve_at(self, image: GrayscaleImage, kernel: KernelLike, x: int, y: int) -> float:
        """Single-point form of convolve(), same boundary handling."""
        kernel = self.as_kernel(kernel)
        if not (0 <= x < image.width and 0 <= y < image.height):
            raise OutOfRange(f"Pixel ({x}, {y}) outside {image.width}x{image.height} grid")
        o = kernel.offset
        ys = np.clip(np.arange(y - o, y + o + 1), 0, image.height - 1)
        xs = np.clip(np.arange(x - o, x + o + 1), 0, image.width - 1)
        window = image.pixels[np.ix_(ys, xs)].astype(np.float64)
        return float((window * kernel.weights).sum())
