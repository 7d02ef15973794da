from __future__ import annotations
from collections import deque
import logging
import numpy as np

from ..models.canny_config import CannyConfig
from ..models.grayscale_image import GrayscaleImage
from ..models.gradient_field import GradientField
from ..models.kernel import Kernel
from .convolution_service import ConvolutionService
from .gradient_service import GradientService, SOBEL_X, SOBEL_Y

logger = logging.getLogger(__name__)

STRONG = 255
WEAK = 128
NONE = 0

_NEIGHBOURS = [(-1, -1), (-1, 0), (-1, 1), (0, -1), (0, 1), (1, -1), (1, 0), (1, 1)]


class CannyService:
    """
    Canny edge detection as four fixed stages:
      1) Gaussian blur (whole image, clamp-to-edge, truncated)
      2) Sobel gradient magnitude + angle on interior pixels
      3) Non-maximum suppression along the quantised gradient direction
      4) Double threshold + hysteresis over 8-connected neighbours

    Every stage is public so it can be inspected or tested on its own;
    detect() always runs all four in order.
    """

    def __init__(
        self,
        config: CannyConfig | None = None,
        convolution_service: ConvolutionService | None = None,
        gradient_service: GradientService | None = None,
    ):
        self.config = config or CannyConfig.from_env()
        self.convolution_service = convolution_service or ConvolutionService()
        self.gradient_service = gradient_service or GradientService(self.convolution_service)

    # ─── Public API ────────────────────────────────────────────────
    def detect(self, image: GrayscaleImage, config: CannyConfig | None = None) -> GrayscaleImage:
        """
        Args:
            image (GrayscaleImage): Source grid.
            config (CannyConfig): Per-call override of the service config.

        Returns:
            GrayscaleImage: edge map with values in {0, 255}.
        """
        config = config or self.config
        blurred = self.gaussian_blur(image, config.blur_kernel_size, config.blur_sigma)
        field = self.gradient_field(blurred)
        suppressed = self.non_maximum_suppression(field)
        edges = self.hysteresis(suppressed, config.low_threshold, config.high_threshold)
        logger.debug(
            f"Canny {image.width}x{image.height} "
            f"(low={config.low_threshold}, high={config.high_threshold}): "
            f"{int(np.count_nonzero(edges.pixels))} edge pixels"
        )
        return edges

    # ─── Stage 1 ───────────────────────────────────────────────────
    def gaussian_blur(
        self,
        image: GrayscaleImage,
        kernel_size: int | None = None,
        sigma: float | None = None,
    ) -> GrayscaleImage:
        kernel = Kernel.gaussian(
            self.config.blur_kernel_size if kernel_size is None else kernel_size,
            self.config.blur_sigma if sigma is None else sigma,
        )
        raw = self.convolution_service.convolve(image, kernel)
        return GrayscaleImage(np.clip(np.trunc(raw), 0, 255))

    # ─── Stage 2 ───────────────────────────────────────────────────
    def gradient_field(self, blurred: GrayscaleImage) -> GradientField:
        return self.gradient_service.gradient_field(blurred, SOBEL_X, SOBEL_Y)

    # ─── Stage 3 ───────────────────────────────────────────────────
    @staticmethod
    def non_maximum_suppression(field: GradientField) -> np.ndarray:
        """
        Keep magnitude[y, x] only where it is >= both neighbours along the
        gradient direction; everything else (and the border ring) is 0.

        Returns:
            np.ndarray: (H, W) int64, pointwise <= field.magnitude.
        """
        mag = field.magnitude
        out = np.zeros_like(mag)
        if field.height < 3 or field.width < 3:
            return out

        deg = field.angle[1:-1, 1:-1] * 180.0 / np.pi
        deg = np.where(deg < 0, deg + 180, deg)

        horizontal = ((0 <= deg) & (deg < 22.5)) | ((157.5 <= deg) & (deg <= 180))
        diagonal_up = (22.5 <= deg) & (deg < 67.5)
        vertical = (67.5 <= deg) & (deg < 112.5)
        diagonal_down = (112.5 <= deg) & (deg < 157.5)
        buckets = [horizontal, diagonal_up, vertical, diagonal_down]

        # Shifted views: name = neighbour position relative to (y, x)
        east, west = mag[1:-1, 2:], mag[1:-1, :-2]
        south, north = mag[2:, 1:-1], mag[:-2, 1:-1]
        south_west, north_east = mag[2:, :-2], mag[:-2, 2:]
        north_west, south_east = mag[:-2, :-2], mag[2:, 2:]

        q = np.select(buckets, [east, south_west, south, north_west], default=STRONG)
        r = np.select(buckets, [west, north_east, north, south_east], default=STRONG)

        centre = mag[1:-1, 1:-1]
        out[1:-1, 1:-1] = np.where((centre >= q) & (centre >= r), centre, 0)
        return out

    # ─── Stage 4 ───────────────────────────────────────────────────
    @staticmethod
    def classify(suppressed: np.ndarray, low: int, high: int) -> np.ndarray:
        """>= high -> 255 (strong), [low, high) -> 128 (weak), else 0."""
        suppressed = np.asarray(suppressed)
        return np.where(
            suppressed >= high, STRONG, np.where(suppressed >= low, WEAK, NONE)
        ).astype(np.uint8)

    @staticmethod
    def promote(edges: np.ndarray, drop_weak: bool = True) -> np.ndarray:
        """
        Promote interior weak pixels that are 8-connected, directly or through
        other weak pixels, to a strong pixel. Propagates outward from the
        strong seeds with a queue; each pixel is queued at most once.

        Returns:
            np.ndarray: new (H, W) uint8 grid; remaining weak pixels become 0
            when drop_weak is set.
        """
        edges = np.array(edges, dtype=np.uint8, copy=True)
        h, w = edges.shape
        queue = deque(zip(*np.nonzero(edges == STRONG)))
        promoted = 0
        while queue:
            y, x = queue.popleft()
            for dy, dx in _NEIGHBOURS:
                ny, nx = y + dy, x + dx
                if 1 <= ny < h - 1 and 1 <= nx < w - 1 and edges[ny, nx] == WEAK:
                    edges[ny, nx] = STRONG
                    promoted += 1
                    queue.append((ny, nx))
        logger.debug(f"Hysteresis promoted {promoted} weak pixels")

        if drop_weak:
            edges[edges == WEAK] = NONE
        return edges

    def hysteresis(
        self,
        suppressed: np.ndarray,
        low: int | None = None,
        high: int | None = None,
    ) -> GrayscaleImage:
        low = self.config.low_threshold if low is None else low
        high = self.config.high_threshold if high is None else high
        return GrayscaleImage(self.promote(self.classify(suppressed, low, high)))
