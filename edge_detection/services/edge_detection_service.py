from __future__ import annotations
from pathlib import Path
from typing import Callable, Dict, List, Union
import logging
import os

from dotenv import load_dotenv

from ..models.canny_config import CannyConfig
from ..models.grayscale_image import GrayscaleImage
from ..repositories.image_repository import ImageRepository
from ..errors import UnknownAlgorithm
from .canny_service import CannyService
from .convolution_service import ConvolutionService
from .gradient_service import GradientService
from .morphology_service import MorphologyService
from .difference_service import DifferenceService

# Load environment variables
load_dotenv()

logger = logging.getLogger(__name__)


class EdgeDetectionService:
    """
    Named-algorithm façade over the edge operators.
    The algorithm is chosen per call; DEFAULT_EDGE_ALGORITHM only fills in
    the name when a call passes none.
    """

    def __init__(self, default_algorithm: str | None = None):
        self.default_algorithm = (
            default_algorithm or os.getenv("DEFAULT_EDGE_ALGORITHM", "sobel")
        ).lower()
        self.convolution_service = ConvolutionService()
        self.gradient_service = GradientService(self.convolution_service)
        self.canny_service = CannyService(convolution_service=self.convolution_service,
                                          gradient_service=self.gradient_service)
        self.morphology_service = MorphologyService()
        self.difference_service = DifferenceService()
        self.image_repository = ImageRepository()

        self._dispatch: Dict[str, Callable[..., GrayscaleImage]] = {
            "sobel": self._sobel,
            "prewitt": self._prewitt,
            "laplacian": self._laplacian,
            "canny": self._canny,
            "morphological": self._morphological,
        }

    def available_algorithms(self) -> List[str]:
        return sorted(self._dispatch)

    # ─── Public API ────────────────────────────────────────────────
    def detect(self, image: GrayscaleImage, algorithm: str | None = None, **options) -> GrayscaleImage:
        """
        Args:
            image (GrayscaleImage): Source grid.
            algorithm (str): sobel | prewitt | laplacian | canny | morphological.
            **options: canny -> low_threshold, high_threshold, blur_kernel_size, blur_sigma;
                       morphological -> structuring_element, repeats.

        Raises:
            UnknownAlgorithm: if algorithm is not one of the names above.
        """
        name = (algorithm or self.default_algorithm).lower()
        if name not in self._dispatch:
            raise UnknownAlgorithm(
                f"Unknown edge detection algorithm: {name!r} "
                f"(expected one of {', '.join(self.available_algorithms())})"
            )
        logger.debug(f"Running {name} on {image.width}x{image.height}")
        return self._dispatch[name](image, **options)

    def detect_file(
        self,
        input_path: Union[str, Path],
        output_path: Union[str, Path],
        algorithm: str | None = None,
        format: str | None = None,
        **options,
    ) -> Path:
        """Load an image, run one algorithm and write the edge map."""
        image = self.image_repository.load(input_path)
        edges = self.detect(image, algorithm, **options)
        return self.image_repository.save(edges, output_path, format=format)

    # ─── Dispatch targets ──────────────────────────────────────────
    def _sobel(self, image: GrayscaleImage) -> GrayscaleImage:
        return self.gradient_service.sobel(image)

    def _prewitt(self, image: GrayscaleImage) -> GrayscaleImage:
        return self.gradient_service.prewitt(image)

    def _laplacian(self, image: GrayscaleImage) -> GrayscaleImage:
        return self.gradient_service.laplacian(image)

    def _canny(
        self,
        image: GrayscaleImage,
        low_threshold: int | None = None,
        high_threshold: int | None = None,
        blur_kernel_size: int | None = None,
        blur_sigma: float | None = None,
    ) -> GrayscaleImage:
        config = CannyConfig.from_env(
            low_threshold=low_threshold,
            high_threshold=high_threshold,
            blur_kernel_size=blur_kernel_size,
            blur_sigma=blur_sigma,
        )
        return self.canny_service.detect(image, config)

    def _morphological(self, image: GrayscaleImage, structuring_element=None, repeats: int = 0) -> GrayscaleImage:
        # Imported here: the pipeline module itself imports services
        from ..pipeline.morphological_edges import morphological_gradient

        return morphological_gradient(
            image,
            structuring_element,
            repeats,
            morphology_service=self.morphology_service,
            difference_service=self.difference_service,
        )
