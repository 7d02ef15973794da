from .convolution_service import ConvolutionService
from .gradient_service import GradientService
from .canny_service import CannyService
from .morphology_service import MorphologyService
from .difference_service import DifferenceService
from .edge_detection_service import EdgeDetectionService

__all__ = [
    "ConvolutionService",
    "GradientService",
    "CannyService",
    "MorphologyService",
    "DifferenceService",
    "EdgeDetectionService",
]
