"""
Grayscale edge detection: gradient operators (Sobel, Prewitt, Laplacian,
Canny) and morphological gradients (dilation - erosion) over GrayscaleImage.
"""
from .errors import (
    EdgeDetectionError,
    InvalidKernel,
    InvalidStructuringElement,
    DimensionMismatch,
    OutOfRange,
    UnknownAlgorithm,
)
from .models import GrayscaleImage, Kernel, StructuringElement, GradientField, CannyConfig
from .services import (
    ConvolutionService,
    GradientService,
    CannyService,
    MorphologyService,
    DifferenceService,
    EdgeDetectionService,
)
from .repositories import ImageRepository
from .pipeline import morphological_gradient, dilation_erosion_edge_detection

__version__ = "1.0.0"
