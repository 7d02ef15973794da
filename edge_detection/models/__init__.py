from .grayscale_image import GrayscaleImage
from .kernel import Kernel
from .structuring_element import StructuringElement, default_structuring_element
from .gradient_field import GradientField
from .canny_config import CannyConfig

__all__ = [
    "GrayscaleImage",
    "Kernel",
    "StructuringElement",
    "default_structuring_element",
    "GradientField",
    "CannyConfig",
]
