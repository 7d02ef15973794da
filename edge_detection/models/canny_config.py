from __future__ import annotations
from dataclasses import dataclass
import os

from dotenv import load_dotenv

from ..errors import InvalidKernel

# Load environment variables
load_dotenv()


@dataclass(frozen=True)
class CannyConfig:
    """
    Value-object holding the Canny thresholds and blur parameters.
    Thresholds compare against the unclipped Sobel magnitude.
    """
    low_threshold: int = 50
    high_threshold: int = 150
    blur_kernel_size: int = 5
    blur_sigma: float = 1.4

    def __post_init__(self):
        if self.blur_kernel_size <= 0 or self.blur_kernel_size % 2 == 0:
            raise InvalidKernel(
                f"blur_kernel_size must be a positive odd int, got {self.blur_kernel_size}"
            )
        if self.blur_sigma <= 0:
            raise ValueError(f"blur_sigma must be positive, got {self.blur_sigma}")

    @classmethod
    def from_env(cls, **overrides) -> "CannyConfig":
        """Defaults from CANNY_* environment variables; explicit keyword overrides win."""
        params = dict(
            low_threshold=int(os.getenv("CANNY_LOW_THRESHOLD", "50")),
            high_threshold=int(os.getenv("CANNY_HIGH_THRESHOLD", "150")),
            blur_kernel_size=int(os.getenv("CANNY_BLUR_KERNEL_SIZE", "5")),
            blur_sigma=float(os.getenv("CANNY_BLUR_SIGMA", "1.4")),
        )
        params.update({k: v for k, v in overrides.items() if v is not None})
        return cls(**params)
