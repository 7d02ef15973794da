from __future__ import annotations
from dataclasses import dataclass
import numpy as np

from ..errors import DimensionMismatch


@dataclass(frozen=True, eq=False)
class GradientField:
    """
    Co-indexed gradient grids for one source image.
    magnitude : (H, W) int64, non-negative, not clipped to 255.
    angle     : (H, W) float64 radians in (-pi, pi] from atan2(gy, gx).
    Border cells that were never computed hold 0 / 0.0.
    """
    magnitude: np.ndarray
    angle: np.ndarray

    def __post_init__(self):
        if self.magnitude.shape != self.angle.shape:
            raise DimensionMismatch(
                f"Magnitude {self.magnitude.shape} and angle {self.angle.shape} grids differ"
            )
        for name, dtype in (("magnitude", np.int64), ("angle", np.float64)):
            grid = np.array(getattr(self, name), dtype=dtype, copy=True)
            grid.setflags(write=False)
            object.__setattr__(self, name, grid)

    @property
    def width(self) -> int:
        return self.magnitude.shape[1]

    @property
    def height(self) -> int:
        return self.magnitude.shape[0]
