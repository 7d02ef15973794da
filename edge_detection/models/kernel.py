from __future__ import annotations
from dataclasses import dataclass
import numpy as np

from ..errors import InvalidKernel


@dataclass(frozen=True)
class Kernel:
    """
    Square matrix of signed weights with an odd side length, so that the
    centre cell sits at (offset, offset) with offset = size // 2.
    """
    weights: np.ndarray

    def __post_init__(self):
        weights = self.weights
        if weights is None:
            raise InvalidKernel("Kernel is missing")
        if not isinstance(weights, np.ndarray):
            rows = [list(row) for row in weights]
            if any(len(row) != len(rows) for row in rows):
                raise InvalidKernel("Kernel must be square")
            weights = np.array(rows, dtype=np.float64).reshape(len(rows), len(rows))
        weights = np.array(weights, dtype=np.float64, copy=True)
        if weights.size == 0:
            raise InvalidKernel("Kernel is empty")
        if weights.ndim != 2 or weights.shape[0] != weights.shape[1]:
            raise InvalidKernel(f"Kernel must be square, got shape {weights.shape}")
        if weights.shape[0] % 2 == 0:
            raise InvalidKernel(f"Kernel side length must be odd, got {weights.shape[0]}")
        weights.setflags(write=False)
        object.__setattr__(self, "weights", weights)

    @property
    def size(self) -> int:
        return self.weights.shape[0]

    @property
    def offset(self) -> int:
        return self.size // 2

    @classmethod
    def gaussian(cls, size: int, sigma: float) -> "Kernel":
        """
        Normalised size x size Gaussian: exp(-(dx² + dy²) / (2σ²)) per cell,
        divided by the total so the weights sum to 1.0.
        """
        if size <= 0 or size % 2 == 0:
            raise InvalidKernel(f"Gaussian kernel size must be a positive odd int, got {size}")
        if sigma <= 0:
            raise ValueError(f"Gaussian sigma must be positive, got {sigma}")
        offset = size // 2
        dy, dx = np.mgrid[-offset:offset + 1, -offset:offset + 1]
        values = np.exp(-(dx ** 2 + dy ** 2) / (2.0 * sigma ** 2))
        return cls(values / values.sum())

    @classmethod
    def identity(cls, size: int = 3) -> "Kernel":
        weights = np.zeros((size, size))
        weights[size // 2, size // 2] = 1.0
        return cls(weights)

    def __eq__(self, other) -> bool:
        if not isinstance(other, Kernel):
            return NotImplemented
        return np.array_equal(self.weights, other.weights)

    def __hash__(self) -> int:
        return hash(self.weights.tobytes())
