from __future__ import annotations
from dataclasses import dataclass
from typing import List, Sequence, Union
import numpy as np

from ..errors import DimensionMismatch, OutOfRange

# Fixed RGB -> gray weights, applied as floor(0.3R + 0.59G + 0.11B)
GRAY_WEIGHTS = (0.3, 0.59, 0.11)

GridLike = Union[np.ndarray, Sequence[Sequence[float]]]


@dataclass(frozen=True, eq=False)
class GrayscaleImage:
    """
    Dense intensity grid, the data object every transform reads and returns.
    Pixels live in one C-contiguous (H, W) uint8 buffer, row-major, and the
    buffer is read-only: transforms build a new GrayscaleImage instead.
    """
    pixels: np.ndarray  # Shape (H, W), dtype uint8, values 0-255.

    def __post_init__(self):
        arr = np.array(np.clip(self.pixels, 0, 255), dtype=np.uint8, order="C")
        if arr.ndim != 2:
            raise DimensionMismatch(f"Expected a 2-D grid, got shape {arr.shape}")
        arr.setflags(write=False)
        object.__setattr__(self, "pixels", arr)

    # ─── Construction ────────────────────────────────────────────────
    @classmethod
    def from_grid(cls, grid: GridLike) -> "GrayscaleImage":
        """
        Build an image from a pre-built grid (nested lists or a 2-D array).
        Values are clipped to [0, 255]; ragged rows are rejected.
        """
        if not isinstance(grid, np.ndarray):
            rows = [list(row) for row in grid]
            widths = {len(row) for row in rows}
            if len(widths) > 1:
                raise DimensionMismatch(f"Rows have differing lengths: {sorted(widths)}")
            width = widths.pop() if widths else 0
            grid = np.array(rows, dtype=np.float64).reshape(len(rows), width)
        return cls(np.clip(grid, 0, 255))

    @classmethod
    def from_rgb(cls, rgb: np.ndarray) -> "GrayscaleImage":
        """Reduce an (H, W, 3) RGB array with gray = floor(0.3R + 0.59G + 0.11B)."""
        rgb = np.asarray(rgb, dtype=np.float64)
        if rgb.ndim != 3 or rgb.shape[2] != 3:
            raise ValueError(f"Expected an (H, W, 3) RGB array, got shape {rgb.shape}")
        wr, wg, wb = GRAY_WEIGHTS
        gray = wr * rgb[:, :, 0] + wg * rgb[:, :, 1] + wb * rgb[:, :, 2]
        return cls(np.clip(np.floor(gray), 0, 255))

    @classmethod
    def from_source(cls, pixels: np.ndarray) -> "GrayscaleImage":
        """
        Resolve a decoded pixel source once: single-channel grids are taken
        as-is, three-channel grids go through the RGB reduction.
        """
        pixels = np.asarray(pixels)
        if pixels.ndim == 2:
            return cls.from_grid(pixels)
        if pixels.ndim == 3 and pixels.shape[2] == 1:
            return cls.from_grid(pixels[:, :, 0])
        if pixels.ndim == 3 and pixels.shape[2] == 3:
            return cls.from_rgb(pixels)
        raise ValueError(f"Unsupported pixel source shape: {pixels.shape}")

    @classmethod
    def blank(cls, width: int, height: int, fill: int = 0) -> "GrayscaleImage":
        return cls(np.full((height, width), fill, dtype=np.uint8))

    # ─── Accessors ───────────────────────────────────────────────────
    @property
    def width(self) -> int:
        return self.pixels.shape[1]

    @property
    def height(self) -> int:
        return self.pixels.shape[0]

    @property
    def shape(self):
        return self.pixels.shape

    def get(self, x: int, y: int) -> int:
        if not (0 <= x < self.width and 0 <= y < self.height):
            raise OutOfRange(f"Pixel ({x}, {y}) outside {self.width}x{self.height} grid")
        return int(self.pixels[y, x])

    def rows(self) -> List[List[int]]:
        return self.pixels.tolist()

    def copy(self) -> "GrayscaleImage":
        return GrayscaleImage(self.pixels)

    def same_size(self, other: "GrayscaleImage") -> bool:
        return self.shape == other.shape

    # ─── Value semantics ─────────────────────────────────────────────
    def __eq__(self, other) -> bool:
        if not isinstance(other, GrayscaleImage):
            return NotImplemented
        return self.same_size(other) and np.array_equal(self.pixels, other.pixels)

    def __hash__(self) -> int:
        return hash((self.width, self.height, self.pixels.tobytes()))

    def __repr__(self) -> str:
        return f"GrayscaleImage({self.width}x{self.height})"
