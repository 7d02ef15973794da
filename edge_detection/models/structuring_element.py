from __future__ import annotations
from dataclasses import dataclass, field
from typing import Tuple
import numpy as np

from ..errors import InvalidStructuringElement


@dataclass(frozen=True)
class StructuringElement:
    """
    Square boolean mask for dilation/erosion; a cell is active only when it
    equals 1.
    Side length may be odd or even; offset = size // 2 either way, so an
    even mask is anchored one cell up-left of its geometric centre.
    """
    mask: np.ndarray
    offsets: Tuple[Tuple[int, int], ...] = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        mask = self.mask
        if mask is None:
            raise InvalidStructuringElement("Structuring element is missing")
        if not isinstance(mask, np.ndarray):
            rows = [list(row) for row in mask]
            if any(len(row) != len(rows) for row in rows):
                raise InvalidStructuringElement("Structuring element must be square")
            mask = np.array(rows).reshape(len(rows), len(rows))
        mask = np.asarray(mask) == 1  # only cells equal to 1 are active
        if mask.size == 0:
            raise InvalidStructuringElement("Structuring element is empty")
        if mask.ndim != 2 or mask.shape[0] != mask.shape[1]:
            raise InvalidStructuringElement(
                f"Structuring element must be square, got shape {mask.shape}"
            )
        mask.setflags(write=False)
        object.__setattr__(self, "mask", mask)

        # Active (dy, dx) offsets, computed once and reused for every pixel
        offset = mask.shape[0] // 2
        active = tuple((int(r) - offset, int(c) - offset) for r, c in np.argwhere(mask))
        object.__setattr__(self, "offsets", active)

    @property
    def size(self) -> int:
        return self.mask.shape[0]

    @property
    def offset(self) -> int:
        return self.size // 2

    def active_offsets(self) -> Tuple[Tuple[int, int], ...]:
        return self.offsets

    def contains_origin(self) -> bool:
        return (0, 0) in self.offsets

    @classmethod
    def square(cls, size: int = 3) -> "StructuringElement":
        return cls(np.ones((size, size), dtype=bool))

    @classmethod
    def cross(cls, size: int = 3) -> "StructuringElement":
        mask = np.zeros((size, size), dtype=bool)
        mask[size // 2, :] = True
        mask[:, size // 2] = True
        return cls(mask)

    def __eq__(self, other) -> bool:
        if not isinstance(other, StructuringElement):
            return NotImplemented
        return np.array_equal(self.mask, other.mask)

    def __hash__(self) -> int:
        return hash(self.mask.tobytes())


def default_structuring_element() -> StructuringElement:
    """3x3 all-ones element used when the caller supplies none."""
    return StructuringElement.square(3)
