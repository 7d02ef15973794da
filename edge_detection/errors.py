class EdgeDetectionError(Exception):
    """Base class for every failure raised by the edge detection core."""


class InvalidKernel(EdgeDetectionError, ValueError):
    """Kernel is missing, non-square or has an even side length."""


class InvalidStructuringElement(EdgeDetectionError, ValueError):
    """Structuring element mask is missing or non-square."""


class DimensionMismatch(EdgeDetectionError, ValueError):
    """Two grids (or the rows of one grid) disagree in width or height."""


class OutOfRange(EdgeDetectionError, IndexError):
    """Pixel access outside the grid bounds."""


class UnknownAlgorithm(EdgeDetectionError, KeyError):
    """Edge detection mode selector not recognised by the dispatch layer."""

    def __str__(self) -> str:
        # KeyError would repr() the message
        return str(self.args[0]) if self.args else ""
