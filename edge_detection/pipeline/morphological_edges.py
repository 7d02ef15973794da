# pipeline/morphological_edges.py
from __future__ import annotations
from pathlib import Path
from typing import Union
import logging

from ..models.grayscale_image import GrayscaleImage
from ..models.structuring_element import default_structuring_element
from ..services.morphology_service import MorphologyService, ElementLike
from ..services.difference_service import DifferenceService
from ..repositories.image_repository import ImageRepository

logger = logging.getLogger(__name__)


def morphological_gradient(
    image: GrayscaleImage,
    structuring_element: ElementLike | None = None,
    repeats: int = 0,
    morphology_service: MorphologyService = MorphologyService(),
    difference_service: DifferenceService = DifferenceService(),
) -> GrayscaleImage:
    """
    Dilation/erosion edge map.

    Args:
        image (GrayscaleImage): Source grid.
        structuring_element: defaults to the 3x3 all-ones element.
        repeats (int): extra rounds per branch, so each branch runs repeats + 1 times.

    Returns:
        GrayscaleImage: dilated - eroded, saturating at 0.
    """
    if repeats < 0:
        raise ValueError(f"repeats must be >= 0, got {repeats}")
    if structuring_element is None:
        structuring_element = default_structuring_element()
    se = morphology_service.as_element(structuring_element)

    dilated = morphology_service.dilation(image, se)
    eroded = morphology_service.erosion(image, se)
    for _ in range(repeats):
        dilated = morphology_service.dilation(dilated, se)
        eroded = morphology_service.erosion(eroded, se)

    logger.debug(f"Morphological gradient: {repeats + 1} round(s) per branch")
    return difference_service.subtract(dilated, eroded)


def dilation_erosion_edge_detection(
    input_path: Union[str, Path],
    output_path: Union[str, Path],
    structuring_element: ElementLike | None = None,
    repeats: int = 0,
    image_repository: ImageRepository | None = None,
) -> Path:
    """Load input_path, build the morphological gradient and write it to output_path."""
    image_repository = image_repository or ImageRepository()
    image = image_repository.load(input_path)
    edges = morphological_gradient(image, structuring_element, repeats)
    return image_repository.save(edges, output_path)
