import numpy as np
import pytest

from edge_detection.models.grayscale_image import GrayscaleImage
from edge_detection.models.structuring_element import StructuringElement
from edge_detection.pipeline.morphological_edges import (
    dilation_erosion_edge_detection,
    morphological_gradient,
)
from edge_detection.repositories.image_repository import ImageRepository
from edge_detection.services.difference_service import DifferenceService
from edge_detection.services.morphology_service import MorphologyService


def test_gradient_of_bright_pixel(bright_centre):
    edges = morphological_gradient(bright_centre).pixels
    expected = np.zeros((5, 5), dtype=np.uint8)
    expected[1:4, 1:4] = 255
    assert np.array_equal(edges, expected)


def test_gradient_of_dark_pixel(dark_centre):
    edges = morphological_gradient(dark_centre).pixels
    expected = np.zeros((5, 5), dtype=np.uint8)
    expected[1:4, 1:4] = 255
    assert np.array_equal(edges, expected)


def test_repeats_apply_each_branch_again(bright_centre):
    edges = morphological_gradient(bright_centre, repeats=1)
    assert np.all(edges.pixels == 255)


def test_repeats_match_manual_composition(random_image):
    se = StructuringElement.cross(3)
    morphology = MorphologyService()
    dilated = morphology.dilation(morphology.dilation(morphology.dilation(random_image, se), se), se)
    eroded = morphology.erosion(morphology.erosion(morphology.erosion(random_image, se), se), se)
    expected = DifferenceService.subtract(dilated, eroded)
    assert morphological_gradient(random_image, se, repeats=2) == expected


def test_default_element_is_3x3_square(random_image):
    assert morphological_gradient(random_image) == morphological_gradient(
        random_image, [[1, 1, 1], [1, 1, 1], [1, 1, 1]]
    )


def test_constant_image_has_no_edges():
    assert np.all(morphological_gradient(GrayscaleImage.blank(6, 4, fill=99)).pixels == 0)


def test_negative_repeats_rejected(random_image):
    with pytest.raises(ValueError):
        morphological_gradient(random_image, repeats=-1)


def test_file_level_pipeline(tmp_path, bright_centre):
    repo = ImageRepository()
    source = repo.save_raster(bright_centre, tmp_path / "in.pgm")
    written = dilation_erosion_edge_detection(source, tmp_path / "out" / "edges.pgm")
    assert written.is_file()
    assert repo.load_raster(written) == morphological_gradient(bright_centre)


def test_file_level_pipeline_png(tmp_path, random_image):
    repo = ImageRepository()
    source = repo.save(random_image, tmp_path / "in.png")
    written = dilation_erosion_edge_detection(source, tmp_path / "edges.png", repeats=1)
    assert repo.load(written) == morphological_gradient(random_image, repeats=1)
