import numpy as np
import pytest

from edge_detection.errors import InvalidKernel, OutOfRange
from edge_detection.models.grayscale_image import GrayscaleImage
from edge_detection.models.kernel import Kernel
from edge_detection.services.convolution_service import ConvolutionService

IDENTITY = [[0, 0, 0], [0, 1, 0], [0, 0, 0]]


@pytest.fixture
def service():
    return ConvolutionService()


@pytest.mark.parametrize("shape", [(1, 1), (2, 3), (8, 5), (17, 23)])
def test_identity_kernel_returns_original(service, shape):
    rng = np.random.default_rng(shape[0] * 100 + shape[1])
    img = GrayscaleImage(rng.integers(0, 256, size=shape, dtype=np.uint8))
    assert service.apply(img, IDENTITY) == img
    assert np.array_equal(service.convolve(img, IDENTITY), img.pixels.astype(np.float64))


def test_boundary_clamps_to_edge(service):
    img = GrayscaleImage.from_grid([[1, 2, 3], [4, 5, 6], [7, 8, 9]])
    raw = service.convolve(img, np.ones((3, 3)))
    # corner sees I[0][0] four times, its two edge neighbours twice, I[1][1] once
    assert raw[0, 0] == 4 * 1 + 2 * 2 + 2 * 4 + 5
    # zero padding would have given 12
    assert raw[0, 0] != 12
    assert raw[1, 1] == 45


def test_single_pixel_image(service):
    img = GrayscaleImage.from_grid([[10]])
    assert service.convolve(img, np.ones((3, 3)))[0, 0] == 90
    assert service.apply(img, np.ones((5, 5))).get(0, 0) == 250


def test_kernel_applied_without_flip(service):
    img = GrayscaleImage.from_grid([[0, 0, 0], [0, 0, 100], [0, 0, 0]])
    kernel = [[0, 0, 0], [0, 0, 1], [0, 0, 0]]  # picks the right-hand neighbour
    assert service.convolve(img, kernel)[1, 1] == 100


def test_apply_clips_to_byte_range(service):
    img = GrayscaleImage.from_grid([[10, 200], [0, 255]])
    doubled = service.apply(img, [[0, 0, 0], [0, 2, 0], [0, 0, 0]])
    assert doubled.rows() == [[20, 255], [0, 255]]
    negated = service.apply(img, [[0, 0, 0], [0, -1, 0], [0, 0, 0]])
    assert negated.rows() == [[0, 0], [0, 0]]


def test_convolve_at_matches_full_grid(service, random_image):
    kernel = Kernel.gaussian(5, 1.4)
    full = service.convolve(random_image, kernel)
    for x, y in [(0, 0), (22, 16), (5, 7), (22, 0), (0, 16)]:
        assert service.convolve_at(random_image, kernel, x, y) == pytest.approx(full[y, x])


def test_convolve_at_out_of_range(service, random_image):
    with pytest.raises(OutOfRange):
        service.convolve_at(random_image, IDENTITY, 23, 0)


@pytest.mark.parametrize("kernel", [[], [[1, 0]], [[1, 1], [1, 1]]])
def test_invalid_kernel_rejected(service, random_image, kernel):
    with pytest.raises(InvalidKernel):
        service.apply(random_image, kernel)


def test_input_not_mutated(service, random_image):
    before = random_image.pixels.copy()
    service.apply(random_image, np.ones((3, 3)) / 9)
    assert np.array_equal(random_image.pixels, before)


def test_empty_image(service):
    img = GrayscaleImage.from_grid([])
    assert service.convolve(img, IDENTITY).shape == (0, 0)
