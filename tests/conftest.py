import numpy as np
import pytest

from edge_detection.models.grayscale_image import GrayscaleImage

_ENV_VARS = [
    "CANNY_LOW_THRESHOLD",
    "CANNY_HIGH_THRESHOLD",
    "CANNY_BLUR_KERNEL_SIZE",
    "CANNY_BLUR_SIGMA",
    "DEFAULT_EDGE_ALGORITHM",
    "VALID_IMAGE_EXTENSIONS",
    "IMAGE_LOAD_TIMEOUT",
]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def bright_centre():
    pixels = np.zeros((5, 5), dtype=np.uint8)
    pixels[2, 2] = 255
    return GrayscaleImage(pixels)


@pytest.fixture
def dark_centre():
    pixels = np.full((5, 5), 255, dtype=np.uint8)
    pixels[2, 2] = 0
    return GrayscaleImage(pixels)


@pytest.fixture
def random_image():
    rng = np.random.default_rng(0)
    return GrayscaleImage(rng.integers(0, 256, size=(17, 23), dtype=np.uint8))


@pytest.fixture
def step_image():
    """20x20, left half 0, right half 255 (step between columns 9 and 10)."""
    pixels = np.zeros((20, 20), dtype=np.uint8)
    pixels[:, 10:] = 255
    return GrayscaleImage(pixels)
