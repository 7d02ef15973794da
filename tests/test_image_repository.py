import numpy as np
import pytest
from PIL import Image as PILImage

from edge_detection.models.grayscale_image import GrayscaleImage
from edge_detection.repositories.image_repository import ImageRepository


@pytest.fixture
def repo():
    return ImageRepository()


def test_to_raster_layout(repo):
    img = GrayscaleImage.from_grid([[1, 2, 3], [4, 5, 255]])
    assert repo.to_raster(img) == "P2\n3 2\n255\n1 2 3\n4 5 255"


def test_raster_round_trip(repo, random_image):
    assert repo.from_raster(repo.to_raster(random_image)) == random_image


def test_raster_file_round_trip(repo, tmp_path, random_image):
    path = repo.save_raster(random_image, tmp_path / "nested" / "img.pgm")
    assert path.read_text().startswith("P2\n23 17\n255\n")
    assert repo.load_raster(path) == random_image
    assert repo.load(path) == random_image


@pytest.mark.parametrize(
    "text",
    [
        "",
        "P5\n1 1\n255\n0",
        "P2\n2 2\n255\n1 2 3",
        "P2\n1 1\n65535\n0",
        "P2\n1 1\n255\n300",
        "P2\nx 1\n255\n0",
    ],
)
def test_malformed_raster(repo, text):
    with pytest.raises(ValueError):
        repo.from_raster(text)


def test_png_round_trip(repo, tmp_path, random_image):
    path = repo.save(random_image, tmp_path / "img.png")
    assert path.is_file()
    assert repo.load(path) == random_image


def test_explicit_format_overrides_suffix(repo, tmp_path, random_image):
    path = repo.save(random_image, tmp_path / "img.out", format="png")
    with PILImage.open(path) as pil:
        assert pil.format == "PNG"


def test_jpg_is_written(repo, tmp_path, random_image):
    path = repo.save(random_image, tmp_path / "img.jpg")
    with PILImage.open(path) as pil:
        assert pil.format == "JPEG"
        assert pil.size == (random_image.width, random_image.height)


def test_unsupported_format(repo, tmp_path, random_image):
    with pytest.raises(ValueError):
        repo.save(random_image, tmp_path / "img.bmp")


def test_load_rgb_applies_gray_reduction(repo, tmp_path):
    rgb = np.zeros((2, 2, 3), dtype=np.uint8)
    rgb[0, 0] = (255, 0, 0)
    rgb[0, 1] = (0, 255, 0)
    rgb[1, 0] = (0, 0, 255)
    path = tmp_path / "rgb.png"
    PILImage.fromarray(rgb).save(path)
    assert repo.load(path).rows() == [[76, 150], [28, 0]]


def test_load_missing_file(repo, tmp_path):
    with pytest.raises(FileNotFoundError):
        repo.load(tmp_path / "missing.png")
    with pytest.raises(FileNotFoundError):
        repo.load_raster(tmp_path / "missing.pgm")


def test_iter_dir_filters_extensions(repo, tmp_path, random_image, bright_centre):
    repo.save(random_image, tmp_path / "a.png")
    repo.save_raster(bright_centre, tmp_path / "b.pgm")
    (tmp_path / "notes.txt").write_text("not an image")
    loaded = repo.load_dir(tmp_path)
    assert [p.name for p, _ in loaded] == ["a.png", "b.pgm"]
    assert loaded[0][1] == random_image
    assert loaded[1][1] == bright_centre


def test_iter_dir_honours_env_extensions(monkeypatch, tmp_path, random_image):
    monkeypatch.setenv("VALID_IMAGE_EXTENSIONS", ".pgm")
    repo = ImageRepository()
    repo.save(random_image, tmp_path / "a.png")
    repo.save_raster(random_image, tmp_path / "b.pgm")
    assert [p.name for p, _ in repo.iter_dir(tmp_path)] == ["b.pgm"]


def test_iter_dir_requires_directory(repo, tmp_path):
    with pytest.raises(NotADirectoryError):
        list(repo.iter_dir(tmp_path / "nope"))
