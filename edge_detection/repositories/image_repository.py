from __future__ import annotations
from pathlib import Path
from typing import Iterable, Iterator, List, Tuple, Union
import logging
import os
import signal

import cv2
import numpy as np
from PIL import Image as PILImage
from dotenv import load_dotenv

from ..models.grayscale_image import GrayscaleImage

# Load environment variables
load_dotenv()

logger = logging.getLogger(__name__)

RASTER_MAGIC = "P2"
RASTER_MAXVAL = 255

# Output formats the pixel sink can encode, keyed by lowercase name/suffix
_PIL_FORMATS = {"png": "PNG", "jpg": "JPEG", "jpeg": "JPEG"}


class ImageRepository:
    """
    Handles file I/O for GrayscaleImage entities.
    *   Decoding goes through OpenCV, encoding through Pillow.
    *   The plain-text P2 raster is the only format implemented here.
    """
    def __init__(self):
        self.VALID_EXTS = {
            ext.strip().lower()
            for ext in os.getenv("VALID_IMAGE_EXTENSIONS", ".png,.jpg,.jpeg,.pgm").split(",")
            if ext.strip()
        }
        self.LOAD_TIMEOUT = int(os.getenv("IMAGE_LOAD_TIMEOUT", "5"))

    # ─── Pixel source ──────────────────────────────────────────────
    def load(self, path: Union[str, Path]) -> GrayscaleImage:
        """
        Decode an image file and reduce it to grayscale.
        Three-channel files use gray = floor(0.3R + 0.59G + 0.11B);
        single-channel files are taken as-is.
        """
        path = Path(path)
        if path.suffix.lower() == ".pgm" and self._is_raster(path):
            return self.load_raster(path)

        arr = self._imread(path, self.LOAD_TIMEOUT)
        if arr is None:
            raise FileNotFoundError(f"Image not found or unreadable: {path}")

        if arr.dtype == np.uint16:
            arr = (arr // 257).astype(np.uint8)
        if arr.ndim == 3 and arr.shape[2] == 4:
            arr = arr[:, :, :3]  # drop alpha
        if arr.ndim == 3 and arr.shape[2] == 3:
            arr = arr[:, :, ::-1]  # BGR -> RGB

        image = GrayscaleImage.from_source(arr)
        logger.info(f"Loaded {path} ({image.width}x{image.height})")
        return image

    @staticmethod
    def _imread(path: Path, timeout: int):
        # ─── timeout wrapper ──────────────────────────────────────────────
        if timeout <= 0 or not hasattr(signal, "SIGALRM"):
            return cv2.imread(str(path), cv2.IMREAD_UNCHANGED)

        def _handler(signum, frame):
            raise TimeoutError(f"cv2.imread timed-out after {timeout}s: {path}")

        previous = signal.signal(signal.SIGALRM, _handler)
        signal.alarm(timeout)
        try:
            return cv2.imread(str(path), cv2.IMREAD_UNCHANGED)
        finally:
            signal.alarm(0)  # always disarm
            signal.signal(signal.SIGALRM, previous)

    @staticmethod
    def _is_raster(path: Path) -> bool:
        with open(path, "rb") as fh:
            return fh.read(2) == RASTER_MAGIC.encode("ascii")

    # ─── Pixel sink ────────────────────────────────────────────────
    def save(self, image: GrayscaleImage, path: Union[str, Path], format: str | None = None) -> Path:
        """
        Encode image to png/jpg (format inferred from the suffix when not
        given). A .pgm target is written as a P2 raster.
        """
        path = Path(path)
        fmt = (format or path.suffix.lstrip(".")).lower()
        if fmt == "pgm":
            return self.save_raster(image, path)
        if fmt not in _PIL_FORMATS:
            raise ValueError(f"Unsupported output format: {fmt!r} (expected png or jpg)")

        path.parent.mkdir(parents=True, exist_ok=True)
        PILImage.fromarray(np.ascontiguousarray(image.pixels)).save(path, format=_PIL_FORMATS[fmt])
        logger.info(f"Saved {image.width}x{image.height} {fmt} -> {path}")
        return path

    # ─── Plain-text raster ─────────────────────────────────────────
    @staticmethod
    def to_raster(image: GrayscaleImage) -> str:
        """P2 header, then one line of space-separated values per row."""
        header = f"{RASTER_MAGIC}\n{image.width} {image.height}\n{RASTER_MAXVAL}\n"
        body = "\n".join(" ".join(str(v) for v in row) for row in image.rows())
        return header + body

    @staticmethod
    def from_raster(text: str) -> GrayscaleImage:
        """Exact inverse of to_raster()."""
        tokens = text.split()
        if len(tokens) < 4 or tokens[0] != RASTER_MAGIC:
            raise ValueError("Not a P2 raster: missing or malformed header")
        try:
            width, height, maxval = int(tokens[1]), int(tokens[2]), int(tokens[3])
            values = [int(t) for t in tokens[4:]]
        except ValueError as err:
            raise ValueError(f"Malformed P2 raster: {err}") from err
        if width < 0 or height < 0 or maxval != RASTER_MAXVAL:
            raise ValueError(f"Unsupported P2 header: {width}x{height}, maxval {maxval}")
        if len(values) != width * height:
            raise ValueError(f"P2 raster holds {len(values)} values, expected {width * height}")
        grid = np.array(values, dtype=np.int64).reshape(height, width)
        if grid.size and (grid.min() < 0 or grid.max() > RASTER_MAXVAL):
            raise ValueError("P2 raster values must lie in [0, 255]")
        return GrayscaleImage(grid)

    def save_raster(self, image: GrayscaleImage, path: Union[str, Path]) -> Path:
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(self.to_raster(image), encoding="ascii")
        logger.info(f"Saved {image.width}x{image.height} raster -> {path}")
        return path

    def load_raster(self, path: Union[str, Path]) -> GrayscaleImage:
        path = Path(path)
        if not path.is_file():
            raise FileNotFoundError(f"Raster not found: {path}")
        return self.from_raster(path.read_text(encoding="ascii"))

    # ─── Directory scanning ────────────────────────────────────────
    def iter_dir(
        self,
        folder: Union[str, Path],
        *,
        recursive: bool = False,
        exts: Iterable[str] | None = None,
    ) -> Iterator[Tuple[Path, GrayscaleImage]]:
        """
        Yield (path, image) pairs one at a time.  Nothing accumulates in memory.
        Unreadable files are logged and skipped.
        """
        folder = Path(folder)
        if not folder.is_dir():
            raise NotADirectoryError(folder)

        allowed = {e.lower() for e in (exts or self.VALID_EXTS)}
        pattern = "**/*" if recursive else "*"

        for p in sorted(folder.glob(pattern)):
            if p.suffix.lower() not in allowed or not p.is_file():
                logger.debug(f"Skipping {p}")
                continue
            try:
                yield p, self.load(p)
            except (FileNotFoundError, TimeoutError, ValueError) as err:
                logger.warning(f"Skipping {p.name}: {err}")

    def load_dir(
        self, folder: Union[str, Path], *, recursive=False, exts=None
    ) -> List[Tuple[Path, GrayscaleImage]]:
        return list(self.iter_dir(folder, recursive=recursive, exts=exts))
