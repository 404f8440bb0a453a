"""Image reader for loading raster files.

This module provides the ImageReader class for decoding image files
with Pillow and converting them into RasterImage domain models.
"""

from pathlib import Path

import numpy as np
from PIL import Image, UnidentifiedImageError

from layerizer.domain import RasterImage
from layerizer.exceptions import ImageLoadError


def raster_from_pil(image: Image.Image) -> RasterImage:
    """Convert a Pillow image of any mode to an RGBA RasterImage."""
    if image.mode != "RGBA":
        image = image.convert("RGBA")
    return RasterImage.from_array(np.asarray(image, dtype=np.uint8))


def raster_to_pil(raster: RasterImage) -> Image.Image:
    """Convert a RasterImage to a Pillow RGBA image."""
    return Image.fromarray(raster.to_array())


class ImageReader:
    """Loads image files and converts them to RasterImage.

    Example:
        reader = ImageReader(Path("photo.png"))
        image = reader.load()
        print(image.width, image.height)
    """

    def __init__(self, image_path: Path) -> None:
        """Initialize the image reader.

        Args:
            image_path: Path to any Pillow-readable image file
        """
        self._image_path = image_path
        self._format: str | None = None

    def load(self) -> RasterImage:
        """Decode the image file.

        Returns:
            RGBA raster of the first frame

        Raises:
            FileNotFoundError: If the image file does not exist
            ImageLoadError: If the file cannot be decoded
        """
        if not self._image_path.exists():
            raise FileNotFoundError(f"Image file not found: {self._image_path}")

        try:
            with Image.open(self._image_path) as image:
                self._format = image.format
                image.load()
                return raster_from_pil(image)
        except (UnidentifiedImageError, OSError, ValueError) as e:
            raise ImageLoadError(str(self._image_path), str(e)) from e

    @property
    def format(self) -> str:
        """Return the decoded file format (e.g. 'PNG', 'JPEG').

        Raises:
            RuntimeError: If the image has not been loaded yet
        """
        if self._format is None:
            raise RuntimeError("Image not loaded. Call load() first.")
        return self._format
