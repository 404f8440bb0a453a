"""Raster types for images and binary layer masks.

This module defines the pixel-level domain models:
- RasterImage: An immutable RGBA pixel grid
- LayerMask: A raster interpreted as binary material coverage for one layer
- Pixel: An explicit (x, y) pixel coordinate
"""

from dataclasses import dataclass, field, replace
from typing import Any, NamedTuple

import numpy as np

from layerizer.exceptions import InvalidImageError

CHANNELS = 4

# Alpha above this value means "material here".
FILLED_ALPHA = 128


class Pixel(NamedTuple):
    """Integer pixel coordinate."""

    x: int
    y: int


@dataclass(frozen=True, eq=False)
class RasterImage:
    """A 2-D grid of RGBA pixels.

    The pixel buffer is stored as a read-only ``(height, width, 4)`` uint8
    array. Transforms never write into it; they build a new RasterImage.

    Attributes:
        width: Width in pixels
        height: Height in pixels
        data: Pixel buffer, row-major, 4 channels per pixel
    """

    width: int
    height: int
    data: np.ndarray = field(repr=False)

    def __post_init__(self) -> None:
        if self.width <= 0 or self.height <= 0:
            raise InvalidImageError(f"dimensions must be positive, got {self.width}x{self.height}")

        data = np.asarray(self.data)
        if data.dtype != np.uint8:
            raise InvalidImageError(f"pixel data must be uint8, got {data.dtype}")
        if data.size != self.width * self.height * CHANNELS:
            raise InvalidImageError(
                f"buffer holds {data.size} values, expected {self.width * self.height * CHANNELS}"
            )

        view = data.reshape(self.height, self.width, CHANNELS).view()
        view.flags.writeable = False
        object.__setattr__(self, "data", view)

    @classmethod
    def from_array(cls, array: np.ndarray) -> "RasterImage":
        """Build an image from a ``(height, width, 4)`` array.

        The array is copied, so later writes to it do not leak in.

        Args:
            array: RGBA pixel array

        Returns:
            RasterImage instance
        """
        array = np.asarray(array)
        if array.ndim != 3 or array.shape[2] != CHANNELS:
            raise InvalidImageError(f"expected (height, width, 4) array, got shape {array.shape}")
        return cls(width=array.shape[1], height=array.shape[0], data=array.astype(np.uint8, copy=True))

    @property
    def alpha(self) -> np.ndarray:
        """Alpha channel as a ``(height, width)`` array."""
        return self.data[:, :, 3]

    def to_array(self) -> np.ndarray:
        """Return a writable copy of the pixel buffer."""
        return np.array(self.data, copy=True)


def filled_to_raster(filled: np.ndarray) -> RasterImage:
    """Render a boolean coverage array as a mask raster.

    Material pixels become opaque white, everything else fully transparent.

    Args:
        filled: ``(height, width)`` boolean array

    Returns:
        RasterImage with RGBA set to 255 where filled, 0 elsewhere
    """
    height, width = filled.shape
    data = np.zeros((height, width, CHANNELS), dtype=np.uint8)
    data[filled] = 255
    return RasterImage(width=width, height=height, data=data)


@dataclass(frozen=True, eq=False)
class LayerMask:
    """Binary material coverage for one depth layer.

    Attributes:
        image: Mask raster; alpha above 128 means material
        order: Stacking index, 0 is the bottom (darkest) layer
        threshold: Quantization boundary value (0-255)
        name: Display name
        visible: Whether the layer is shown in previews
        color: Preview colour as ``#rrggbb``
    """

    image: RasterImage
    order: int
    threshold: float
    name: str = ""
    visible: bool = True
    color: str = "#000000"

    @property
    def width(self) -> int:
        return self.image.width

    @property
    def height(self) -> int:
        return self.image.height

    @property
    def filled(self) -> np.ndarray:
        """Boolean ``(height, width)`` coverage array."""
        return self.image.alpha > FILLED_ALPHA

    @property
    def area(self) -> int:
        """Number of material pixels."""
        return int(np.count_nonzero(self.filled))

    def is_empty(self) -> bool:
        return self.area == 0

    def with_filled(self, filled: np.ndarray) -> "LayerMask":
        """Return a replacement mask with new coverage and the same metadata."""
        return replace(self, image=filled_to_raster(filled))

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary for IPC.

        Returns:
            Dictionary with packed coverage bits and layer metadata
        """
        return {
            "width": self.width,
            "height": self.height,
            "bits": np.packbits(self.filled).tobytes(),
            "order": self.order,
            "threshold": self.threshold,
            "name": self.name,
            "visible": self.visible,
            "color": self.color,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "LayerMask":
        """Deserialize from dictionary.

        Args:
            data: Dictionary representation of a mask

        Returns:
            LayerMask instance
        """
        width, height = data["width"], data["height"]
        bits = np.frombuffer(data["bits"], dtype=np.uint8)
        filled = np.unpackbits(bits, count=width * height).astype(bool).reshape(height, width)
        return cls(
            image=filled_to_raster(filled),
            order=data["order"],
            threshold=data["threshold"],
            name=data["name"],
            visible=data["visible"],
            color=data["color"],
        )
