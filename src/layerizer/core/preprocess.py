"""Image pre-processing before quantization.

This module prepares a decoded image for layer extraction:
- Resizing to the working resolution (Pillow LANCZOS resampling)
- Optional near-white background removal with a soft alpha ramp
- Grayscale conversion using Rec. 601 luminance weights

Every function returns a new RasterImage; inputs are never modified.
"""

import numpy as np
from PIL import Image

from layerizer.domain import RasterImage

LUMA_WEIGHTS = (0.299, 0.587, 0.114)


def luminance(image: RasterImage) -> np.ndarray:
    """Compute per-pixel luminance.

    Args:
        image: Source image

    Returns:
        ``(height, width)`` uint8 array of rounded luminance values
    """
    rgb = image.data[:, :, :3].astype(np.float64)
    luma = rgb[:, :, 0] * LUMA_WEIGHTS[0] + rgb[:, :, 1] * LUMA_WEIGHTS[1] + rgb[:, :, 2] * LUMA_WEIGHTS[2]
    return np.clip(np.rint(luma), 0, 255).astype(np.uint8)


def to_grayscale(image: RasterImage) -> RasterImage:
    """Convert an image to grayscale, preserving alpha.

    Args:
        image: Source image

    Returns:
        Image with R = G = B = luminance
    """
    gray = luminance(image)
    data = image.to_array()
    data[:, :, 0] = gray
    data[:, :, 1] = gray
    data[:, :, 2] = gray
    return RasterImage.from_array(data)


def resize_to_max(image: RasterImage, max_size: int) -> RasterImage:
    """Downscale an image so its longest side is at most max_size.

    Images already within the limit are returned as-is. Each side is
    scaled by the same factor and rounded, never below one pixel.

    Args:
        image: Source image
        max_size: Longest allowed side in pixels

    Returns:
        Resized image, or the input when no resize is needed
    """
    longest = max(image.width, image.height)
    if longest <= max_size:
        return image

    scale = max_size / longest
    width = max(1, round(image.width * scale))
    height = max(1, round(image.height * scale))

    source = Image.fromarray(image.to_array())
    resized = source.resize((width, height), resample=Image.Resampling.LANCZOS)
    return RasterImage.from_array(np.asarray(resized))


def remove_background(image: RasterImage, tolerance: int, softness: float) -> RasterImage:
    """Make near-white pixels transparent.

    A pixel whose R, G and B all exceed ``255 - tolerance`` is treated as
    background. Its alpha drops along a ramp that gets steeper as the
    pixel gets whiter: ``255 - (min(R, G, B) - threshold) * softness``,
    clamped at 0. Alpha is never raised above its existing value.

    Args:
        image: Source image
        tolerance: Distance below pure white still counted as background
        softness: Ramp steepness; 0 leaves alpha unchanged

    Returns:
        Image with background alpha reduced
    """
    threshold = 255 - tolerance
    rgb = image.data[:, :, :3].astype(np.float64)
    near_white = np.all(rgb > threshold, axis=2)

    distance = rgb.min(axis=2) - threshold
    ramp = np.clip(255.0 - distance * softness, 0.0, 255.0)

    data = image.to_array()
    alpha = data[:, :, 3]
    ramped = np.minimum(alpha, np.rint(ramp).astype(np.uint8))
    data[:, :, 3] = np.where(near_white, ramped, alpha)
    return RasterImage.from_array(data)
