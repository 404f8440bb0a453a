"""Mask cleanup: small-region removal and edge smoothing.

This module cleans quantized masks before tracing:
- Island removal erases connected components below a physical area
- Edge smoothing applies a morphological closing (dilate, then erode)

Both operations return a replacement LayerMask with the same metadata
and can be composed in either order. The pipeline removes islands first.
"""

import math

import numpy as np

from layerizer.core.components import component_index, iter_components
from layerizer.domain import LayerMask
from layerizer.exceptions import InvalidSettingsError
from layerizer.utils import YieldHook


def min_area_pixels(width_px: int, min_area_mm2: float, target_width_mm: float) -> float:
    """Convert a physical area to a pixel-area threshold.

    Args:
        width_px: Working image width in pixels
        min_area_mm2: Area in square millimetres
        target_width_mm: Physical width the image maps to

    Returns:
        Area in square pixels

    Raises:
        InvalidSettingsError: If target_width_mm is not positive
    """
    if target_width_mm <= 0:
        raise InvalidSettingsError("target_width_mm", f"must be positive, got {target_width_mm}")
    pixels_per_mm = width_px / target_width_mm
    return min_area_mm2 * pixels_per_mm * pixels_per_mm


def remove_islands(
    mask: LayerMask,
    min_area_mm2: float,
    target_width_mm: float,
    on_yield: YieldHook | None = None,
) -> LayerMask:
    """Erase connected components smaller than a physical area.

    Components at or above the threshold are kept exactly as they are;
    nothing is ever added to the mask.

    Args:
        mask: Mask to clean
        min_area_mm2: Minimum kept area in square millimetres
        target_width_mm: Physical width of the finished piece
        on_yield: Cooperative yield hook for the flood fill

    Returns:
        Replacement mask with small components erased
    """
    threshold = min_area_pixels(mask.width, min_area_mm2, target_width_mm)
    filled = mask.filled
    if threshold <= 0 or not filled.any():
        return mask

    result = filled.copy()
    for component in iter_components(filled, on_yield):
        if len(component) < threshold:
            result[component_index(component)] = False

    return mask.with_filled(result)


def dilate(filled: np.ndarray, on_yield: YieldHook | None = None) -> np.ndarray:
    """Binary dilation with a 3x3 neighbourhood (max filter).

    Neighbours outside the image are absent, not padded with a value.

    Args:
        filled: ``(height, width)`` boolean coverage
        on_yield: Hook called once per row

    Returns:
        Dilated coverage
    """
    height = filled.shape[0]
    result = np.zeros_like(filled)
    for y in range(height):
        if on_yield is not None:
            on_yield()
        band = filled[max(0, y - 1) : y + 2].any(axis=0)
        row = band.copy()
        row[1:] |= band[:-1]
        row[:-1] |= band[1:]
        result[y] = row
    return result


def erode(filled: np.ndarray, on_yield: YieldHook | None = None) -> np.ndarray:
    """Binary erosion with a 3x3 neighbourhood (min filter).

    Neighbours outside the image are absent, so border pixels are only
    compared against pixels that exist.

    Args:
        filled: ``(height, width)`` boolean coverage
        on_yield: Hook called once per row

    Returns:
        Eroded coverage
    """
    height = filled.shape[0]
    result = np.zeros_like(filled)
    for y in range(height):
        if on_yield is not None:
            on_yield()
        band = filled[max(0, y - 1) : y + 2].all(axis=0)
        row = band.copy()
        row[1:] &= band[:-1]
        row[:-1] &= band[1:]
        result[y] = row
    return result


def smoothing_iterations(strength: int) -> int:
    """Number of dilate (and erode) passes for a smoothing strength."""
    return math.ceil(strength / 2)


def smooth_edges(mask: LayerMask, strength: int, on_yield: YieldHook | None = None) -> LayerMask:
    """Smooth mask edges with a morphological closing.

    Runs ``ceil(strength / 2)`` dilations followed by the same number of
    erosions. Gaps and notches narrower than the closing disappear while
    net area stays roughly the same.

    Args:
        mask: Mask to smooth
        strength: Smoothing strength, 0 is a no-op
        on_yield: Hook called once per row of every pass

    Returns:
        Replacement mask with smoothed coverage
    """
    iterations = smoothing_iterations(strength)
    filled = mask.filled
    if iterations <= 0 or not filled.any():
        return mask

    for _ in range(iterations):
        filled = dilate(filled, on_yield)
    for _ in range(iterations):
        filled = erode(filled, on_yield)

    return mask.with_filled(filled)
