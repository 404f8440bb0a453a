"""Tone quantization into binary layer masks.

This module splits a grayscale image into N mutually exclusive masks,
one per depth layer, ordered from darkest (order 0) to lightest:

- posterize: N equal luminance bands over 0-255
- kmeans: 1-D k-means over the luminance of opaque pixels

Pixels with alpha at or below 128 belong to no mask.

Key functions:
- quantize: Dispatch on method and build LayerMask objects
- posterize_labels: Band index per pixel
- kmeans_centroids: Converged, sorted 1-D centroids
"""

import colorsys

import numpy as np

from layerizer.config import QuantizeMethod
from layerizer.core.preprocess import luminance
from layerizer.domain import FILLED_ALPHA, LayerMask, RasterImage, filled_to_raster
from layerizer.exceptions import InvalidSettingsError

KMEANS_MAX_ITERATIONS = 10

# Iteration stops once no centroid moves further than this.
KMEANS_CONVERGENCE = 1.0

# Label for pixels excluded from every mask.
TRANSPARENT = -1


def layer_color(index: int, total: int) -> str:
    """Preview colour for a layer, evenly spaced around the hue wheel.

    Equivalent to ``hsl(index / total * 360, 70%, 50%)``.

    Args:
        index: Layer index
        total: Number of layers

    Returns:
        Colour as ``#rrggbb``
    """
    hue = (index / total) % 1.0
    r, g, b = colorsys.hls_to_rgb(hue, 0.5, 0.7)
    return f"#{round(r * 255):02x}{round(g * 255):02x}{round(b * 255):02x}"


def posterize_labels(gray: np.ndarray, opaque: np.ndarray, layer_count: int) -> np.ndarray:
    """Assign each opaque pixel to one of N equal luminance bands.

    Args:
        gray: ``(height, width)`` uint8 luminance
        opaque: ``(height, width)`` boolean, True where alpha > 128
        layer_count: Number of bands

    Returns:
        ``(height, width)`` int array of band indices, TRANSPARENT elsewhere
    """
    band_size = 256.0 / layer_count
    bands = np.floor(gray.astype(np.float64) / band_size).astype(np.int64)
    bands = np.clip(bands, 0, layer_count - 1)
    return np.where(opaque, bands, TRANSPARENT)


def _nearest(values: np.ndarray, centroids: np.ndarray) -> np.ndarray:
    """Index of the nearest centroid per value; ties go to the lower index."""
    return np.abs(values[:, None] - centroids[None, :]).argmin(axis=1)


def kmeans_centroids(values: np.ndarray, k: int) -> np.ndarray:
    """Run 1-D Lloyd iterations over luminance values.

    Centroids start evenly spread over [0, 255]. Each iteration assigns
    values to the nearest centroid and moves every centroid to the mean
    of its members; a centroid without members stays put. Iteration
    stops after KMEANS_MAX_ITERATIONS or when no centroid moves by more
    than KMEANS_CONVERGENCE.

    The work runs on a 256-bin histogram, which gives the same means as
    iterating over every pixel.

    Args:
        values: 1-D uint8 array of opaque pixel luminances (non-empty)
        k: Number of clusters

    Returns:
        Centroids sorted ascending
    """
    hist = np.bincount(values.astype(np.int64), minlength=256).astype(np.float64)
    levels = np.arange(256, dtype=np.float64)

    if k == 1:
        centroids = np.array([127.5])
    else:
        centroids = np.linspace(0.0, 255.0, k)

    for _ in range(KMEANS_MAX_ITERATIONS):
        labels = _nearest(levels, centroids)
        updated = centroids.copy()
        for i in range(k):
            members = labels == i
            weight = hist[members].sum()
            if weight > 0:
                updated[i] = float((hist[members] * levels[members]).sum() / weight)

        moved = float(np.abs(updated - centroids).max())
        centroids = updated
        if moved <= KMEANS_CONVERGENCE:
            break

    return np.sort(centroids)


def kmeans_labels(gray: np.ndarray, opaque: np.ndarray, layer_count: int) -> np.ndarray:
    """Assign each opaque pixel to its nearest sorted k-means centroid.

    Args:
        gray: ``(height, width)`` uint8 luminance
        opaque: ``(height, width)`` boolean, True where alpha > 128
        layer_count: Number of clusters

    Returns:
        ``(height, width)`` int array of cluster indices, TRANSPARENT elsewhere
    """
    values = gray[opaque]
    if values.size == 0:
        return np.full(gray.shape, TRANSPARENT, dtype=np.int64)

    centroids = kmeans_centroids(values, layer_count)
    label_by_level = _nearest(np.arange(256, dtype=np.float64), centroids)
    return np.where(opaque, label_by_level[gray], TRANSPARENT)


def quantize(
    image: RasterImage,
    layer_count: int,
    method: QuantizeMethod = QuantizeMethod.POSTERIZE,
) -> list[LayerMask]:
    """Split an image into mutually exclusive layer masks.

    Args:
        image: Grayscale (or colour) image; luminance is recomputed
        layer_count: Number of masks to produce (>= 1)
        method: Quantization method

    Returns:
        ``layer_count`` masks, index 0 the darkest

    Raises:
        InvalidSettingsError: If layer_count is below 1
    """
    if layer_count < 1:
        raise InvalidSettingsError("layer_count", f"must be at least 1, got {layer_count}")

    gray = luminance(image)
    opaque = image.alpha > FILLED_ALPHA

    if QuantizeMethod(method) == QuantizeMethod.KMEANS:
        labels = kmeans_labels(gray, opaque, layer_count)
    else:
        labels = posterize_labels(gray, opaque, layer_count)

    return [
        LayerMask(
            image=filled_to_raster(labels == i),
            order=i,
            threshold=(i / layer_count) * 255,
            name=f"Layer {i + 1}",
            visible=True,
            color=layer_color(i, layer_count),
        )
        for i in range(layer_count)
    ]
