"""Unit tests for tone quantization."""

import numpy as np
import pytest

from layerizer.config import QuantizeMethod
from layerizer.core.quantizer import (
    TRANSPARENT,
    kmeans_centroids,
    layer_color,
    posterize_labels,
    quantize,
)
from layerizer.domain import RasterImage
from layerizer.exceptions import InvalidSettingsError


def gray_image(values: list[list[int]], alpha: int = 255) -> RasterImage:
    """Build an opaque grayscale image from luminance rows."""
    gray = np.array(values, dtype=np.uint8)
    data = np.zeros((*gray.shape, 4), dtype=np.uint8)
    data[:, :, 0] = gray
    data[:, :, 1] = gray
    data[:, :, 2] = gray
    data[:, :, 3] = alpha
    return RasterImage.from_array(data)


class TestPosterize:
    """Tests for posterize quantization."""

    def test_band_boundaries(self) -> None:
        """Test that values split into equal bands of 256 / N."""
        gray = np.array([[0, 63, 64, 127, 128, 191, 192, 255]], dtype=np.uint8)
        opaque = np.ones_like(gray, dtype=bool)
        labels = posterize_labels(gray, opaque, 4)
        assert labels.tolist() == [[0, 0, 1, 1, 2, 2, 3, 3]]

    def test_transparent_pixels_unlabelled(self) -> None:
        """Test that transparent pixels get no band."""
        gray = np.array([[10, 200]], dtype=np.uint8)
        opaque = np.array([[True, False]])
        labels = posterize_labels(gray, opaque, 2)
        assert labels.tolist() == [[0, TRANSPARENT]]

    def test_monotonic(self) -> None:
        """Test that a brighter pixel never lands in a darker band."""
        gray = np.arange(256, dtype=np.uint8).reshape(1, 256)
        opaque = np.ones_like(gray, dtype=bool)
        for count in (1, 3, 5, 7, 16):
            labels = posterize_labels(gray, opaque, count)[0]
            assert np.all(np.diff(labels) >= 0)
            assert labels.min() == 0
            assert labels.max() == count - 1


class TestKMeans:
    """Tests for 1-D k-means quantization."""

    def test_two_clusters(self) -> None:
        """Test that two well separated groups converge to their means."""
        values = np.array([10, 20, 10, 20, 200, 220, 200, 220], dtype=np.uint8)
        centroids = kmeans_centroids(values, 2)
        assert centroids.tolist() == pytest.approx([15.0, 210.0])

    def test_centroids_sorted(self) -> None:
        """Test that centroids are returned in ascending order."""
        values = np.array([250, 5, 128, 250, 5, 128], dtype=np.uint8)
        centroids = kmeans_centroids(values, 3)
        assert list(centroids) == sorted(centroids)

    def test_single_cluster(self) -> None:
        """Test that one cluster converges to the mean."""
        values = np.array([100, 110, 120], dtype=np.uint8)
        centroids = kmeans_centroids(values, 1)
        assert centroids.tolist() == pytest.approx([110.0])

    def test_kmeans_masks_exclusive(self) -> None:
        """Test that every opaque pixel lands in exactly one mask."""
        rng = np.random.default_rng(42)
        values = rng.integers(0, 256, size=(24, 24)).tolist()
        masks = quantize(gray_image(values), 5, QuantizeMethod.KMEANS)

        coverage = np.sum([mask.filled for mask in masks], axis=0)
        assert np.all(coverage == 1)

    def test_kmeans_dark_to_light(self) -> None:
        """Test that the darkest cluster is layer 0."""
        image = gray_image([[10, 10, 240, 240]])
        masks = quantize(image, 2, QuantizeMethod.KMEANS)
        assert masks[0].filled.tolist() == [[True, True, False, False]]
        assert masks[1].filled.tolist() == [[False, False, True, True]]

    def test_kmeans_fully_transparent(self) -> None:
        """Test that a transparent image produces empty masks."""
        masks = quantize(gray_image([[50, 150]], alpha=0), 3, QuantizeMethod.KMEANS)
        assert all(mask.is_empty() for mask in masks)


class TestQuantize:
    """Tests for the quantize entry point."""

    def test_mask_metadata(self) -> None:
        """Test order, threshold, name and colour of each mask."""
        masks = quantize(gray_image([[0, 255]]), 5)
        assert [m.order for m in masks] == [0, 1, 2, 3, 4]
        assert [m.threshold for m in masks] == pytest.approx([0.0, 51.0, 102.0, 153.0, 204.0])
        assert [m.name for m in masks] == ["Layer 1", "Layer 2", "Layer 3", "Layer 4", "Layer 5"]
        assert all(m.visible for m in masks)
        assert all(m.color.startswith("#") and len(m.color) == 7 for m in masks)

    def test_masks_match_image_size(self) -> None:
        """Test that every mask has the image dimensions."""
        masks = quantize(gray_image([[0, 100, 200]] * 2), 3)
        assert all((m.width, m.height) == (3, 2) for m in masks)

    def test_posterize_exclusive(self) -> None:
        """Test that posterized masks never overlap."""
        values = [list(range(0, 256, 4))] * 4
        masks = quantize(gray_image(values), 6)
        coverage = np.sum([mask.filled for mask in masks], axis=0)
        assert np.all(coverage == 1)

    def test_semi_transparent_excluded(self) -> None:
        """Test that pixels at alpha 128 belong to no mask."""
        masks = quantize(gray_image([[0, 0]], alpha=128), 2)
        assert all(mask.is_empty() for mask in masks)

    def test_invalid_layer_count(self) -> None:
        """Test that fewer than one layer is rejected."""
        with pytest.raises(InvalidSettingsError):
            quantize(gray_image([[0]]), 0)


class TestLayerColor:
    """Tests for preview colours."""

    def test_first_layer_red(self) -> None:
        """Test that layer 0 sits at hue 0."""
        assert layer_color(0, 5) == "#d92626"

    def test_colors_distinct(self) -> None:
        """Test that colours differ across layers."""
        colors = [layer_color(i, 6) for i in range(6)]
        assert len(set(colors)) == 6
