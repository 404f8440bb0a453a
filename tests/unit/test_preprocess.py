"""Unit tests for image pre-processing."""

import numpy as np
import pytest

from layerizer.core.preprocess import luminance, remove_background, resize_to_max, to_grayscale
from layerizer.domain import RasterImage


def solid_image(width: int, height: int, rgba: tuple[int, int, int, int]) -> RasterImage:
    """Build an image filled with one colour."""
    data = np.zeros((height, width, 4), dtype=np.uint8)
    data[:, :] = rgba
    return RasterImage.from_array(data)


class TestLuminance:
    """Tests for luminance and grayscale conversion."""

    def test_primary_weights(self) -> None:
        """Test Rec. 601 weights on pure primaries."""
        data = np.zeros((1, 3, 4), dtype=np.uint8)
        data[0, 0] = (255, 0, 0, 255)
        data[0, 1] = (0, 255, 0, 255)
        data[0, 2] = (0, 0, 255, 255)
        gray = luminance(RasterImage.from_array(data))
        assert gray.tolist() == [[76, 150, 29]]

    def test_white_and_black(self) -> None:
        """Test the extremes of the range."""
        assert luminance(solid_image(1, 1, (255, 255, 255, 255))).tolist() == [[255]]
        assert luminance(solid_image(1, 1, (0, 0, 0, 255))).tolist() == [[0]]

    def test_to_grayscale_preserves_alpha(self) -> None:
        """Test that grayscale sets R = G = B and keeps alpha."""
        image = solid_image(2, 2, (200, 100, 50, 77))
        gray = to_grayscale(image)
        pixel = gray.data[0, 0].tolist()
        assert pixel[0] == pixel[1] == pixel[2]
        assert pixel[3] == 77

    def test_to_grayscale_does_not_modify_input(self) -> None:
        """Test that the source image is untouched."""
        image = solid_image(1, 1, (200, 100, 50, 255))
        to_grayscale(image)
        assert image.data[0, 0].tolist() == [200, 100, 50, 255]


class TestResize:
    """Tests for working-resolution resizing."""

    def test_small_image_unchanged(self) -> None:
        """Test that an image within the limit is returned as-is."""
        image = solid_image(40, 30, (0, 0, 0, 255))
        assert resize_to_max(image, 100) is image

    def test_landscape_downscaled(self) -> None:
        """Test that the longest side is scaled to the limit."""
        image = solid_image(400, 200, (0, 0, 0, 255))
        resized = resize_to_max(image, 100)
        assert (resized.width, resized.height) == (100, 50)

    def test_portrait_downscaled(self) -> None:
        """Test scaling when height is the longest side."""
        image = solid_image(90, 300, (0, 0, 0, 255))
        resized = resize_to_max(image, 150)
        assert (resized.width, resized.height) == (45, 150)

    def test_solid_colour_kept(self) -> None:
        """Test that resampling a solid image keeps its colour."""
        image = solid_image(64, 64, (120, 60, 30, 255))
        resized = resize_to_max(image, 16)
        assert resized.data[8, 8].tolist() == [120, 60, 30, 255]


class TestRemoveBackground:
    """Tests for near-white background removal."""

    def test_pure_white_transparent(self) -> None:
        """Test that pure white loses all alpha with the default ramp."""
        result = remove_background(solid_image(2, 2, (255, 255, 255, 255)), 10, 5.0)
        # distance 10, alpha = 255 - 50
        assert result.alpha.tolist() == [[205, 205], [205, 205]]

    def test_steep_ramp_clamps_to_zero(self) -> None:
        """Test that a steep ramp clamps alpha at zero."""
        result = remove_background(solid_image(1, 1, (255, 255, 255, 255)), 10, 100.0)
        assert result.alpha.tolist() == [[0]]

    def test_dark_pixels_untouched(self) -> None:
        """Test that pixels outside the tolerance keep their alpha."""
        result = remove_background(solid_image(1, 1, (240, 255, 255, 255)), 10, 100.0)
        assert result.alpha.tolist() == [[255]]

    def test_alpha_never_raised(self) -> None:
        """Test that existing transparency is not undone."""
        result = remove_background(solid_image(1, 1, (255, 255, 255, 20)), 10, 5.0)
        assert result.alpha.tolist() == [[20]]

    @pytest.mark.parametrize("softness", [0.0, 1.0, 5.0])
    def test_rgb_unchanged(self, softness: float) -> None:
        """Test that only the alpha channel changes."""
        result = remove_background(solid_image(1, 1, (250, 251, 252, 255)), 10, softness)
        assert result.data[0, 0, :3].tolist() == [250, 251, 252]
