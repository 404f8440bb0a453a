"""Unit tests for marching squares contour tracing."""

from unittest.mock import Mock

import numpy as np
import pytest

from layerizer.core.vectorizer import (
    cell_cases,
    extract_segments,
    prune_collinear,
    stitch_segments,
    trace_filled,
    vectorize,
)
from layerizer.domain import LayerMask, Point, filled_to_raster
from layerizer.utils import SCAN_YIELD_ROWS


def disk(size: int, cx: int, cy: int, radius: int) -> np.ndarray:
    """Boolean disk of the given radius."""
    ys, xs = np.mgrid[0:size, 0:size]
    return (xs - cx) ** 2 + (ys - cy) ** 2 <= radius * radius


class TestCellCases:
    """Tests for per-cell case computation."""

    def test_case_bits(self) -> None:
        """Test corner bit assignment on single-pixel cells."""
        for (y, x), case in {(0, 0): 1, (0, 1): 2, (1, 1): 4, (1, 0): 8}.items():
            filled = np.zeros((2, 2), dtype=bool)
            filled[y, x] = True
            assert cell_cases(filled).tolist() == [[case]]

    def test_shape(self) -> None:
        """Test that there is one cell per 2x2 window."""
        assert cell_cases(np.zeros((5, 7), dtype=bool)).shape == (4, 6)


class TestSegments:
    """Tests for segment extraction and stitching."""

    def test_single_pixel_ring(self) -> None:
        """Test that one pixel yields a closed diamond of four segments."""
        filled = np.zeros((3, 3), dtype=bool)
        filled[1, 1] = True
        segments = extract_segments(filled)
        assert len(segments) == 4

        chains = stitch_segments(segments)
        assert len(chains) == 1
        chain = chains[0]
        assert chain[0] == chain[-1]
        assert len(chain) == 5

    def test_saddle_split(self) -> None:
        """Test that a diagonal pair produces two separate contours."""
        filled = np.zeros((4, 4), dtype=bool)
        filled[1, 1] = True
        filled[2, 2] = True
        chains = stitch_segments(extract_segments(filled))
        assert len(chains) == 2
        assert all(chain[0] == chain[-1] for chain in chains)

    def test_small_masks_have_no_segments(self) -> None:
        """Test that a mask narrower than one cell has no boundary."""
        assert extract_segments(np.ones((1, 5), dtype=bool)) == []

    def test_full_mask_has_no_segments(self) -> None:
        """Test that a mask with no empty pixel has no interior boundary."""
        assert extract_segments(np.ones((4, 4), dtype=bool)) == []

    def test_scan_yields(self) -> None:
        """Test that the scan yields every SCAN_YIELD_ROWS rows."""
        hook = Mock()
        extract_segments(np.zeros((SCAN_YIELD_ROWS * 2 + 1, 4), dtype=bool), on_yield=hook)
        assert hook.call_count == 2


class TestPruneCollinear:
    """Tests for collinear point pruning."""

    def test_straight_run_collapsed(self) -> None:
        """Test that interior points on a straight line are dropped."""
        chain = [(0, 0), (2, 0), (4, 0), (4, 2), (4, 4)]
        assert prune_collinear(chain) == [(0, 0), (4, 0), (4, 4)]

    def test_endpoints_kept(self) -> None:
        """Test that the first and last points always survive."""
        chain = [(0, 0), (1, 0), (2, 0), (3, 0)]
        assert prune_collinear(chain) == [(0, 0), (3, 0)]


class TestTrace:
    """Tests for full tracing."""

    def test_square_closed_contour(self) -> None:
        """Test that a square traces to one closed polyline around it."""
        filled = np.zeros((40, 40), dtype=bool)
        filled[10:30, 10:30] = True
        polylines = trace_filled(filled)

        assert len(polylines) == 1
        polyline = polylines[0]
        assert polyline.is_closed
        bbox = polyline.bounding_box()
        assert bbox.x == pytest.approx(9.5)
        assert bbox.y == pytest.approx(9.5)
        assert bbox.width == pytest.approx(20.0)
        assert bbox.height == pytest.approx(20.0)
        # four sides plus four cut corners, plus the repeated start
        assert len(polyline) == 9

    def test_disk_traces_one_contour(self) -> None:
        """Test that a filled disk traces to one closed contour of its size."""
        filled = disk(64, 32, 32, 20)
        polylines = trace_filled(filled)

        assert len(polylines) == 1
        assert polylines[0].is_closed
        bbox = polylines[0].bounding_box()
        assert abs(bbox.width - 40) <= 2
        assert abs(bbox.height - 40) <= 2

    def test_ring_traces_two_contours(self) -> None:
        """Test that a region with a hole has outer and inner contours."""
        filled = np.zeros((30, 30), dtype=bool)
        filled[5:25, 5:25] = True
        filled[10:20, 10:20] = False
        polylines = trace_filled(filled)
        assert len(polylines) == 2
        assert all(p.is_closed for p in polylines)

    def test_border_region_open(self) -> None:
        """Test that a region touching the image edge traces an open path."""
        filled = np.zeros((20, 20), dtype=bool)
        filled[5:15, :8] = True
        polylines = trace_filled(filled)
        assert len(polylines) == 1
        polyline = polylines[0]
        assert not polyline.is_closed
        assert polyline.points[0] == Point(0.0, 4.5)
        assert polyline.points[-1] == Point(0.0, 14.5)

    def test_straight_border_line_discarded(self) -> None:
        """Test that a boundary collapsing to two points is dropped."""
        filled = np.zeros((20, 20), dtype=bool)
        filled[:, :8] = True
        assert trace_filled(filled) == []

    def test_empty_mask(self) -> None:
        """Test that an empty mask has no contours."""
        assert trace_filled(np.zeros((10, 10), dtype=bool)) == []

    def test_vectorize_mask(self) -> None:
        """Test tracing from a LayerMask."""
        filled = np.zeros((10, 10), dtype=bool)
        filled[3:6, 3:6] = True
        mask = LayerMask(image=filled_to_raster(filled), order=0, threshold=0.0)
        polylines = vectorize(mask)
        assert len(polylines) == 1
        assert Point(2.5, 3.0) in polylines[0].points
