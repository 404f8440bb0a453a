"""Unit tests for polyline simplification and geometry helpers."""

import math

import numpy as np
import pytest

from layerizer.core.geometry import nearest_pixel, perpendicular_distance, polylines_bounding_box
from layerizer.core.simplify import simplify, simplify_to_commands
from layerizer.domain import BoundingBox, Close, Pixel, Point, Polyline


def distance_to_segment(p: Point, a: Point, b: Point) -> float:
    """Distance from a point to a finite segment."""
    dx, dy = b.x - a.x, b.y - a.y
    length_sq = dx * dx + dy * dy
    if length_sq == 0:
        return math.hypot(p.x - a.x, p.y - a.y)
    t = max(0.0, min(1.0, ((p.x - a.x) * dx + (p.y - a.y) * dy) / length_sq))
    return math.hypot(p.x - (a.x + t * dx), p.y - (a.y + t * dy))


class TestPerpendicularDistance:
    """Tests for point-to-chord distance."""

    def test_above_horizontal_chord(self) -> None:
        """Test distance to a horizontal line."""
        assert perpendicular_distance(Point(5, 3), Point(0, 0), Point(10, 0)) == pytest.approx(3.0)

    def test_beyond_chord_end(self) -> None:
        """Test that the distance is to the infinite line."""
        assert perpendicular_distance(Point(20, 2), Point(0, 0), Point(10, 0)) == pytest.approx(2.0)

    def test_degenerate_chord(self) -> None:
        """Test that a zero-length chord measures point-to-point."""
        assert perpendicular_distance(Point(3, 4), Point(0, 0), Point(0, 0)) == pytest.approx(5.0)


class TestNearestPixel:
    """Tests for brute-force nearest pixel search."""

    def test_finds_closest(self) -> None:
        """Test that the closest pixel and its distance are returned."""
        pixels = [Pixel(0, 0), Pixel(10, 0), Pixel(3, 4)]
        pixel, dist = nearest_pixel(Point(3.0, 3.0), pixels)
        assert pixel == Pixel(3, 4)
        assert dist == pytest.approx(1.0)

    def test_empty_rejected(self) -> None:
        """Test that an empty set is rejected."""
        with pytest.raises(ValueError):
            nearest_pixel(Point(0, 0), [])


class TestBoundingBox:
    """Tests for multi-polyline bounding boxes."""

    def test_union(self) -> None:
        """Test the box spanning several polylines."""
        polylines = [Polyline.from_xy([(0, 0), (2, 2)]), Polyline.from_xy([(5, -1), (6, 1)])]
        assert polylines_bounding_box(polylines) == BoundingBox(x=0, y=-1, width=6, height=3)

    def test_none_for_empty(self) -> None:
        """Test that no polylines have no box."""
        assert polylines_bounding_box([]) is None


class TestSimplify:
    """Tests for Ramer-Douglas-Peucker simplification."""

    @pytest.fixture
    def zigzag(self) -> Polyline:
        """Create a noisy horizontal line."""
        rng = np.random.default_rng(11)
        noise = rng.uniform(-0.4, 0.4, size=50)
        return Polyline.from_xy([(float(i), float(noise[i])) for i in range(50)])

    def test_zero_tolerance_identity(self, zigzag: Polyline) -> None:
        """Test that tolerance 0 returns the input unchanged."""
        assert simplify(zigzag, 0.0) is zigzag

    def test_straight_line_collapses(self) -> None:
        """Test that collinear points collapse to the endpoints."""
        line = Polyline.from_xy([(i, 0) for i in range(10)])
        assert simplify(line, 0.5).points == (Point(0, 0), Point(9, 0))

    def test_noise_removed(self, zigzag: Polyline) -> None:
        """Test that noise below the tolerance disappears."""
        simplified = simplify(zigzag, 1.0)
        assert simplified.points == (zigzag.points[0], zigzag.points[-1])

    def test_corner_kept(self) -> None:
        """Test that a point far from the chord is kept."""
        polyline = Polyline.from_xy([(0, 0), (5, 5.2), (10, 10), (15, 5.2), (20, 0)])
        simplified = simplify(polyline, 1.0)
        assert Point(10, 10) in simplified.points
        assert Point(5, 5.2) not in simplified.points

    def test_tolerance_bound(self) -> None:
        """Test that every dropped point lies within tolerance of the result."""
        angles = np.linspace(0.0, 2 * math.pi, 120)
        polyline = Polyline.from_xy([(30 * math.cos(a), 30 * math.sin(a)) for a in angles])
        tolerance = 1.5
        simplified = simplify(polyline, tolerance)

        assert len(simplified) < len(polyline)
        segments = list(zip(simplified.points, simplified.points[1:], strict=False))
        for p in polyline.points:
            nearest = min(distance_to_segment(p, a, b) for a, b in segments)
            assert nearest <= tolerance + 1e-9

    def test_closed_stays_closed(self) -> None:
        """Test that a closed polyline keeps its repeated endpoint."""
        square = Polyline.from_xy([(0, 0), (5, 0), (10, 0), (10, 10), (0, 10), (0, 0)])
        simplified = simplify(square, 0.5)
        assert simplified.is_closed
        assert len(simplified) == 5

    def test_short_polyline_unchanged(self) -> None:
        """Test that two points are returned as-is."""
        line = Polyline.from_xy([(0, 0), (1, 1)])
        assert simplify(line, 2.0) is line

    def test_long_polyline_no_recursion_limit(self) -> None:
        """Test that very long polylines simplify without recursion."""
        points = [(float(i), float(i % 2) * 10.0) for i in range(1500)]
        simplified = simplify(Polyline.from_xy(points), 1.0)
        assert len(simplified) == 1500

    def test_simplify_to_commands(self) -> None:
        """Test conversion of a simplified closed polyline to commands."""
        square = Polyline.from_xy([(0, 0), (5, 0), (10, 0), (10, 10), (0, 10), (0, 0)])
        commands = simplify_to_commands(square, 0.5)
        assert len(commands) == 5
        assert isinstance(commands[-1], Close)
