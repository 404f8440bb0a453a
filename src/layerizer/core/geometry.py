"""Geometric helpers for simplification and bridge placement.

This module provides small, pure utilities:
- Perpendicular distance from a point to a chord
- Nearest pixel lookup by brute-force scan
- Bounding box over many polylines

All functions are pure and stateless.
"""

import math
from collections.abc import Iterable

from layerizer.domain import BoundingBox, Pixel, Point, Polyline

# Chords shorter than this are treated as a single point.
DEGENERATE_CHORD = 1e-12


def perpendicular_distance(point: Point, start: Point, end: Point) -> float:
    """Distance from a point to the line through start and end.

    When start and end coincide (the chord of a closed polyline), the
    distance to that shared point is returned instead.

    Args:
        point: Point to measure
        start: First chord endpoint
        end: Second chord endpoint

    Returns:
        Non-negative distance

    Examples:
        >>> perpendicular_distance(Point(1.0, 1.0), Point(0.0, 0.0), Point(2.0, 0.0))
        1.0
        >>> perpendicular_distance(Point(3.0, 4.0), Point(0.0, 0.0), Point(0.0, 0.0))
        5.0
    """
    dx = end.x - start.x
    dy = end.y - start.y
    length_sq = dx * dx + dy * dy

    if length_sq < DEGENERATE_CHORD:
        return math.hypot(point.x - start.x, point.y - start.y)

    cross = dx * (point.y - start.y) - dy * (point.x - start.x)
    return abs(cross) / math.sqrt(length_sq)


def nearest_pixel(target: Point, pixels: Iterable[Pixel]) -> tuple[Pixel, float]:
    """Find the pixel closest to a target point by scanning all of them.

    Args:
        target: Point to measure from
        pixels: Candidate pixels (non-empty)

    Returns:
        Tuple of (closest pixel, distance to it)

    Raises:
        ValueError: If pixels is empty
    """
    best: Pixel | None = None
    best_dist_sq = math.inf

    for pixel in pixels:
        dx = pixel.x - target.x
        dy = pixel.y - target.y
        dist_sq = dx * dx + dy * dy
        if dist_sq < best_dist_sq:
            best_dist_sq = dist_sq
            best = pixel

    if best is None:
        raise ValueError("Cannot find nearest pixel in an empty set")

    return best, math.sqrt(best_dist_sq)


def polylines_bounding_box(polylines: Iterable[Polyline]) -> BoundingBox | None:
    """Bounding box over every point of several polylines."""
    return BoundingBox.from_points(p for polyline in polylines for p in polyline.points)
