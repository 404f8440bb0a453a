"""Ramer-Douglas-Peucker polyline simplification.

For each sub-chain, the point furthest from the chord between its
endpoints is kept when that distance exceeds the tolerance and the
sub-chain is split there; otherwise the whole sub-chain collapses to its
endpoints. Every removed point therefore lies within the tolerance of
the chord that replaced it.

The split work is driven by an explicit stack, so long contours cannot
exhaust the interpreter's recursion limit.
"""

from layerizer.core.geometry import perpendicular_distance
from layerizer.domain import PathCommand, Polyline, polyline_to_commands


def simplify(polyline: Polyline, tolerance: float) -> Polyline:
    """Simplify a polyline within a distance tolerance.

    The first and last points are always kept, so a closed polyline
    stays closed. A tolerance of 0 or less returns the input unchanged.

    Args:
        polyline: Polyline to simplify
        tolerance: Maximum distance of a removed point from its chord

    Returns:
        Polyline with equal or fewer points
    """
    points = polyline.points
    count = len(points)
    if tolerance <= 0 or count < 3:
        return polyline

    keep = [False] * count
    keep[0] = True
    keep[-1] = True

    stack = [(0, count - 1)]
    while stack:
        start, end = stack.pop()
        if end - start < 2:
            continue

        chord_start = points[start]
        chord_end = points[end]
        max_dist = -1.0
        max_index = start
        for i in range(start + 1, end):
            dist = perpendicular_distance(points[i], chord_start, chord_end)
            if dist > max_dist:
                max_dist = dist
                max_index = i

        if max_dist > tolerance:
            keep[max_index] = True
            stack.append((max_index, end))
            stack.append((start, max_index))

    kept_points = tuple(p for p, kept in zip(points, keep, strict=True) if kept)
    return Polyline(points=kept_points, closed=polyline.closed)


def simplify_to_commands(polyline: Polyline, tolerance: float) -> list[PathCommand]:
    """Simplify a polyline and convert it to drawing commands.

    A ``Close`` command ends the result when the simplified endpoints
    coincide.
    """
    return polyline_to_commands(simplify(polyline, tolerance))
