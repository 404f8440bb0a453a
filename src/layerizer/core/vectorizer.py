"""Contour tracing of binary masks with marching squares.

This module turns a mask into polylines in three steps:
1. Scan every 2x2 cell and emit boundary segments between edge midpoints
2. Stitch segments sharing endpoints into chains
3. Drop collinear interior points and discard chains under 3 points

Segment endpoints live on a doubled integer lattice (half-pixel
precision) so stitching compares exact integers. Output polylines are
in pixel units, where pixel (x, y) has its centre at (x, y).

Saddle cells (cases 5 and 10) are always split into two separate
segments rather than disambiguated from the cell centre. On
checkerboard-like patterns this can break a contour into extra
fragments; stitching tolerates them.
"""

import numpy as np

from layerizer.domain import LayerMask, Point, Polyline
from layerizer.utils import SCAN_YIELD_ROWS, YieldHook

# Doubled-lattice point and undirected segment.
LatticePoint = tuple[int, int]
Segment = tuple[LatticePoint, LatticePoint]

# Edge midpoint offsets within a cell on the doubled lattice.
_TOP = (1, 0)
_RIGHT = (2, 1)
_BOTTOM = (1, 2)
_LEFT = (0, 1)

# Case bits: 1 = top-left, 2 = top-right, 4 = bottom-right, 8 = bottom-left.
CASE_SEGMENTS: dict[int, tuple[tuple[LatticePoint, LatticePoint], ...]] = {
    0: (),
    1: ((_LEFT, _TOP),),
    2: ((_TOP, _RIGHT),),
    3: ((_LEFT, _RIGHT),),
    4: ((_RIGHT, _BOTTOM),),
    5: ((_LEFT, _TOP), (_RIGHT, _BOTTOM)),
    6: ((_TOP, _BOTTOM),),
    7: ((_LEFT, _BOTTOM),),
    8: ((_LEFT, _BOTTOM),),
    9: ((_TOP, _BOTTOM),),
    10: ((_TOP, _RIGHT), (_BOTTOM, _LEFT)),
    11: ((_RIGHT, _BOTTOM),),
    12: ((_LEFT, _RIGHT),),
    13: ((_TOP, _RIGHT),),
    14: ((_LEFT, _TOP),),
    15: (),
}

MIN_POLYLINE_POINTS = 3


def cell_cases(filled: np.ndarray) -> np.ndarray:
    """Compute the 4-bit marching squares case of every 2x2 cell.

    Args:
        filled: ``(height, width)`` boolean coverage

    Returns:
        ``(height - 1, width - 1)`` uint8 case array
    """
    f = filled.astype(np.uint8)
    return (
        f[:-1, :-1]
        | (f[:-1, 1:] << 1)
        | (f[1:, 1:] << 2)
        | (f[1:, :-1] << 3)
    )


def extract_segments(filled: np.ndarray, on_yield: YieldHook | None = None) -> list[Segment]:
    """Emit boundary segments for every cell of a mask.

    Args:
        filled: ``(height, width)`` boolean coverage
        on_yield: Hook called every SCAN_YIELD_ROWS rows

    Returns:
        Segments on the doubled lattice, in scan order
    """
    height, width = filled.shape
    if height < 2 or width < 2:
        return []

    cases = cell_cases(filled)
    segments: list[Segment] = []

    for y in range(height - 1):
        if on_yield is not None and y % SCAN_YIELD_ROWS == 0:
            on_yield()

        row = cases[y]
        for x in np.flatnonzero((row != 0) & (row != 15)).tolist():
            ox, oy = x * 2, y * 2
            for (ax, ay), (bx, by) in CASE_SEGMENTS[int(row[x])]:
                segments.append(((ox + ax, oy + ay), (ox + bx, oy + by)))

    return segments


def _edge_key(a: LatticePoint, b: LatticePoint) -> Segment:
    return (a, b) if a <= b else (b, a)


def stitch_segments(segments: list[Segment]) -> list[list[LatticePoint]]:
    """Join segments that share endpoints into chains.

    Segments form an undirected graph keyed by endpoint. Each chain
    starts from an unused edge and grows forward, then backward, until
    no unused edge continues it or it closes on its starting point. A
    closed chain repeats its first point at the end.

    Args:
        segments: Undirected segments

    Returns:
        Chains of lattice points
    """
    adjacency: dict[LatticePoint, list[LatticePoint]] = {}
    edges: dict[Segment, None] = {}

    for a, b in segments:
        edges[_edge_key(a, b)] = None
        adjacency.setdefault(a, []).append(b)
        adjacency.setdefault(b, []).append(a)

    used: set[Segment] = set()
    chains: list[list[LatticePoint]] = []

    def next_point(tip: LatticePoint, before: LatticePoint) -> LatticePoint | None:
        for candidate in adjacency.get(tip, ()):
            if candidate != before and _edge_key(tip, candidate) not in used:
                return candidate
        return None

    for edge in edges:
        if edge in used:
            continue
        used.add(edge)
        chain = [edge[0], edge[1]]

        # forward
        while True:
            last = chain[-1]
            nxt = next_point(last, chain[-2])
            if nxt is None:
                break
            used.add(_edge_key(last, nxt))
            chain.append(nxt)
            if nxt == chain[0]:
                break

        # backward
        while chain[0] != chain[-1]:
            first = chain[0]
            nxt = next_point(first, chain[1])
            if nxt is None:
                break
            used.add(_edge_key(first, nxt))
            chain.insert(0, nxt)
            if nxt == chain[-1]:
                break

        chains.append(chain)

    return chains


def prune_collinear(chain: list[LatticePoint]) -> list[LatticePoint]:
    """Drop interior points where the chain does not change direction.

    The first and last points are always kept.

    Args:
        chain: Lattice points

    Returns:
        Pruned chain
    """
    if len(chain) <= 3:
        return list(chain)

    out = [chain[0]]
    for i in range(1, len(chain) - 1):
        ax, ay = out[-1]
        bx, by = chain[i]
        cx, cy = chain[i + 1]
        cross = (bx - ax) * (cy - by) - (by - ay) * (cx - bx)
        if cross != 0:
            out.append(chain[i])
    out.append(chain[-1])
    return out


def trace_filled(filled: np.ndarray, on_yield: YieldHook | None = None) -> list[Polyline]:
    """Trace boolean coverage into polylines.

    Args:
        filled: ``(height, width)`` boolean coverage
        on_yield: Cooperative yield hook for the cell scan

    Returns:
        Polylines in pixel units, each with at least 3 points
    """
    chains = stitch_segments(extract_segments(filled, on_yield))

    polylines: list[Polyline] = []
    for chain in chains:
        pruned = prune_collinear(chain)
        if len(pruned) < MIN_POLYLINE_POINTS:
            continue
        polylines.append(Polyline(points=tuple(Point(x / 2.0, y / 2.0) for x, y in pruned)))
    return polylines


def vectorize(mask: LayerMask, on_yield: YieldHook | None = None) -> list[Polyline]:
    """Trace a layer mask into contour polylines.

    Args:
        mask: Mask to trace
        on_yield: Cooperative yield hook for the cell scan

    Returns:
        Contour polylines in pixel units
    """
    return trace_filled(mask.filled, on_yield)
