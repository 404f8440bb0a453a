"""Connected component extraction for binary masks.

Components are 4-connected groups of material pixels. The fill uses an
explicit stack, so region size is bounded by memory only, not by the
interpreter's recursion limit.

Key functions:
- flood_fill: Collect one component from a seed pixel
- iter_components: Walk every component of a mask in row-major seed order
"""

from collections.abc import Iterator

import numpy as np

from layerizer.domain import Pixel
from layerizer.utils import FLOOD_FILL_YIELD_INTERVAL, YieldCounter, YieldHook


def flood_fill(
    grid: list[list[bool]],
    visited: list[bytearray],
    start_x: int,
    start_y: int,
    counter: YieldCounter | None = None,
) -> list[Pixel]:
    """Collect the 4-connected component containing a seed pixel.

    Marks every collected pixel in ``visited``.

    Args:
        grid: Row-major material flags, ``grid[y][x]``
        visited: Row-major visited flags, updated in place
        start_x: Seed X
        start_y: Seed Y
        counter: Optional yield counter, ticked once per stack pop

    Returns:
        Component pixels in fill order (empty if the seed is not material
        or was already visited)
    """
    height = len(grid)
    width = len(grid[0]) if height else 0

    stack: list[tuple[int, int]] = [(start_x, start_y)]
    component: list[Pixel] = []

    while stack:
        if counter is not None:
            counter.tick()

        x, y = stack.pop()
        if x < 0 or x >= width or y < 0 or y >= height:
            continue
        if visited[y][x] or not grid[y][x]:
            continue

        visited[y][x] = 1
        component.append(Pixel(x, y))

        stack.append((x + 1, y))
        stack.append((x - 1, y))
        stack.append((x, y + 1))
        stack.append((x, y - 1))

    return component


def iter_components(filled: np.ndarray, on_yield: YieldHook | None = None) -> Iterator[list[Pixel]]:
    """Yield every connected component of a boolean mask.

    Seeds are visited in row-major order, so components come out ordered
    by their top-left-most pixel.

    Args:
        filled: ``(height, width)`` boolean coverage
        on_yield: Hook called every FLOOD_FILL_YIELD_INTERVAL steps

    Yields:
        Lists of component pixels
    """
    height, width = filled.shape
    if height == 0 or width == 0:
        return

    grid: list[list[bool]] = filled.tolist()
    visited = [bytearray(width) for _ in range(height)]
    counter = YieldCounter(on_yield, FLOOD_FILL_YIELD_INTERVAL)

    ys, xs = np.nonzero(filled)
    for y, x in zip(ys.tolist(), xs.tolist(), strict=True):
        counter.tick()
        if visited[y][x]:
            continue
        yield flood_fill(grid, visited, x, y, counter)


def component_index(pixels: list[Pixel]) -> tuple[np.ndarray, np.ndarray]:
    """Convert component pixels to ``(ys, xs)`` arrays for numpy indexing."""
    ys = np.fromiter((p.y for p in pixels), dtype=np.intp, count=len(pixels))
    xs = np.fromiter((p.x for p in pixels), dtype=np.intp, count=len(pixels))
    return ys, xs
