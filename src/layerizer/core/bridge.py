"""Bridge generation for connecting floating regions to the main body.

This module implements the bridge logic for one mask:
- Detecting islands (connected components) with their centroids
- Treating the largest island as the main body
- Emitting a rectangular bridge from every other island's centroid to
  the nearest main-body pixel

Bridges are additive geometry: they are appended to a layer's path and
never cut anything away.

Key classes:
- BridgeGenerator: Sizes and places bridges from project settings
"""

import math

from layerizer.config import ProjectSettings
from layerizer.core.cleanup import min_area_pixels
from layerizer.core.components import iter_components
from layerizer.core.geometry import nearest_pixel
from layerizer.domain import Bridge, Island, LayerMask, Polyline
from layerizer.utils import YieldHook

# Components smaller than this are noise, not islands.
MIN_ISLAND_PIXELS = 10

# Islands closer than this to the main body already touch it.
MIN_BRIDGE_LENGTH = 5.0


def detect_islands(mask: LayerMask, on_yield: YieldHook | None = None) -> list[Island]:
    """Find the connected regions of a mask.

    Args:
        mask: Mask to analyze
        on_yield: Cooperative yield hook for the flood fill

    Returns:
        Islands of at least MIN_ISLAND_PIXELS pixels, in row-major seed order
    """
    islands: list[Island] = []
    for pixels in iter_components(mask.filled, on_yield):
        if len(pixels) < MIN_ISLAND_PIXELS:
            continue
        islands.append(Island.from_pixels(len(islands), pixels))
    return islands


def generate_bridges(islands: list[Island], thickness: float, min_island_size: float) -> list[Bridge]:
    """Connect every floating island to the main body.

    The island with the most pixels is the main body (the earliest
    detected one wins a tie). Each other island at or above
    ``min_island_size`` gets a bridge from its centroid to the nearest
    main-body pixel, unless that pixel is closer than MIN_BRIDGE_LENGTH.

    Args:
        islands: Islands of one mask
        thickness: Bridge width in pixels
        min_island_size: Smallest island, in pixels, worth bridging

    Returns:
        Bridges in pixel coordinates
    """
    if len(islands) < 2:
        return []

    ranked = sorted(islands, key=lambda island: island.size, reverse=True)
    main_body = ranked[0]

    bridges: list[Bridge] = []
    for island in ranked[1:]:
        if island.size < min_island_size:
            continue

        closest, distance = nearest_pixel(island.centroid, main_body.pixels)
        if distance < MIN_BRIDGE_LENGTH:
            continue

        dx = closest.x - island.centroid.x
        dy = closest.y - island.centroid.y
        bridges.append(
            Bridge(
                anchor=island.centroid,
                length=distance,
                thickness=thickness,
                angle=math.atan2(dy, dx),
                island_id=island.id,
            )
        )

    return bridges


class BridgeGenerator:
    """Places bridges on masks according to project settings.

    The minimum bridged island size is the same physical area the
    cleanup stage uses for removal, converted to pixels at the working
    resolution.
    """

    def __init__(self, settings: ProjectSettings, image_width: int) -> None:
        """Initialize bridge generator.

        Args:
            settings: Project settings (bridge width, island area, target width)
            image_width: Working image width in pixels
        """
        self.thickness = settings.bridge_width_px
        self.min_island_size = min_area_pixels(
            image_width, settings.min_island_area_mm2, settings.target_width_mm
        )

    def generate(self, islands: list[Island]) -> list[Bridge]:
        """Generate bridges for already detected islands."""
        return generate_bridges(islands, self.thickness, self.min_island_size)

    def bridges_for_mask(self, mask: LayerMask, on_yield: YieldHook | None = None) -> list[Bridge]:
        """Detect islands in a mask and bridge the floating ones.

        Args:
            mask: Cleaned layer mask
            on_yield: Cooperative yield hook for island detection

        Returns:
            Bridges in pixel coordinates
        """
        return self.generate(detect_islands(mask, on_yield))

    @staticmethod
    def bridge_polylines(bridges: list[Bridge]) -> list[Polyline]:
        """Render bridges as closed rectangular polylines."""
        return [bridge.as_polyline() for bridge in bridges]
