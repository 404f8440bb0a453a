"""Island and bridge types for keeping floating regions attached.

This module defines the bridge domain models used for connecting
islands (disconnected regions of a mask) to the mask's main body.
"""

import math
from dataclasses import dataclass

from layerizer.domain.path import BoundingBox, Point, Polyline
from layerizer.domain.raster import Pixel


@dataclass
class Island:
    """A connected component of material pixels inside one mask.

    Islands only live for one detection pass; nothing keeps them after
    bridges have been computed.

    Attributes:
        id: Detection order index
        pixels: Member pixel coordinates
        bounding_box: Pixel extent (width/height count whole pixels)
        centroid: Mean pixel coordinate
    """

    id: int
    pixels: list[Pixel]
    bounding_box: BoundingBox
    centroid: Point

    @property
    def size(self) -> int:
        """Number of member pixels."""
        return len(self.pixels)

    @classmethod
    def from_pixels(cls, island_id: int, pixels: list[Pixel]) -> "Island":
        """Build an island, computing its bounding box and centroid.

        Args:
            island_id: Detection order index
            pixels: Non-empty list of member pixels

        Returns:
            Island instance
        """
        min_x = min(p.x for p in pixels)
        max_x = max(p.x for p in pixels)
        min_y = min(p.y for p in pixels)
        max_y = max(p.y for p in pixels)
        count = len(pixels)
        return cls(
            id=island_id,
            pixels=pixels,
            bounding_box=BoundingBox(
                x=min_x, y=min_y, width=max_x - min_x + 1, height=max_y - min_y + 1
            ),
            centroid=Point(sum(p.x for p in pixels) / count, sum(p.y for p in pixels) / count),
        )


@dataclass(frozen=True)
class Bridge:
    """A rectangular connector from an island to the main body.

    The rectangle starts at the anchor, runs ``length`` along ``angle``
    and is ``thickness`` wide, centred on that line.

    Attributes:
        anchor: Island centroid where the bridge starts
        length: Distance from the anchor to the main body
        thickness: Rectangle width across the bridge direction
        angle: Direction in radians, ``atan2(dy, dx)``
        island_id: Island the bridge belongs to
    """

    anchor: Point
    length: float
    thickness: float
    angle: float
    island_id: int = -1

    @property
    def end(self) -> Point:
        """Point where the bridge meets the main body."""
        return Point(
            self.anchor.x + self.length * math.cos(self.angle),
            self.anchor.y + self.length * math.sin(self.angle),
        )

    def corners(self) -> tuple[Point, Point, Point, Point]:
        """Rectangle corners, rotated about the anchor.

        Returns:
            Four corners in drawing order
        """
        cos_a = math.cos(self.angle)
        sin_a = math.sin(self.angle)
        half = self.thickness / 2.0
        ax, ay = self.anchor.x, self.anchor.y
        ex = ax + self.length * cos_a
        ey = ay + self.length * sin_a

        return (
            Point(ax - half * sin_a, ay + half * cos_a),
            Point(ax + half * sin_a, ay - half * cos_a),
            Point(ex + half * sin_a, ey - half * cos_a),
            Point(ex - half * sin_a, ey + half * cos_a),
        )

    def as_polyline(self) -> Polyline:
        """Convert the rectangle to a closed polyline."""
        corners = self.corners()
        return Polyline(points=(*corners, corners[0]))
