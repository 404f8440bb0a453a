"""Vector geometry types.

This module defines the geometry produced by tracing and consumed by export:
- Point: A 2D point
- Polyline: An immutable ordered sequence of points
- MoveTo, LineTo, Close: Typed path drawing commands
- BoundingBox: Axis-aligned extent of a set of points
"""

from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from typing import Any

# Endpoints closer than this are treated as the same point.
CLOSE_EPSILON = 1e-3


@dataclass(frozen=True, slots=True)
class Point:
    """A point in 2D space.

    Immutable and hashable for use in sets/dicts.

    Attributes:
        x: X coordinate
        y: Y coordinate
    """

    x: float
    y: float

    def scaled(self, factor: float) -> "Point":
        """Return the point with both coordinates multiplied by factor."""
        return Point(self.x * factor, self.y * factor)

    def is_close(self, other: "Point", epsilon: float = CLOSE_EPSILON) -> bool:
        """Check whether two points coincide within epsilon on both axes."""
        return abs(self.x - other.x) < epsilon and abs(self.y - other.y) < epsilon


@dataclass(frozen=True)
class BoundingBox:
    """Axis-aligned bounding box.

    Attributes:
        x: Minimum X
        y: Minimum Y
        width: Extent along X
        height: Extent along Y
    """

    x: float
    y: float
    width: float
    height: float

    @classmethod
    def from_points(cls, points: Iterable[Point]) -> "BoundingBox | None":
        """Compute the bounding box of points.

        Returns:
            BoundingBox, or None when there are no points
        """
        xs: list[float] = []
        ys: list[float] = []
        for p in points:
            xs.append(p.x)
            ys.append(p.y)
        if not xs:
            return None
        min_x, min_y = min(xs), min(ys)
        return cls(x=min_x, y=min_y, width=max(xs) - min_x, height=max(ys) - min_y)

    def to_dict(self) -> dict[str, float]:
        return {"x": self.x, "y": self.y, "width": self.width, "height": self.height}

    @classmethod
    def from_dict(cls, data: dict[str, float]) -> "BoundingBox":
        return cls(x=data["x"], y=data["y"], width=data["width"], height=data["height"])


@dataclass(frozen=True)
class Polyline:
    """An ordered, immutable sequence of points.

    Closure is decided once, when the polyline is built in the units it
    was traced in: first and last points coinciding within CLOSE_EPSILON.
    Scaling keeps that decision, so a millimetre copy of an open pixel
    contour stays open however small the scale.

    Attributes:
        points: Vertices in drawing order
        closed: Whether the last point returns to the first (derived from
            the endpoints when not given)
    """

    points: tuple[Point, ...]
    closed: bool | None = None

    def __post_init__(self) -> None:
        if self.closed is None:
            closed = len(self.points) >= 2 and self.points[0].is_close(self.points[-1])
            object.__setattr__(self, "closed", closed)

    @classmethod
    def from_xy(cls, coords: Sequence[tuple[float, float]]) -> "Polyline":
        """Build a polyline from (x, y) tuples."""
        return cls(points=tuple(Point(x, y) for x, y in coords))

    def __len__(self) -> int:
        return len(self.points)

    @property
    def is_closed(self) -> bool:
        return bool(self.closed)

    def bounding_box(self) -> BoundingBox | None:
        return BoundingBox.from_points(self.points)

    def scaled(self, factor: float) -> "Polyline":
        """Return a copy with every point scaled about the origin."""
        return Polyline(points=tuple(p.scaled(factor) for p in self.points), closed=self.closed)


@dataclass(frozen=True, slots=True)
class MoveTo:
    """Start a new subpath at a point."""

    point: Point


@dataclass(frozen=True, slots=True)
class LineTo:
    """Draw a straight line to a point."""

    point: Point


@dataclass(frozen=True, slots=True)
class Close:
    """Close the current subpath."""


PathCommand = MoveTo | LineTo | Close


def polyline_to_commands(polyline: Polyline) -> list[PathCommand]:
    """Convert a polyline to drawing commands.

    A closed polyline ends with ``Close``. Its repeated end point is
    dropped, since ``Close`` draws the final segment.

    Args:
        polyline: Polyline to convert

    Returns:
        Command list, empty for an empty polyline
    """
    points = polyline.points
    if not points:
        return []

    closed = polyline.is_closed
    if closed:
        points = points[:-1]

    commands: list[PathCommand] = [MoveTo(points[0])]
    commands.extend(LineTo(p) for p in points[1:])
    if closed:
        commands.append(Close())
    return commands


def command_points(commands: Iterable[PathCommand]) -> list[Point]:
    """Collect the coordinates referenced by drawing commands."""
    return [c.point for c in commands if isinstance(c, (MoveTo, LineTo))]


def command_to_dict(command: PathCommand) -> dict[str, Any]:
    """Serialize a command to a dictionary for IPC."""
    if isinstance(command, Close):
        return {"op": "Z"}
    op = "M" if isinstance(command, MoveTo) else "L"
    return {"op": op, "x": command.point.x, "y": command.point.y}


def command_from_dict(data: dict[str, Any]) -> PathCommand:
    """Deserialize a command produced by command_to_dict."""
    op = data["op"]
    if op == "Z":
        return Close()
    point = Point(data["x"], data["y"])
    if op == "M":
        return MoveTo(point)
    if op == "L":
        return LineTo(point)
    raise ValueError(f"Unknown path command '{op}'")
