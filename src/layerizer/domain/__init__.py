"""Domain models for layerizer.

This module contains the core domain models representing rasters, masks,
vector geometry, layers, islands and bridges. All models are designed to be:

- Immutable where possible (using frozen dataclasses, read-only pixel buffers)
- Serializable for inter-process communication (parallel layer processing)
- Independent of Pillow and of any markup format

Key classes:
- RasterImage: RGBA pixel grid
- LayerMask: Binary material coverage for one layer
- Point, Polyline: Traced vector geometry
- MoveTo, LineTo, Close: Typed path commands
- VectorLayer, LayerStats: Per-layer output
- Island, Bridge: Floating region detection and connectors
- HealthCheck: Advisory manufacturability finding
"""

from layerizer.domain.bridge import Bridge, Island
from layerizer.domain.layer import HealthCheck, LayerStats, Severity, VectorLayer
from layerizer.domain.path import (
    BoundingBox,
    Close,
    LineTo,
    MoveTo,
    PathCommand,
    Point,
    Polyline,
    command_points,
    polyline_to_commands,
)
from layerizer.domain.raster import FILLED_ALPHA, LayerMask, Pixel, RasterImage, filled_to_raster

__all__: list[str] = [
    # Enums
    "Severity",
    # Raster types
    "FILLED_ALPHA",
    "LayerMask",
    "Pixel",
    "RasterImage",
    "filled_to_raster",
    # Vector types
    "BoundingBox",
    "Close",
    "LineTo",
    "MoveTo",
    "PathCommand",
    "Point",
    "Polyline",
    "command_points",
    "polyline_to_commands",
    # Layer types
    "HealthCheck",
    "LayerStats",
    "VectorLayer",
    # Bridge types
    "Bridge",
    "Island",
]
