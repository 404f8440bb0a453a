"""Vector layer and health check models.

This module defines the output of a pipeline run: one VectorLayer per
depth band, each with its drawing commands and statistics, plus the
advisory HealthCheck findings computed over all layers.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any

from layerizer.domain.path import BoundingBox, PathCommand, command_from_dict, command_to_dict


class Severity(str, Enum):
    """Health check severity."""

    ERROR = "error"
    WARNING = "warning"
    INFO = "info"


@dataclass(frozen=True)
class HealthCheck:
    """An advisory manufacturability finding.

    Attributes:
        severity: error, warning or info
        message: One-line summary
        details: Suggested remedy or context
    """

    severity: Severity
    message: str
    details: str = ""

    def to_dict(self) -> dict[str, str]:
        return {"severity": self.severity.value, "message": self.message, "details": self.details}


@dataclass(frozen=True)
class LayerStats:
    """Statistics of a vector layer's contour paths.

    Bridge rectangles are counted separately and do not contribute to
    the contour counts or the bounding box.

    Attributes:
        path_count: Number of contour paths
        open_path_count: Contour paths not ending in a close command
        island_count: Separately cut regions
        bounding_box: Extent in millimetres (None for an empty layer)
        bridge_count: Bridge rectangles appended to the path
    """

    path_count: int = 0
    open_path_count: int = 0
    island_count: int = 0
    bounding_box: BoundingBox | None = None
    bridge_count: int = 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "path_count": self.path_count,
            "open_path_count": self.open_path_count,
            "island_count": self.island_count,
            "bounding_box": self.bounding_box.to_dict() if self.bounding_box else None,
            "bridge_count": self.bridge_count,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "LayerStats":
        bbox = data.get("bounding_box")
        return cls(
            path_count=data["path_count"],
            open_path_count=data["open_path_count"],
            island_count=data["island_count"],
            bounding_box=BoundingBox.from_dict(bbox) if bbox else None,
            bridge_count=data.get("bridge_count", 0),
        )


@dataclass(frozen=True)
class VectorLayer:
    """Cut-ready vector geometry for one depth layer.

    Attributes:
        order: Stacking index, 0 is the bottom layer
        name: Display name
        color: Preview colour as ``#rrggbb``
        threshold: Quantization boundary of the source mask
        visible: Whether the layer is shown in previews
        path: Drawing commands in millimetres, contours then bridges
        stats: Contour statistics
    """

    order: int
    name: str
    color: str
    threshold: float
    path: tuple[PathCommand, ...]
    stats: LayerStats
    visible: bool = True

    def is_empty(self) -> bool:
        return not self.path

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary for IPC."""
        return {
            "order": self.order,
            "name": self.name,
            "color": self.color,
            "threshold": self.threshold,
            "visible": self.visible,
            "path": [command_to_dict(c) for c in self.path],
            "stats": self.stats.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "VectorLayer":
        """Deserialize from dictionary."""
        return cls(
            order=data["order"],
            name=data["name"],
            color=data["color"],
            threshold=data["threshold"],
            visible=data["visible"],
            path=tuple(command_from_dict(c) for c in data["path"]),
            stats=LayerStats.from_dict(data["stats"]),
        )
