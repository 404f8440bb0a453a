"""SVG writer for saving vector layers.

This module renders VectorLayers as SVG documents: one file per layer
for cutting and a combined file for previewing the stack. A project
file with the settings and per-layer statistics can be written beside
them. Paths are
already in millimetres, so the viewBox spans the physical size.
"""

import json
import re
from collections.abc import Iterable, Sequence
from datetime import datetime, timezone
from pathlib import Path
from typing import Any
from xml.sax.saxutils import escape

from layerizer.config import OutputFormat, ProjectSettings
from layerizer.domain import Close, LineTo, MoveTo, PathCommand, VectorLayer
from layerizer.exceptions import ExportWriteError

COMBINED_FILENAME = "combined-all-layers.svg"
COMBINED_OPACITY = 0.8
SETTINGS_FILENAME = "settings.json"
SETTINGS_FORMAT_VERSION = "3.0"
STROKE_WIDTH = 0.1


def sanitize(name: str) -> str:
    """Lowercase a name and reduce it to dash-separated alphanumerics.

    Examples:
        >>> sanitize("Layer 1")
        'layer-1'
        >>> sanitize("  Top / Front!  ")
        'top-front'
    """
    return re.sub(r"[^a-z0-9]+", "-", name.lower()).strip("-")


def _fmt(value: float) -> str:
    return f"{value:.2f}"


def format_path_data(commands: Iterable[PathCommand]) -> str:
    """Render drawing commands as SVG path data.

    Args:
        commands: MoveTo/LineTo/Close commands

    Returns:
        Path data such as ``M 0.00 0.00 L 1.00 0.00 L 1.00 1.00 Z``
    """
    parts: list[str] = []
    for command in commands:
        if isinstance(command, MoveTo):
            parts.append(f"M {_fmt(command.point.x)} {_fmt(command.point.y)}")
        elif isinstance(command, LineTo):
            parts.append(f"L {_fmt(command.point.x)} {_fmt(command.point.y)}")
        elif isinstance(command, Close):
            parts.append("Z")
    return " ".join(parts)


def _paint(output_format: OutputFormat, color: str) -> str:
    if output_format == OutputFormat.FILLED:
        return f'fill="{color}" fill-rule="evenodd"'
    return f'fill="none" stroke="{color}" stroke-width="{STROKE_WIDTH}"'


def _svg_open(width_mm: float, height_mm: float) -> str:
    return (
        '<?xml version="1.0" encoding="UTF-8"?>\n'
        f'<svg width="{_fmt(width_mm)}mm" height="{_fmt(height_mm)}mm" '
        f'viewBox="0 0 {_fmt(width_mm)} {_fmt(height_mm)}" '
        'xmlns="http://www.w3.org/2000/svg">\n'
    )


class SvgWriter:
    """Writes vector layers as SVG files.

    Example:
        writer = SvgWriter(Path("out"))
        paths = writer.write(result.layers, result.target_width_mm, result.height_mm)
    """

    def __init__(self, output_dir: Path, output_format: OutputFormat = OutputFormat.FILLED) -> None:
        """Initialize the SVG writer.

        Args:
            output_dir: Directory for the SVG files (created on write)
            output_format: Filled or stroked paths
        """
        self._output_dir = output_dir
        self._output_format = output_format

    @property
    def output_dir(self) -> Path:
        return self._output_dir

    def layer_svg(self, layer: VectorLayer, width_mm: float, height_mm: float) -> str:
        """Render a single layer for cutting, always in black."""
        return (
            _svg_open(width_mm, height_mm)
            + f"  <title>{escape(layer.name)}</title>\n"
            + f'  <g id="{sanitize(layer.name)}">\n'
            + f'    <path d="{format_path_data(layer.path)}" {_paint(self._output_format, "black")} />\n'
            + "  </g>\n"
            + "</svg>\n"
        )

    def combined_svg(self, layers: Sequence[VectorLayer], width_mm: float, height_mm: float) -> str:
        """Render all visible layers stacked bottom first in their colours."""
        svg = _svg_open(width_mm, height_mm) + "  <title>Combined Layers</title>\n"
        visible = [layer for layer in layers if layer.visible]
        for layer in sorted(visible, key=lambda item: item.order):
            svg += (
                f'  <g id="{sanitize(layer.name)}" opacity="{COMBINED_OPACITY}">\n'
                f'    <path d="{format_path_data(layer.path)}" {_paint(self._output_format, layer.color)} />\n'
                "  </g>\n"
            )
        return svg + "</svg>\n"

    @staticmethod
    def get_output_dir(input_path: Path) -> Path:
        """Default output directory beside the source image.

        Converts: photo.png -> photo-layers/
        """
        return input_path.parent / f"{input_path.stem}-layers"

    @staticmethod
    def layer_filename(index: int, layer: VectorLayer) -> str:
        """File name for the layer at a 0-based position, e.g. ``layer-01-layer-1.svg``."""
        return f"layer-{index + 1:02d}-{sanitize(layer.name)}.svg"

    def project_settings(
        self, layers: Sequence[VectorLayer], settings: ProjectSettings
    ) -> dict[str, Any]:
        """Build the project record saved as ``settings.json``.

        Args:
            layers: Vector layers, bottom first
            settings: Settings the layers were produced with

        Returns:
            JSON-ready dict with format version, UTC timestamp, settings
            and per-layer name, order, threshold and statistics
        """
        return {
            "version": SETTINGS_FORMAT_VERSION,
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "settings": settings.model_dump(mode="json"),
            "layers": [
                {
                    "name": layer.name,
                    "order": layer.order,
                    "threshold": layer.threshold,
                    "stats": layer.stats.to_dict(),
                }
                for layer in layers
            ],
        }

    def write(
        self,
        layers: Sequence[VectorLayer],
        width_mm: float,
        height_mm: float,
        settings: ProjectSettings | None = None,
    ) -> list[Path]:
        """Write every layer file and the combined file.

        Args:
            layers: Vector layers, bottom first
            width_mm: Physical width
            height_mm: Physical height
            settings: When given, also write ``settings.json``

        Returns:
            Written paths: layer files, the combined file, then the
            settings file if written

        Raises:
            ExportWriteError: If the directory or a file cannot be written
        """
        try:
            self._output_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise ExportWriteError(str(self._output_dir), str(e)) from e

        documents = [
            (self.layer_filename(i, layer), self.layer_svg(layer, width_mm, height_mm))
            for i, layer in enumerate(layers)
        ]
        documents.append((COMBINED_FILENAME, self.combined_svg(layers, width_mm, height_mm)))
        if settings is not None:
            record = self.project_settings(layers, settings)
            documents.append((SETTINGS_FILENAME, json.dumps(record, indent=2) + "\n"))

        written: list[Path] = []
        for filename, content in documents:
            path = self._output_dir / filename
            try:
                path.write_text(content, encoding="utf-8")
            except OSError as e:
                raise ExportWriteError(str(path), str(e)) from e
            written.append(path)

        return written
