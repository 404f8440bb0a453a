"""Image and SVG I/O layer for layerizer.

This module handles decoding raster files with Pillow and writing vector
layers as SVG. It keeps file formats out of the domain models and the
core algorithms.

Key responsibilities:
- Load any Pillow-readable image as RGBA
- Render layer paths as SVG path data
- Write per-layer and combined SVG files plus a settings.json project record

Key classes:
- ImageReader: Load images into RasterImage
- SvgWriter: Save vector layers
"""

from layerizer.io.reader import ImageReader, raster_from_pil, raster_to_pil
from layerizer.io.writer import SvgWriter, format_path_data, sanitize

__all__ = [
    "ImageReader",
    "SvgWriter",
    "format_path_data",
    "raster_from_pil",
    "raster_to_pil",
    "sanitize",
]
