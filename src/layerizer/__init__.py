"""Layerizer - Convert a raster image into stackable laser-cut vector layers.

Layerizer splits an image into tonal depth bands, cleans each band's binary
mask, traces it into closed vector contours, simplifies them and optionally
adds bridges that keep floating regions attached when cut from one sheet.

Example:
    $ layerizer portrait.png --layers 7 --bridges

This will write layer-01-layer-1.svg ... layer-07-layer-7.svg and
combined-all-layers.svg next to portrait.png.
"""

__version__ = "0.1.0"
__author__ = "Layerizer Contributors"

__all__ = ["__author__", "__version__"]
