"""Core processing algorithms for layerizer.

This module contains the core algorithms for:

- Preprocessing (resize, background removal, grayscale)
- Tone quantization (posterize, 1-D k-means)
- Mask cleanup (island removal, morphological closing)
- Vectorization (marching squares, segment stitching)
- Polyline simplification (Ramer-Douglas-Peucker)
- Bridge placement for floating regions
- Manufacturability health checks

Pixel-heavy stages accept an optional ``on_yield`` hook so callers can
interleave other work.

Key functions:
- quantize: Split a grayscale image into layer masks
- remove_islands / smooth_edges: Mask cleanup
- vectorize: Trace a mask into polylines
- simplify: Reduce polyline point count within a tolerance
- perform_health_checks: Inspect finished layers

Key classes:
- BridgeGenerator: Places bridges from project settings
- LayerPipeline: Orchestrates a full run
"""

from layerizer.core.bridge import BridgeGenerator, detect_islands, generate_bridges
from layerizer.core.cleanup import min_area_pixels, remove_islands, smooth_edges
from layerizer.core.geometry import nearest_pixel, perpendicular_distance, polylines_bounding_box
from layerizer.core.health import has_errors, perform_health_checks
from layerizer.core.preprocess import luminance, remove_background, resize_to_max, to_grayscale
from layerizer.core.processor import (
    LayerPipeline,
    PipelineProgress,
    PipelineResult,
    build_vector_layer,
    clean_mask,
    process_layer,
    validate_inputs,
)
from layerizer.core.quantizer import kmeans_centroids, layer_color, quantize
from layerizer.core.simplify import simplify, simplify_to_commands
from layerizer.core.vectorizer import trace_filled, vectorize

__all__ = [
    # Bridge
    "BridgeGenerator",
    "detect_islands",
    "generate_bridges",
    # Cleanup
    "min_area_pixels",
    "remove_islands",
    "smooth_edges",
    # Geometry
    "nearest_pixel",
    "perpendicular_distance",
    "polylines_bounding_box",
    # Health
    "has_errors",
    "perform_health_checks",
    # Preprocessing
    "luminance",
    "remove_background",
    "resize_to_max",
    "to_grayscale",
    # Processor
    "LayerPipeline",
    "PipelineProgress",
    "PipelineResult",
    "build_vector_layer",
    "clean_mask",
    "process_layer",
    "validate_inputs",
    # Quantization
    "kmeans_centroids",
    "layer_color",
    "quantize",
    # Simplification
    "simplify",
    "simplify_to_commands",
    # Vectorization
    "trace_filled",
    "vectorize",
]
