"""Pipeline orchestration from raster image to vector layers.

This module sequences the full conversion:
1. Validate inputs
2. Resize to the working resolution
3. Optionally remove a near-white background
4. Convert to grayscale
5. Quantize into layer masks
6. Clean every mask (island removal, then edge smoothing)
7. Trace, simplify and scale every mask into a VectorLayer, adding bridges
8. Run health checks

Masks are independent after quantization, so per-layer work can run in
a process pool. With one worker everything runs in-process and the
caller's yield hook reaches every pixel loop.

Key components:
- process_layer: Top-level picklable function for parallel execution
- LayerPipeline: Main orchestrator class
"""

import time
import traceback
from collections.abc import Callable
from concurrent.futures import ProcessPoolExecutor, as_completed
from dataclasses import dataclass, field
from typing import Any

import structlog

from layerizer.config import LayerizerSettings, ProjectSettings
from layerizer.core.bridge import BridgeGenerator
from layerizer.core.cleanup import remove_islands, smooth_edges
from layerizer.core.geometry import polylines_bounding_box
from layerizer.core.health import perform_health_checks
from layerizer.core.preprocess import remove_background, resize_to_max, to_grayscale
from layerizer.core.quantizer import quantize
from layerizer.core.simplify import simplify
from layerizer.core.vectorizer import vectorize
from layerizer.domain import (
    Bridge,
    HealthCheck,
    LayerMask,
    LayerStats,
    PathCommand,
    RasterImage,
    VectorLayer,
    polyline_to_commands,
)
from layerizer.exceptions import InvalidImageError, InvalidSettingsError, ProcessingError
from layerizer.utils import ProcessingLogger, ProcessingStats, YieldHook


@dataclass(frozen=True)
class PipelineProgress:
    """A progress report.

    Attributes:
        stage: Stage name (load, background, grayscale, quantize,
            cleanup, vectorize, health, complete)
        progress: Overall completion, 0-100
        message: Human-readable description
    """

    stage: str
    progress: float
    message: str


ProgressCallback = Callable[[PipelineProgress], None]


@dataclass
class PipelineResult:
    """Everything a pipeline run produces.

    Attributes:
        masks: Cleaned layer masks, bottom first
        layers: Vector layers, bottom first
        health_checks: Advisory findings
        working_width: Working raster width in pixels
        working_height: Working raster height in pixels
        target_width_mm: Physical width the layers are scaled to
        stats: Run statistics
    """

    masks: list[LayerMask]
    layers: list[VectorLayer]
    health_checks: list[HealthCheck]
    working_width: int
    working_height: int
    target_width_mm: float
    stats: ProcessingStats = field(default_factory=ProcessingStats)

    @property
    def height_mm(self) -> float:
        """Physical height, keeping the working raster's aspect ratio."""
        return self.target_width_mm * self.working_height / self.working_width

    @property
    def total_paths(self) -> int:
        return sum(layer.stats.path_count for layer in self.layers)


def validate_inputs(image: Any, settings: ProjectSettings) -> None:
    """Reject inputs that cannot drive a run.

    The snapshot is re-checked because ``model_construct`` bypasses
    pydantic validation.

    Raises:
        InvalidImageError: If image is not a usable RasterImage
        InvalidSettingsError: If a setting is out of range
    """
    if not isinstance(image, RasterImage):
        raise InvalidImageError(f"expected RasterImage, got {type(image).__name__}")
    if image.width <= 0 or image.height <= 0:
        raise InvalidImageError("image is empty")
    if settings.layer_count < 1:
        raise InvalidSettingsError("layer_count", f"must be at least 1, got {settings.layer_count}")
    if settings.target_width_mm <= 0:
        raise InvalidSettingsError(
            "target_width_mm", f"must be positive, got {settings.target_width_mm}"
        )
    if settings.max_working_size < 1:
        raise InvalidSettingsError(
            "max_working_size", f"must be positive, got {settings.max_working_size}"
        )


def clean_mask(mask: LayerMask, settings: ProjectSettings, on_yield: YieldHook | None = None) -> LayerMask:
    """Apply island removal, then edge smoothing, as configured."""
    if settings.min_island_area_mm2 > 0:
        mask = remove_islands(mask, settings.min_island_area_mm2, settings.target_width_mm, on_yield)
    if settings.smooth_edges_strength > 0:
        mask = smooth_edges(mask, settings.smooth_edges_strength, on_yield)
    return mask


def build_vector_layer(
    mask: LayerMask,
    settings: ProjectSettings,
    on_yield: YieldHook | None = None,
) -> tuple[VectorLayer, list[Bridge]]:
    """Trace a cleaned mask into a millimetre-scaled vector layer.

    Contour paths come first, followed by one closed rectangle per
    bridge when auto bridges are enabled.

    Args:
        mask: Cleaned layer mask
        settings: Project settings
        on_yield: Cooperative yield hook

    Returns:
        Tuple of (vector layer, bridges in pixel coordinates)
    """
    scale = settings.target_width_mm / mask.width

    # Closure is decided on the pixel-unit polyline; scaling keeps it.
    contours = [
        simplify(polyline, settings.simplify_tolerance).scaled(scale)
        for polyline in vectorize(mask, on_yield)
    ]

    commands: list[PathCommand] = []
    for contour in contours:
        commands.extend(polyline_to_commands(contour))

    bridges: list[Bridge] = []
    if settings.auto_bridges:
        generator = BridgeGenerator(settings, mask.width)
        bridges = generator.bridges_for_mask(mask, on_yield)
        for polyline in generator.bridge_polylines(bridges):
            commands.extend(polyline_to_commands(polyline.scaled(scale)))

    stats = LayerStats(
        path_count=len(contours),
        open_path_count=sum(1 for contour in contours if not contour.is_closed),
        island_count=len(contours),
        bounding_box=polylines_bounding_box(contours),
        bridge_count=len(bridges),
    )

    layer = VectorLayer(
        order=mask.order,
        name=mask.name,
        color=mask.color,
        threshold=mask.threshold,
        visible=mask.visible,
        path=tuple(commands),
        stats=stats,
    )
    return layer, bridges


def process_layer(mask_dict: dict[str, Any], settings_dict: dict[str, Any]) -> dict[str, Any]:
    """Clean and vectorize a single layer.

    Top-level function designed to be picklable for use with ProcessPoolExecutor.

    Args:
        mask_dict: Serialized mask (from LayerMask.to_dict())
        settings_dict: Serialized project settings

    Returns:
        Dictionary containing either:
        - Success: {"mask": dict, "layer": dict, "bridges": int, "duration_ms": float}
        - Error: {"error": str, "order": int, "traceback": str, "duration_ms": float}
    """
    start_time = time.time()

    try:
        mask = LayerMask.from_dict(mask_dict)
        settings = ProjectSettings(**settings_dict)

        cleaned = clean_mask(mask, settings)
        layer, bridges = build_vector_layer(cleaned, settings)

        duration_ms = (time.time() - start_time) * 1000
        return {
            "mask": cleaned.to_dict(),
            "layer": layer.to_dict(),
            "bridges": len(bridges),
            "duration_ms": duration_ms,
        }

    except Exception as e:
        duration_ms = (time.time() - start_time) * 1000
        return {
            "error": str(e),
            "order": mask_dict.get("order", -1),
            "traceback": traceback.format_exc(),
            "duration_ms": duration_ms,
        }


class LayerPipeline:
    """Orchestrates image-to-layers conversion.

    Example:
        pipeline = LayerPipeline(LayerizerSettings())
        result = pipeline.process(image)
        for layer in result.layers:
            print(layer.name, layer.stats.path_count)
    """

    def __init__(
        self,
        config: LayerizerSettings,
        logger: structlog.stdlib.BoundLogger | None = None,
    ) -> None:
        """Initialize the pipeline.

        Args:
            config: Application settings; ``config.project`` is the run snapshot
            logger: Bound logger (the "layerizer" logger if None)
        """
        self.config = config
        self.logger = logger if logger is not None else structlog.get_logger("layerizer")
        self.processing_logger = ProcessingLogger(self.logger)

    def _report(
        self,
        callback: ProgressCallback | None,
        stage: str,
        progress: float,
        message: str,
    ) -> None:
        self.processing_logger.log_stage(stage, progress, message)
        if callback is not None:
            callback(PipelineProgress(stage=stage, progress=progress, message=message))

    def prepare(self, image: RasterImage, progress_callback: ProgressCallback | None = None) -> RasterImage:
        """Resize, strip background and convert to grayscale.

        Args:
            image: Decoded source image
            progress_callback: Optional progress receiver

        Returns:
            Grayscale working image
        """
        settings = self.config.project

        self._report(progress_callback, "load", 10, "Loading image...")
        working = resize_to_max(image, settings.max_working_size)

        self._report(progress_callback, "background", 20, "Processing background...")
        if settings.remove_background:
            working = remove_background(
                working, settings.background_tolerance, settings.background_softness
            )

        self._report(progress_callback, "grayscale", 30, "Converting to grayscale...")
        return to_grayscale(working)

    def process(
        self,
        image: RasterImage,
        progress_callback: ProgressCallback | None = None,
        on_yield: YieldHook | None = None,
    ) -> PipelineResult:
        """Convert an image into vector layers.

        Args:
            image: Decoded RGBA source image
            progress_callback: Optional progress receiver
            on_yield: Cooperative yield hook forwarded to pixel loops
                (in-process runs only)

        Returns:
            PipelineResult with masks, layers, health checks and stats

        Raises:
            InvalidImageError: If the image is unusable
            InvalidSettingsError: If the settings are out of range
            ProcessingError: If a worker process fails on a layer
        """
        settings = self.config.project
        validate_inputs(image, settings)

        stats = self.processing_logger.stats
        stats.start_time = time.time()
        stats.layer_count = settings.layer_count

        self.logger.info(
            "Starting pipeline",
            width=image.width,
            height=image.height,
            layers=settings.layer_count,
            method=settings.quantize_method.value,
            max_workers=self.config.processing.max_workers,
        )

        grayscale = self.prepare(image, progress_callback)

        self._report(
            progress_callback,
            "quantize",
            40,
            f"Quantizing into {settings.layer_count} layers...",
        )
        masks = quantize(grayscale, settings.layer_count, settings.quantize_method)

        if self.config.processing.max_workers == 1:
            cleaned, layers = self._process_sequential(masks, progress_callback, on_yield)
        else:
            cleaned, layers = self._process_parallel(masks, progress_callback, on_yield)

        self._report(progress_callback, "health", 97, "Running health checks...")
        checks = perform_health_checks(layers, self.config.health)

        stats.end_time = time.time()
        self._report(progress_callback, "complete", 100, "Processing complete!")

        self.logger.info(
            "Pipeline complete",
            layers=len(layers),
            paths=stats.path_count,
            empty_layers=stats.empty_count,
            bridges=stats.bridges_added,
            findings=len(checks),
            duration_seconds=round(stats.duration_seconds, 2),
        )

        return PipelineResult(
            masks=cleaned,
            layers=layers,
            health_checks=checks,
            working_width=grayscale.width,
            working_height=grayscale.height,
            target_width_mm=settings.target_width_mm,
            stats=stats,
        )

    def _process_sequential(
        self,
        masks: list[LayerMask],
        progress_callback: ProgressCallback | None,
        on_yield: YieldHook | None,
    ) -> tuple[list[LayerMask], list[VectorLayer]]:
        """Clean, then vectorize, every mask in this process."""
        settings = self.config.project
        total = len(masks)

        self._report(progress_callback, "cleanup", 50, "Cleaning up layers...")
        cleaned: list[LayerMask] = []
        for i, mask in enumerate(masks):
            result = clean_mask(mask, settings, on_yield)
            self.processing_logger.log_cleanup(mask.order, mask.area, result.area)
            cleaned.append(result)
            self._report(
                progress_callback,
                "cleanup",
                50 + ((i + 1) / total) * 20,
                f"Cleaning layer {i + 1}/{total}...",
            )

        self._report(progress_callback, "vectorize", 70, "Vectorizing layers...")
        layers: list[VectorLayer] = []
        for i, mask in enumerate(cleaned):
            start_time = time.time()
            layer, bridges = build_vector_layer(mask, settings, on_yield)
            duration_ms = (time.time() - start_time) * 1000

            for bridge in bridges:
                self.processing_logger.log_bridge_placement(
                    mask.order, bridge.island_id, bridge.length, bridge.angle
                )
            self.processing_logger.log_layer_complete(
                order=mask.order,
                path_count=layer.stats.path_count,
                bridges_added=len(bridges),
                duration_ms=duration_ms,
            )
            layers.append(layer)
            self._report(
                progress_callback,
                "vectorize",
                70 + ((i + 1) / total) * 25,
                f"Vectorizing layer {i + 1}/{total}...",
            )

        return cleaned, layers

    def _process_parallel(
        self,
        masks: list[LayerMask],
        progress_callback: ProgressCallback | None,
        on_yield: YieldHook | None,
    ) -> tuple[list[LayerMask], list[VectorLayer]]:
        """Clean and vectorize masks in worker processes.

        Raises:
            ProcessingError: If any layer fails
        """
        max_workers = self.config.processing.max_workers
        settings_dict = self.config.project.model_dump()
        total = len(masks)

        self.logger.info("Starting parallel processing", layer_count=total, max_workers=max_workers)
        self._report(progress_callback, "cleanup", 50, "Processing layers in parallel...")

        cleaned: dict[int, LayerMask] = {}
        layers: dict[int, VectorLayer] = {}
        failures: list[tuple[int, str]] = []
        completed = 0

        with ProcessPoolExecutor(max_workers=max_workers) as executor:
            pending = {
                executor.submit(process_layer, mask.to_dict(), settings_dict): mask.order
                for mask in masks
            }

            for future in as_completed(pending):
                order = pending[future]

                try:
                    result = future.result()
                except Exception as e:
                    self.processing_logger.log_layer_error(order, e, traceback.format_exc())
                    failures.append((order, str(e)))
                else:
                    if "error" in result:
                        self.processing_logger.log_layer_error(
                            order, Exception(result["error"]), result.get("traceback")
                        )
                        failures.append((order, result["error"]))
                    else:
                        layer = VectorLayer.from_dict(result["layer"])
                        cleaned[order] = LayerMask.from_dict(result["mask"])
                        layers[order] = layer
                        self.processing_logger.log_layer_complete(
                            order=order,
                            path_count=layer.stats.path_count,
                            bridges_added=result["bridges"],
                            duration_ms=result.get("duration_ms", 0.0),
                        )

                completed += 1
                if on_yield is not None:
                    on_yield()
                self._report(
                    progress_callback,
                    "vectorize",
                    50 + (completed / total) * 45,
                    f"Processed layer {completed}/{total}...",
                )

        if failures:
            order, reason = min(failures)
            raise ProcessingError(order, reason)

        orders = sorted(layers)
        return [cleaned[o] for o in orders], [layers[o] for o in orders]
