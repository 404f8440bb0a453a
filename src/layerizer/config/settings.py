"""Configuration settings for Layerizer."""

from enum import Enum
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class QuantizeMethod(str, Enum):
    """Tone quantization method."""

    POSTERIZE = "posterize"
    KMEANS = "kmeans"


class OutputFormat(str, Enum):
    """How layer paths are drawn in exported markup."""

    FILLED = "filled"
    STROKED = "stroked"


class Mode(str, Enum):
    """Named project presets."""

    SHADOWBOX = "shadowbox"
    POSTER = "poster"
    ORNAMENT = "ornament"
    MANDALA = "mandala"
    SIGN = "sign"
    CUSTOM = "custom"


class ProjectSettings(BaseModel):
    """Immutable settings snapshot for a single pipeline run.

    A new run takes a new snapshot; fields cannot be reassigned.
    Areas are in square millimetres of the finished piece, tolerances
    in working-resolution pixels.
    """

    model_config = ConfigDict(frozen=True)

    layer_count: int = Field(
        default=5,
        ge=1,
        le=64,
        description="Number of depth layers to split the image into",
    )
    quantize_method: QuantizeMethod = Field(
        default=QuantizeMethod.POSTERIZE,
        description="Tone quantization method",
    )
    remove_background: bool = Field(
        default=False,
        description="Make near-white pixels transparent before quantizing",
    )
    background_tolerance: int = Field(
        default=10,
        ge=0,
        le=255,
        description="How far below pure white a pixel may be and still count as background",
    )
    background_softness: float = Field(
        default=5.0,
        ge=0.0,
        description="Alpha ramp steepness for background removal",
    )
    max_working_size: int = Field(
        default=1200,
        ge=16,
        description="Longest side of the working raster in pixels",
    )
    min_island_area_mm2: float = Field(
        default=0.8,
        ge=0.0,
        description="Regions smaller than this are erased (0 disables)",
    )
    smooth_edges_strength: int = Field(
        default=5,
        ge=0,
        le=10,
        description="Morphological closing strength (0 disables)",
    )
    simplify_tolerance: float = Field(
        default=1.0,
        ge=0.0,
        le=5.0,
        description="Ramer-Douglas-Peucker tolerance in pixels",
    )
    auto_bridges: bool = Field(
        default=False,
        description="Connect floating regions to the main body with bridges",
    )
    bridge_width_px: float = Field(
        default=12.0,
        gt=0.0,
        description="Bridge thickness in working-resolution pixels",
    )
    target_width_mm: float = Field(
        default=200.0,
        gt=0.0,
        description="Physical width of the finished piece",
    )
    output_format: OutputFormat = Field(
        default=OutputFormat.FILLED,
        description="Filled or stroked paths in exported markup",
    )


class HealthCheckConfig(BaseModel):
    """Thresholds for manufacturability checks."""

    max_islands_per_layer: int = Field(
        default=100,
        ge=1,
        description="Layers with more separate regions than this are flagged",
    )
    min_layer_size_mm: float = Field(
        default=2.0,
        ge=0.0,
        description="Layers whose bounding box side is below this are flagged",
    )


class ProcessingConfig(BaseModel):
    """Configuration for pipeline execution."""

    max_workers: int | None = Field(
        default=1,
        ge=1,
        description="Worker processes for per-layer work (1 = in-process, None = auto)",
    )


class LoggingConfig(BaseModel):
    """Logging configuration."""

    log_file: Path | None = Field(
        default=None,
        description="Path to log file",
    )
    log_level: str = Field(
        default="WARNING",
        description="Console log level",
    )
    file_log_level: str = Field(
        default="DEBUG",
        description="File log level (more verbose)",
    )


class LayerizerSettings(BaseModel):
    """Main application settings."""

    project: ProjectSettings = Field(default_factory=ProjectSettings)
    health: HealthCheckConfig = Field(default_factory=HealthCheckConfig)
    processing: ProcessingConfig = Field(default_factory=ProcessingConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


# Per-mode defaults; anything not listed falls back to ProjectSettings defaults.
MODE_PRESETS: dict[Mode, dict[str, Any]] = {
    Mode.SHADOWBOX: {
        "layer_count": 7,
        "quantize_method": QuantizeMethod.POSTERIZE,
        "simplify_tolerance": 1.5,
        "auto_bridges": True,
    },
    Mode.POSTER: {
        "layer_count": 8,
        "quantize_method": QuantizeMethod.KMEANS,
        "simplify_tolerance": 1.0,
        "auto_bridges": False,
    },
    Mode.ORNAMENT: {
        "layer_count": 5,
        "quantize_method": QuantizeMethod.POSTERIZE,
        "simplify_tolerance": 0.8,
        "auto_bridges": True,
    },
    Mode.MANDALA: {
        "layer_count": 6,
        "quantize_method": QuantizeMethod.KMEANS,
        "simplify_tolerance": 0.5,
        "auto_bridges": True,
        "min_island_area_mm2": 0.0,
    },
    Mode.SIGN: {
        "layer_count": 4,
        "quantize_method": QuantizeMethod.POSTERIZE,
        "simplify_tolerance": 1.2,
        "auto_bridges": False,
    },
    Mode.CUSTOM: {},
}


def preset_settings(mode: Mode, **overrides: Any) -> ProjectSettings:
    """Build a settings snapshot from a preset.

    Args:
        mode: Preset to start from
        **overrides: Field values that replace the preset's

    Returns:
        Validated, frozen project settings
    """
    values = {**MODE_PRESETS[mode], **overrides}
    return ProjectSettings(**values)


def get_default_settings() -> LayerizerSettings:
    """Get default application settings."""
    return LayerizerSettings()
