"""Configuration management for layerizer.

This module provides configuration management using Pydantic models.
Configuration can be provided via CLI arguments, presets or defaults.

Key classes:
- ProjectSettings: Frozen per-run settings snapshot
- HealthCheckConfig: Manufacturability check thresholds
- ProcessingConfig: Pipeline execution settings
- LoggingConfig: Logging settings
- LayerizerSettings: Main application settings
"""

from layerizer.config.settings import (
    MODE_PRESETS,
    HealthCheckConfig,
    LayerizerSettings,
    LoggingConfig,
    Mode,
    OutputFormat,
    ProcessingConfig,
    ProjectSettings,
    QuantizeMethod,
    get_default_settings,
    preset_settings,
)

__all__ = [
    "MODE_PRESETS",
    "HealthCheckConfig",
    "LayerizerSettings",
    "LoggingConfig",
    "Mode",
    "OutputFormat",
    "ProcessingConfig",
    "ProjectSettings",
    "QuantizeMethod",
    "get_default_settings",
    "preset_settings",
]
