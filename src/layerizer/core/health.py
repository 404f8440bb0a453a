"""Manufacturability checks over finished vector layers.

Checks are independent and advisory: they report, they never block.
"""

from layerizer.config import HealthCheckConfig
from layerizer.domain import HealthCheck, Severity, VectorLayer


def perform_health_checks(
    layers: list[VectorLayer],
    config: HealthCheckConfig | None = None,
) -> list[HealthCheck]:
    """Inspect layers for issues that could spoil a cut.

    Emits a warning per layer with open paths, per layer with too many
    separate regions and per non-empty layer that is too small, plus an
    error when no layer has any path. When nothing is found, a single
    informational entry reports that all checks passed.

    Args:
        layers: Finished vector layers
        config: Thresholds (defaults if None)

    Returns:
        Findings, warnings first in layer order, then the error if any
    """
    config = config or HealthCheckConfig()
    checks: list[HealthCheck] = []

    for layer in layers:
        if layer.stats.open_path_count > 0:
            checks.append(
                HealthCheck(
                    severity=Severity.WARNING,
                    message=f"{layer.name} has {layer.stats.open_path_count} open paths",
                    details="Open paths may not cut correctly. Consider increasing simplify tolerance.",
                )
            )

    for layer in layers:
        if layer.stats.island_count > config.max_islands_per_layer:
            checks.append(
                HealthCheck(
                    severity=Severity.WARNING,
                    message=f"{layer.name} has {layer.stats.island_count} separate regions",
                    details="Too many separate regions. Consider increasing min island area.",
                )
            )

    for layer in layers:
        bbox = layer.stats.bounding_box
        if bbox is None:
            continue
        if bbox.width < config.min_layer_size_mm or bbox.height < config.min_layer_size_mm:
            checks.append(
                HealthCheck(
                    severity=Severity.WARNING,
                    message=f"{layer.name} is very small ({bbox.width:.1f}x{bbox.height:.1f}mm)",
                    details="Layer may be too small to cut accurately.",
                )
            )

    total_paths = sum(layer.stats.path_count for layer in layers)
    if total_paths == 0:
        checks.append(
            HealthCheck(
                severity=Severity.ERROR,
                message="No paths generated",
                details="All layers are empty. Try adjusting quantization settings.",
            )
        )

    if not checks:
        checks.append(
            HealthCheck(
                severity=Severity.INFO,
                message="All health checks passed",
                details="Project is ready for export.",
            )
        )

    return checks


def has_errors(checks: list[HealthCheck]) -> bool:
    """Check whether any finding is an error."""
    return any(check.severity == Severity.ERROR for check in checks)
