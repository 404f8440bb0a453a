"""Rich console output helpers for the CLI.

This module provides user-friendly console output using Rich library
with progress bars, tables, and formatted messages.
"""

from collections.abc import Sequence
from pathlib import Path

from rich.console import Console
from rich.progress import (
    BarColumn,
    Progress,
    TaskProgressColumn,
    TextColumn,
    TimeElapsedColumn,
)
from rich.table import Table
from rich.text import Text

from layerizer.config import ProjectSettings
from layerizer.domain import HealthCheck, Severity, VectorLayer

console = Console()

# Unicode symbols for consistent visual language
SYM_STEP = "▸"  # Step indicator
SYM_OK = "✓"  # Success
SYM_ERR = "✗"  # Error
SYM_WARN = "!"  # Warning
SYM_DOT = "·"  # Separator/secondary info

_SEVERITY_STYLE = {
    Severity.ERROR: ("red", SYM_ERR),
    Severity.WARNING: ("yellow", SYM_WARN),
    Severity.INFO: ("green", SYM_OK),
}


def create_progress() -> Progress:
    """Create a rich progress bar for pipeline stages.

    Returns:
        Configured Progress instance with stage text, bar and time elapsed.
    """
    return Progress(
        TextColumn("  "),
        BarColumn(bar_width=40, complete_style="green", finished_style="green"),
        TaskProgressColumn(),
        TimeElapsedColumn(),
        TextColumn("{task.description}"),
        console=console,
        transient=False,
    )


def print_header(version: str) -> None:
    """Print application header.

    Args:
        version: Application version string
    """
    console.print(f"\n[bold]Layerizer[/bold] v{version}")
    console.print("─" * 44)


def print_step(message: str) -> None:
    """Print a processing step indicator."""
    console.print(f"\n{SYM_STEP} {message}")


def print_image_info(image_path: str, image_format: str, width: int, height: int) -> None:
    """Print source image information.

    Args:
        image_path: Path to the image file
        image_format: Decoded format (e.g. "PNG")
        width: Width in pixels
        height: Height in pixels
    """
    # Use Text to safely handle paths with special characters
    line = Text("  ")
    line.append(image_path)
    line.append(f" ({image_format})")
    console.print(line)
    console.print(f"  {width:,} x {height:,} px")


def print_settings(settings: ProjectSettings, mode: str) -> None:
    """Print the settings snapshot driving the run."""
    bridges = f"bridges {settings.bridge_width_px:g}px" if settings.auto_bridges else "no bridges"
    console.print(
        f"  {mode} {SYM_DOT} {settings.layer_count} layers {SYM_DOT} "
        f"{settings.quantize_method.value} {SYM_DOT} {settings.target_width_mm:g}mm wide"
    )
    console.print(
        f"  min island {settings.min_island_area_mm2:g}mm² {SYM_DOT} "
        f"smooth {settings.smooth_edges_strength} {SYM_DOT} "
        f"simplify {settings.simplify_tolerance:g} {SYM_DOT} {bridges}"
    )


def print_layer_table(layers: Sequence[VectorLayer]) -> None:
    """Print per-layer statistics.

    Args:
        layers: Finished vector layers, bottom first
    """
    table = Table(box=None, padding=(0, 2), show_edge=False)
    table.add_column("Layer")
    table.add_column("Paths", justify="right")
    table.add_column("Open", justify="right")
    table.add_column("Bridges", justify="right")
    table.add_column("Size (mm)", justify="right")

    for layer in layers:
        stats = layer.stats
        bbox = stats.bounding_box
        size = f"{bbox.width:.1f} x {bbox.height:.1f}" if bbox else "empty"
        open_style = "yellow" if stats.open_path_count else "green"
        table.add_row(
            Text(layer.name, style=layer.color),
            str(stats.path_count),
            f"[{open_style}]{stats.open_path_count}[/{open_style}]",
            str(stats.bridge_count),
            size,
        )

    console.print(table)


def print_health_checks(checks: Sequence[HealthCheck], verbose: bool = False) -> None:
    """Print health check findings.

    Args:
        checks: Findings from the health check stage
        verbose: Whether to show remedy details
    """
    for check in checks:
        style, symbol = _SEVERITY_STYLE[check.severity]
        console.print(f"  [{style}]{symbol}[/{style}] {check.message}")
        if verbose and check.details:
            console.print(f"    [dim]{check.details}[/dim]")


def _format_time(seconds: float) -> str:
    """Format seconds into human-readable time string."""
    if seconds < 1:
        return f"{seconds * 1000:.0f}ms"
    elif seconds < 60:
        return f"{seconds:.1f}s"
    else:
        mins = int(seconds // 60)
        secs = seconds % 60
        return f"{mins}m {secs:.1f}s"


def print_processing_info(workers: int | None) -> None:
    """Print processing configuration.

    Args:
        workers: Worker processes (None for auto)
    """
    if workers == 1:
        console.print(f"  in-process {SYM_DOT} Ctrl+C to cancel")
    else:
        label = "auto" if workers is None else str(workers)
        console.print(f"  {label} workers {SYM_DOT} Ctrl+C to cancel")


def print_success(
    output_dir: str,
    files: Sequence[Path],
    total_time_s: float,
    layers: int,
    paths: int,
    bridges: int,
    avg_time_ms: float | None = None,
) -> None:
    """Print success message with summary.

    Args:
        output_dir: Directory the files were written to
        files: Written files
        total_time_s: Total processing time in seconds
        layers: Number of layers produced
        paths: Total contour paths
        bridges: Total bridges added
        avg_time_ms: Average vectorization time per layer in milliseconds
    """
    time_str = _format_time(total_time_s)

    console.print(f"\n[bold green]{SYM_OK} Complete[/bold green] in {time_str}")

    line = Text("  ")
    line.append(output_dir, style="bold")
    line.append(f" ({len(files)} files)")
    console.print(line)

    console.print(f"  {layers} layers {SYM_DOT} {paths} paths {SYM_DOT} {bridges} bridges")

    if avg_time_ms is not None:
        console.print(f"  {avg_time_ms:.1f}ms avg per layer")


def print_error(message: str, details: str | None = None) -> None:
    """Print error message.

    Args:
        message: Main error message
        details: Optional detailed error information
    """
    console.print(f"\n[bold red]{SYM_ERR} Error:[/bold red] {message}")
    if details:
        console.print(f"  {details}")


def print_cancellation_notice() -> None:
    """Print cancellation acknowledgment."""
    console.print(f"\n{SYM_DOT} [bold]Cancelled[/bold]")
    console.print("  No output files written")
