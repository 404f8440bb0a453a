"""CLI application entry point for layerizer.

This module provides the main CLI interface using Typer.
"""

from pathlib import Path
from typing import Annotated, Any

import typer
from pydantic import ValidationError

from layerizer import __version__
from layerizer.cli.output import (
    SYM_OK,
    console,
    create_progress,
    print_cancellation_notice,
    print_error,
    print_header,
    print_health_checks,
    print_image_info,
    print_layer_table,
    print_processing_info,
    print_settings,
    print_step,
    print_success,
)
from layerizer.config import (
    LayerizerSettings,
    LoggingConfig,
    Mode,
    OutputFormat,
    ProcessingConfig,
    QuantizeMethod,
    preset_settings,
)
from layerizer.core import LayerPipeline, PipelineProgress, PipelineResult, has_errors
from layerizer.domain import RasterImage, Severity
from layerizer.exceptions import ExportError, ImageLoadError, InputError, LayerizerError
from layerizer.io import ImageReader, SvgWriter
from layerizer.utils import configure_logging

# Create the Typer app
app = typer.Typer(
    name="layerizer",
    help="Split an image into stacked, cut-ready vector layers.",
    add_completion=False,
    no_args_is_help=True,
)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        console.print(f"[bold blue]Layerizer[/bold blue] v{__version__}")
        raise typer.Exit()


def _parse_choice(enum_type: Any, value: str, option: str) -> Any:
    """Resolve a case-insensitive enum value or exit with a usage error."""
    try:
        return enum_type(value.lower())
    except ValueError:
        valid = ", ".join(member.value for member in enum_type)
        print_error(f"Invalid {option}: {value}", details=f"Valid values: {valid}")
        raise typer.Exit(code=1)


@app.command()
def layerize(
    input_image: Annotated[
        Path,
        typer.Argument(
            help="Path to input image (PNG, JPEG, WebP, ...)",
            show_default=False,
        ),
    ],
    output: Annotated[
        Path | None,
        typer.Option(
            "--output",
            "-o",
            help="Output directory (default: {name}-layers)",
        ),
    ] = None,
    mode: Annotated[
        str,
        typer.Option(
            "--mode",
            "-m",
            help="Preset (shadowbox|poster|ornament|mandala|sign|custom)",
        ),
    ] = "custom",
    layers: Annotated[
        int | None,
        typer.Option(
            "--layers",
            "-n",
            help="Number of layers (overrides the preset)",
            min=1,
            max=64,
        ),
    ] = None,
    method: Annotated[
        str | None,
        typer.Option(
            "--method",
            help="Quantization method (posterize|kmeans)",
        ),
    ] = None,
    min_island: Annotated[
        float | None,
        typer.Option(
            "--min-island",
            help="Minimum region area in mm² (0 keeps everything)",
            min=0.0,
        ),
    ] = None,
    smooth: Annotated[
        int | None,
        typer.Option(
            "--smooth",
            help="Edge smoothing strength (0-10)",
            min=0,
            max=10,
        ),
    ] = None,
    simplify: Annotated[
        float | None,
        typer.Option(
            "--simplify",
            help="Path simplification tolerance in pixels (0-5)",
            min=0.0,
            max=5.0,
        ),
    ] = None,
    bridges: Annotated[
        bool | None,
        typer.Option(
            "--bridges/--no-bridges",
            help="Connect floating regions with bridges (default: from preset)",
            show_default=False,
        ),
    ] = None,
    bridge_width: Annotated[
        float | None,
        typer.Option(
            "--bridge-width",
            help="Bridge width in working pixels",
            min=0.1,
        ),
    ] = None,
    width_mm: Annotated[
        float | None,
        typer.Option(
            "--width-mm",
            "-w",
            help="Physical width of the finished piece in mm",
            min=0.1,
        ),
    ] = None,
    output_format: Annotated[
        str | None,
        typer.Option(
            "--format",
            "-f",
            help="Path style in SVG output (filled|stroked)",
        ),
    ] = None,
    remove_bg: Annotated[
        bool,
        typer.Option(
            "--remove-bg",
            help="Make near-white background transparent",
        ),
    ] = False,
    bg_tolerance: Annotated[
        int | None,
        typer.Option(
            "--bg-tolerance",
            help="Background tolerance below pure white (0-255)",
            min=0,
            max=255,
        ),
    ] = None,
    bg_softness: Annotated[
        float | None,
        typer.Option(
            "--bg-softness",
            help="Background alpha ramp steepness",
            min=0.0,
        ),
    ] = None,
    workers: Annotated[
        int,
        typer.Option(
            "--workers",
            "-j",
            help="Worker processes for per-layer work (0 = auto, 1 = in-process)",
            min=0,
        ),
    ] = 1,
    dry_run: Annotated[
        bool,
        typer.Option(
            "--dry-run",
            help="Process and report without writing any files",
        ),
    ] = False,
    log_file: Annotated[
        Path | None,
        typer.Option(
            "--log-file",
            help="Write detailed logs to file",
        ),
    ] = None,
    log_level: Annotated[
        str,
        typer.Option(
            "--log-level",
            help="Logging level (DEBUG|INFO|WARNING|ERROR)",
        ),
    ] = "WARNING",
    verbose: Annotated[
        bool,
        typer.Option(
            "--verbose",
            "-v",
            help="Verbose console output",
        ),
    ] = False,
    quiet: Annotated[
        bool,
        typer.Option(
            "--quiet",
            "-q",
            help="Minimal console output",
        ),
    ] = False,
    _version: Annotated[  # noqa: ARG001
        bool | None,
        typer.Option(
            "--version",
            "-V",
            help="Show version and exit",
            callback=version_callback,
            is_eager=True,
        ),
    ] = None,
) -> None:
    """Split an image into stacked vector layers for laser cutting.

    The image is quantized into tonal bands, each band is cleaned up and
    traced, and every layer is written as its own SVG plus a combined
    preview.

    Example:
        layerizer portrait.jpg --mode shadowbox --width-mm 150

    This will create portrait-layers/ with layer-01-layer-1.svg through
    layer-07-layer-7.svg, combined-all-layers.svg and settings.json.
    """
    # Validate mutually exclusive options
    if verbose and quiet:
        print_error("Cannot use --verbose and --quiet together")
        raise typer.Exit(code=1)

    # Validate input file exists
    if not input_image.exists():
        print_error(
            f"Input file not found: {input_image}",
            details=f"The file '{input_image}' does not exist or is not accessible.",
        )
        raise typer.Exit(code=1)

    if not input_image.is_file():
        print_error(
            f"Input path is not a file: {input_image}",
            details="Please provide a path to an image file.",
        )
        raise typer.Exit(code=1)

    preset = _parse_choice(Mode, mode, "mode")

    overrides: dict[str, Any] = {}
    if layers is not None:
        overrides["layer_count"] = layers
    if method is not None:
        overrides["quantize_method"] = _parse_choice(QuantizeMethod, method, "method")
    if min_island is not None:
        overrides["min_island_area_mm2"] = min_island
    if smooth is not None:
        overrides["smooth_edges_strength"] = smooth
    if simplify is not None:
        overrides["simplify_tolerance"] = simplify
    if bridges is not None:
        overrides["auto_bridges"] = bridges
    if bridge_width is not None:
        overrides["bridge_width_px"] = bridge_width
    if width_mm is not None:
        overrides["target_width_mm"] = width_mm
    if output_format is not None:
        overrides["output_format"] = _parse_choice(OutputFormat, output_format, "format")
    if remove_bg:
        overrides["remove_background"] = True
    if bg_tolerance is not None:
        overrides["background_tolerance"] = bg_tolerance
    if bg_softness is not None:
        overrides["background_softness"] = bg_softness

    # Create settings from CLI arguments
    try:
        settings = LayerizerSettings(
            project=preset_settings(preset, **overrides),
            processing=ProcessingConfig(
                max_workers=workers or None,
            ),
            logging=LoggingConfig(
                log_file=log_file,
                log_level=log_level if not quiet else "WARNING",
            ),
        )
    except ValidationError as e:
        print_error("Invalid settings", details=str(e))
        raise typer.Exit(code=1)

    try:
        logger = configure_logging(
            log_file=settings.logging.log_file,
            console_level=settings.logging.log_level,
            file_level=settings.logging.file_log_level,
            quiet=quiet,
        )
    except (ValueError, OSError) as e:
        print_error("Could not set up logging", details=str(e))
        raise typer.Exit(code=1)

    if not quiet:
        print_header(__version__)

    try:
        if not quiet:
            print_step("Loading image")

        reader = ImageReader(input_image)
        try:
            image = reader.load()
        except FileNotFoundError as e:
            raise ImageLoadError(str(input_image), str(e)) from e

        if not quiet:
            print_image_info(str(input_image), reader.format, image.width, image.height)
            print_settings(settings.project, preset.value)

        if not quiet:
            print_step("Processing")
            print_processing_info(settings.processing.max_workers)

        pipeline = LayerPipeline(settings, logger=logger)
        try:
            result = _run_pipeline(pipeline, image, quiet)
        except KeyboardInterrupt:
            if not quiet:
                print_cancellation_notice()
            raise typer.Exit(code=130) from None  # Standard Unix SIGINT exit code

        if not quiet:
            print_step("Layers")
            print_layer_table(result.layers)
            print_step("Health checks")
            print_health_checks(result.health_checks, verbose=verbose)

        failed = has_errors(result.health_checks)
        if failed and quiet:
            errors = [c.message for c in result.health_checks if c.severity == Severity.ERROR]
            print_error("Health checks failed", details="; ".join(errors))

        if dry_run:
            if not quiet:
                console.print(
                    f"\n[bold green]{SYM_OK} Dry run complete[/bold green] – no files written"
                )
            raise typer.Exit(code=1 if failed else 0)

        output_dir = output if output is not None else SvgWriter.get_output_dir(input_image)
        writer = SvgWriter(output_dir, settings.project.output_format)
        files = writer.write(
            result.layers, result.target_width_mm, result.height_mm, settings=settings.project
        )

        if not quiet:
            stats = result.stats
            print_success(
                output_dir=str(output_dir),
                files=files,
                total_time_s=stats.duration_seconds,
                layers=len(result.layers),
                paths=result.total_paths,
                bridges=stats.bridges_added,
                avg_time_ms=stats.avg_layer_time_ms,
            )

        if failed:
            raise typer.Exit(code=1)

    except ImageLoadError as e:
        print_error(f"Could not load image: {e.reason}")
        raise typer.Exit(code=1)
    except InputError as e:
        print_error(str(e))
        raise typer.Exit(code=1)
    except ExportError as e:
        print_error(f"Could not write output: {e}")
        raise typer.Exit(code=1)
    except LayerizerError as e:
        print_error(str(e))
        raise typer.Exit(code=1)
    except typer.Exit:
        # Re-raise typer.Exit to allow clean exits
        raise
    except Exception as e:
        print_error(f"Unexpected error: {e}")
        raise typer.Exit(code=1)


def _run_pipeline(pipeline: LayerPipeline, image: RasterImage, quiet: bool) -> PipelineResult:
    """Run the pipeline, with a progress bar unless quiet."""
    if quiet:
        return pipeline.process(image)

    with create_progress() as progress:
        task_id = progress.add_task("Starting", total=100)

        def update_progress(report: PipelineProgress) -> None:
            progress.update(task_id, completed=report.progress, description=report.message)

        return pipeline.process(image, progress_callback=update_progress)


def cli() -> None:
    """Entry point for the CLI application."""
    app()


def main() -> None:
    """Entry point for the CLI application (alias for cli)."""
    cli()


if __name__ == "__main__":
    cli()
