"""Command-line interface for layerizer.

This module provides the CLI using Typer with rich output for
user-friendly feedback and progress reporting.

Key features:
- Mode presets with per-option overrides
- Stage progress bar
- Per-layer statistics and health check report
- Verbose/quiet output modes
"""

from layerizer.cli.app import cli, main

__all__ = ["cli", "main"]
