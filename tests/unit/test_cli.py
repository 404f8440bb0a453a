"""Tests for the command-line interface."""

from pathlib import Path

import numpy as np
import pytest
from PIL import Image
from typer.testing import CliRunner

from layerizer import __version__
from layerizer.cli.app import app

runner = CliRunner()


@pytest.fixture
def square_png(tmp_path: Path) -> Path:
    """Write a white PNG with a black square in the middle."""
    data = np.full((40, 40, 3), 255, dtype=np.uint8)
    data[10:30, 10:30] = 0
    path = tmp_path / "square.png"
    Image.fromarray(data).save(path)
    return path


@pytest.fixture
def transparent_png(tmp_path: Path) -> Path:
    """Write a fully transparent PNG."""
    path = tmp_path / "empty.png"
    Image.new("RGBA", (20, 20), (0, 0, 0, 0)).save(path)
    return path


class TestArguments:
    """Tests for argument handling."""

    def test_version(self) -> None:
        """Test that --version prints the version and exits cleanly."""
        result = runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert __version__ in result.output

    def test_missing_file(self, tmp_path: Path) -> None:
        """Test that a nonexistent input exits with an error."""
        result = runner.invoke(app, [str(tmp_path / "nope.png")])
        assert result.exit_code == 1
        assert "not found" in result.output

    def test_directory_input(self, tmp_path: Path) -> None:
        """Test that a directory is not accepted as input."""
        result = runner.invoke(app, [str(tmp_path)])
        assert result.exit_code == 1

    def test_verbose_and_quiet(self, square_png: Path) -> None:
        """Test that -v and -q are mutually exclusive."""
        result = runner.invoke(app, [str(square_png), "-v", "-q"])
        assert result.exit_code == 1

    def test_invalid_mode(self, square_png: Path) -> None:
        """Test that an unknown preset is rejected."""
        result = runner.invoke(app, [str(square_png), "--mode", "sculpture"])
        assert result.exit_code == 1
        assert "shadowbox" in result.output

    def test_invalid_method(self, square_png: Path) -> None:
        """Test that an unknown quantization method is rejected."""
        result = runner.invoke(app, [str(square_png), "--method", "median"])
        assert result.exit_code == 1

    def test_layers_out_of_range(self, square_png: Path) -> None:
        """Test that Typer enforces option bounds."""
        result = runner.invoke(app, [str(square_png), "--layers", "0"])
        assert result.exit_code != 0

    def test_undecodable_image(self, tmp_path: Path) -> None:
        """Test that a file that is not an image exits with an error."""
        path = tmp_path / "notes.png"
        path.write_text("hello", encoding="utf-8")
        result = runner.invoke(app, [str(path), "-q"])
        assert result.exit_code == 1


class TestRun:
    """Tests for complete CLI runs."""

    def test_writes_layers(self, square_png: Path, tmp_path: Path) -> None:
        """Test that a run writes one file per layer plus the combined and settings files."""
        out = tmp_path / "out"
        result = runner.invoke(app, [str(square_png), "-o", str(out), "-n", "3", "-q"])

        assert result.exit_code == 0, result.output
        names = sorted(p.name for p in out.iterdir())
        assert names == [
            "combined-all-layers.svg",
            "layer-01-layer-1.svg",
            "layer-02-layer-2.svg",
            "layer-03-layer-3.svg",
            "settings.json",
        ]
        assert "<path" in (out / "layer-01-layer-1.svg").read_text(encoding="utf-8")

    def test_default_output_dir(self, square_png: Path) -> None:
        """Test that output goes next to the input by default."""
        result = runner.invoke(app, [str(square_png), "--mode", "sign"])
        assert result.exit_code == 0, result.output
        out = square_png.parent / "square-layers"
        assert len(list(out.glob("layer-*.svg"))) == 4

    def test_stroked_format(self, square_png: Path, tmp_path: Path) -> None:
        """Test that --format stroked changes the path style."""
        out = tmp_path / "out"
        result = runner.invoke(
            app, [str(square_png), "-o", str(out), "-n", "2", "-f", "stroked", "-q"]
        )
        assert result.exit_code == 0, result.output
        assert 'fill="none"' in (out / "combined-all-layers.svg").read_text(encoding="utf-8")

    def test_dry_run_writes_nothing(self, square_png: Path, tmp_path: Path) -> None:
        """Test that --dry-run reports without creating output."""
        out = tmp_path / "out"
        result = runner.invoke(app, [str(square_png), "-o", str(out), "--dry-run"])
        assert result.exit_code == 0, result.output
        assert "Dry run complete" in result.output
        assert not out.exists()

    def test_health_error_exit_code(self, transparent_png: Path, tmp_path: Path) -> None:
        """Test that a run with no paths exits with an error."""
        out = tmp_path / "out"
        result = runner.invoke(app, [str(transparent_png), "-o", str(out), "--dry-run", "-q"])
        assert result.exit_code == 1
        assert "No paths generated" in result.output
        assert not out.exists()

    def test_log_file(self, square_png: Path, tmp_path: Path) -> None:
        """Test that --log-file receives structured records."""
        log_path = tmp_path / "run.log"
        result = runner.invoke(
            app, [str(square_png), "--dry-run", "-q", "--log-file", str(log_path)]
        )
        assert result.exit_code == 0, result.output
        assert "Pipeline complete" in log_path.read_text(encoding="utf-8")
