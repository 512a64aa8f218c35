"""Tests for the command line entry point."""

from __future__ import annotations

import json
import os

import pytest

from mandeltile.cli import build_arg_parser, main

@pytest.fixture
def config_file(tmp_path):
    path = tmp_path / "cfg.json"
    path.write_text(
        json.dumps(
            {
                "pixel_density": 10,
                "max_iterations": 30,
                "tile_size": 16,
                "output_dir": str(tmp_path / "out"),
                "segments_dir": str(tmp_path / "segments"),
            }
        ),
        encoding="utf-8",
    )
    return str(path)

class TestArgParser:
    def test_silence_levels(self) -> None:
        p = build_arg_parser()
        assert p.parse_args(["render", "-s"]).silence == "progress"
        assert p.parse_args(["render", "--silence=ALL"]).silence == "ALL"
        assert p.parse_args(["segments"]).silence is None

    def test_unknown_flag_aborts(self) -> None:
        with pytest.raises(SystemExit) as exc:
            main(["render", "--bogus"])
        assert exc.value.code == 2

    def test_bad_silence_value_aborts(self) -> None:
        with pytest.raises(SystemExit):
            main(["render", "--silence=SOME"])

class TestMain:
    def test_render(self, config_file, tmp_path) -> None:
        assert main(["--config", config_file, "render", "--silence=ALL"]) == 0
        assert os.path.isfile(tmp_path / "out" / "mandelbrot_10_30.png")

    def test_segments_then_stitch(self, config_file, tmp_path) -> None:
        assert main(["--config", config_file, "segments", "-s"]) == 0
        # ceil(32 / 16) x ceil(25 / 16)
        assert len(os.listdir(tmp_path / "segments")) == 4
        assert main(["--config", config_file, "segments", "-s=ALL"]) == 0
        assert len(os.listdir(tmp_path / "segments")) == 4
        assert main(["--config", config_file, "stitch"]) == 0
        assert os.path.isfile(tmp_path / "out" / "mandelbrot_10_30_stitched.png")

    def test_unknown_config_option_fails_before_rendering(self, tmp_path) -> None:
        path = tmp_path / "bad.json"
        path.write_text(json.dumps({"pixel_density": 10, "zoom": 3, "output_dir": str(tmp_path / "out")}), encoding="utf-8")
        assert main(["--config", str(path), "render", "-y"]) == 1
        assert not (tmp_path / "out").exists()

    def test_segments_overwrite_rerenders_existing_grid(self, config_file, tmp_path) -> None:
        from PIL import Image

        assert main(["--config", config_file, "segments", "-s=ALL"]) == 0
        stale = tmp_path / "segments" / "mandelbrot_10_30_1_1-1.png"
        Image.new("RGB", (3, 3)).save(stale)

        assert main(["--config", config_file, "segments", "-s=ALL"]) == 0
        with Image.open(stale) as img:
            assert img.size == (3, 3)

        assert main(["--config", config_file, "segments", "-o", "-s=ALL"]) == 0
        with Image.open(stale) as img:
            assert img.size == (16, 16)

    def test_stitch_with_bad_segment_fails_cleanly(self, config_file, tmp_path) -> None:
        from PIL import Image

        assert main(["--config", config_file, "segments", "-s=ALL"]) == 0
        Image.new("RGB", (3, 3)).save(tmp_path / "segments" / "mandelbrot_10_30_1_1-1.png")
        assert main(["--config", config_file, "stitch"]) == 1

    def test_stitch_without_segments_fails(self, config_file) -> None:
        assert main(["--config", config_file, "stitch"]) == 1
