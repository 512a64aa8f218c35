from __future__ import annotations

from typing import List, Tuple

import numpy as np
import pytest

from mandeltile.config import RASTER, normalise_config
from mandeltile.util.logging_setup import get_logger

class RecordingWriter:
    def __init__(self) -> None:
        self.writes: List[Tuple[str, np.ndarray]] = []

    def __call__(self, buf: np.ndarray, path: str) -> None:
        self.writes.append((path, buf.copy()))

    @property
    def paths(self) -> List[str]:
        return [p for p, _ in self.writes]

@pytest.fixture
def writer() -> RecordingWriter:
    return RecordingWriter()

@pytest.fixture
def make_config(tmp_path):
    """Small 32x25 picture split into 10px segments (4x3 grid)."""

    def _make(mode: str = RASTER, **overrides):
        cfg = {
            "pixel_density": 10,
            "max_iterations": 50,
            "tile_size": 10,
            "output_dir": str(tmp_path / "out"),
            "segments_dir": str(tmp_path / "segments"),
            "report_progress": False,
            "silence_output": True,
        }
        cfg.update(overrides)
        return normalise_config(cfg, mode)

    return _make

@pytest.fixture(autouse=True)
def _reset_logger():
    yield
    logger = get_logger()
    for h in list(logger.handlers):
        logger.removeHandler(h)
        h.close()
