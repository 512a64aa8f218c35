from __future__ import annotations

import json
import math
from dataclasses import dataclass, fields
from typing import Any, Dict, Optional

from mandeltile.color import PALETTES, DEFAULT_PALETTE, Palette
from mandeltile.errors import ConfigError
from mandeltile.viewport import TileGrid, Viewport

RASTER = "raster"
SEGMENTS = "segments"

_SHARED_DEFAULTS: Dict[str, Any] = {
    "max_iterations": 180,
    "color_band_width": 30,
    "viewport_width": 3.2,
    "viewport_height": 2.5,
    "center_offset_x": 0.5,
    "center_offset_y": 0.0,
    "report_progress": True,
    "silence_output": False,
    "overwrite_existing": False,
    "accept_existing": True,
    "output_dir": ".",
    "segments_dir": "segments",
    "palette": DEFAULT_PALETTE,
    "workers": 1,
}

DEFAULTS: Dict[str, Dict[str, Any]] = {
    RASTER: dict(_SHARED_DEFAULTS, pixel_density=4800, tile_size=500),
    SEGMENTS: dict(_SHARED_DEFAULTS, pixel_density=10000, tile_size=500),
}

@dataclass(frozen=True)
class RenderConfig:
    pixel_density: float
    max_iterations: int
    color_band_width: int
    viewport_width: float
    viewport_height: float
    center_offset_x: float
    center_offset_y: float
    tile_size: int
    report_progress: bool
    silence_output: bool
    overwrite_existing: bool
    accept_existing: bool
    output_dir: str
    segments_dir: str
    palette: str
    workers: int

    @property
    def viewport(self) -> Viewport:
        return Viewport(
            width=self.viewport_width,
            height=self.viewport_height,
            center_offset_x=self.center_offset_x,
            center_offset_y=self.center_offset_y,
            density=self.pixel_density,
        )

    @property
    def grid(self) -> TileGrid:
        return TileGrid(viewport=self.viewport, tile_size=self.tile_size)

    @property
    def color_palette(self) -> Palette:
        return PALETTES[self.palette]

    @property
    def density_token(self) -> str:
        d = self.pixel_density
        return str(int(d)) if float(d).is_integer() else str(d)

_FIELDS = {f.name for f in fields(RenderConfig)}
_INTS = ("max_iterations", "color_band_width", "tile_size", "workers")
_FLOATS = ("pixel_density", "viewport_width", "viewport_height", "center_offset_x", "center_offset_y")
_BOOLS = ("report_progress", "silence_output", "overwrite_existing", "accept_existing")
_STRS = ("output_dir", "segments_dir", "palette")

def load_config(config_path: Optional[str]) -> Dict[str, Any]:
    if not config_path:
        return {}
    try:
        with open(config_path, "r", encoding="utf-8") as f:
            cfg = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        raise ConfigError(f"Cannot read config {config_path}: {e}") from e
    if not isinstance(cfg, dict):
        raise ConfigError("Config JSON must be an object.")
    return cfg

def normalise_config(cfg: Dict[str, Any], mode: str = RASTER) -> RenderConfig:
    if mode not in DEFAULTS:
        raise ConfigError(f"Unknown mode: {mode}")

    unknown = sorted(set(cfg) - _FIELDS)
    if unknown:
        raise ConfigError(f"Unrecognised config option(s): {', '.join(unknown)}")

    merged = dict(DEFAULTS[mode])
    merged.update(cfg)

    out: Dict[str, Any] = {}
    for name in _INTS:
        v = merged[name]
        if isinstance(v, bool) or not isinstance(v, int):
            raise ConfigError(f"{name} must be an integer, got {v!r}")
        out[name] = v
    for name in _FLOATS:
        v = merged[name]
        if isinstance(v, bool) or not isinstance(v, (int, float)):
            raise ConfigError(f"{name} must be a number, got {v!r}")
        if not math.isfinite(v):
            raise ConfigError(f"{name} must be finite, got {v!r}")
        out[name] = v
    for name in _BOOLS:
        v = merged[name]
        if not isinstance(v, bool):
            raise ConfigError(f"{name} must be true or false, got {v!r}")
        out[name] = v
    for name in _STRS:
        out[name] = str(merged[name])

    for name in ("pixel_density", "viewport_width", "viewport_height"):
        if out[name] <= 0:
            raise ConfigError(f"{name} must be positive.")
    for name in _INTS:
        if out[name] <= 0:
            raise ConfigError(f"{name} must be positive.")
    extent_x = out["pixel_density"] * out["viewport_width"]
    extent_y = out["pixel_density"] * out["viewport_height"]
    if not (math.isfinite(extent_x) and math.isfinite(extent_y)):
        raise ConfigError("Picture size overflows; lower pixel_density or the viewport size.")
    if round(extent_x) < 1 or round(extent_y) < 1:
        raise ConfigError(
            f"Picture would be {round(extent_x)}x{round(extent_y)} pixels; raise pixel_density or the viewport size."
        )
    if out["palette"] not in PALETTES:
        raise ConfigError(f"Unknown palette {out['palette']!r}, choose from: {', '.join(sorted(PALETTES))}")

    return RenderConfig(**out)
