from __future__ import annotations

import os
from typing import Optional

from PIL import Image

from mandeltile.config import RenderConfig
from mandeltile.errors import MissingSegmentError, StitchError
from mandeltile.pipeline import segment_filename
from mandeltile.util.imageio import ensure_dir
from mandeltile.util.logging_setup import get_logger

def stitch_filename(cfg: RenderConfig) -> str:
    return os.path.join(cfg.output_dir, f"mandelbrot_{cfg.density_token}_{cfg.max_iterations}_stitched.png")

def stitch_segments(cfg: RenderConfig, output: Optional[str] = None) -> str:
    """Paste every segment of the configured grid into one picture."""
    logger = get_logger()
    grid = cfg.grid
    output = output or stitch_filename(cfg)

    missing = [
        segment_filename(cfg, tx, ty)
        for tx, ty in grid.tiles()
        if not os.path.isfile(segment_filename(cfg, tx, ty))
    ]
    if missing:
        raise MissingSegmentError(f"{len(missing)} of {grid.total} segments missing, first: {missing[0]}")

    size = grid.tile_size
    canvas = Image.new("RGB", (grid.tiles_x * size, grid.tiles_y * size))
    logger.info("Stitching %s segments into %sx%s picture", grid.total, canvas.size[0], canvas.size[1])
    for tx, ty in grid.tiles():
        x0, y0 = grid.offset(tx, ty)
        path = segment_filename(cfg, tx, ty)
        try:
            with Image.open(path) as tile:
                if tile.size != (size, size):
                    raise StitchError(f"Segment {tx}-{ty} is {tile.size[0]}x{tile.size[1]}, expected {size}x{size}")
                canvas.paste(tile.convert("RGB"), (x0, y0))
        except OSError as e:
            # UnidentifiedImageError and truncated data both land here.
            raise StitchError(f"Cannot read segment {path}: {e}") from e

    ensure_dir(os.path.dirname(output))
    canvas.save(output, format="PNG", optimize=True)
    logger.info("Stitched picture written: %s", output)
    return output
