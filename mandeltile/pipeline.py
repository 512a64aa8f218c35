from __future__ import annotations

import os
import time
from contextlib import closing
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional, Tuple

import numpy as np
from tqdm import tqdm

from mandeltile.config import RenderConfig
from mandeltile.renderers.cpu import Block, render_blocks, row_bands
from mandeltile.util.confirm import DeclineConfirmation
from mandeltile.util.imageio import ensure_dir, save_image
from mandeltile.util.logging_setup import get_logger

Writer = Callable[[np.ndarray, str], None]
Confirm = Callable[[str], bool]

RENDER = "render"
SKIP = "skip"

BAND_HEIGHT = 16

@dataclass
class SegmentReport:
    rendered: List[str] = field(default_factory=list)
    skipped: List[str] = field(default_factory=list)

    @property
    def total(self) -> int:
        return len(self.rendered) + len(self.skipped)

def raster_filename(cfg: RenderConfig) -> str:
    return os.path.join(cfg.output_dir, f"mandelbrot_{cfg.density_token}_{cfg.max_iterations}.png")

def segment_filename(cfg: RenderConfig, tile_x: int, tile_y: int) -> str:
    grid = cfg.grid
    num = grid.index(tile_x, tile_y)
    name = f"mandelbrot_{cfg.density_token}_{cfg.max_iterations}_{num:0{grid.pad_width}d}_{tile_x}-{tile_y}.png"
    return os.path.join(cfg.segments_dir, name)

def decide_write(
    path: str,
    *,
    overwrite: bool = False,
    accept_existing: bool = False,
    confirm: Optional[Confirm] = None,
) -> str:
    """
    Existing-output policy. A missing target is always rendered. An existing one is
    skipped when accept_existing is set, rendered when overwrite is set, and
    otherwise left to the confirmation provider (no provider means decline).
    """
    if not os.path.exists(path):
        return RENDER
    if accept_existing:
        return SKIP
    if overwrite:
        return RENDER
    confirm = confirm or DeclineConfirmation()
    return RENDER if confirm(path) else SKIP

def _elapsed(start: float) -> float:
    return round((time.perf_counter() - start) * 10) / 10

def render_raster(
    cfg: RenderConfig,
    *,
    writer: Writer = save_image,
    confirm: Optional[Confirm] = None,
) -> Optional[str]:
    """Render the whole viewport into one picture. Returns the written path, or None when skipped."""
    logger = get_logger()
    path = raster_filename(cfg)
    existed = os.path.exists(path)

    if decide_write(path, overwrite=cfg.overwrite_existing, confirm=confirm) == SKIP:
        if not cfg.silence_output:
            logger.info("Render target already exists: '%s', skipping.", path)
        return None
    if existed and not cfg.silence_output:
        logger.info("Render target already exists: '%s', overwriting.", path)

    vp = cfg.viewport
    width, height = vp.picture_width, vp.picture_height
    buf = np.zeros((height, width, 3), dtype=np.uint8)

    if not cfg.silence_output:
        logger.info("Image processing started (%sx%s, %s iterations).", width, height, cfg.max_iterations)

    total_pixels = width * height
    pixels_through = 0
    pc_through = 0
    start = time.perf_counter()
    with closing(render_blocks(cfg, row_bands(width, height, BAND_HEIGHT))) as bands:
        for (col0, row0, cols, rows), band in bands:
            buf[row0:row0 + rows, col0:col0 + cols] = band
            pixels_through += cols * rows
            pc = int(round(pixels_through / total_pixels * 100))
            if cfg.report_progress and pc != pc_through and pc < 100:
                logger.info("%s%%", pc)
            pc_through = pc
    if cfg.report_progress:
        logger.info("100%")

    if not cfg.silence_output:
        logger.info("Image processing finished.")
        logger.info("Mandelbrot set calculations took %s seconds.", _elapsed(start))

    ensure_dir(cfg.output_dir)
    writer(buf, path)
    if not cfg.silence_output:
        logger.info("Image saved to '%s'.", path)
    return path

def render_segments(cfg: RenderConfig, *, writer: Writer = save_image) -> SegmentReport:
    """Render every tile of the grid that is not already on disk (unless accept_existing is off)."""
    logger = get_logger()
    grid = cfg.grid
    report = SegmentReport()

    ensure_dir(cfg.segments_dir)
    if not cfg.silence_output:
        logger.info(
            "Image processing started (%s segments, %sx%s of %spx).",
            grid.total, grid.tiles_x, grid.tiles_y, grid.tile_size,
        )

    pending: List[Block] = []
    names: Dict[Block, Tuple[str, int]] = {}
    for seq, (tile_x, tile_y) in enumerate(grid.tiles(), start=1):
        path = segment_filename(cfg, tile_x, tile_y)
        if decide_write(path, accept_existing=cfg.accept_existing, overwrite=not cfg.accept_existing) == SKIP:
            report.skipped.append(path)
            if cfg.report_progress:
                logger.info("Skipping '%s'. (%s of %s)", path, seq, grid.total)
            continue
        col0, row0 = grid.offset(tile_x, tile_y)
        block = (col0, row0, grid.tile_size, grid.tile_size)
        pending.append(block)
        names[block] = (path, seq)

    start = time.perf_counter()
    with tqdm(total=len(pending), unit="segment", disable=not cfg.report_progress) as bar, \
            closing(render_blocks(cfg, pending)) as rendered:
        for block, buf in rendered:
            path, seq = names[block]
            writer(buf, path)
            report.rendered.append(path)
            bar.update(1)
            if cfg.report_progress:
                logger.info("Saved '%s' (%s of %s).", path, seq, grid.total)

    if not cfg.silence_output:
        logger.info("Image processing finished.")
        logger.info("Mandelbrot set calculations took %s seconds.", _elapsed(start))
    return report
