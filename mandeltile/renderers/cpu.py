from __future__ import annotations

from concurrent.futures import ProcessPoolExecutor
from typing import Iterable, Iterator, List, Tuple

import numpy as np

from mandeltile.color import BLACK, RGB, Palette, length_to_color
from mandeltile.config import RenderConfig
from mandeltile.escape import INTERIOR, escape_time
from mandeltile.util.logging_setup import get_logger, start_log_forwarding, worker_logging_initialiser
from mandeltile.viewport import Viewport

# (col0, row0, cols, rows) in absolute pixels of the full picture.
Block = Tuple[int, int, int, int]

_G = {}

def render_block(
    *,
    viewport: Viewport,
    max_iterations: int,
    band_width: int,
    palette: Palette,
    block: Block,
    background: RGB = BLACK,
) -> np.ndarray:
    col0, row0, cols, rows = block
    buf = np.empty((rows, cols, 3), dtype=np.uint8)
    buf[:, :] = background
    for r in range(rows):
        for c in range(cols):
            cx, cy = viewport.pixel_to_complex(col0 + c, row0 + r)
            n = escape_time(cx, cy, max_iterations)
            # Points in the set keep the background.
            if n != INTERIOR:
                buf[r, c] = length_to_color(n, band_width, palette)
    return buf

def render_block_for(cfg: RenderConfig, block: Block) -> np.ndarray:
    return render_block(
        viewport=cfg.viewport,
        max_iterations=cfg.max_iterations,
        band_width=cfg.color_band_width,
        palette=cfg.color_palette,
        block=block,
    )

def row_bands(width: int, height: int, band_height: int) -> List[Block]:
    bands: List[Block] = []
    y = 0
    while y < height:
        y1 = min(height, y + band_height)
        bands.append((0, y, width, y1 - y))
        y = y1
    return bands

def _init_worker(cfg: RenderConfig, log_queue, log_level: int) -> None:
    _G["cfg"] = cfg
    worker_logging_initialiser(log_queue, log_level)

def _render_job(block: Block) -> Tuple[Block, np.ndarray]:
    cfg = _G["cfg"]
    buf = render_block_for(cfg, block)
    get_logger().debug("Rendered block at (%s,%s) size %sx%s", block[0], block[1], block[2], block[3])
    return block, buf

def render_blocks(cfg: RenderConfig, blocks: Iterable[Block]) -> Iterator[Tuple[Block, np.ndarray]]:
    """Render blocks in order; with cfg.workers > 1 they are computed by a process pool."""
    blocks = list(blocks)
    if cfg.workers <= 1 or len(blocks) <= 1:
        for block in blocks:
            yield block, render_block_for(cfg, block)
        return

    logger = get_logger()
    queue, listener = start_log_forwarding()
    try:
        with ProcessPoolExecutor(
            max_workers=cfg.workers,
            initializer=_init_worker,
            initargs=(cfg, queue, logger.getEffectiveLevel()),
        ) as pool:
            for block, buf in pool.map(_render_job, blocks):
                yield block, buf
    finally:
        listener.stop()
