from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Tuple

@dataclass(frozen=True)
class Viewport:
    """Region of the complex plane and its pixel density. The origin sits at the centre before offsets."""

    width: float
    height: float
    center_offset_x: float
    center_offset_y: float
    density: float

    @property
    def picture_width(self) -> int:
        return int(round(self.density * self.width))

    @property
    def picture_height(self) -> int:
        return int(round(self.density * self.height))

    def pixel_to_complex(self, col: int, row: int) -> Tuple[float, float]:
        # Samples sit at the 1-indexed pixel position; increasing the offsets moves the picture right/up.
        cx = (col + 1) / self.density - self.width / 2 - self.center_offset_x
        cy = -((row + 1) / self.density) + self.height / 2 - self.center_offset_y
        return cx, cy

@dataclass(frozen=True)
class TileGrid:
    viewport: Viewport
    tile_size: int

    @property
    def tiles_x(self) -> int:
        return int(math.ceil(self.viewport.density * self.viewport.width / self.tile_size))

    @property
    def tiles_y(self) -> int:
        return int(math.ceil(self.viewport.density * self.viewport.height / self.tile_size))

    @property
    def total(self) -> int:
        return self.tiles_x * self.tiles_y

    @property
    def pad_width(self) -> int:
        return len(str(self.total))

    def index(self, tile_x: int, tile_y: int) -> int:
        return tile_x + (tile_y - 1) * self.tiles_x

    def offset(self, tile_x: int, tile_y: int) -> Tuple[int, int]:
        return (tile_x - 1) * self.tile_size, (tile_y - 1) * self.tile_size

    def tiles(self):
        """Yield (tile_x, tile_y), 1-indexed, in row-major order."""
        for tile_y in range(1, self.tiles_y + 1):
            for tile_x in range(1, self.tiles_x + 1):
                yield tile_x, tile_y
