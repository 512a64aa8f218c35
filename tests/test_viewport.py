"""Tests for the pixel to complex-plane transform and the tile grid."""

from __future__ import annotations

import pytest

from mandeltile.viewport import TileGrid, Viewport

@pytest.fixture
def viewport() -> Viewport:
    return Viewport(width=3.2, height=2.5, center_offset_x=0.5, center_offset_y=0.0, density=10)

class TestViewport:
    def test_picture_size(self, viewport: Viewport) -> None:
        assert (viewport.picture_width, viewport.picture_height) == (32, 25)

    def test_top_left_sample(self, viewport: Viewport) -> None:
        cx, cy = viewport.pixel_to_complex(0, 0)
        assert cx == pytest.approx(-2.0)
        assert cy == pytest.approx(1.15)

    def test_rows_go_down_the_imaginary_axis(self, viewport: Viewport) -> None:
        _, top = viewport.pixel_to_complex(0, 0)
        _, below = viewport.pixel_to_complex(0, 1)
        assert below == pytest.approx(top - 0.1)

    def test_offsets_shift_the_picture(self) -> None:
        base = Viewport(width=2.0, height=2.0, center_offset_x=0.0, center_offset_y=0.0, density=4)
        moved = Viewport(width=2.0, height=2.0, center_offset_x=0.25, center_offset_y=0.5, density=4)
        bx, by = base.pixel_to_complex(3, 3)
        mx, my = moved.pixel_to_complex(3, 3)
        assert mx == pytest.approx(bx - 0.25)
        assert my == pytest.approx(by - 0.5)

class TestTileGrid:
    def test_counts_round_up(self, viewport: Viewport) -> None:
        grid = TileGrid(viewport=viewport, tile_size=10)
        assert (grid.tiles_x, grid.tiles_y, grid.total) == (4, 3, 12)
        assert grid.pad_width == 2

    def test_exact_division(self) -> None:
        vp = Viewport(width=2.0, height=1.0, center_offset_x=0.0, center_offset_y=0.0, density=10)
        grid = TileGrid(viewport=vp, tile_size=5)
        assert (grid.tiles_x, grid.tiles_y) == (4, 2)

    def test_row_major_order_and_index(self, viewport: Viewport) -> None:
        grid = TileGrid(viewport=viewport, tile_size=10)
        tiles = list(grid.tiles())
        assert tiles[:5] == [(1, 1), (2, 1), (3, 1), (4, 1), (1, 2)]
        assert [grid.index(x, y) for x, y in tiles] == list(range(1, 13))

    def test_offset(self, viewport: Viewport) -> None:
        grid = TileGrid(viewport=viewport, tile_size=10)
        assert grid.offset(1, 1) == (0, 0)
        assert grid.offset(3, 2) == (20, 10)
