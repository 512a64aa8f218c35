# color.py

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Optional, Tuple

from mandeltile.errors import PaletteError

RGB = Tuple[int, int, int]

BLACK: RGB = (0, 0, 0)
BLUE: RGB = (0, 0, 255)
GREEN: RGB = (0, 255, 0)
YELLOW: RGB = (255, 255, 0)
RED: RGB = (255, 0, 0)
MAGENTA: RGB = (255, 0, 255)

def _check_rgb(color: RGB) -> None:
    if len(color) != 3 or any(not isinstance(v, int) or v < 0 or v > 255 for v in color):
        raise PaletteError(f"Invalid RGB triple: {color!r}")

@dataclass(frozen=True)
class Segment:
    start: RGB
    end: RGB

    def __post_init__(self) -> None:
        _check_rgb(self.start)
        _check_rgb(self.end)

    def at(self, value: int) -> RGB:
        """Interpolate between the endpoints; value runs from 0 (start) to 255 (end)."""
        return (
            self.start[0] + (self.end[0] - self.start[0]) * value // 255,
            self.start[1] + (self.end[1] - self.start[1]) * value // 255,
            self.start[2] + (self.end[2] - self.start[2]) * value // 255,
        )

@dataclass(frozen=True)
class Palette:
    """
    Cyclic gradient. Band n uses segments[n % len(segments)], except band 0
    which uses lead_in when one is given.
    """

    name: str
    segments: Tuple[Segment, ...]
    lead_in: Optional[Segment] = None

    def __post_init__(self) -> None:
        if not self.segments:
            raise PaletteError(f"Palette {self.name!r} has no segments.")

    @property
    def cycle_length(self) -> int:
        return len(self.segments)

    def segment_for_band(self, band: int) -> Segment:
        if band == 0 and self.lead_in is not None:
            return self.lead_in
        return self.segments[band % self.cycle_length]

VIBRANT = Palette(
    name="vibrant",
    segments=(
        Segment(BLACK, BLUE),
        Segment(BLUE, GREEN),
        Segment(GREEN, YELLOW),
        Segment(YELLOW, RED),
        Segment(RED, MAGENTA),
        Segment(MAGENTA, BLUE),
    ),
)

# Black -> blue once, then blue -> green -> yellow -> red -> magenta -> blue etc.
CLASSIC = Palette(
    name="classic",
    segments=(
        Segment(MAGENTA, BLUE),
        Segment(BLUE, GREEN),
        Segment(GREEN, YELLOW),
        Segment(YELLOW, RED),
        Segment(RED, MAGENTA),
    ),
    lead_in=Segment(BLACK, BLUE),
)

PALETTES: Dict[str, Palette] = {p.name: p for p in (VIBRANT, CLASSIC)}
DEFAULT_PALETTE = VIBRANT.name

def channel_value(length: int, band_width: int) -> int:
    """floor(progress / band_width * 256) clamped to 255, in integer arithmetic."""
    progress = length % band_width
    return min(progress * 256 // band_width, 255)

def length_to_color(length: int, band_width: int, palette: Palette = VIBRANT) -> RGB:
    """Map an escape iteration count (never INTERIOR) to its gradient color."""
    band = length // band_width
    return palette.segment_for_band(band).at(channel_value(length, band_width))
