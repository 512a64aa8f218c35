from __future__ import annotations

INTERIOR = -1
ESCAPE_RADIUS = 2.0

def escape_time(cx: float, cy: float, max_iterations: int) -> int:
    """
    Iterate z -> z*z + c from z = 0 and return the 1-indexed iteration at which
    |z| first exceeds the escape radius, or INTERIOR if it never does within
    max_iterations.
    """
    c = complex(cx, cy)
    z = 0j
    limit = ESCAPE_RADIUS * ESCAPE_RADIUS
    for i in range(1, max_iterations + 1):
        z = z * z + c
        # |z|^2 against r^2; float products overflow to inf, never raise
        if z.real * z.real + z.imag * z.imag > limit:
            return i
    return INTERIOR
