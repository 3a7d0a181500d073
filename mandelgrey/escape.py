"""Escape-time evaluation of a single point.

:func:`escape_time` is the reference definition of the iteration. The tile
kernel :func:`mandelgrey.renderer.escape_grid` runs the same recurrence and
threshold over whole grids and must agree with it on every point.
"""

from __future__ import annotations

from typing import Optional

DEFAULT_LIMIT = 255
ESCAPE_RADIUS_SQUARED = 4.0


def escape_time(point: complex, limit: int = DEFAULT_LIMIT) -> Optional[int]:
    """Return the 0-based iteration at which ``point`` leaves the radius-2 disc.

    Iterates ``z = z * z + point`` from zero at most ``limit`` times and
    returns ``None`` when the orbit never escapes, i.e. the point is taken to
    belong to the Mandelbrot set.
    """

    c_re = float(point.real)
    c_im = float(point.imag)
    z_re = 0.0
    z_im = 0.0
    for i in range(limit):
        z_re, z_im = z_re * z_re - z_im * z_im + c_re, z_re * z_im * 2.0 + c_im
        if z_re * z_re + z_im * z_im > ESCAPE_RADIUS_SQUARED:
            return i
    return None
