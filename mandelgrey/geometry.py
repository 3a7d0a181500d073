"""Mapping between pixel grids and the complex plane."""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np


@dataclass(frozen=True)
class Surface:
    """Pixel grid dimensions of a rendered image or tile."""

    width: int
    height: int

    @property
    def size(self) -> int:
        return self.width * self.height


@dataclass(frozen=True)
class Viewport:
    """Rectangle of the complex plane mapped onto a surface."""

    top_left: complex
    bottom_right: complex

    @property
    def is_oriented(self) -> bool:
        """Whether ``top_left`` is really above and to the left of ``bottom_right``."""

        return (
            self.top_left.real <= self.bottom_right.real
            and self.top_left.imag >= self.bottom_right.imag
        )


def pixel_to_point(
    surface: Surface,
    pixel: tuple[int, int],
    top_left: complex,
    bottom_right: complex,
) -> complex:
    """Return the complex point under ``pixel`` (column, row) of ``surface``.

    Rows grow downwards while the imaginary axis grows upwards. Pixels outside
    the surface extrapolate linearly and a zero dimension yields ``nan``/``inf``.
    """

    column, row = pixel
    plane_width = np.float64(bottom_right.real) - np.float64(top_left.real)
    plane_height = np.float64(top_left.imag) - np.float64(bottom_right.imag)

    with np.errstate(divide="ignore", invalid="ignore"):
        re = np.float64(top_left.real) + np.float64(column) * plane_width / np.float64(surface.width)
        im = np.float64(top_left.imag) - np.float64(row) * plane_height / np.float64(surface.height)
    return complex(float(re), float(im))


def sample_axes(surface: Surface, top_left: complex, bottom_right: complex) -> tuple[np.ndarray, np.ndarray]:
    """Real parts of every column and imaginary parts of every row of ``surface``.

    Uses the same operation order as :func:`pixel_to_point`, so both agree bit
    for bit on every pixel.
    """

    plane_width = np.float64(bottom_right.real) - np.float64(top_left.real)
    plane_height = np.float64(top_left.imag) - np.float64(bottom_right.imag)

    columns = np.arange(surface.width, dtype=np.float64)
    rows = np.arange(surface.height, dtype=np.float64)

    with np.errstate(divide="ignore", invalid="ignore"):
        re_axis = np.float64(top_left.real) + columns * plane_width / np.float64(surface.width)
        im_axis = np.float64(top_left.imag) - rows * plane_height / np.float64(surface.height)
    return re_axis, im_axis
