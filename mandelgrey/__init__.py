"""Public API for parallel greyscale Mandelbrot rendering."""

from .arguments import parse_complex, parse_pair
from .dispatcher import Band, RenderParameters, exec_render, partition, render_frame
from .escape import DEFAULT_LIMIT, escape_time
from .geometry import Surface, Viewport, pixel_to_point, sample_axes
from .image import write_image
from .palette import PALETTES, get_palette
from .renderer import escape_grid, render

__all__ = [
    "Band",
    "DEFAULT_LIMIT",
    "PALETTES",
    "RenderParameters",
    "Surface",
    "Viewport",
    "escape_grid",
    "escape_time",
    "exec_render",
    "get_palette",
    "parse_complex",
    "parse_pair",
    "partition",
    "pixel_to_point",
    "render",
    "render_frame",
    "sample_axes",
    "write_image",
]
