"""Parallel rendering of a full image as independent row bands."""

from __future__ import annotations

import os
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Optional

import numpy as np

from .escape import DEFAULT_LIMIT
from .geometry import Surface, Viewport, pixel_to_point, sample_axes
from .palette import Palette, get_palette, inverted
from .renderer import render


def default_worker_count() -> int:
    return os.cpu_count() or 1


@dataclass(frozen=True)
class RenderParameters:
    """Parameters that describe a single greyscale render."""

    width: int
    height: int
    top_left: complex
    bottom_right: complex
    max_iterations: int = DEFAULT_LIMIT
    palette: str = "inverted"
    workers: int = field(default_factory=default_worker_count)

    @property
    def surface(self) -> Surface:
        return Surface(self.width, self.height)

    @property
    def viewport(self) -> Viewport:
        return Viewport(self.top_left, self.bottom_right)


@dataclass(frozen=True)
class Band:
    """Half-open range of rows ``[top, top + rows)`` rendered by one worker."""

    top: int
    rows: int

    @property
    def stop(self) -> int:
        return self.top + self.rows


def partition(height: int, worker_count: int) -> list[Band]:
    """Split ``height`` rows into contiguous bands of ``height // worker_count + 1`` rows.

    The last band takes whatever rows remain, and no empty band is produced,
    so fewer than ``worker_count`` bands may come back.
    """

    if worker_count < 1:
        raise ValueError(f"worker_count must be at least 1, got {worker_count}.")

    rows_per_band = height // worker_count + 1
    return [Band(top, min(rows_per_band, height - top)) for top in range(0, height, rows_per_band)]


def exec_render(
    worker_count: int,
    pixel_buffer: np.ndarray,
    surface: Surface,
    top_left: complex,
    bottom_right: complex,
    *,
    limit: int = DEFAULT_LIMIT,
    palette: Palette = inverted,
    device: Optional[str] = None,
) -> None:
    """Render ``pixel_buffer`` with one thread per band and wait for all of them.

    Each band gets a disjoint slice view of the buffer, corner points taken
    from the full surface mapping and its rows of the full-image sample axes,
    so every pixel maps to the same point whatever the worker count. An
    exception raised while rendering any band propagates once every band has
    finished.
    """

    if pixel_buffer.ndim != 1:
        raise ValueError(f"pixel_buffer must be one-dimensional, got shape {pixel_buffer.shape}.")
    if pixel_buffer.size != surface.size:
        raise ValueError(
            f"pixel_buffer holds {pixel_buffer.size} pixels, surface "
            f"{surface.width}x{surface.height} needs {surface.size}."
        )

    bands = partition(surface.height, worker_count)
    if not bands:
        return

    width = surface.width
    re_axis, im_axis = sample_axes(surface, top_left, bottom_right)
    with ThreadPoolExecutor(max_workers=len(bands), thread_name_prefix="band") as pool:
        futures = []
        for band in bands:
            tile = pixel_buffer[band.top * width:band.stop * width]
            band_top_left = pixel_to_point(surface, (0, band.top), top_left, bottom_right)
            band_bottom_right = pixel_to_point(surface, (width, band.stop), top_left, bottom_right)
            futures.append(
                pool.submit(
                    render,
                    tile,
                    Surface(width, band.rows),
                    band_top_left,
                    band_bottom_right,
                    limit=limit,
                    palette=palette,
                    device=device,
                    axes=(re_axis, im_axis[band.top:band.stop]),
                )
            )
        for future in futures:
            future.result()


def render_frame(params: RenderParameters, *, device: Optional[str] = None) -> np.ndarray:
    """Render a full greyscale frame and return its flat ``uint8`` pixel buffer."""

    surface = params.surface
    pixels = np.zeros(surface.size, dtype=np.uint8)
    exec_render(
        params.workers,
        pixels,
        surface,
        params.top_left,
        params.bottom_right,
        limit=params.max_iterations,
        palette=get_palette(params.palette),
        device=device,
    )
    return pixels
