"""Rendering of one rectangular tile of the pixel buffer."""

from __future__ import annotations

from typing import Optional

import numpy as np
import tensorflow as tf

from .escape import DEFAULT_LIMIT, ESCAPE_RADIUS_SQUARED
from .geometry import Surface, sample_axes
from .palette import NO_ESCAPE, Palette, inverted

DEFAULT_DEVICE = "/CPU:0"


@tf.function
def _escape_step(
    i: tf.Tensor,
    c_re: tf.Tensor,
    c_im: tf.Tensor,
    z_re: tf.Tensor,
    z_im: tf.Tensor,
    counts: tf.Tensor,
    active: tf.Tensor,
) -> tuple[tf.Tensor, tf.Tensor, tf.Tensor, tf.Tensor]:
    """Advance every orbit that has not escaped yet by one iteration."""

    next_re = z_re * z_re - z_im * z_im + c_re
    next_im = z_re * z_im * 2.0 + c_im
    z_re = tf.where(active, next_re, z_re)
    z_im = tf.where(active, next_im, z_im)

    radius = tf.constant(ESCAPE_RADIUS_SQUARED, dtype=tf.float64)
    escaped = tf.logical_and(active, z_re * z_re + z_im * z_im > radius)
    counts = tf.where(escaped, i, counts)
    active = tf.logical_and(active, tf.logical_not(escaped))
    return z_re, z_im, counts, active


@tf.function(
    input_signature=(
        tf.TensorSpec(shape=[None, None], dtype=tf.float64),
        tf.TensorSpec(shape=[None, None], dtype=tf.float64),
        tf.TensorSpec(shape=[], dtype=tf.int32),
    )
)
def _escape_run(c_re: tf.Tensor, c_im: tf.Tensor, limit: tf.Tensor) -> tf.Tensor:
    """Iterate the whole grid in a TensorFlow while loop until all escaped or ``limit``."""

    i = tf.constant(0, dtype=tf.int32)
    z_re = tf.zeros_like(c_re)
    z_im = tf.zeros_like(c_im)
    counts = tf.fill(tf.shape(c_re), tf.constant(NO_ESCAPE, dtype=tf.int32))
    active = tf.ones_like(counts, dtype=tf.bool)

    def cond(i, z_re, z_im, counts, active):
        return tf.logical_and(tf.less(i, limit), tf.reduce_any(active))

    def body(i, z_re, z_im, counts, active):
        z_re, z_im, counts, active = _escape_step(i, c_re, c_im, z_re, z_im, counts, active)
        return i + 1, z_re, z_im, counts, active

    _, _, _, counts, _ = tf.while_loop(cond, body, (i, z_re, z_im, counts, active))
    return counts


def escape_grid(
    re_axis: np.ndarray,
    im_axis: np.ndarray,
    limit: int = DEFAULT_LIMIT,
    *,
    device: Optional[str] = None,
) -> np.ndarray:
    """Escape counts for the grid spanned by ``re_axis`` (columns) and ``im_axis`` (rows).

    Returns an ``int32`` array of shape ``(len(im_axis), len(re_axis))`` holding
    the iteration index at which each point escaped, or ``-1`` where it never did.
    """

    with tf.device(device if device is not None else DEFAULT_DEVICE):
        x = tf.convert_to_tensor(np.asarray(re_axis, dtype=np.float64), dtype=tf.float64)
        y = tf.convert_to_tensor(np.asarray(im_axis, dtype=np.float64), dtype=tf.float64)
        c_re, c_im = tf.meshgrid(x, y)
        counts = _escape_run(c_re, c_im, tf.constant(limit, dtype=tf.int32))
    return counts.numpy()


def render(
    tile_buffer: np.ndarray,
    tile_surface: Surface,
    tile_top_left: complex,
    tile_bottom_right: complex,
    *,
    limit: int = DEFAULT_LIMIT,
    palette: Palette = inverted,
    device: Optional[str] = None,
    axes: Optional[tuple[np.ndarray, np.ndarray]] = None,
) -> None:
    """Fill ``tile_buffer`` in place with the greyscale rendering of one tile.

    The tile is mapped with its own corner points unless ``axes`` supplies the
    real part of every column and the imaginary part of every row already.
    ``tile_buffer`` must be a flat view holding exactly
    ``tile_surface.width * tile_surface.height`` bytes.
    """

    assert tile_buffer.size == tile_surface.size, (
        f"tile buffer holds {tile_buffer.size} pixels, surface "
        f"{tile_surface.width}x{tile_surface.height} needs {tile_surface.size}"
    )

    if axes is None:
        axes = sample_axes(tile_surface, tile_top_left, tile_bottom_right)
    re_axis, im_axis = axes
    assert re_axis.size == tile_surface.width and im_axis.size == tile_surface.height, (
        f"axes of {re_axis.size}x{im_axis.size} samples do not match surface "
        f"{tile_surface.width}x{tile_surface.height}"
    )

    counts = escape_grid(re_axis, im_axis, limit, device=device)
    tile_buffer[:] = palette(counts, limit).reshape(-1)
