"""Greyscale palettes turning escape counts into pixel intensities.

A palette is called with an ``int32`` array of escape counts, where ``-1``
marks points that never escaped, and the iteration limit used to compute
them. It returns a ``uint8`` array of the same shape. Every palette renders
non-escaping points black (0) and points escaping on the first iteration
white (255).
"""

from __future__ import annotations

from typing import Callable

import numpy as np

Palette = Callable[[np.ndarray, int], np.ndarray]

NO_ESCAPE = -1


def inverted(counts: np.ndarray, limit: int) -> np.ndarray:
    """``255 - count`` clamped to a byte; fast escapes are bright."""

    values = 255 - counts.astype(np.int64)
    values = np.where(counts == NO_ESCAPE, 0, values)
    return np.clip(values, 0, 255).astype(np.uint8)


def scaled(counts: np.ndarray, limit: int) -> np.ndarray:
    """Spread the whole ``[0, limit)`` count range over the byte range."""

    span = max(int(limit) - 1, 1)
    values = 255 - (counts.astype(np.int64) * 255) // span
    values = np.where(counts == NO_ESCAPE, 0, values)
    return np.clip(values, 0, 255).astype(np.uint8)


PALETTES: dict[str, Palette] = {
    "inverted": inverted,
    "scaled": scaled,
}


def get_palette(name: str) -> Palette:
    try:
        return PALETTES[name]
    except KeyError:
        raise ValueError(f"Unknown palette '{name}'. Valid choices: {', '.join(sorted(PALETTES))}.") from None
