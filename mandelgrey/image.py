"""Encoding of rendered pixel buffers as greyscale image files."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Optional

import numpy as np
import PIL.Image

from .geometry import Surface

DEFAULT_FORMAT = "png"


def _pil_format_name(ext: str) -> str:
    upper = ext.upper()
    if upper == "JPG":
        return "JPEG"
    if upper == "TIF":
        return "TIFF"
    return upper


def resolve_output(path: str | os.PathLike, image_format: Optional[str] = None) -> tuple[Path, str]:
    """Return the destination path and the Pillow format name used to write it.

    An explicit ``image_format`` wins; otherwise the format follows the file
    suffix, and a path without suffix gets ``.png`` appended.
    """

    output_path = Path(path).expanduser()
    if image_format:
        pil_format = _pil_format_name(image_format.lower().lstrip("."))
        if output_path.suffix == "":
            output_path = output_path.with_suffix(f".{image_format.lower().lstrip('.')}")
    elif output_path.suffix:
        pil_format = PIL.Image.registered_extensions().get(output_path.suffix.lower())
        if pil_format is None:
            raise ValueError(f"Unsupported image extension '{output_path.suffix}'.")
    else:
        output_path = output_path.with_suffix(f".{DEFAULT_FORMAT}")
        pil_format = _pil_format_name(DEFAULT_FORMAT)

    if pil_format not in PIL.Image.SAVE:
        PIL.Image.init()
    if pil_format not in PIL.Image.SAVE:
        raise ValueError(f"Pillow cannot write images in format '{pil_format}'.")
    return output_path, pil_format


def write_image(
    path: str | os.PathLike,
    pixels: np.ndarray,
    surface: Surface,
    image_format: Optional[str] = None,
) -> Path:
    """Write ``pixels`` as an 8-bit greyscale image and return the path written.

    The image is first written to a temporary file next to the destination and
    moved into place only once encoding succeeded, so a failed write leaves no
    file behind.
    """

    if pixels.size != surface.size:
        raise ValueError(
            f"pixel buffer holds {pixels.size} pixels, surface "
            f"{surface.width}x{surface.height} needs {surface.size}."
        )

    output_path, pil_format = resolve_output(path, image_format)
    image = PIL.Image.fromarray(np.ascontiguousarray(pixels, dtype=np.uint8).reshape(surface.height, surface.width))

    output_path.parent.mkdir(parents=True, exist_ok=True)
    partial_path = output_path.with_name(f".{output_path.name}.part")
    try:
        image.save(str(partial_path), format=pil_format)
        os.replace(partial_path, output_path)
    except BaseException:
        partial_path.unlink(missing_ok=True)
        raise
    return output_path
