import numpy as np
import pytest

from mandelgrey.escape import escape_time
from mandelgrey.geometry import Surface, pixel_to_point, sample_axes
from mandelgrey.palette import scaled
from mandelgrey.renderer import escape_grid, render


def test_single_interior_pixel_is_black():
    pixels = np.full(1, 7, dtype=np.uint8)
    render(pixels, Surface(1, 1), complex(0.0, 0.0), complex(1.0, -1.0))
    assert pixels[0] == 0


def test_immediate_escape_is_white():
    pixels = np.zeros(1, dtype=np.uint8)
    render(pixels, Surface(1, 1), complex(5.0, 4.0), complex(6.0, 3.0))
    assert pixels[0] == 255


def test_escape_grid_agrees_with_escape_time():
    surface = Surface(24, 20)
    top_left, bottom_right = complex(-2.0, 1.25), complex(1.0, -1.25)
    re_axis, im_axis = sample_axes(surface, top_left, bottom_right)

    counts = escape_grid(re_axis, im_axis, 64)

    assert counts.shape == (20, 24)
    assert counts.dtype == np.int32
    for row in range(surface.height):
        for column in range(surface.width):
            expected = escape_time(complex(re_axis[column], im_axis[row]), 64)
            assert counts[row, column] == (-1 if expected is None else expected)


def test_render_matches_per_pixel_evaluation():
    surface = Surface(16, 12)
    top_left, bottom_right = complex(-1.20, 0.35), complex(-1.0, 0.20)
    pixels = np.zeros(surface.size, dtype=np.uint8)

    render(pixels, surface, top_left, bottom_right)

    for row in range(surface.height):
        for column in range(surface.width):
            count = escape_time(pixel_to_point(surface, (column, row), top_left, bottom_right), 255)
            expected = 0 if count is None else 255 - count
            assert pixels[row * surface.width + column] == expected


def test_render_writes_only_its_slice():
    surface = Surface(5, 2)
    pixels = np.full(3 * surface.size, 42, dtype=np.uint8)
    tile = pixels[surface.size:2 * surface.size]

    render(tile, surface, complex(3.0, 3.0), complex(4.0, 2.0))

    assert np.all(pixels[:surface.size] == 42)
    assert np.all(pixels[2 * surface.size:] == 42)
    assert np.all(pixels[surface.size:2 * surface.size] == 255)


def test_render_uses_limit_and_palette():
    surface = Surface(8, 8)
    top_left, bottom_right = complex(-2.0, 1.5), complex(1.0, -1.5)
    pixels = np.zeros(surface.size, dtype=np.uint8)

    render(pixels, surface, top_left, bottom_right, limit=1000, palette=scaled)

    re_axis, im_axis = sample_axes(surface, top_left, bottom_right)
    expected = scaled(escape_grid(re_axis, im_axis, 1000), 1000).reshape(-1)
    np.testing.assert_array_equal(pixels, expected)


def test_render_rejects_mismatched_buffer():
    with pytest.raises(AssertionError):
        render(np.zeros(5, dtype=np.uint8), Surface(2, 2), complex(-1.0, 1.0), complex(1.0, -1.0))


def test_render_with_precomputed_axes_ignores_corners():
    surface = Surface(10, 4)
    top_left, bottom_right = complex(-2.0, 1.0), complex(1.0, -1.0)
    re_axis, im_axis = sample_axes(Surface(10, 8), top_left, bottom_right)
    rows = im_axis[4:]

    pixels = np.zeros(surface.size, dtype=np.uint8)
    render(pixels, surface, complex(9.0, 9.0), complex(10.0, 8.0), axes=(re_axis, rows))

    expected = np.zeros(surface.size, dtype=np.uint8)
    render(expected, surface, complex(9.0, 9.0), complex(10.0, 8.0))
    assert np.all(expected == 255)
    for row in range(surface.height):
        for column in range(surface.width):
            count = escape_time(complex(re_axis[column], rows[row]), 255)
            assert pixels[row * surface.width + column] == (0 if count is None else 255 - count)


def test_render_rejects_mismatched_axes():
    re_axis, im_axis = sample_axes(Surface(3, 2), complex(-1.0, 1.0), complex(1.0, -1.0))
    with pytest.raises(AssertionError):
        render(np.zeros(4, dtype=np.uint8), Surface(2, 2), complex(-1.0, 1.0), complex(1.0, -1.0), axes=(re_axis, im_axis))
