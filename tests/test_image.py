import numpy as np
import PIL.Image
import pytest

from mandelgrey.geometry import Surface
from mandelgrey.image import resolve_output, write_image


def _gradient(surface):
    return (np.arange(surface.size) % 256).astype(np.uint8)


def test_write_png_round_trip(tmp_path):
    surface = Surface(4, 3)
    pixels = _gradient(surface)

    written = write_image(tmp_path / "out.png", pixels, surface)

    assert written == tmp_path / "out.png"
    with PIL.Image.open(written) as image:
        assert image.format == "PNG"
        assert image.mode == "L"
        assert image.size == (4, 3)
        np.testing.assert_array_equal(np.array(image), pixels.reshape(3, 4))
    assert sorted(p.name for p in tmp_path.iterdir()) == ["out.png"]


def test_missing_suffix_defaults_to_png(tmp_path):
    written = write_image(tmp_path / "out", np.zeros(6, dtype=np.uint8), Surface(3, 2))
    assert written.name == "out.png"
    with PIL.Image.open(written) as image:
        assert image.format == "PNG"


def test_explicit_format(tmp_path):
    written = write_image(tmp_path / "out", np.zeros(6, dtype=np.uint8), Surface(3, 2), "jpg")
    assert written.name == "out.jpg"
    with PIL.Image.open(written) as image:
        assert image.format == "JPEG"
        assert image.mode == "L"


def test_resolve_output_from_suffix(tmp_path):
    assert resolve_output(tmp_path / "a.PNG") == (tmp_path / "a.PNG", "PNG")
    assert resolve_output(tmp_path / "a.bmp") == (tmp_path / "a.bmp", "BMP")


def test_unknown_suffix(tmp_path):
    with pytest.raises(ValueError, match="Unsupported image extension"):
        resolve_output(tmp_path / "a.fractal")


def test_size_mismatch(tmp_path):
    with pytest.raises(ValueError, match="needs 6"):
        write_image(tmp_path / "out.png", np.zeros(5, dtype=np.uint8), Surface(3, 2))


def test_unwritable_destination(tmp_path):
    blocker = tmp_path / "blocker"
    blocker.write_text("not a directory")

    with pytest.raises(OSError):
        write_image(blocker / "out.png", np.zeros(6, dtype=np.uint8), Surface(3, 2))


def test_failed_encode_leaves_no_file(tmp_path, monkeypatch):
    def failing_save(self, fp, format=None, **params):
        with open(fp, "wb") as handle:
            handle.write(b"partial")
        raise OSError("disk full")

    monkeypatch.setattr(PIL.Image.Image, "save", failing_save)

    with pytest.raises(OSError, match="disk full"):
        write_image(tmp_path / "out.png", np.zeros(6, dtype=np.uint8), Surface(3, 2))
    assert list(tmp_path.iterdir()) == []
