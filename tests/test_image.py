import pytest

from grayvol.errors import (
    ImageFileNotFoundError,
    ImagingError,
    InvalidImageFormatError,
    InvalidPixelValueError,
)
from grayvol.image import Image


def test_new_image_is_zero_filled():
    img = Image(3, 2)
    assert img.pixels == [[0, 0, 0], [0, 0, 0]]
    assert (img.width, img.height) == (3, 2)


def test_set_and_get_pixel():
    img = Image(2, 2)
    img.set_pixel(1, 0, 42)
    assert img.get_pixel(1, 0) == 42
    assert img.pixels[0][1] == 42


@pytest.mark.parametrize("x,y", [(-1, 0), (2, 0), (0, 2), (0, -1)])
def test_pixel_access_out_of_range(x, y):
    img = Image(2, 2)
    with pytest.raises(ImagingError, match="fuera de rango"):
        img.get_pixel(x, y)
    with pytest.raises(ImagingError, match="fuera de rango"):
        img.set_pixel(x, y, 1)


@pytest.mark.parametrize("value", [-1, 256])
def test_set_pixel_rejects_bad_value(value):
    img = Image(2, 2)
    with pytest.raises(InvalidPixelValueError) as info:
        img.set_pixel(1, 1, value)
    assert info.value.value == value
    assert img.get_pixel(1, 1) == 0


def test_save_writes_p2_text(tmp_path):
    img = Image(2, 1, pixels=[[0, 5]])
    path = tmp_path / "out.pgm"
    img.save(str(path))
    assert path.read_text() == "P2\n2 1\n255\n0 5 \n"


def test_save_load_round_trip(tmp_path):
    pixels = [[1, 2, 3], [4, 5, 6]]
    path = tmp_path / "img.pgm"
    Image(3, 2, pixels=[row[:] for row in pixels]).save(str(path))
    loaded = Image()
    loaded.load(str(path))
    assert loaded.pixels == pixels
    assert (loaded.width, loaded.height) == (3, 2)
    assert loaded.max_value == 255
    assert loaded.filename == str(path)


def test_load_missing_file(tmp_path):
    with pytest.raises(ImageFileNotFoundError):
        Image().load(str(tmp_path / "missing.pgm"))


def test_load_wrong_magic(tmp_path):
    path = tmp_path / "bad.pgm"
    path.write_text("P5\n1 1\n255\n0\n")
    with pytest.raises(InvalidImageFormatError, match="P2"):
        Image().load(str(path))


@pytest.mark.parametrize("header", ["0 2 255", "2 -1 255", "2 2 300", "2 x 255"])
def test_load_bad_header(tmp_path, header):
    path = tmp_path / "bad.pgm"
    path.write_text(f"P2\n{header}\n0 0 0 0\n")
    with pytest.raises(InvalidImageFormatError, match="no válidos"):
        Image().load(str(path))


def test_load_pixel_out_of_range(tmp_path):
    path = tmp_path / "bad.pgm"
    path.write_text("P2\n2 1\n255\n1 300\n")
    with pytest.raises(InvalidPixelValueError) as info:
        Image().load(str(path))
    assert (info.value.x, info.value.y, info.value.value) == (1, 0, 300)


def test_load_missing_pixels(tmp_path):
    path = tmp_path / "short.pgm"
    path.write_text("P2\n2 2\n255\n1 2 3\n")
    with pytest.raises(InvalidImageFormatError):
        Image().load(str(path))


def test_describe_and_format_pixels():
    img = Image(2, 2, pixels=[[1, 2], [3, 4]], filename="a.pgm")
    assert img.describe() == "Imagen: a.pgm\nDimensiones: 2x2\n"
    assert img.format_pixels() == "1 2 \n3 4 \n"


def test_clear_resets_everything():
    img = Image(2, 2, filename="a.pgm", max_value=255)
    img.clear()
    assert (img.width, img.height, img.max_value) == (0, 0, 0)
    assert img.pixels == []
    assert img.filename == ""