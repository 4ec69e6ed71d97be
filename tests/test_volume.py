import pytest

from grayvol.errors import ImagingError
from grayvol.image import Image
from grayvol.volume import Volume, reduce_values


def _volume(*grids):
    vol = Volume(base_name="serie")
    for grid in grids:
        vol.add_image(Image(len(grid[0]), len(grid), pixels=[r[:] for r in grid]))
    return vol


@pytest.mark.parametrize(
    "criterion,expected",
    [("minimo", 1), ("maximo", 9), ("mediana", 5)],
)
def test_reduce_values_odd(criterion, expected):
    assert reduce_values([9, 1, 5], criterion) == expected


def test_reduce_values_average_truncates():
    assert reduce_values([10, 20], "promedio") == 15
    assert reduce_values([1, 2], "promedio") == 1


def test_reduce_values_median_even():
    assert reduce_values([4, 1, 3, 2], "mediana") == 2


def test_reduce_values_does_not_mutate_input():
    values = [3, 1, 2]
    reduce_values(values, "mediana")
    assert values == [3, 1, 2]


def test_reduce_values_empty_and_unknown():
    assert reduce_values([], "maximo") == 0
    assert reduce_values([7, 8], "moda") == 0


def test_add_and_get_image():
    vol = _volume([[1]], [[2]])
    assert vol.count == 2
    assert vol.get_image(1).pixels == [[2]]
    with pytest.raises(IndexError):
        vol.get_image(2)
    with pytest.raises(IndexError):
        vol.get_image(-1)


def test_describe_empty_and_loaded():
    assert Volume().describe() == "Volumen vacío\n"
    text = _volume([[1, 2]], [[3, 4]]).describe()
    assert "Nombre del volumen: serie" in text
    assert "Cantidad de imágenes: 2" in text
    assert "2 x 1" in text


def test_clear():
    vol = _volume([[1]])
    vol.clear()
    assert vol.images == []
    assert vol.count == 0
    assert vol.base_name == ""


@pytest.mark.parametrize("direction", ["z", "y"])
def test_project_along_depth(tmp_path, direction):
    vol = _volume([[1, 8], [3, 4]], [[5, 2], [7, 0]])
    path = tmp_path / "p.pgm"
    result = vol.project(direction, "maximo", str(path))
    assert result.pixels == [[5, 8], [7, 4]]
    reloaded = Image()
    reloaded.load(str(path))
    assert reloaded.pixels == result.pixels


def test_project_min_along_z():
    vol = _volume([[1, 8]], [[5, 2]])
    result = vol.project("z", "minimo", "/dev/null")
    assert result.pixels == [[1, 2]]


def test_project_x_fills_leading_columns(tmp_path):
    vol = _volume([[1, 2]], [[3, 4]], [[5, 6]])
    result = vol.project("x", "maximo", str(tmp_path / "x.pgm"))
    assert (result.width, result.height) == (3, 1)
    assert result.pixels == [[6, 6, 0]]


def test_project_x_wider_than_deep_fails(tmp_path):
    vol = _volume([[1, 2, 3]])
    with pytest.raises(ImagingError, match="proyección"):
        vol.project("x", "maximo", str(tmp_path / "x.pgm"))


def test_project_errors(tmp_path):
    with pytest.raises(ImagingError):
        Volume().project("z", "maximo", str(tmp_path / "a.pgm"))
    with pytest.raises(ImagingError, match="Dirección"):
        _volume([[1]]).project("w", "maximo", str(tmp_path / "a.pgm"))