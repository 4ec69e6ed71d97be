import io

import pytest

from grayvol.cli import main, process_line
from grayvol.errors import ImagingError
from grayvol.system import UNKNOWN_COMMAND, ImageSystem, help_text, read_image

PIXELS = [[1, 2, 3], [4, 5, 6]]


def _write_pgm(path, rows, max_value=255):
    body = "\n".join(" ".join(str(v) for v in row) for row in rows)
    path.write_text(f"P2\n{len(rows[0])} {len(rows)}\n{max_value}\n{body}\n")
    return str(path)


@pytest.fixture
def system():
    return ImageSystem()


@pytest.fixture
def loaded(system, tmp_path):
    path = _write_pgm(tmp_path / "img.pgm", PIXELS)
    process_line(system, f"cargar_imagen {path}")
    return system


def test_general_help(system):
    assert process_line(system, "ayuda") == (help_text(""), False)


def test_command_help(system):
    text, finished = process_line(system, "ayuda cargar_imagen")
    assert text == help_text("cargar_imagen")
    assert "comando: cargar_imagen" in text
    assert finished is False


def test_unknown_command(system):
    assert process_line(system, "volar") == (UNKNOWN_COMMAND, False)


def test_blank_line_is_unknown(system):
    assert process_line(system, "   ") == (UNKNOWN_COMMAND, False)


def test_load_image_needs_name(system):
    text, _ = process_line(system, "cargar_imagen")
    assert text.startswith("(Error) Debes especificar un nombre de archivo.")


def test_load_missing_image_raises(system, tmp_path):
    with pytest.raises(ImagingError):
        process_line(system, f"cargar_imagen {tmp_path / 'nada.pgm'}")
    assert system.image_loaded is False


def test_load_then_info(loaded, tmp_path):
    assert loaded.image_loaded is True
    text, _ = process_line(loaded, "info_imagen")
    assert str(tmp_path / "img.pgm") in text


def test_info_without_image_raises(system):
    with pytest.raises(ImagingError, match="No hay una imagen cargada"):
        process_line(system, "info_imagen")


@pytest.mark.parametrize("line", ["cargar_volumen base", "cargar_volumen base abc"])
def test_load_volume_usage(system, line):
    text, _ = process_line(system, line)
    assert text == "(Error) Debes proporcionar un nombre base y un número de imágenes.\n"


def test_projection_usage(system):
    text, _ = process_line(system, "proyeccion_2d z maximo")
    assert text.startswith("(Error) Uso incorrecto.")


def test_decode_usage(system):
    text, _ = process_line(system, "decodificar_archivo solo.huf")
    assert text.startswith("(Error) Uso incorrecto.")


def test_segment_without_seeds(loaded):
    text, _ = process_line(loaded, "segmentar out.pgm")
    assert text.startswith("(Error) Debes ingresar al menos una semilla.")


def test_segment_too_many_seeds(loaded):
    seeds = " ".join("0 0 1" for _ in range(6))
    text, _ = process_line(loaded, f"segmentar out.pgm {seeds}")
    assert text == "(Error) Solo se permiten hasta 5 semillas.\n"


def test_segment_single_seed_labels_everything(loaded, tmp_path):
    out = tmp_path / "seg.pgm"
    text, finished = process_line(loaded, f"segmentar {out} 0 0 7")
    assert finished is False
    assert str(out) in text
    result = read_image(str(out))
    assert all(value == 7 for row in result.pixels for value in row)


def test_encode_decode_round_trip(loaded, tmp_path):
    huf = tmp_path / "img.huf"
    pgm = tmp_path / "back.pgm"
    process_line(loaded, f"codificar_imagen {huf}")
    process_line(loaded, f"decodificar_archivo {huf} {pgm}")
    assert read_image(str(pgm)).pixels == PIXELS


def test_exit_resets_loaded_image(loaded):
    text, finished = process_line(loaded, "salir")
    assert finished is True
    assert text.startswith("Saliendo del programa...")
    assert "Datos borrados del sistema" in text
    assert loaded.image_loaded is False


def test_exit_without_data(system):
    assert process_line(system, "salir") == ("Saliendo del programa...\n", True)


def test_main_runs_until_exit(monkeypatch, capsys):
    monkeypatch.setattr("sys.stdin", io.StringIO("ayuda\nsalir\nayuda\n"))
    assert main([]) == 0
    out = capsys.readouterr().out
    assert "Saliendo del programa..." in out
    assert out.count("Comandos disponibles:") == 1


def test_main_ends_at_eof(monkeypatch, capsys):
    monkeypatch.setattr("sys.stdin", io.StringIO(""))
    assert main([]) == 0
    assert "Escriba 'ayuda'" in capsys.readouterr().out


def test_main_reports_errors(monkeypatch, capsys):
    monkeypatch.setattr("sys.stdin", io.StringIO("info_imagen\nsalir\n"))
    assert main([]) == 0
    err = capsys.readouterr().err
    assert "(Error) No hay una imagen cargada en memoria." in err