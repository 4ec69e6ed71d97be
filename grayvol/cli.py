"""Interactive command line for the grayscale image and volume system."""

from __future__ import annotations

import argparse
import logging
import re
import sys
from typing import Sequence

from .errors import ImagingError
from .system import UNKNOWN_COMMAND, Command, ImageSystem, command_code, help_text

MAX_SEEDS = 5

_BANNER = (
    "\nSistema de procesamiento de imagenes en escala de grises.\n\n"
    "Escriba 'ayuda' para ver los comandos disponibles.\n\n"
)
_PROMPT = "$ "
_LEADING_INT = re.compile(r"[+-]?\d+")


def _leading_int(token: str | None) -> int | None:
    """Read an integer from the start of token, ignoring any trailing text."""
    if token is None:
        return None
    match = _LEADING_INT.match(token)
    return int(match.group()) if match else None


def _parse_seeds(tokens: Sequence[str]) -> list[tuple[int, int, int]]:
    """Read complete (x, y, label) triples until one cannot be read."""
    seeds = []
    for start in range(0, len(tokens) - len(tokens) % 3, 3):
        try:
            x, y, label = (int(tok) for tok in tokens[start : start + 3])
        except ValueError:
            break
        seeds.append((x, y, label))
    return seeds


def process_line(system: ImageSystem, line: str) -> tuple[str, bool]:
    """Run one command line against system.

    Returns the text to show and whether the session should end.
    Errors reported by the system are raised as ImagingError.
    """
    words = line.split()
    if not words:
        return UNKNOWN_COMMAND, False
    name, args = words[0], words[1:]
    command = command_code(name)

    if command is Command.EXIT:
        text = "Saliendo del programa...\n"
        if system.image.width > 0 or system.volume.count > 0:
            text += system.reset()
        return text, True

    if command is Command.HELP:
        return help_text(args[0] if args else ""), False

    if command is Command.LOAD_IMAGE:
        if not args:
            return (
                "(Error) Debes especificar un nombre de archivo. "
                "Ejemplo: cargar_imagen foto.pgm\n",
                False,
            )
        return system.load_image(args[0]), False

    if command is Command.LOAD_VOLUME:
        count = _leading_int(args[1]) if len(args) >= 2 else None
        if count is None:
            return (
                "(Error) Debes proporcionar un nombre base y un número de imágenes.\n",
                False,
            )
        return system.load_volume(args[0], count), False

    if command is Command.IMAGE_INFO:
        return system.image_info(), False

    if command is Command.VOLUME_INFO:
        return system.volume_info(), False

    if command is Command.PROJECTION_2D:
        if len(args) < 3:
            return (
                "(Error) Uso incorrecto. Ejemplo: proyeccion2D X max salida.pgm\n",
                False,
            )
        direction, criterion, path = args[:3]
        return system.projection_2d(direction, criterion, path), False

    if command is Command.ENCODE_IMAGE:
        if not args:
            return "(Error) Debes especificar un nombre de archivo.\n", False
        return system.encode_image(args[0]), False

    if command is Command.DECODE_FILE:
        if len(args) < 2:
            return (
                "(Error) Uso incorrecto. Ejemplo: decodificar_archivo "
                "archivo.txt salida.pgm\n",
                False,
            )
        return system.decode_file(args[0], args[1]), False

    if command is Command.SEGMENT:
        output = args[0] if args else ""
        seeds = _parse_seeds(args[1:])
        if not seeds:
            return (
                "(Error) Debes ingresar al menos una semilla. "
                "Ejemplo: segmentar salida.pgm 5 10 100\n",
                False,
            )
        if len(seeds) > MAX_SEEDS:
            return "(Error) Solo se permiten hasta 5 semillas.\n", False
        return system.segment(output, seeds), False

    return UNKNOWN_COMMAND, False


def main(argv: Sequence[str] | None = None) -> int:
    """Run the interactive session on standard input until 'salir' or end of input."""
    parser = argparse.ArgumentParser(
        prog="grayvol",
        description="Procesamiento interactivo de imagenes en escala de grises.",
    )
    parser.parse_args(argv)
    logging.basicConfig(level=logging.INFO, format="%(message)s", stream=sys.stderr)

    system = ImageSystem()
    print(_BANNER, end="")
    while True:
        try:
            line = input(_PROMPT)
        except EOFError:
            print()
            return 0
        try:
            text, finished = process_line(system, line)
        except ImagingError as exc:
            print(f"(Error) {exc}", file=sys.stderr)
            continue
        except Exception as exc:  # keep the session alive on unexpected failures
            print(f"(Error inesperado) {exc}", file=sys.stderr)
            continue
        print(text, end="")
        if finished:
            return 0