"""Grayscale images stored in plain PGM (P2) format."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator

from .errors import (
    ImageFileNotFoundError,
    ImagingError,
    InvalidImageFormatError,
    InvalidPixelValueError,
)

_OUT_OF_RANGE = "Coordenadas de píxel fuera de rango."


def _next_int(tokens: Iterator[str]) -> int | None:
    token = next(tokens, None)
    if token is None:
        return None
    try:
        return int(token)
    except ValueError:
        return None


@dataclass
class Image:
    """A grayscale image held as rows of integer intensities."""

    width: int = 0
    height: int = 0
    pixels: list[list[int]] | None = None
    filename: str = ""
    max_value: int = 0

    def __post_init__(self) -> None:
        if self.pixels is None:
            self.pixels = [[0] * self.width for _ in range(self.height)]

    def _check_bounds(self, x: int, y: int) -> None:
        if not (0 <= x < self.width and 0 <= y < self.height):
            raise ImagingError(_OUT_OF_RANGE)

    def get_pixel(self, x: int, y: int) -> int:
        """Return the intensity at column x, row y."""
        self._check_bounds(x, y)
        return self.pixels[y][x]

    def set_pixel(self, x: int, y: int, value: int) -> None:
        """Set the intensity at column x, row y to a value in 0..255."""
        self._check_bounds(x, y)
        if not 0 <= value <= 255:
            raise InvalidPixelValueError(x, y, value)
        self.pixels[y][x] = value

    def load(self, path: str) -> None:
        """Read a P2 image from path into this image."""
        try:
            with open(path, encoding="latin-1") as handle:
                text = handle.read()
        except OSError as exc:
            raise ImageFileNotFoundError(path) from exc

        tokens = iter(text.split())
        if next(tokens, None) != "P2":
            raise InvalidImageFormatError("Se esperaba formato PGM (P2).")

        width, height, max_value = (_next_int(tokens) for _ in range(3))
        if (
            width is None
            or height is None
            or max_value is None
            or width <= 0
            or height <= 0
            or max_value > 255
        ):
            raise InvalidImageFormatError(
                "Dimensiones o valor máximo de intensidad no válidos."
            )

        rows = []
        for y in range(height):
            row = []
            for x in range(width):
                value = _next_int(tokens)
                if value is None:
                    raise InvalidImageFormatError(
                        "Faltan datos de píxeles o formato incorrecto."
                    )
                if not 0 <= value <= 255:
                    raise InvalidPixelValueError(x, y, value)
                row.append(value)
            rows.append(row)

        self.width = width
        self.height = height
        self.max_value = max_value
        self.pixels = rows
        self.filename = path

    def save(self, path: str) -> None:
        """Write this image to path as a P2 file with maximum value 255."""
        lines = ["P2", f"{self.width} {self.height}", "255"]
        lines.extend(
            "".join(f"{self.pixels[y][x]} " for x in range(self.width))
            for y in range(self.height)
        )
        try:
            with open(path, "w", encoding="ascii") as handle:
                handle.write("\n".join(lines) + "\n")
        except OSError as exc:
            raise ImageFileNotFoundError(path) from exc

    def describe(self) -> str:
        """Return the file name and dimensions as text."""
        return f"Imagen: {self.filename}\nDimensiones: {self.width}x{self.height}\n"

    def format_pixels(self) -> str:
        """Return every row of pixels as a line of space-separated values."""
        return "".join(
            "".join(f"{value} " for value in row) + "\n" for row in self.pixels
        )

    def clear(self) -> None:
        """Drop all data held by the image."""
        self.width = 0
        self.height = 0
        self.max_value = 0
        self.pixels = []
        self.filename = ""