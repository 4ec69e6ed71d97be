"""Ordered series of grayscale images and their 2D projections."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from .errors import ImagingError
from .image import Image

logger = logging.getLogger(__name__)


def _trunc_div(numerator: int, denominator: int) -> int:
    quotient = abs(numerator) // abs(denominator)
    return quotient if (numerator >= 0) == (denominator > 0) else -quotient


def reduce_values(values: list[int], criterion: str) -> int:
    """Collapse values to one intensity with minimo, maximo, promedio or mediana.

    An empty list or an unknown criterion gives 0.
    """
    if not values:
        return 0
    if criterion == "minimo":
        return min(values)
    if criterion == "maximo":
        return max(values)
    if criterion == "promedio":
        return _trunc_div(sum(values), len(values))
    if criterion == "mediana":
        ordered = sorted(values)
        mid = len(ordered) // 2
        if len(ordered) % 2 == 0:
            return _trunc_div(ordered[mid - 1] + ordered[mid], 2)
        return ordered[mid]
    logger.warning("Criterio inválido. Usando valor 0")
    return 0


@dataclass
class Volume:
    """A stack of equally sized images loaded from a common base name."""

    images: list[Image] = field(default_factory=list)
    base_name: str = ""
    count: int = 0

    def add_image(self, image: Image) -> None:
        """Append an image to the stack."""
        self.images.append(image)
        self.count = len(self.images)

    def get_image(self, index: int) -> Image:
        """Return the image at index."""
        if 0 <= index < len(self.images):
            return self.images[index]
        raise IndexError("Índice de imagen fuera de rango")

    def describe(self) -> str:
        """Return the base name, image count and dimensions as text."""
        if not self.images:
            return "Volumen vacío\n"
        first = self.images[0]
        return (
            f"Nombre del volumen: {self.base_name}\n"
            f"Cantidad de imágenes: {self.count}\n"
            f"Dimensiones (ancho x alto): {first.width} x {first.height}\n"
        )

    def clear(self) -> None:
        """Drop every image."""
        self.images.clear()
        self.count = 0
        self.base_name = ""

    def project(self, direction: str, criterion: str, path: str) -> Image:
        """Project the volume along x, y or z, save the result to path and return it."""
        if not self.images:
            raise ImagingError("Volumen vacío")

        depth = len(self.images)
        width = self.images[0].width
        height = self.images[0].height

        if direction in ("z", "y"):
            result = Image(width, height)
        elif direction == "x":
            result = Image(depth, height)
        else:
            raise ImagingError("Dirección inválida. Use 'x', 'y' o 'z'")

        try:
            if direction == "x":
                self._fill_x(result, criterion, width, height)
            else:
                # The y direction is computed on the XY plane, like z.
                for y in range(height):
                    for x in range(width):
                        values = [img.get_pixel(x, y) for img in self.images]
                        result.set_pixel(x, y, reduce_values(values, criterion))
        except (ImagingError, IndexError) as exc:
            raise ImagingError(f"Error durante la proyección: {exc}") from exc

        result.save(path)
        return result

    def _fill_x(self, result: Image, criterion: str, width: int, height: int) -> None:
        # Each row of every slice is reduced in turn; the leading `width`
        # columns of the result end up holding the reduction of the last one.
        value = None
        for image in self.images:
            for y in range(height):
                row = [image.get_pixel(x, y) for x in range(width)]
                value = reduce_values(row, criterion)
        if value is None:
            return
        for x in range(width):
            for y in range(height):
                result.set_pixel(x, y, value)