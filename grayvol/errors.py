"""Exceptions raised by the grayscale imaging tools."""


class ImagingError(Exception):
    """Base class for every error reported by the imaging system."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return self.message


class ImageFileNotFoundError(ImagingError):
    """A file could not be found or opened."""

    def __init__(self, filename: str) -> None:
        super().__init__(f"Archivo no encontrado: {filename}")
        self.filename = filename


class InvalidImageFormatError(ImagingError):
    """An image file does not follow the expected format."""

    def __init__(self, detail: str) -> None:
        super().__init__(f"Formato de imagen no válido: {detail}")
        self.detail = detail


class InvalidPixelValueError(ImagingError):
    """A pixel value lies outside the range 0..255."""

    def __init__(self, x: int, y: int, value: int) -> None:
        super().__init__(f"Valor de píxel no válido en ({x}, {y}): {value}")
        self.x = x
        self.y = y
        self.value = value