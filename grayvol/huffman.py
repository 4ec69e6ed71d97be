"""Huffman coding of grayscale images into a compact binary file."""

from __future__ import annotations

import heapq
import itertools
import logging
import struct
from dataclasses import dataclass, field
from typing import Mapping, Sequence

from .errors import ImageFileNotFoundError, ImagingError, InvalidImageFormatError
from .image import Image

logger = logging.getLogger(__name__)

_HEADER = struct.Struct("<HHB")
_FREQUENCY = struct.Struct("<Q")
_BIT_COUNT = struct.Struct("<I")


@dataclass
class HuffmanNode:
    """A node of a Huffman tree; leaves carry a symbol value."""

    value: int
    frequency: int
    left: HuffmanNode | None = None
    right: HuffmanNode | None = None

    def is_leaf(self) -> bool:
        """Return True when the node has no children."""
        return self.left is None and self.right is None


@dataclass
class HuffmanTree:
    """A Huffman tree over integer symbols and its table of codes."""

    root: HuffmanNode | None = None
    codes: dict[int, str] = field(default_factory=dict)

    def is_empty(self) -> bool:
        """Return True when no tree has been built."""
        return self.root is None

    def build(self, frequencies: Mapping[int, int]) -> None:
        """Build the tree from a mapping of symbol to frequency.

        Ties are broken by insertion order, with leaves inserted in
        ascending symbol order, so equal inputs always give equal trees.
        """
        if not frequencies:
            raise ValueError("El mapa de frecuencias está vacío")

        order = itertools.count()
        queue: list[tuple[int, int, HuffmanNode]] = []
        for value in sorted(frequencies):
            node = HuffmanNode(value, frequencies[value])
            heapq.heappush(queue, (node.frequency, next(order), node))

        while len(queue) > 1:
            _, _, left = heapq.heappop(queue)
            _, _, right = heapq.heappop(queue)
            parent = HuffmanNode(0, left.frequency + right.frequency, left, right)
            heapq.heappush(queue, (parent.frequency, next(order), parent))

        self.root = queue[0][2]

    def generate_codes(self) -> None:
        """Fill the code table by walking the tree: 0 for left, 1 for right."""
        self.codes = {}
        if self.root is None:
            return
        stack: list[tuple[HuffmanNode, str]] = [(self.root, "")]
        while stack:
            node, path = stack.pop()
            if node.is_leaf():
                self.codes[node.value] = path
                continue
            if node.right is not None:
                stack.append((node.right, path + "1"))
            if node.left is not None:
                stack.append((node.left, path + "0"))

    def encode_value(self, value: int) -> str:
        """Return the code of a symbol."""
        try:
            return self.codes[value]
        except KeyError:
            raise ImagingError("Dato no encontrado en la tabla de códigos") from None

    def decode_sequence(self, bits: str, pos: int) -> tuple[int, int]:
        """Decode one symbol from bits starting at pos.

        Returns the symbol and the position just after its code.
        """
        if self.root is None:
            raise ImagingError("Árbol no inicializado")

        node = self.root
        while not node.is_leaf() and pos < len(bits):
            bit = bits[pos]
            if bit == "0":
                node = node.left
            elif bit == "1":
                node = node.right
            else:
                raise ImagingError("Bit no válido en la secuencia")
            pos += 1

        if not node.is_leaf():
            raise ImagingError("Secuencia de bits incompleta")
        return node.value, pos

    def compress_image(
        self,
        path: str,
        width: int,
        height: int,
        max_value: int,
        frequencies: Mapping[int, int],
        pixels: Sequence[Sequence[int]],
    ) -> None:
        """Write the pixels, coded with the current table, to a binary file.

        The layout is: width and height as 16-bit, the maximum value as
        8-bit, one 64-bit frequency for each value 0..max, a 32-bit count
        of coded bits and the bits packed most significant first.
        """
        bit_string = "".join(
            self._code_for_pixel(value) for row in pixels for value in row
        )

        max_byte = max_value & 0xFF
        chunks = [_HEADER.pack(width & 0xFFFF, height & 0xFFFF, max_byte)]
        chunks.extend(
            _FREQUENCY.pack(frequencies.get(value, 0)) for value in range(max_byte + 1)
        )
        chunks.append(_BIT_COUNT.pack(len(bit_string)))
        chunks.append(_pack_bits(bit_string))

        try:
            with open(path, "wb") as handle:
                handle.write(b"".join(chunks))
        except OSError as exc:
            raise ImageFileNotFoundError(path) from exc

    def _code_for_pixel(self, value: int) -> str:
        try:
            return self.codes[value]
        except KeyError:
            raise ImagingError(
                f"No se encontró código Huffman para el valor de píxel: {value}"
            ) from None

    def decompress_image(self, path: str) -> Image:
        """Read a file written by compress_image and return the decoded image."""
        try:
            with open(path, "rb") as handle:
                data = handle.read()
        except OSError as exc:
            raise ImageFileNotFoundError(path) from exc

        if len(data) < _HEADER.size:
            raise InvalidImageFormatError("Error al leer el encabezado de la imagen.")
        width, height, max_value = _HEADER.unpack_from(data, 0)
        offset = _HEADER.size

        frequencies: dict[int, int] = {}
        for value in range(max_value + 1):
            if offset + _FREQUENCY.size > len(data):
                raise InvalidImageFormatError("Tabla de frecuencias incompleta.")
            (frequency,) = _FREQUENCY.unpack_from(data, offset)
            offset += _FREQUENCY.size
            if frequency:
                frequencies[value] = frequency

        tree = HuffmanTree()
        try:
            tree.build(frequencies)
        except ValueError as exc:
            raise InvalidImageFormatError(
                "Árbol Huffman no pudo ser construido."
            ) from exc

        if offset + _BIT_COUNT.size > len(data):
            raise InvalidImageFormatError(
                "No se pudo leer la cantidad de bits codificados."
            )
        (bit_count,) = _BIT_COUNT.unpack_from(data, offset)
        offset += _BIT_COUNT.size

        byte_count = (bit_count + 7) // 8
        payload = data[offset : offset + byte_count].ljust(byte_count, b"\x00")
        bit_string = "".join(f"{byte:08b}" for byte in payload)[:bit_count]

        pos = 0
        rows = []
        for _ in range(height):
            row = []
            for _ in range(width):
                value, pos = tree.decode_sequence(bit_string, pos)
                row.append(value)
            rows.append(row)

        logger.info("Imagen decodificada exitosamente desde %s.", path)
        return Image(width, height, rows, max_value=max_value)


def _pack_bits(bit_string: str) -> bytes:
    if not bit_string:
        return b""
    padded = bit_string + "0" * (-len(bit_string) % 8)
    return int(padded, 2).to_bytes(len(padded) // 8, "big")