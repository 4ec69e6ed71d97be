"""Command handling for the grayscale image and volume processing system."""

from __future__ import annotations

import logging
from collections import Counter
from dataclasses import dataclass, field
from enum import IntEnum
from typing import Iterable, Iterator, Sequence

from .errors import ImageFileNotFoundError, ImagingError, InvalidImageFormatError
from .graph import SegmentationGraph
from .huffman import HuffmanTree
from .image import Image
from .volume import Volume

logger = logging.getLogger(__name__)


class Command(IntEnum):
    """Commands understood by the interactive system."""

    LOAD_IMAGE = 0
    LOAD_VOLUME = 1
    IMAGE_INFO = 2
    VOLUME_INFO = 3
    PROJECTION_2D = 4
    ENCODE_IMAGE = 5
    DECODE_FILE = 6
    SEGMENT = 7
    HELP = 8
    EXIT = 9
    INVALID = 10


_COMMAND_NAMES = {
    "cargar_imagen": Command.LOAD_IMAGE,
    "cargar_volumen": Command.LOAD_VOLUME,
    "info_imagen": Command.IMAGE_INFO,
    "info_volumen": Command.VOLUME_INFO,
    "proyeccion_2d": Command.PROJECTION_2D,
    "codificar_imagen": Command.ENCODE_IMAGE,
    "decodificar_archivo": Command.DECODE_FILE,
    "segmentar": Command.SEGMENT,
    "ayuda": Command.HELP,
    "salir": Command.EXIT,
}

UNKNOWN_COMMAND = (
    "(Error) Comando no reconocido. Usa 'ayuda' para ver los comandos disponibles.\n"
)

_GENERAL_HELP = (
    "\nComandos disponibles:\n"
    " cargar_imagen: Carga una imagen PGM en memoria.\n"
    " cargar_volumen: Carga una serie ordenada de imagenes PGM.\n"
    " info_imagen: Muestra informacion de la imagen cargada.\n"
    " info_volumen: Muestra informacion del volumen cargado.\n"
    " proyeccion_2D: Genera una proyección 2D del volumen.\n"
    " codificar_imagen: Codifica la imagen en memoria con Huffman.\n"
    " decodificar_archivo: Decodifica un archivo .huf a PGM.\n"
    " segmentar: Segmenta la imagen en memoria.\n"
    " ayuda: Muestra la lista de comandos disponibles.\n"
    " salir: Cierra el programa.\n"
    "\nPara más información sobre un comando, usa: ayuda [comando]\n"
)

_COMMAND_HELP = {
    Command.LOAD_IMAGE: (
        "\ncomando: cargar_imagen nombre_imagen.pgm\n"
        "salida en pantalla:\n"
        "(proceso satisfactorio) La imagen nombre_imagen.pgm ha sido cargada.\n"
        "(mensaje de error) La imagen nombre_imagen.pgm no ha podido ser cargada.\n"
        "descripción: El comando debe cargar en memoria (en la estructura más "
        "adecuada) la imagen identificada con el nombre_imagen.pgm . Una vez "
        "cargada la información en memoria, el comando debe mostrar el  mensaje "
        "de carga satisfactoria. Si por alguna razón no es posible cargar la "
        "imagen (nombre de archivo erróneo o no existe), el comando debe mostrar "
        "el mensaje de error. Solo es posible cargar una única imagen por sesión, "
        "de tal forma que si el comando es llamado nuevamente con otro nombre de "
        "archivo,  la nueva imagen sobre escribe en memoria a la que ya estaba "
        "cargada anteriormente.\n"
    ),
    Command.LOAD_VOLUME: (
        "\ncomando: cargar_volumen nombre_base n_im\n"
        "salida en pantalla:\n"
        "(proceso satisfactorio) El volumen nombre_base ha sido cargado.\n"
        "(mensaje de error) El volumen nombre_base no ha podido ser cargado.\n"
        "descripción: El comando debe cargar en memoria (en la estructura más "
        "adecuada) la serie ordenada de imágenes identificada con el nombre_base "
        "y cuyo tamaño corresponde a n_im imágenes (la serie podrá tener máximo "
        "99 imágenes). Todas las imágenes de la serie deben estar nombradas como "
        "nombre_base xx.pgm, donde xx corresponde a dos dígitos de identificación "
        "de la posición de la imagen en la serie (varía en el rango 01 - n_im ). "
        "Una vez cargada toda la información en memoria, el comando debe mostrar "
        "el mensaje de carga satisfactoria. Si por alguna razón no es posible "
        "cargar completamente la serie ordenada de imágenes (nombre de base "
        "erróneo, cantidad de imágenes no corresponde, error en alguna imagen), "
        "el comando debe mostrar el mensaje de error. Solo es posible cargar un "
        "único volumen por sesión, de tal forma que si el comando es llamado "
        "nuevamente con otro nombre base, el nuevo volumen sobreescribe en "
        "memoria al que ya estaba cargado anteriormente.\n"
    ),
    Command.IMAGE_INFO: (
        "\ncomando: info_imagen\n"
        "salida en pantalla:\n"
        "(proceso satisfactorio) Imagen cargada en memoria: nombre_imagen.pgm , "
        "ancho: W , alto: H .\n"
        "(mensaje de error) No hay una imagen cargada en memoria.\n"
        "descripción: El comando debe mostrar en pantalla la información básica "
        "de la imagen actualmente cargada en memoria: nombre de archivo, ancho en "
        "pixeles y alto en pixeles. Si no se ha cargado aún una imagen en "
        "memoria, el comando debe mostrar el mensaje de error.\n"
    ),
    Command.VOLUME_INFO: (
        "\ncomando: info_volumen\n"
        "salida en pantalla:\n"
        "(proceso satisfactorio) Volumen cargado en memoria: nombre_base , "
        "tamaño: n_im , ancho:W , alto: H .\n"
        "(mensaje de error) No hay un volumen cargado en memoria.\n"
        "descripción: El comando debe mostrar en pantalla la información básica "
        "del volumen (serie de imágenes) cargado actualmente en memoria: nombre "
        "base, cantidad de imágenes, ancho en pixeles y alto en pixeles. Si no se "
        "ha cargado aún un volumen en memoria, el comando debe mostrar el mensaje "
        "de error.\n"
    ),
    Command.PROJECTION_2D: (
        "\ncomando: proyeccion2D dirección criterio nombre_archivo.pgm\n"
        "salida en pantalla:\n"
        "(proceso satisfactorio) La proyección 2D del volumen en memoria ha sido "
        "generada y almacenada\nen el archivo nombre_archivo.pgm .\n"
        "(mensajes de error)\n"
        "El volumen aún no ha sido cargado en memoria.\n"
        "La proyección 2D del volumen en memoria no ha podido ser generada.\n"
        "descripción: El comando debe tomar la serie ordenada de imágenes (ya "
        "cargada en memoria), y de acuerdo a la dirección especificada por el "
        "usuario, debe recorrer cada posición en el plano perpendicular a la "
        "dirección dada, y para cada una de esas posiciones debe colapsar toda la "
        "información existente en la dirección dada utilizando el criterio "
        "especificado. Esto genera un único valor de píxel para cada posición del "
        "plano perpendicular, generando así una imagen 2D con la proyección de la "
        "información en el volumen. La dirección puede ser una entre x (en "
        "dirección de las columnas), y (en dirección de las filas) o z (en "
        "dirección de la profundidad). El criterio puede ser uno entre minimo (el "
        "valor mínimo de intensidad), maximo (el valor máximo de intensidad), "
        "promedio (el valor promedio de intensidad) o mediana (el valor mediana "
        "de intensidad). Una vez generada la proyección, debe guardarse como "
        "imagen en formato PGM como nombre_archivo.pgm . Es importante anotar que "
        "este comando solo puede funcionar sobre volúmenes (series de imágenes).\n"
    ),
    Command.ENCODE_IMAGE: (
        "\ncomando: codificar_imagen nombre_archivo.huf\n"
        "salida en pantalla:\n"
        "(proceso satisfactorio) La imagen en memoria ha sido codificada "
        "exitosamente y almacenada\nen el archivo nombre_archivo.huf .\n"
        "(mensaje de error) No hay una imagen cargada en memoria.\n"
        "descripción: El comando debe generar el archivo de texto con la "
        "correspondiente codificación de Huffman para la imagen que se encuentre "
        "actualmente cargada en memoria, almacenándolo en disco bajo el nombre "
        "nombre_archivo.huf . Si no se ha cargado aún una imagen en memoria, el "
        "comando debe mostrar el mensaje de error.\n"
    ),
    Command.DECODE_FILE: (
        "\ncomando: decodificar_archivo nombre_archivo.huf nombre_imagen.pgm\n"
        "salida en pantalla:\n"
        "(proceso satisfactorio) El archivo nombre_archivo.huf ha sido "
        "decodificado exitosamente, y la imagen correspondiente se ha almacenado "
        "en el archivo nombre_imagen.pgm . \n"
        "(mensaje de error) El archivo nombre_archivo.huf no ha podido ser "
        "decodificado. \n"
        "descripción: El comando debe cargar en memoria (en la estructura más "
        "adecuada) la información de codificación contenida en el archivo "
        "nombre_archivo.huf y luego debe generar la correspondiente imagen "
        "decodificada en formato PGM, almacenándola en disco bajo el nombre "
        "nombre_imagen.pgm . Si por alguna razón no es posible cargar la "
        "información de codificación (nombre de archivo erróneo o no existe), o "
        "no es posible realizar el proceso de decodificación (mal formato del "
        "archivo), el comando debe mostrar el mensaje de error.\n"
    ),
    Command.SEGMENT: (
        "\ncomando: segmentar salida_imagen.pgm sx1 sy1 sl1 sx2 sy2 sl2 ...\n"
        "salida en pantalla:\n"
        "(proceso satisfactorio) La imagen en memoria fue segmentada "
        "correctamente y almacenada en el archivo salida_imagen.pgm .\n"
        "(mensaje de error)\n"
        "No hay una imagen cargada en memoria.\n"
        "La imagen en memoria no pudo ser segmentada.\n"
        "descripción: El comando debe cargar la información del conjunto de "
        "semillas correspondiente a la imagen cargada en memoria, para luego "
        "proceder a su segmentación de acuerdo al algoritmo presentado "
        "anteriormente. El usuario puede ingresar un máximo de 5 semillas en el "
        "comando. La imagen con las etiquetas debe quedar guardada en "
        "salida_imagen.pgm . Si no se ha cargado aún una imagen en memoria, o por "
        "alguna razón no es posible realizar el proceso de segmentación (semillas "
        "mal ubicadas, problemas en la construcción del grafo), el comando debe "
        "mostrar el mensaje de error.\n"
    ),
}


def command_code(name: str) -> Command:
    """Return the command named by name, or Command.INVALID."""
    return _COMMAND_NAMES.get(name, Command.INVALID)


def help_text(command: str = "") -> str:
    """Return the general help, or the detailed help of one command."""
    if not command:
        return _GENERAL_HELP
    return _COMMAND_HELP.get(command_code(command.lower()), UNKNOWN_COMMAND)


def file_exists(path: str) -> bool:
    """Return True when path names a file that can be opened for reading."""
    try:
        with open(path, "rb"):
            return True
    except OSError:
        return False


def _tokens(text: str) -> Iterator[tuple[int, str]]:
    for line_no, line in enumerate(text.splitlines()):
        for token in line.split():
            yield line_no, token


def _parse_int(token: str | None) -> int | None:
    if token is None:
        return None
    try:
        return int(token)
    except ValueError:
        return None


def _read_width(tokens: Iterator[tuple[int, str]], path: str) -> int:
    # Comment lines are skipped only before the width, as the header allows.
    comment_line = None
    for line_no, token in tokens:
        if line_no == comment_line:
            continue
        if token.startswith("#"):
            comment_line = line_no
            continue
        width = _parse_int(token)
        if width is None:
            raise InvalidImageFormatError(
                f"(Error) La cabecera del archivo {path} es inválida."
            )
        return width
    raise InvalidImageFormatError(f"(Error) La cabecera del archivo {path} es inválida.")


def read_image(path: str) -> Image:
    """Read and validate a P2 image, allowing comments before the width."""
    if not path:
        raise ImagingError(
            "Debes especificar un nombre de archivo. Ejemplo: cargar_imagen foto.pgm"
        )
    if not file_exists(path):
        raise ImageFileNotFoundError(path)
    try:
        with open(path, encoding="latin-1") as handle:
            text = handle.read()
    except OSError as exc:
        raise ImagingError(f"(Error) No se pudo abrir el archivo {path}.") from exc

    tokens = _tokens(text)
    first = next(tokens, None)
    if first is None or first[1] != "P2":
        raise InvalidImageFormatError(
            f"(Error) El archivo {path} no es un archivo PGM valido."
        )

    width = _read_width(tokens, path)
    height = _parse_int(next((tok for _, tok in tokens), None))
    max_value = _parse_int(next((tok for _, tok in tokens), None))
    if (
        height is None
        or max_value is None
        or width <= 0
        or height <= 0
        or max_value <= 0
        or max_value > 255
    ):
        logger.warning("Valores inválidos en la cabecera del archivo.")
        raise InvalidImageFormatError(
            f"(Error) La cabecera del archivo {path} es inválida."
        )

    rows = []
    for _ in range(height):
        row = []
        for _ in range(width):
            entry = next(tokens, None)
            value = _parse_int(entry[1] if entry else None)
            if value is None:
                raise ImagingError(
                    "(Error) Problema al leer los datos de la imagen. "
                    "Faltan datos o formato incorrecto."
                )
            if value < 0:
                raise ImagingError("(Error) La imagen contiene valores negativos.")
            if value > max_value:
                raise ImagingError("(Error) Valor de píxel fuera del rango permitido.")
            row.append(value)
        rows.append(row)

    if next(tokens, None) is not None:
        raise ImagingError(
            f"(Error) El archivo {path} contiene datos adicionales después de los píxeles."
        )

    return Image(width, height, rows, filename=path, max_value=max_value)


def read_volume(base_name: str, count: int) -> Volume:
    """Read base_name01.pgm .. base_nameNN.pgm as a volume of equal-sized images.

    An empty base name or a count below 1 gives an empty volume.
    """
    if not base_name or count <= 0:
        logger.error(
            "Debes proporcionar un nombre base y un número de imágenes válidos."
        )
        return Volume()

    volume = Volume()
    reference: tuple[int, int] | None = None
    for index in range(1, count + 1):
        path = f"{base_name}{index:02d}.pgm"
        logger.info("Archivo: %s", path)
        if not file_exists(path):
            raise ImagingError(f"Error: El archivo {path} no existe.")
        try:
            image = read_image(path)
            size = (image.width, image.height)
            if reference is None:
                reference = size
            elif size != reference:
                raise ImagingError(
                    f"Error: La imagen {path} tiene dimensiones diferentes "
                    "a las de la primera imagen."
                )
            volume.add_image(image)
        except ImagingError as exc:
            raise ImagingError(f"Error al leer el archivo {path}: {exc}") from exc

    volume.base_name = base_name
    volume.count = count
    return volume


@dataclass
class ImageSystem:
    """Session state: one image, one volume and the last Huffman tree.

    Every command returns the text it reports on success and raises
    ImagingError on failure.
    """

    image: Image = field(default_factory=Image)
    image_loaded: bool = False
    volume: Volume = field(default_factory=Volume)
    volume_loaded: bool = False
    tree: HuffmanTree = field(default_factory=HuffmanTree)

    def reset(self) -> str:
        """Drop the loaded image and volume."""
        self.image.clear()
        self.volume.clear()
        self.image_loaded = False
        self.volume_loaded = False
        return "Datos borrados del sistema, hasta pronto!\n"

    def load_image(self, path: str) -> str:
        """Load the session image; only one image may be loaded."""
        if self.image_loaded:
            raise ImagingError(
                "Ya hay una imagen cargada en memoria. Por favor, usa 'info_imagen' "
                "para ver la informacion de la imagen actual."
            )
        try:
            self.image = read_image(path)
        except ImagingError as exc:
            self.image.clear()
            self.image_loaded = False
            raise ImagingError(f"Error al cargar la imagen: {exc}") from exc
        self.image_loaded = True
        return f"Imagen cargada con exito: {path}\n" + self.image.format_pixels()

    def load_volume(self, base_name: str, count: int) -> str:
        """Load the session volume; only one volume may be loaded."""
        if self.volume_loaded:
            raise ImagingError(
                "Ya hay un volumen cargado en memoria. Por favor, usa 'info_volumen' "
                "para ver la informacion del volumen actual."
            )
        try:
            volume = read_volume(base_name, count)
            if volume.count != count:
                raise ImagingError("Existio un error al cargar el volumen.")
        except ImagingError as exc:
            self.volume.clear()
            self.volume_loaded = False
            raise ImagingError(f"Error al cargar el volumen: {exc}") from exc
        self.volume = volume
        self.volume_loaded = True
        return (
            f"Volumen cargado con exito. Nombre base: {base_name}, "
            f"Cantidad de imágenes: {count}\n" + volume.describe()
        )

    def image_info(self) -> str:
        """Describe the loaded image."""
        if not self.image_loaded:
            raise ImagingError("No hay una imagen cargada en memoria.")
        return "Informacion de la imagen cargada en memoria \n" + self.image.describe()

    def volume_info(self) -> str:
        """Describe the loaded volume."""
        if not self.volume_loaded:
            raise ImagingError("No hay un volumen cargado en memoria.")
        return "Informacion del volumen cargado en memoria \n" + self.volume.describe()

    def projection_2d(self, direction: str, criterion: str, path: str) -> str:
        """Project the volume and save the result to path."""
        self.volume.project(direction, criterion, path)
        return "Proyección 2D completada con éxito.\n"

    def encode_image(self, path: str) -> str:
        """Huffman-code the loaded image into path."""
        if not self.image_loaded:
            raise ImagingError("No hay imagen cargada para codificar.")

        counts = Counter(value for row in self.image.pixels for value in row)
        frequencies = {value: counts[value] for value in sorted(counts)}
        self.tree.build(frequencies)
        self.tree.generate_codes()

        lines = [f"Valor: {value} -> Frecuencia: {n}" for value, n in frequencies.items()]
        lines.append("Códigos de Huffman:")
        lines.extend(
            f"Valor: {value} -> Código: {code}"
            for value, code in sorted(self.tree.codes.items())
        )

        self.tree.compress_image(
            path,
            self.image.width,
            self.image.height,
            self.image.max_value,
            frequencies,
            self.image.pixels,
        )
        lines.append(f"Imagen codificada y guardada en {path}")
        return "\n".join(lines) + "\n"

    def decode_file(self, source: str, target: str) -> str:
        """Decode a Huffman file and save the image to target."""
        try:
            decoded = self.tree.decompress_image(source)
            decoded.filename = target
            decoded.save(target)
        except ImagingError as exc:
            raise ImagingError(f"Error al decodificar archivo: {exc}") from exc
        return f"Imagen decodificada exitosamente desde {source}.\n"

    def segment(self, output: str, seeds: Iterable[Sequence[int]]) -> str:
        """Segment the loaded image from labelled seeds and save the labels."""
        if not self.image_loaded:
            raise ImagingError("No hay imagen cargada en memoria.")
        seed_list = [tuple(seed) for seed in seeds]
        if not seed_list:
            raise ImagingError(
                "Debes proporcionar al menos una semilla para la segmentación."
            )

        width, height = self.image.width, self.image.height
        for x, y, label in seed_list:
            if not (0 <= x < width and 0 <= y < height):
                raise ImagingError(
                    "Una de las semillas está fuera de los límites de la imagen."
                )
            if label > 255:
                raise ImagingError("La etiqueta de una semilla es mayor a 255.")

        graph = SegmentationGraph()
        graph.build(self.image.pixels)
        graph.segment(seed_list)

        result = Image(
            width,
            height,
            graph.labels(),
            filename=output,
            max_value=self.image.max_value,
        )
        result.save(output)
        return (
            "La imagen en memoria fue segmentada correctamente y almacenada "
            f"en el archivo {output}.\n"
        )