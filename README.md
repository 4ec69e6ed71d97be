# grayvol

An interactive shell and a small library for grayscale images in plain PGM
(`P2`) format, and for volumes built from a numbered series of such images.
It can:

- load a single image and show its name and size;
- load a volume, a stack of equally sized images named `<base>01.pgm`,
  `<base>02.pgm`, …;
- reduce a volume to a 2D image by minimum, maximum, average or median;
- compress the loaded image with Huffman coding into a binary file, and
  decode such a file back into a PGM image;
- segment the loaded image from up to five labelled seed points, growing
  regions along the cheapest paths of intensity differences between
  4-connected pixels.

The program has no dependencies outside the standard library.

## Installation

```
pip install .
```

## Running the shell

```
grayvol
```

The shell prints a banner and then reads one command per line after the
`$ ` prompt, until `salir` or the end of input. Results go to standard
output; errors are printed to standard error as `(Error) ...` and the
session continues.

| Command | Arguments |
|---|---|
| `cargar_imagen` | `image.pgm` |
| `cargar_volumen` | `base_name n_images` |
| `info_imagen` | |
| `info_volumen` | |
| `proyeccion_2d` | `direction criterion output.pgm` |
| `codificar_imagen` | `output.huf` |
| `decodificar_archivo` | `input.huf output.pgm` |
| `segmentar` | `output.pgm x1 y1 label1 [x2 y2 label2 ...]` |
| `ayuda` | `[command]` |
| `salir` | |

Notes on the commands:

- Only one image and one volume can be loaded per session; a second
  `cargar_imagen` or `cargar_volumen` is reported as an error.
- Images loaded by `cargar_imagen` and `cargar_volumen` may have comment
  lines (starting with `#`) before the width, must have a maximum value in
  1..255, pixels in 0..maximum, and no data after the last pixel.
- `proyeccion_2d` takes a direction of `x`, `y` or `z` and a criterion of
  `minimo`, `maximo`, `promedio` or `mediana`; an unknown criterion gives 0.
  `z` and `y` both reduce every pixel position across the stack. `x` gives
  an image `n_images` wide; its leading columns are filled with a single
  value, the reduction of the last row of the last image.
- `segmentar` accepts at most five seeds; each seed must lie inside the
  image and its label must not exceed 255. The label image is saved as PGM.
- `ayuda` alone lists the commands; `ayuda <command>` describes one.

Example session:

```
$ cargar_imagen photo.pgm
$ codificar_imagen photo.huf
$ decodificar_archivo photo.huf copy.pgm
$ segmentar labels.pgm 5 10 100 40 40 200
$ salir
```

## The Huffman file

`codificar_imagen` writes, little-endian: width and height as 16-bit
integers, the maximum value as an 8-bit integer, one 64-bit frequency for
each value from 0 to the maximum, a 32-bit count of coded bits, and then
the bits packed most significant first. `decodificar_archivo` reads the
same layout, rebuilds the tree from the frequencies and writes the image
as PGM with a maximum value of 255.

## Using it from Python

```python
from grayvol.image import Image
from grayvol.volume import Volume, reduce_values
from grayvol.graph import SegmentationGraph
from grayvol.huffman import HuffmanTree
from grayvol.system import ImageSystem, read_image, read_volume

system = ImageSystem()
print(system.load_image("photo.pgm"))
print(system.encode_image("photo.huf"))
print(system.segment("labels.pgm", [(5, 10, 100), (40, 40, 200)]))

reduce_values([3, 1, 2], "mediana")  # 2
```

- `grayvol.image.Image` holds width, height, pixel rows, file name and
  maximum value, with `get_pixel`, `set_pixel`, `load`, `save`, `describe`,
  `format_pixels` and `clear`.
- `grayvol.volume.Volume` holds a list of images with `add_image`,
  `get_image`, `describe`, `clear` and `project`.
- `grayvol.graph.SegmentationGraph` offers `build`, `segment`, `labels`
  and `neighbors`.
- `grayvol.huffman.HuffmanTree` offers `build`, `generate_codes`,
  `encode_value`, `decode_sequence`, `compress_image` and
  `decompress_image`.
- `grayvol.system.ImageSystem` keeps the session state; each of its
  commands returns the text it reports and raises on failure.
  `grayvol.cli.process_line` runs one shell line against a system.

Errors are raised as `grayvol.errors.ImagingError` or one of its
subclasses: `ImageFileNotFoundError`, `InvalidImageFormatError` and
`InvalidPixelValueError`.

## Running the tests

```
pip install .[test]
pytest
```