[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "grayvol"
version = "0.1.0"
description = "Grayscale PGM images and volumes: 2D projections, Huffman coding and seeded segmentation"
requires-python = ">=3.10"
dependencies = []
keywords = ["pgm", "grayscale", "huffman", "segmentation", "volume", "projection"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: Console",
    "Intended Audience :: Science/Research",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Scientific/Engineering :: Image Processing",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
grayvol = "grayvol.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["grayvol"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
