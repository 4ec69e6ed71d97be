"""Grayscale PGM images and volumes: projections, Huffman coding, segmentation and an interactive shell."""

__version__ = "0.1.0"
__all__ = ["errors", "image", "volume", "graph", "huffman", "system", "cli"]