"""Seeded image segmentation by shortest paths over the pixel grid."""

from __future__ import annotations

import heapq
from dataclasses import dataclass, field

INFINITE_COST = 2**63 - 1


@dataclass
class GraphNode:
    """A pixel as a graph vertex."""

    x: int = 0
    y: int = 0
    intensity: int = 0
    label: int = 0
    cost: int = INFINITE_COST
    visited: bool = False


@dataclass
class SegmentationGraph:
    """A 4-connected pixel grid whose edges weigh the intensity difference."""

    width: int = 0
    height: int = 0
    nodes: list[list[GraphNode]] = field(default_factory=list)

    def build(self, image: list[list[int]]) -> None:
        """Create one node per pixel of the given rows."""
        self.height = len(image)
        self.width = len(image[0]) if self.height > 0 else 0
        self.nodes = [
            [GraphNode(x, y, image[y][x]) for x in range(self.width)]
            for y in range(self.height)
        ]

    def neighbors(self, x: int, y: int, width: int, height: int) -> list[tuple[int, int]]:
        """Return the 4-connected neighbours of (x, y): left, right, up, down."""
        result = []
        if x > 0:
            result.append((x - 1, y))
        if x < width - 1:
            result.append((x + 1, y))
        if y > 0:
            result.append((x, y - 1))
        if y < height - 1:
            result.append((x, y + 1))
        return result

    def segment(self, seeds: list[tuple[int, int, int]]) -> None:
        """Label every reachable pixel with the label of its cheapest seed."""
        queue: list[tuple[int, int, int, int]] = []
        for x, y, label in seeds:
            if not (0 <= x < self.width and 0 <= y < self.height):
                raise IndexError(f"Semilla fuera de la imagen: ({x}, {y})")
            node = self.nodes[y][x]
            node.cost = 0
            node.label = label
            heapq.heappush(queue, (0, x, y, label))

        while queue:
            _, x, y, label = heapq.heappop(queue)
            current = self.nodes[y][x]
            if current.visited:
                continue
            current.visited = True
            for nx, ny in self.neighbors(x, y, self.width, self.height):
                neighbor = self.nodes[ny][nx]
                candidate = current.cost + abs(current.intensity - neighbor.intensity)
                if candidate < neighbor.cost:
                    neighbor.cost = candidate
                    neighbor.label = label
                    heapq.heappush(queue, (candidate, nx, ny, label))

    def labels(self) -> list[list[int]]:
        """Return the label of every pixel as rows."""
        return [[node.label for node in row] for row in self.nodes]