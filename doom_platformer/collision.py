# collision.py
# Entity-vs-entity overlap tests.
#
# Narrow phase is always aabb_overlap. The broad phase only narrows down
# which pairs are worth testing; at tens of entities brute force is fine,
# and the grid is there for editor-built levels that get crowded.

from __future__ import annotations
import math
from collections import defaultdict
from typing import Iterable, Protocol, TypeVar

from . import settings


class Box(Protocol):
    x: float
    y: float
    w: float
    h: float


T = TypeVar("T")


def aabb_overlap(a, b) -> bool:
    """Strict overlap: boxes that only share an edge do not touch."""
    return (
        a.x < b.x + b.w
        and a.x + a.w > b.x
        and a.y < b.y + b.h
        and a.y + a.h > b.y
    )


class BruteForcePhase:
    """Every body is a candidate."""

    def __init__(self, bodies: Iterable = ()):
        self.bodies = list(bodies)

    def rebuild(self, bodies: Iterable) -> None:
        self.bodies = list(bodies)

    def candidates(self, box) -> list:
        return list(self.bodies)


class SpatialHashGrid:
    """Buckets bodies by the grid cells their boxes cover."""

    def __init__(self, cell_size: float = settings.TILE_SIZE * 4, bodies: Iterable = ()):
        self.cell_size = cell_size
        self.cells: dict[tuple[int, int], list] = defaultdict(list)
        self.rebuild(bodies)

    def _cells_for(self, box) -> Iterable[tuple[int, int]]:
        size = self.cell_size
        for cy in range(math.floor(box.y / size), math.floor((box.y + box.h) / size) + 1):
            for cx in range(math.floor(box.x / size), math.floor((box.x + box.w) / size) + 1):
                yield cx, cy

    def rebuild(self, bodies: Iterable) -> None:
        self.cells.clear()
        for body in bodies:
            self.insert(body)

    def insert(self, body) -> None:
        for cell in self._cells_for(body):
            self.cells[cell].append(body)

    def candidates(self, box) -> list:
        seen = set()
        found = []
        for cell in self._cells_for(box):
            for body in self.cells.get(cell, ()):
                if id(body) not in seen:
                    seen.add(id(body))
                    found.append(body)
        return found


def overlapping(box, bodies: Iterable[T], broad_phase=None) -> list[T]:
    """Bodies whose boxes overlap box, optionally pre-filtered by a broad phase."""
    pool = broad_phase.candidates(box) if broad_phase is not None else bodies
    return [body for body in pool if body is not box and aabb_overlap(box, body)]
