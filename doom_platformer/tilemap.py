# tilemap.py
# The static tile grid of one level and the queries collision is built on.
#
# Level rows are strings with one digit per tile:
#   0 empty, 1 solid, 2 one-way platform, 3 spikes, 4 background, 5 exit
#
# Anything outside the grid reads as EMPTY, so edge-of-map queries behave
# like open space instead of failing.

from __future__ import annotations
import math
from enum import IntEnum
from typing import Iterator

from . import settings


class Tile(IntEnum):
    EMPTY = 0
    SOLID = 1
    PLATFORM = 2      # one-way: only blocks things falling onto its top
    SPIKES = 3        # passable, hurts
    BACKGROUND = 4    # decorative
    EXIT = 5          # touching it completes the level


VALID_TILE_CHARS = frozenset(str(int(t)) for t in Tile)


class TileMap:
    def __init__(self, level):
        self.name = level.name
        self.width = level.width
        self.height = level.height
        self.player_start = level.player_start
        self.tiles: list[list[Tile]] = self.parse_rows(level.data)

        self.pixel_width = self.width * settings.TILE_SIZE
        self.pixel_height = self.height * settings.TILE_SIZE

    @staticmethod
    def parse_rows(rows: list[str]) -> list[list[Tile]]:
        return [[Tile(int(ch)) for ch in row] for row in rows]

    def to_rows(self) -> list[str]:
        return ["".join(str(int(t)) for t in row) for row in self.tiles]

    # --------------------------
    # Queries
    # --------------------------

    def in_bounds(self, tx: int, ty: int) -> bool:
        return 0 <= tx < self.width and 0 <= ty < self.height

    def tile_at(self, tx: int, ty: int) -> Tile:
        if not self.in_bounds(tx, ty):
            return Tile.EMPTY
        return self.tiles[ty][tx]

    def tile_at_pixel(self, px: float, py: float) -> Tile:
        tile_size = settings.TILE_SIZE
        return self.tile_at(math.floor(px / tile_size), math.floor(py / tile_size))

    def is_solid(self, tx: int, ty: int) -> bool:
        return self.tile_at(tx, ty) == Tile.SOLID

    def is_platform(self, tx: int, ty: int) -> bool:
        return self.tile_at(tx, ty) == Tile.PLATFORM

    def is_spikes(self, tx: int, ty: int) -> bool:
        return self.tile_at(tx, ty) == Tile.SPIKES

    def is_exit(self, tx: int, ty: int) -> bool:
        return self.tile_at(tx, ty) == Tile.EXIT

    def is_solid_at(self, px: float, py: float, prev_bottom: float | None = None) -> bool:
        """
        Is the point (px, py) blocked?

        SOLID always blocks. A PLATFORM only blocks a body whose bottom edge
        was at or above the platform's top on the previous step; pass that
        bottom as prev_bottom. Without it platforms read as open.
        """
        tile = self.tile_at_pixel(px, py)
        if tile == Tile.SOLID:
            return True
        if tile == Tile.PLATFORM and prev_bottom is not None:
            platform_top = math.floor(py / settings.TILE_SIZE) * settings.TILE_SIZE
            return prev_bottom <= platform_top
        return False

    def tiles_overlapping(self, x: float, y: float, w: float, h: float) -> Iterator[tuple[int, int, Tile]]:
        """Every (tx, ty, tile) cell touched by the box, in-bounds or not."""
        tile_size = settings.TILE_SIZE
        eps = 1e-6
        for ty in range(math.floor(y / tile_size), math.floor((y + h - eps) / tile_size) + 1):
            for tx in range(math.floor(x / tile_size), math.floor((x + w - eps) / tile_size) + 1):
                yield tx, ty, self.tile_at(tx, ty)

    # --------------------------
    # Editing
    # --------------------------

    def set_tile(self, tx: int, ty: int, tile: Tile) -> bool:
        if not self.in_bounds(tx, ty):
            return False
        self.tiles[ty][tx] = Tile(tile)
        return True
