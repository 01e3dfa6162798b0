# physics.py
# Shared movement for everything that walks, falls or flies through the tile grid.
#
# Integration per tick:
#   vel.y += gravity * dt (clamped to MAX_FALL_SPEED)
#   friction on vel.x when nothing is pushing
#   move X and resolve against tiles, then move Y and resolve
#
# Resolution is swept: every tile row/column the leading edge crosses this
# step is checked in order, so a fast body cannot skip over a thin floor.

from __future__ import annotations
import math
from enum import Enum

import pygame

from . import settings
from .tilemap import Tile, TileMap

EPSILON = 1e-6


class LifeState(Enum):
    ALIVE = "alive"
    DYING = "dying"   # death animation / respawn wait
    DEAD = "dead"     # eligible for removal


def clamp_frame_dt(raw_dt: float) -> float:
    """Normalize a raw frame delta: negative or NaN -> 0, capped at MAX_FRAME_DT."""
    if raw_dt != raw_dt or raw_dt <= 0.0:
        return 0.0
    return min(float(raw_dt), settings.MAX_FRAME_DT)


def friction_factor(friction: float, dt: float) -> float:
    """Per-frame friction (tuned at 60 FPS) converted to this dt."""
    return friction ** (dt * settings.FRICTION_REFERENCE_FPS)


class Body:
    """A box with a float position and velocity that collides with the tilemap."""

    def __init__(self, x: float, y: float, width: float, height: float):
        self.pos = pygame.Vector2(x, y)
        self.vel = pygame.Vector2(0.0, 0.0)
        self.width = width
        self.height = height
        self.on_ground = False

    # --------------------------
    # Geometry
    # --------------------------

    @property
    def x(self) -> float:
        return self.pos.x

    @property
    def y(self) -> float:
        return self.pos.y

    @property
    def w(self) -> float:
        return self.width

    @property
    def h(self) -> float:
        return self.height

    @property
    def rect(self) -> pygame.FRect:
        return pygame.FRect(self.pos.x, self.pos.y, self.width, self.height)

    @property
    def center(self) -> pygame.Vector2:
        return pygame.Vector2(self.pos.x + self.width / 2, self.pos.y + self.height / 2)

    @property
    def bottom(self) -> float:
        return self.pos.y + self.height

    # --------------------------
    # Forces
    # --------------------------

    def apply_gravity(self, dt: float) -> None:
        self.vel.y += settings.GRAVITY * dt
        if self.vel.y > settings.MAX_FALL_SPEED:
            self.vel.y = settings.MAX_FALL_SPEED

    def apply_friction(self, dt: float) -> None:
        friction = settings.GROUND_FRICTION if self.on_ground else settings.AIR_FRICTION
        self.vel.x *= friction_factor(friction, dt)
        if abs(self.vel.x) < settings.MIN_HORIZONTAL_SPEED:
            self.vel.x = 0.0

    # --------------------------
    # Tile collision
    # --------------------------

    def _rows_spanned(self) -> range:
        tile_size = settings.TILE_SIZE
        return range(
            math.floor(self.pos.y / tile_size),
            math.floor((self.pos.y + self.height - EPSILON) / tile_size) + 1,
        )

    def _cols_spanned(self) -> range:
        tile_size = settings.TILE_SIZE
        return range(
            math.floor(self.pos.x / tile_size),
            math.floor((self.pos.x + self.width - EPSILON) / tile_size) + 1,
        )

    def move_x(self, amount: float, tilemap: TileMap) -> bool:
        """Move horizontally; returns True if a solid wall stopped us."""
        if amount == 0:
            return False

        tile_size = settings.TILE_SIZE
        rows = self._rows_spanned()

        if amount > 0:
            old_right = self.pos.x + self.width
            self.pos.x += amount
            first = math.ceil((old_right - EPSILON) / tile_size)
            last = math.floor((self.pos.x + self.width - EPSILON) / tile_size)
            for tx in range(first, last + 1):
                if any(tilemap.is_solid(tx, ty) for ty in rows):
                    self.pos.x = tx * tile_size - self.width
                    self.vel.x = 0.0
                    return True
        else:
            old_left = self.pos.x
            self.pos.x += amount
            first = math.floor((old_left + EPSILON) / tile_size) - 1
            last = math.floor(self.pos.x / tile_size)
            for tx in range(first, last - 1, -1):
                if any(tilemap.is_solid(tx, ty) for ty in rows):
                    self.pos.x = (tx + 1) * tile_size
                    self.vel.x = 0.0
                    return True
        return False

    def move_y(self, amount: float, tilemap: TileMap) -> bool:
        """
        Move vertically; returns True if we landed or bumped a ceiling.

        Falling: SOLID and PLATFORM rows whose top lies at or below the
        previous bottom edge stop us (so a platform we are already inside,
        or rising through, never catches us). Rising: only SOLID.
        """
        if amount == 0:
            return False

        tile_size = settings.TILE_SIZE
        cols = self._cols_spanned()

        if amount > 0:
            self.on_ground = False
            old_bottom = self.pos.y + self.height
            self.pos.y += amount
            first = math.ceil((old_bottom - EPSILON) / tile_size)
            last = math.floor((self.pos.y + self.height - EPSILON) / tile_size)
            for ty in range(first, last + 1):
                if any(tilemap.tile_at(tx, ty) in (Tile.SOLID, Tile.PLATFORM) for tx in cols):
                    self.pos.y = ty * tile_size - self.height
                    self.vel.y = 0.0
                    self.on_ground = True
                    return True
        else:
            self.on_ground = False
            old_top = self.pos.y
            self.pos.y += amount
            first = math.floor((old_top + EPSILON) / tile_size) - 1
            last = math.floor(self.pos.y / tile_size)
            for ty in range(first, last - 1, -1):
                if any(tilemap.is_solid(tx, ty) for tx in cols):
                    self.pos.y = (ty + 1) * tile_size
                    self.vel.y = 0.0
                    return True
        return False

    def probe_ground(self, tilemap: TileMap) -> bool:
        """Is there floor (solid or platform) directly under our feet?"""
        tile_size = settings.TILE_SIZE
        bottom = self.pos.y + self.height
        if abs(bottom - round(bottom / tile_size) * tile_size) > 0.01:
            return False
        ty = round(bottom / tile_size)
        return any(tilemap.tile_at(tx, ty) in (Tile.SOLID, Tile.PLATFORM) for tx in self._cols_spanned())

    def touching_tiles(self, tilemap: TileMap) -> set[Tile]:
        return {tile for _, _, tile in tilemap.tiles_overlapping(self.pos.x, self.pos.y, self.width, self.height)}

    def clamp_to_level(self, tilemap: TileMap) -> None:
        """Keep the body inside the level horizontally."""
        if self.pos.x < 0:
            self.pos.x = 0.0
            self.vel.x = 0.0
        max_x = tilemap.pixel_width - self.width
        if self.pos.x > max_x:
            self.pos.x = max_x
            self.vel.x = 0.0
