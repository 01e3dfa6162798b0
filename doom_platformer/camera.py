# camera.py
# Viewport offset in world pixels. Derived from the player every tick;
# nothing here is saved or needed to reproduce a run.

from __future__ import annotations
import math

import pygame

from . import settings
from .utils import clamp


def target_offset(center, view: tuple[float, float], bounds: tuple[float, float],
                  look_ahead=(0.0, 0.0)) -> pygame.Vector2:
    """
    Where the camera wants to be: `center` in the middle of the view,
    shifted by `look_ahead` and clamped so the view never leaves the level.
    """
    vw, vh = view
    max_x = max(0.0, bounds[0] - vw)
    max_y = max(0.0, bounds[1] - vh)
    x = center[0] - vw / 2 + look_ahead[0]
    y = center[1] - vh / 2 + look_ahead[1]
    return pygame.Vector2(clamp(x, 0, max_x), clamp(y, 0, max_y))


class Camera:
    def __init__(self, width: float = settings.WINDOW_WIDTH, height: float = settings.WINDOW_HEIGHT):
        self.width = width
        self.height = height
        self.pos = pygame.Vector2(0.0, 0.0)
        self.look_ahead = pygame.Vector2(0.0, 0.0)
        self.bounds = (width, height)

    @property
    def x(self) -> float:
        return self.pos.x

    @property
    def y(self) -> float:
        return self.pos.y

    def set_bounds(self, level_width: float, level_height: float) -> None:
        self.bounds = (level_width, level_height)

    def snap_to(self, player) -> None:
        """Jump straight to the player (level load)."""
        self.look_ahead.update(0, 0)
        self.pos = target_offset(player.center, (self.width, self.height), self.bounds)

    def follow(self, player, dt: float) -> None:
        # Look ahead in the facing direction and a little into vertical motion
        ahead_x = settings.CAMERA_LOOK_AHEAD if player.facing > 0 else -settings.CAMERA_LOOK_AHEAD
        ahead_y = 30.0 if player.vel.y > 100 else (-20.0 if player.vel.y < -100 else 0.0)
        k = settings.CAMERA_LOOK_AHEAD_SMOOTHING * dt
        self.look_ahead.x += (ahead_x - self.look_ahead.x) * k
        self.look_ahead.y += (ahead_y - self.look_ahead.y) * k

        target = target_offset(player.center, (self.width, self.height), self.bounds, self.look_ahead)

        # Exponential ease, frame-rate independent; both ends are in bounds so the result is too
        t = 1 - math.pow(0.001, dt * settings.CAMERA_SMOOTHING)
        self.pos += (target - self.pos) * t

    def world_to_screen(self, x: float, y: float, shake=(0.0, 0.0)) -> pygame.Vector2:
        """World pixel -> window pixel, with the current shake offset applied."""
        return pygame.Vector2(x - self.pos.x + shake[0], y - self.pos.y + shake[1])
