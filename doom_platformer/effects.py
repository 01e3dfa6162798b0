# effects.py
# Screen shake + particles. Pure presentation state: the renderer reads it,
# gameplay never does.

from __future__ import annotations
import math
import random
from dataclasses import dataclass

import pygame

Color = tuple[int, int, int]

PARTICLE_GRAVITY = 400.0


class ScreenShake:
    def __init__(self, rng: random.Random | None = None):
        self.intensity = 0.0
        self.duration = 0.0
        self.offset = pygame.Vector2(0, 0)
        self.rng = rng or random.Random()

    def shake(self, intensity: float, duration: float) -> None:
        # a weaker shake never cuts a stronger one short
        self.intensity = max(self.intensity, intensity)
        self.duration = max(self.duration, duration)

    def update(self, dt: float) -> None:
        if self.duration > 0:
            self.duration -= dt
            if self.duration > 0:
                self.offset.update(
                    (self.rng.random() - 0.5) * self.intensity * 2,
                    (self.rng.random() - 0.5) * self.intensity * 2,
                )
                return
        self.duration = 0.0
        self.intensity = 0.0
        self.offset.update(0, 0)

    def reset(self) -> None:
        self.intensity = 0.0
        self.duration = 0.0
        self.offset.update(0, 0)


@dataclass
class Particle:
    pos: pygame.Vector2
    vel: pygame.Vector2
    color: Color
    size: float
    lifetime: float
    max_lifetime: float

    @property
    def alive(self) -> bool:
        return self.lifetime > 0

    @property
    def alpha(self) -> float:
        return max(0.0, self.lifetime / self.max_lifetime) if self.max_lifetime > 0 else 0.0

    def update(self, dt: float) -> None:
        self.pos += self.vel * dt
        self.vel.y += PARTICLE_GRAVITY * dt
        self.lifetime -= dt


class ParticleSystem:
    def __init__(self, rng: random.Random | None = None, limit: int = 2000):
        self.particles: list[Particle] = []
        self.rng = rng or random.Random()
        self.limit = limit

    def __len__(self) -> int:
        return len(self.particles)

    def emit(self, x: float, y: float, count: int, color: Color = (255, 102, 0),
             min_speed: float = 50, max_speed: float = 200,
             min_size: float = 2, max_size: float = 6,
             lifetime: float = 0.5, spread: float = math.tau) -> None:
        rng = self.rng
        for _ in range(count):
            if len(self.particles) >= self.limit:
                return
            angle = rng.random() * spread - spread / 2 - math.pi / 2
            speed = min_speed + rng.random() * (max_speed - min_speed)
            life = lifetime + rng.random() * 0.2
            self.particles.append(Particle(
                pos=pygame.Vector2(x, y),
                vel=pygame.Vector2(math.cos(angle), math.sin(angle)) * speed,
                color=color,
                size=min_size + rng.random() * (max_size - min_size),
                lifetime=life,
                max_lifetime=life,
            ))

    def emit_explosion(self, x: float, y: float, color: Color = (255, 68, 0)) -> None:
        self.emit(x, y, 15, color, 100, 300, 3, 8, 0.6)
        self.emit(x, y, 8, (255, 255, 0), 150, 350, 2, 4, 0.4)

    def emit_blood(self, x: float, y: float) -> None:
        self.emit(x, y, 10, (139, 0, 0), 50, 150, 2, 5, 0.5)
        self.emit(x, y, 5, (204, 0, 0), 30, 100, 3, 6, 0.4)

    def emit_hit(self, x: float, y: float) -> None:
        self.emit(x, y, 6, (255, 170, 0), 80, 180, 2, 4, 0.3)

    def emit_dust(self, x: float, y: float) -> None:
        self.emit(x, y, 8, (136, 102, 68), 30, 80, 2, 5, 0.4, spread=math.pi)
        self.emit(x, y, 4, (102, 68, 34), 20, 60, 3, 6, 0.3, spread=math.pi)

    def update(self, dt: float) -> None:
        for p in self.particles:
            p.update(dt)
        self.particles = [p for p in self.particles if p.alive]

    def clear(self) -> None:
        self.particles.clear()
