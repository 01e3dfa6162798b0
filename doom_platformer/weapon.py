# weapon.py
# Weapon table + Projectile class.
#
# - A WeaponSpec decides *how to shoot* (fire rate, projectile speed, spread, count)
# - A Projectile is a small moving box with a lifetime, an owner side and
#   optional piercing / explosive behaviour.

from __future__ import annotations
import math
import random
from dataclasses import dataclass
from enum import Enum

import pygame

from . import settings
from .tilemap import TileMap


class WeaponKind(str, Enum):
    PISTOL = "pistol"
    SHOTGUN = "shotgun"
    MACHINEGUN = "machinegun"
    PLASMA = "plasma"
    ROCKET = "rocket"
    LASER = "laser"


# Slot order for number keys 1-6 and next/previous cycling
WEAPON_ORDER = list(WeaponKind)


class ProjectileKind(str, Enum):
    BULLET = "bullet"
    PELLET = "pellet"
    PLASMA = "plasma"
    ROCKET = "rocket"
    LASER = "laser"


class Side(Enum):
    PLAYER = "player"
    ENEMY = "enemy"


@dataclass(frozen=True)
class WeaponSpec:
    kind: WeaponKind
    name: str
    damage: float
    fire_rate: float            # seconds between shots
    projectile_speed: float
    ammo: int | None            # starting ammo on grant, None = unlimited
    max_ammo: int | None
    spread: float               # radians, total cone width
    projectile_count: int
    projectile_kind: ProjectileKind
    color: tuple[int, int, int]
    piercing: bool = False
    explosive: bool = False
    explosion_radius: float = 0.0

    @property
    def unlimited(self) -> bool:
        return self.ammo is None


WEAPONS: dict[WeaponKind, WeaponSpec] = {
    WeaponKind.PISTOL: WeaponSpec(
        WeaponKind.PISTOL, "PISTOL", damage=25, fire_rate=0.25, projectile_speed=500,
        ammo=None, max_ammo=None, spread=0.0, projectile_count=1,
        projectile_kind=ProjectileKind.BULLET, color=(136, 255, 136),
    ),
    WeaponKind.SHOTGUN: WeaponSpec(
        WeaponKind.SHOTGUN, "SHOTGUN", damage=15, fire_rate=0.8, projectile_speed=450,
        ammo=20, max_ammo=50, spread=0.3, projectile_count=5,
        projectile_kind=ProjectileKind.PELLET, color=(255, 170, 68),
    ),
    WeaponKind.MACHINEGUN: WeaponSpec(
        WeaponKind.MACHINEGUN, "MACHINE GUN", damage=12, fire_rate=0.1, projectile_speed=550,
        ammo=100, max_ammo=200, spread=0.1, projectile_count=1,
        projectile_kind=ProjectileKind.BULLET, color=(255, 255, 68), piercing=True,
    ),
    WeaponKind.PLASMA: WeaponSpec(
        WeaponKind.PLASMA, "PLASMA GUN", damage=40, fire_rate=0.4, projectile_speed=400,
        ammo=50, max_ammo=100, spread=0.0, projectile_count=1,
        projectile_kind=ProjectileKind.PLASMA, color=(68, 170, 255),
        explosive=True, explosion_radius=50,
    ),
    WeaponKind.ROCKET: WeaponSpec(
        WeaponKind.ROCKET, "ROCKET LAUNCHER", damage=80, fire_rate=1.2, projectile_speed=300,
        ammo=20, max_ammo=40, spread=0.0, projectile_count=1,
        projectile_kind=ProjectileKind.ROCKET, color=(255, 68, 68),
        explosive=True, explosion_radius=80,
    ),
    WeaponKind.LASER: WeaponSpec(
        WeaponKind.LASER, "LASER RIFLE", damage=35, fire_rate=0.05, projectile_speed=1000,
        ammo=150, max_ammo=300, spread=0.0, projectile_count=1,
        projectile_kind=ProjectileKind.LASER, color=(255, 0, 255), piercing=True,
    ),
}

# (width, height) per projectile kind
PROJECTILE_SIZES = {
    ProjectileKind.BULLET: (8, 4),
    ProjectileKind.PELLET: (4, 4),
    ProjectileKind.PLASMA: (12, 12),
    ProjectileKind.ROCKET: (16, 8),
    ProjectileKind.LASER: (20, 2),
}

PELLET_LIFETIME = 0.5
ROCKET_DROP = 50.0   # px/s^2 of downward drift


class Projectile:
    """A projectile owned by one side. Dies on solid tiles, on expiry, or when it runs out of hits."""

    def __init__(
        self,
        center: pygame.Vector2,
        vel: pygame.Vector2,
        side: Side,
        damage: float,
        kind: ProjectileKind = ProjectileKind.BULLET,
        piercing: bool = False,
        explosive: bool = False,
        explosion_radius: float = 0.0,
        color: tuple[int, int, int] | None = None,
        size: tuple[float, float] | None = None,
    ):
        self.kind = kind
        self.side = side
        self.damage = damage
        self.piercing = piercing
        self.explosive = explosive
        self.explosion_radius = explosion_radius
        self.color = color or ((136, 255, 136) if side is Side.PLAYER else (255, 136, 136))

        self.width, self.height = size or PROJECTILE_SIZES[kind]
        self.pos = pygame.Vector2(center.x - self.width / 2, center.y - self.height / 2)
        self.vel = pygame.Vector2(vel)

        self.lifetime = PELLET_LIFETIME if kind is ProjectileKind.PELLET else settings.PROJECTILE_LIFETIME
        self.hit_count = 0
        # uids of targets we are overlapping right now; each is damaged once per contact
        self.touching: set[int] = set()
        self.dead = False
        self.pending_explosion = False

    # Box protocol for collision
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
    def center(self) -> pygame.Vector2:
        return pygame.Vector2(self.pos.x + self.width / 2, self.pos.y + self.height / 2)

    @property
    def rect(self) -> pygame.FRect:
        return pygame.FRect(self.pos.x, self.pos.y, self.width, self.height)

    @property
    def from_player(self) -> bool:
        return self.side is Side.PLAYER

    def kill(self, explode: bool = True) -> None:
        if self.dead:
            return
        self.dead = True
        if explode and self.explosive:
            self.pending_explosion = True

    def update(self, dt: float, tilemap: TileMap) -> None:
        if self.dead:
            return

        self.pos += self.vel * dt
        self.lifetime -= dt

        if self.kind is ProjectileKind.ROCKET:
            self.vel.y += ROCKET_DROP * dt

        c = self.center
        if tilemap.is_solid_at(c.x, c.y):
            self.kill()
            return

        if self.lifetime <= 0:
            # fizzles out, no blast
            self.kill(explode=False)

    # --------------------------
    # Hits
    # --------------------------

    def forget_contacts(self, still_touching: set[int]) -> None:
        """Drop targets we no longer overlap, so touching them again counts as a new hit."""
        self.touching &= still_touching

    def register_hit(self, target_uid: int) -> bool:
        """
        Record contact with a target; returns True if damage should be applied.

        A target already in contact is ignored. Non-piercing projectiles die
        on their first hit; piercing ones after PIERCE_MAX_HITS.
        """
        if self.dead or target_uid in self.touching:
            return False

        self.touching.add(target_uid)
        self.hit_count += 1
        if not self.piercing or self.hit_count >= settings.PIERCE_MAX_HITS:
            self.kill()
        return True


def fire_weapon(
    spec: WeaponSpec,
    origin: pygame.Vector2,
    angle: float,
    side: Side = Side.PLAYER,
    rng: random.Random | None = None,
) -> list[Projectile]:
    """Build one volley from spec, aimed at angle (radians, 0 = right, +pi/2 = down)."""
    rng = rng or random.Random()
    volley = []
    for _ in range(spec.projectile_count):
        spread = (rng.random() - 0.5) * spec.spread
        final = angle + spread
        vel = pygame.Vector2(math.cos(final), math.sin(final)) * spec.projectile_speed
        volley.append(Projectile(
            origin, vel, side, spec.damage,
            kind=spec.projectile_kind,
            piercing=spec.piercing,
            explosive=spec.explosive,
            explosion_radius=spec.explosion_radius,
            color=spec.color,
        ))
    return volley


def enemy_shot(origin: pygame.Vector2, vel: pygame.Vector2, damage: float,
               color: tuple[int, int, int] | None = None,
               size: tuple[float, float] | None = None) -> Projectile:
    return Projectile(origin, vel, Side.ENEMY, damage, color=color, size=size)
