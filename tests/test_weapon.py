"""Tests for projectiles: hits, piercing and explosions."""

import math
import random

import pygame
import pytest

from doom_platformer import settings
from doom_platformer.tilemap import TileMap
from doom_platformer.weapon import (
    WEAPONS, Projectile, ProjectileKind, Side, WeaponKind, enemy_shot, fire_weapon,
)

from conftest import ROOM, build_level


def _shot(**kwargs):
    return Projectile(pygame.Vector2(100, 80), pygame.Vector2(0, 0), Side.PLAYER, 10, **kwargs)


@pytest.fixture
def tilemap():
    return TileMap(build_level(ROOM))


class TestFiring:
    """Volleys built from weapon specs."""

    def test_pistol_single_shot(self):
        """The pistol fires one bullet straight ahead."""
        volley = fire_weapon(WEAPONS[WeaponKind.PISTOL], pygame.Vector2(50, 50), 0.0)
        assert len(volley) == 1
        shot = volley[0]
        assert shot.vel.x == pytest.approx(500)
        assert shot.vel.y == pytest.approx(0)
        assert shot.damage == 25
        assert shot.from_player

    def test_shotgun_spreads_pellets(self):
        """The shotgun fires five pellets inside its cone."""
        spec = WEAPONS[WeaponKind.SHOTGUN]
        volley = fire_weapon(spec, pygame.Vector2(0, 0), 0.0, rng=random.Random(1))
        assert len(volley) == 5
        assert all(p.kind is ProjectileKind.PELLET for p in volley)
        for pellet in volley:
            assert abs(math.atan2(pellet.vel.y, pellet.vel.x)) <= spec.spread / 2

    def test_enemy_shot_side(self):
        """Enemy shots belong to the enemy side."""
        shot = enemy_shot(pygame.Vector2(0, 0), pygame.Vector2(-100, 0), 10)
        assert shot.side is Side.ENEMY
        assert not shot.from_player


class TestHits:
    """Hit registration for piercing and non-piercing shots."""

    def test_non_piercing_dies_on_first_hit(self):
        """A normal bullet is spent by its first target."""
        shot = _shot()
        assert shot.register_hit(5)
        assert shot.dead
        assert not shot.register_hit(6)

    def test_piercing_ignores_target_still_in_contact(self):
        """A piercing shot damages a target once per entry."""
        shot = _shot(piercing=True)
        assert shot.register_hit(5)
        shot.forget_contacts({5})
        assert not shot.register_hit(5)
        assert not shot.dead

    def test_piercing_hits_again_after_leaving(self):
        """Leaving and re-entering a target counts as a new hit."""
        shot = _shot(piercing=True)
        assert shot.register_hit(5)
        shot.forget_contacts(set())
        assert shot.register_hit(5)
        assert shot.hit_count == 2

    def test_piercing_limit(self):
        """A piercing shot is spent after the maximum number of hits."""
        shot = _shot(piercing=True)
        for uid in range(settings.PIERCE_MAX_HITS):
            assert shot.register_hit(uid)
        assert shot.dead


class TestLifetime:
    """Walls, lifetime and explosions."""

    def test_wall_kills_and_explodes(self, tilemap):
        """An explosive shot that hits a wall leaves a pending explosion."""
        shot = Projectile(pygame.Vector2(280, 80), pygame.Vector2(600, 0), Side.PLAYER, 80,
                          kind=ProjectileKind.ROCKET, explosive=True, explosion_radius=80)
        shot.update(0.02, tilemap)
        assert shot.dead
        assert shot.pending_explosion

    def test_expiry_does_not_explode(self, tilemap):
        """Running out of lifetime ends the shot without a blast."""
        shot = Projectile(pygame.Vector2(100, 80), pygame.Vector2(0, 0), Side.PLAYER, 40,
                          kind=ProjectileKind.PLASMA, explosive=True, explosion_radius=50)
        for _ in range(40):
            shot.update(0.1, tilemap)
        assert shot.dead
        assert not shot.pending_explosion

    def test_plain_shot_never_explodes(self, tilemap):
        """Non-explosive shots die against walls without a blast."""
        shot = Projectile(pygame.Vector2(280, 80), pygame.Vector2(600, 0), Side.PLAYER, 25)
        shot.update(0.02, tilemap)
        assert shot.dead
        assert not shot.pending_explosion
