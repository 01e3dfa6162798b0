"""Tests for enemy health, dying and behaviours."""

import pytest

from doom_platformer import settings
from doom_platformer.enemies import Enemy, EnemyKind
from doom_platformer.player import Player
from doom_platformer.tilemap import TileMap
from doom_platformer.weapon import Side

from conftest import CORRIDOR, build_level

FLOOR = 128


@pytest.fixture
def tilemap():
    return TileMap(build_level(CORRIDOR))


def _grounded(kind, x):
    enemy = Enemy(kind, x, 0)
    enemy.pos.y = FLOOR - enemy.h
    enemy.on_ground = True
    return enemy


class TestHealth:
    """Damage, dying and difficulty scaling."""

    def test_difficulty_scales_stats(self):
        """Hard enemies have more health and hit harder."""
        enemy = Enemy(EnemyKind.PATROL, 0, 0, multipliers=settings.difficulty("hard"))
        assert enemy.max_health == 75
        assert enemy.damage == 15

    def test_unique_ids(self):
        """Every enemy gets its own id, never the player's."""
        a = Enemy(EnemyKind.PATROL, 0, 0)
        b = Enemy(EnemyKind.PATROL, 0, 0)
        assert a.uid != b.uid
        assert Player.uid not in (a.uid, b.uid)

    def test_lethal_damage_starts_dying(self):
        """Health at zero starts the death animation."""
        enemy = Enemy(EnemyKind.PATROL, 0, 0)
        enemy.take_damage(50)
        assert not enemy.alive
        assert not enemy.is_fully_dead

    def test_dying_ignores_damage(self):
        """A dying enemy takes no more damage."""
        enemy = Enemy(EnemyKind.PATROL, 0, 0)
        enemy.take_damage(60)
        assert enemy.take_damage(10) == 0

    def test_death_animation_finishes(self, tilemap):
        """The enemy is fully dead once the death timer runs out."""
        enemy = _grounded(EnemyKind.PATROL, 300)
        enemy.take_damage(100)
        enemy.update(0.3, tilemap, Player(), [], [])
        assert not enemy.is_fully_dead
        enemy.update(0.3, tilemap, Player(), [], [])
        assert enemy.is_fully_dead


class TestBehaviour:
    """Per-kind movement and attacks."""

    def test_patrol_chases_nearby_player(self, tilemap):
        """A patrol enemy runs at a player inside its detection range."""
        enemy = _grounded(EnemyKind.PATROL, 300)
        player = Player(200, FLOOR - settings.PLAYER_HEIGHT)
        enemy.update(1 / 60, tilemap, player, [], [])
        assert enemy.state == "chase"
        assert enemy.vel.x < 0

    def test_patrol_wanders_without_player(self, tilemap):
        """A patrol enemy walks its beat when the player is far away."""
        enemy = _grounded(EnemyKind.PATROL, 300)
        player = Player(800, FLOOR - settings.PLAYER_HEIGHT)
        enemy.update(1 / 60, tilemap, player, [], [])
        assert enemy.state == "patrol"
        assert enemy.vel.x == enemy.speed

    def test_shooter_fires_in_range(self, tilemap):
        """A shooter fires at a player in range, then waits for its cooldown."""
        enemy = _grounded(EnemyKind.SHOOTER, 400)
        player = Player(250, FLOOR - settings.PLAYER_HEIGHT)
        projectiles = []
        enemy.update(1 / 60, tilemap, player, projectiles, [])
        assert len(projectiles) == 1
        assert projectiles[0].side is Side.ENEMY
        assert projectiles[0].vel.x < 0
        enemy.update(1 / 60, tilemap, player, projectiles, [])
        assert len(projectiles) == 1

    def test_shooter_ignores_distant_player(self, tilemap):
        """A shooter holds fire when the player is out of range."""
        enemy = _grounded(EnemyKind.SHOOTER, 800)
        player = Player(40, FLOOR - settings.PLAYER_HEIGHT)
        projectiles = []
        enemy.update(1 / 60, tilemap, player, projectiles, [])
        assert projectiles == []


class TestBoss:
    """Boss phases."""

    def test_phase_change_makes_boss_invulnerable(self, tilemap):
        """Crossing a health threshold enters the next phase behind a shield."""
        boss = Enemy(EnemyKind.BOSS, 500, 0)
        player = Player(100, FLOOR - settings.PLAYER_HEIGHT)
        boss.take_damage(400)
        boss.update(1 / 60, tilemap, player, [], [])
        assert boss.boss.phase == 2
        assert boss.boss.invulnerable
        assert boss.take_damage(100) == 0
        assert boss.boss.take_shake() == 20.0
        assert boss.boss.take_shake() == 0.0
