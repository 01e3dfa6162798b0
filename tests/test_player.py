"""Tests for player damage, lives, respawning and movement."""

import pytest

from doom_platformer import settings
from doom_platformer.controls import Controls
from doom_platformer.player import Player
from doom_platformer.tilemap import TileMap
from doom_platformer.weapon import WeaponKind

from conftest import ROOM, build_level

FLOOR_Y = 128 - settings.PLAYER_HEIGHT


@pytest.fixture
def tilemap():
    return TileMap(build_level(ROOM))


class TestDamage:
    """Health, armor and invulnerability."""

    def test_hit_without_armor(self):
        """A 25 point hit leaves 75 health and the player alive."""
        player = Player()
        assert player.take_damage(25) == 25
        assert player.health == 75
        assert player.alive
        assert player.invulnerable == settings.INVULNERABLE_DURATION

    def test_invulnerable_after_hit(self):
        """A second hit during the grace period is ignored."""
        player = Player()
        player.take_damage(25)
        assert player.take_damage(25) == 0
        assert player.health == 75

    def test_armor_absorbs_half(self):
        """Armor soaks half the hit."""
        player = Player()
        player.armor = 50
        player.take_damage(20)
        assert player.armor == 40
        assert player.health == 90

    def test_armor_absorbs_only_what_is_left(self):
        """Absorption is bounded by the remaining armor."""
        player = Player()
        player.armor = 4
        player.take_damage(20)
        assert player.armor == 0
        assert player.health == 84

    def test_damage_multiplier(self):
        """Difficulty scales every hit taken."""
        player = Player()
        player.damage_multiplier = 2.0
        player.take_damage(10)
        assert player.health == 80

    def test_lethal_hit_costs_a_life(self):
        """Dropping to zero health starts dying and costs one life."""
        player = Player()
        player.take_damage(500)
        assert not player.alive
        assert player.lives == settings.PLAYER_LIVES - 1
        assert player.stats.deaths == 1

    def test_invincibility_blocks_damage(self):
        """The invincibility power-up blocks all damage."""
        player = Player()
        player.invincibility = 5
        assert player.take_damage(50) == 0
        assert player.health == 100


class TestRespawn:
    """Respawn delay, checkpoints and game over."""

    def test_respawn_at_start(self, tilemap):
        """After the delay the player returns at the level start."""
        player = Player()
        player.die()
        player.update(0.5, Controls(), tilemap, [])
        assert not player.alive
        player.update(0.6, Controls(), tilemap, [])
        assert player.alive
        assert player.health == player.max_health
        assert (player.pos.x, player.pos.y) == (32, 64)

    def test_respawn_at_checkpoint(self, tilemap):
        """An activated checkpoint replaces the level start."""
        player = Player()
        player.set_checkpoint(100, 40)
        player.die()
        player.update(1.1, Controls(), tilemap, [])
        assert (player.pos.x, player.pos.y) == (100, 40)

    def test_out_of_lives(self, tilemap):
        """Losing the last life ends the run."""
        player = Player()
        player.lives = 1
        player.die()
        player.update(1.1, Controls(), tilemap, [])
        assert player.out_of_lives


class TestMovement:
    """Jumping, hazards and the exit."""

    def test_jump_from_ground(self, tilemap):
        """Pressing jump on the ground launches the player upward."""
        player = Player(32, FLOOR_Y)
        player.on_ground = True
        controls = Controls()
        controls.press_jump()
        player.update(1 / 60, controls, tilemap, [])
        assert player.vel.y < 0
        assert not player.on_ground
        assert player.jumped

    def test_no_jump_in_air(self, tilemap):
        """Jump does nothing in mid-air without coyote time."""
        player = Player(32, 32)
        controls = Controls()
        controls.press_jump()
        player.update(1 / 60, controls, tilemap, [])
        assert player.vel.y > 0

    def test_spikes_hurt(self):
        """Standing in spikes deals spike damage."""
        rows = list(ROOM)
        rows[3] = "1400000001"
        tilemap = TileMap(build_level(rows))
        player = Player(32, FLOOR_Y)
        player.update(1 / 60, Controls(), tilemap, [])
        assert player.health == 100 - settings.SPIKE_DAMAGE

    def test_exit_reached(self):
        """Touching an exit tile raises the exit signal."""
        rows = list(ROOM)
        rows[3] = "1500000001"
        tilemap = TileMap(build_level(rows))
        player = Player(32, FLOOR_Y)
        player.update(1 / 60, Controls(), tilemap, [])
        assert player.reached_exit


class TestWeapons:
    """Weapon ownership and switching."""

    def test_cannot_switch_to_unowned(self):
        """Slots for weapons not owned are refused."""
        player = Player()
        assert not player.switch_weapon(2)
        assert player.current_weapon is WeaponKind.PISTOL

    def test_grant_and_switch(self):
        """A granted weapon is equipped with its starting ammo."""
        player = Player()
        player.grant_weapon(WeaponKind.SHOTGUN)
        assert player.current_weapon is WeaponKind.SHOTGUN
        assert player.ammo[WeaponKind.SHOTGUN] == 20
        assert player.switch_weapon(1)
        assert player.switch_weapon(-2)
        assert player.current_weapon is WeaponKind.SHOTGUN

    def test_full_reset_restores_pistol(self):
        """A new run starts with only the pistol."""
        player = Player()
        player.grant_weapon(WeaponKind.ROCKET)
        player.lives = 1
        player.full_reset()
        assert player.owned == {WeaponKind.PISTOL}
        assert player.lives == settings.PLAYER_LIVES
