"""Tests for pickups and checkpoints."""

from doom_platformer.pickup import Checkpoint, Pickup, PickupKind
from doom_platformer.player import Player
from doom_platformer.weapon import WeaponKind


class TestPickup:
    """Collecting pickups."""

    def test_health_at_full_is_left(self):
        """Health is not wasted on a healthy player."""
        pickup = Pickup(0, 0, PickupKind.HEALTH)
        assert not pickup.collect(Player())
        assert not pickup.collected

    def test_health_heals(self):
        """Health restores up to the maximum."""
        player = Player()
        player.health = 90
        pickup = Pickup(0, 0, "health")
        assert pickup.collect(player)
        assert player.health == 100
        assert pickup.collected

    def test_collect_once(self):
        """A collected pickup cannot be collected again."""
        player = Player()
        player.health = 10
        pickup = Pickup(0, 0, PickupKind.HEALTH)
        pickup.collect(player)
        assert not pickup.collect(player)
        assert player.health == 35

    def test_weapon_pickup_grants_weapon(self):
        """Weapon pickups add and equip the weapon."""
        player = Player()
        assert Pickup(0, 0, PickupKind.ROCKET).collect(player)
        assert WeaponKind.ROCKET in player.owned
        assert player.current_weapon is WeaponKind.ROCKET

    def test_ammo_for_pistol_is_wasted(self):
        """Ammo does nothing for the unlimited pistol."""
        assert not Pickup(0, 0, PickupKind.AMMO).collect(Player())

    def test_armor_and_coin(self):
        """Armor adds armor; coins are always taken."""
        player = Player()
        assert Pickup(0, 0, PickupKind.ARMOR).collect(player)
        assert player.armor == 50
        assert Pickup(0, 0, PickupKind.COIN).collect(player)


class TestCheckpoint:
    """Checkpoint activation."""

    def test_activation_sets_respawn(self):
        """Activating stores a respawn point standing on the checkpoint's base."""
        player = Player()
        checkpoint = Checkpoint(100, 200)
        assert checkpoint.activate(player)
        assert player.checkpoint.x == 100
        assert player.checkpoint.y == 200 - player.h + checkpoint.h

    def test_activation_is_idempotent(self):
        """Touching an active checkpoint again changes nothing."""
        player = Player()
        first = Checkpoint(100, 200)
        second = Checkpoint(300, 200)
        first.activate(player)
        second.activate(player)
        assert not second.activate(player)
        assert not first.activate(player)
        assert player.checkpoint.x == 300
