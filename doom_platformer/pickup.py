# pickup.py
# Pickups/Powerups and checkpoints. Add more pickup types by extending
# PickupKind and the apply table below.

from __future__ import annotations
import math
from enum import Enum

from . import settings
from .weapon import WeaponKind


class PickupKind(str, Enum):
    HEALTH = "health"
    ARMOR = "armor"
    AMMO = "ammo"
    INVINCIBILITY = "invincibility"
    COIN = "coin"
    SHOTGUN = "shotgun"
    MACHINEGUN = "machinegun"
    PLASMA = "plasma"
    ROCKET = "rocket"
    LASER = "laser"

    @property
    def weapon(self) -> WeaponKind | None:
        """The weapon this pickup grants, if it is a weapon pickup."""
        try:
            return WeaponKind(self.value)
        except ValueError:
            return None


PICKUP_SIZE = 24
CHECKPOINT_WIDTH = 32
CHECKPOINT_HEIGHT = 48


def _apply_health(player) -> bool:
    return player.heal(settings.HEALTH_PICKUP_AMOUNT)


def _apply_armor(player) -> bool:
    return player.add_armor(settings.ARMOR_PICKUP_AMOUNT)


def _apply_ammo(player) -> bool:
    return player.add_ammo(player.current_weapon, settings.AMMO_PICKUP_AMOUNT)


def _apply_invincibility(player) -> bool:
    player.invincibility = settings.INVINCIBILITY_DURATION
    return True


_APPLY = {
    PickupKind.HEALTH: _apply_health,
    PickupKind.ARMOR: _apply_armor,
    PickupKind.AMMO: _apply_ammo,
    PickupKind.INVINCIBILITY: _apply_invincibility,
    # coins only need to be consumed; the currency system is credited by the loop
    PickupKind.COIN: lambda player: True,
}


class Pickup:
    def __init__(self, x: float, y: float, kind: PickupKind | str):
        self.kind = PickupKind(kind)
        self.x = float(x)
        self.y = float(y)
        self.w = PICKUP_SIZE
        self.h = PICKUP_SIZE
        self.collected = False
        self.anim_time = 0.0

    def update(self, dt: float) -> None:
        self.anim_time += dt

    @property
    def bob(self) -> float:
        """Vertical draw offset; presentation only."""
        return math.sin(self.anim_time * 4) * 4

    def collect(self, player) -> bool:
        """Apply to player. Returns False (and stays in the world) if it would be wasted."""
        if self.collected:
            return False

        weapon = self.kind.weapon
        if weapon is not None:
            player.grant_weapon(weapon)
            consumed = True
        else:
            consumed = _APPLY[self.kind](player)

        if consumed:
            self.collected = True
        return consumed


class Checkpoint:
    def __init__(self, x: float, y: float):
        self.x = float(x)
        self.y = float(y)
        self.w = CHECKPOINT_WIDTH
        self.h = CHECKPOINT_HEIGHT
        self.activated = False
        self.anim_time = 0.0

    def update(self, dt: float) -> None:
        self.anim_time += dt

    def activate(self, player) -> bool:
        """Make this the player's respawn point. Touching it again does nothing."""
        if self.activated:
            return False
        self.activated = True
        player.set_checkpoint(self.x, self.y - player.h + self.h)
        return True
