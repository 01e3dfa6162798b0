# player.py
# The marine.
#
# Jump feel:
# - Jump buffer (press slightly before landing still jumps)
# - Coyote time (jump shortly after walking off a ledge)
# - Variable jump height (release early for a short hop)
#
# Death: DYING while the respawn timer runs, then back at the last
# checkpoint (or the level start). With no lives left the player stays DEAD
# and the game loop ends the run.

from __future__ import annotations
import math
import random
from dataclasses import asdict, dataclass

import pygame

from . import settings
from .physics import Body, LifeState
from .tilemap import Tile, TileMap
from .weapon import WEAPON_ORDER, WEAPONS, WeaponKind, fire_weapon, Side


@dataclass
class PlayerStats:
    shots_fired: int = 0
    damage_dealt: float = 0.0
    damage_taken: float = 0.0
    pickups_collected: int = 0
    enemies_killed: int = 0
    levels_completed: int = 0
    deaths: int = 0

    def to_dict(self) -> dict:
        return asdict(self)


class Player(Body):
    uid = 0

    def __init__(self, x: float = 0.0, y: float = 0.0):
        super().__init__(x, y, settings.PLAYER_WIDTH, settings.PLAYER_HEIGHT)
        self.facing = 1
        self.state = "idle"     # idle / walking / jumping / falling / dead

        # Jump feel
        self.jump_buffer = 0.0
        self.coyote_timer = 0.0
        self.jump_cooldown = 0.0

        # Health
        self.max_health = settings.PLAYER_MAX_HEALTH
        self.max_armor = settings.PLAYER_MAX_ARMOR
        self.health = float(self.max_health)
        self.armor = 0.0
        self.invulnerable = 0.0      # post-hit grace
        self.invincibility = 0.0     # power-up
        self.life = LifeState.ALIVE
        self.respawn_timer = 0.0
        self.lives = settings.PLAYER_LIVES
        # difficulty scaling of every hit taken, set when a run starts
        self.damage_multiplier = 1.0

        # Weapons
        self.owned: set[WeaponKind] = {WeaponKind.PISTOL}
        self.ammo: dict[WeaponKind, int] = {kind: 0 for kind in WeaponKind}
        self.current_weapon = WeaponKind.PISTOL
        self.shoot_cooldown = 0.0

        self.checkpoint: pygame.Vector2 | None = None
        self.stats = PlayerStats()

        # per-tick signals for the loop
        self.reached_exit = False
        self.fired: WeaponKind | None = None
        self.rocket_jumped = False
        self.jumped = False

    # --------------------------
    # Lifecycle
    # --------------------------

    @property
    def alive(self) -> bool:
        return self.life is LifeState.ALIVE

    @property
    def out_of_lives(self) -> bool:
        return self.life is LifeState.DEAD

    def die(self) -> None:
        if not self.alive:
            return
        self.life = LifeState.DYING
        self.state = "dead"
        self.health = 0.0
        self.respawn_timer = settings.RESPAWN_DELAY
        self.vel.update(0, 0)
        self.lives -= 1
        self.stats.deaths += 1

    def reset(self, x: float, y: float) -> None:
        """Back to life at (x, y) with full health. Loadout is kept."""
        self.pos.update(x, y)
        self.vel.update(0, 0)
        self.on_ground = False
        self.life = LifeState.ALIVE
        self.state = "idle"
        self.respawn_timer = 0.0
        self.health = float(self.max_health)
        self.invulnerable = 0.0
        self.invincibility = 0.0
        self.shoot_cooldown = 0.0
        self.jump_buffer = 0.0
        self.coyote_timer = 0.0
        self.jump_cooldown = 0.0
        self.reached_exit = False
        if self.current_weapon is not WeaponKind.PISTOL and self.ammo[self.current_weapon] <= 0:
            self.current_weapon = WeaponKind.PISTOL

    def full_reset(self) -> None:
        """New run: pistol only, no armor, full lives, fresh stats."""
        self.owned = {WeaponKind.PISTOL}
        self.ammo = {kind: 0 for kind in WeaponKind}
        self.current_weapon = WeaponKind.PISTOL
        self.armor = 0.0
        self.lives = settings.PLAYER_LIVES
        self.checkpoint = None
        self.stats = PlayerStats()
        self.life = LifeState.ALIVE
        self.health = float(self.max_health)

    def set_checkpoint(self, x: float, y: float) -> None:
        self.checkpoint = pygame.Vector2(x, y)

    def clear_checkpoint(self) -> None:
        self.checkpoint = None

    # --------------------------
    # Health / loadout
    # --------------------------

    def take_damage(self, amount: float, multiplier: float | None = None) -> float:
        """
        Apply a hit. Returns the health actually lost.

        Ignored while dying, during post-hit invulnerability or under the
        invincibility power-up. Armor soaks ARMOR_ABSORPTION of the hit,
        bounded by what is left of it.
        """
        if not self.alive or self.invulnerable > 0 or self.invincibility > 0:
            return 0.0

        amount *= self.damage_multiplier if multiplier is None else multiplier
        if self.armor > 0:
            absorbed = min(self.armor, amount * settings.ARMOR_ABSORPTION)
            self.armor -= absorbed
            amount -= absorbed

        self.health -= amount
        self.stats.damage_taken += amount
        self.invulnerable = settings.INVULNERABLE_DURATION

        if self.health <= 0:
            self.die()
        return amount

    def heal(self, amount: float) -> bool:
        if self.health >= self.max_health:
            return False
        self.health = min(self.max_health, self.health + amount)
        return True

    def add_armor(self, amount: float) -> bool:
        if self.armor >= self.max_armor:
            return False
        self.armor = min(self.max_armor, self.armor + amount)
        return True

    def add_ammo(self, weapon: WeaponKind, amount: int) -> bool:
        spec = WEAPONS[weapon]
        if spec.unlimited or self.ammo[weapon] >= spec.max_ammo:
            return False
        self.ammo[weapon] = min(spec.max_ammo, self.ammo[weapon] + amount)
        return True

    def grant_weapon(self, weapon: WeaponKind) -> None:
        spec = WEAPONS[weapon]
        self.owned.add(weapon)
        self.current_weapon = weapon
        if not spec.unlimited:
            self.ammo[weapon] = spec.ammo

    def has_ammo(self, weapon: WeaponKind) -> bool:
        return WEAPONS[weapon].unlimited or self.ammo[weapon] > 0

    def _usable(self, weapon: WeaponKind) -> bool:
        return weapon in self.owned and self.has_ammo(weapon)

    def switch_weapon(self, slot: int) -> bool:
        """1-6 picks a slot, -1 / -2 cycle to the previous / next usable weapon."""
        count = len(WEAPON_ORDER)
        if slot in (-1, -2):
            step = -1 if slot == -1 else 1
            current = WEAPON_ORDER.index(self.current_weapon)
            for i in range(1, count + 1):
                candidate = WEAPON_ORDER[(current + step * i) % count]
                if self._usable(candidate):
                    self.current_weapon = candidate
                    return True
            return False

        if 1 <= slot <= count and self._usable(WEAPON_ORDER[slot - 1]):
            self.current_weapon = WEAPON_ORDER[slot - 1]
            return True
        return False

    # --------------------------
    # Update
    # --------------------------

    def update(self, dt: float, controls, tilemap: TileMap, projectiles: list,
               rng: random.Random | None = None) -> None:
        self.reached_exit = False
        self.fired = None
        self.rocket_jumped = False
        self.jumped = False

        if not self.alive:
            self._update_dead(dt, tilemap)
            return

        # Timers
        self.jump_cooldown = max(0.0, self.jump_cooldown - dt)
        self.jump_buffer = max(0.0, self.jump_buffer - dt)
        self.invulnerable = max(0.0, self.invulnerable - dt)
        self.invincibility = max(0.0, self.invincibility - dt)
        self.shoot_cooldown = max(0.0, self.shoot_cooldown - dt)
        self.coyote_timer = max(0.0, self.coyote_timer - dt)

        self._handle_movement(dt, controls)
        self._handle_jump(controls)
        self._handle_shooting(controls, projectiles, rng)
        self.apply_gravity(dt)

        self.move_x(self.vel.x * dt, tilemap)
        self.clamp_to_level(tilemap)
        self.move_y(self.vel.y * dt, tilemap)

        # --- Ground probe (stabilises grounding when perfectly still) ---
        if not self.on_ground and self.vel.y >= 0 and self.probe_ground(tilemap):
            self.on_ground = True

        if self.on_ground:
            self.coyote_timer = settings.COYOTE_TIME

        # Hazards and exit
        touching = self.touching_tiles(tilemap)
        if Tile.SPIKES in touching:
            self.take_damage(settings.SPIKE_DAMAGE)
        if Tile.EXIT in touching and self.alive:
            self.reached_exit = True

        # Death pit
        if self.pos.y > tilemap.pixel_height:
            self.die()

        self._update_state()

    def _update_dead(self, dt: float, tilemap: TileMap) -> None:
        if self.life is LifeState.DEAD:
            return
        self.respawn_timer -= dt
        if self.respawn_timer > 0:
            return
        if self.lives <= 0:
            self.life = LifeState.DEAD
            return
        if self.checkpoint is not None:
            self.reset(self.checkpoint.x, self.checkpoint.y)
        else:
            start = tilemap.player_start
            self.reset(start.x * settings.TILE_SIZE, start.y * settings.TILE_SIZE)

    def _handle_movement(self, dt: float, controls) -> None:
        target = 0.0
        if controls.left:
            target = -settings.PLAYER_SPEED
            self.facing = -1
        if controls.right:
            target = settings.PLAYER_SPEED
            self.facing = 1

        if target != 0:
            direction = 1 if target > self.vel.x else -1
            self.vel.x += direction * settings.PLAYER_ACCELERATION * dt
            if (direction > 0 and self.vel.x > target) or (direction < 0 and self.vel.x < target):
                self.vel.x = target
        else:
            self.apply_friction(dt)

    def _handle_jump(self, controls) -> None:
        if controls.consume_jump():
            self.jump_buffer = settings.JUMP_BUFFER_TIME

        can_jump = (self.on_ground or self.coyote_timer > 0) and self.jump_cooldown <= 0
        if self.jump_buffer > 0 and can_jump:
            self.vel.y = -settings.JUMP_SPEED
            self.on_ground = False
            self.jump_cooldown = settings.JUMP_COOLDOWN
            self.coyote_timer = 0.0
            self.jump_buffer = 0.0
            self.jumped = True

        # short hop
        if not controls.jump and self.vel.y < -settings.JUMP_CUT_SPEED:
            self.vel.y *= 0.5

    def _handle_shooting(self, controls, projectiles: list, rng: random.Random | None) -> None:
        switch = controls.consume_weapon_switch()
        if switch:
            self.switch_weapon(switch)

        if not self.has_ammo(self.current_weapon):
            self.current_weapon = WeaponKind.PISTOL

        if not controls.consume_fire() or self.shoot_cooldown > 0:
            return

        weapon = self.current_weapon
        spec = WEAPONS[weapon]

        if controls.up:
            angle = -math.pi / 2
            origin = pygame.Vector2(self.center.x, self.pos.y)
        elif controls.down:
            angle = math.pi / 2
            origin = pygame.Vector2(self.center.x, self.bottom)
        else:
            angle = 0.0 if self.facing > 0 else math.pi
            origin = pygame.Vector2(self.center.x, self.center.y - 4)

        projectiles.extend(fire_weapon(spec, origin, angle, Side.PLAYER, rng))
        self.shoot_cooldown = spec.fire_rate
        if not spec.unlimited:
            self.ammo[weapon] -= 1
        self.stats.shots_fired += 1
        self.fired = weapon

        # Rocket jump: firing the launcher straight down
        if weapon is WeaponKind.ROCKET and math.sin(angle) > 0.5:
            self.vel.y = -settings.ROCKET_JUMP_SPEED
            self.rocket_jumped = True

    def _update_state(self) -> None:
        if not self.alive:
            self.state = "dead"
        elif not self.on_ground:
            self.state = "jumping" if self.vel.y < 0 else "falling"
        elif abs(self.vel.x) > 20:
            self.state = "walking"
        else:
            self.state = "idle"

    # --------------------------
    # Save data
    # --------------------------

    def loadout(self) -> dict:
        return {
            "health": self.health,
            "armor": self.armor,
            "currentWeapon": self.current_weapon.value,
            "weapons": sorted(w.value for w in self.owned),
            "ammo": {w.value: n for w, n in self.ammo.items() if not WEAPONS[w].unlimited},
            "stats": self.stats.to_dict(),
        }

    def apply_loadout(self, data: dict) -> None:
        """Restore a saved loadout. Raises ValueError/TypeError on a bad field, before changing anything."""
        health = float(data.get("health", self.max_health))
        armor = float(data.get("armor", 0))
        owned = {WeaponKind.PISTOL} | {WeaponKind(w) for w in data.get("weapons", [])}
        ammo = {WeaponKind(name): int(count) for name, count in (data.get("ammo") or {}).items()}
        current = WeaponKind(data.get("currentWeapon", WeaponKind.PISTOL.value))
        stats = data.get("stats") or {}
        stats = PlayerStats(**{k: v for k, v in stats.items() if k in PlayerStats.__dataclass_fields__})

        self.health = health
        self.armor = armor
        self.owned = owned
        self.ammo.update(ammo)
        self.current_weapon = current if current in owned else WeaponKind.PISTOL
        self.stats = stats
