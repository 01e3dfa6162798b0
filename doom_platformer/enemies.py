# enemies.py
# One Enemy class for every kind. What differs between kinds is mostly data
# (ENEMY_SPECS) plus one behaviour function per kind, picked from _BEHAVIOURS.
#
# Lifecycle: ALIVE -> (health <= 0) -> DYING (short grace for the death
# effect) -> DEAD (removed by the game loop). Enemies never decide what a
# kill is worth; the loop does that when it sweeps the dying ones.

from __future__ import annotations
import itertools
import math
import random
from dataclasses import dataclass
from enum import Enum

import pygame

from . import settings
from .physics import Body, LifeState, friction_factor
from .weapon import enemy_shot

_uids = itertools.count(1)


class EnemyKind(str, Enum):
    PATROL = "patrol"
    SHOOTER = "shooter"
    FLYING = "flying"
    BOSS = "boss"


@dataclass(frozen=True)
class EnemySpec:
    width: int
    height: int
    health: float
    damage: float               # contact damage
    speed: float
    chase_speed: float
    detection_range: float
    attack_cooldown: float = 0.0
    projectile_speed: float = 0.0
    gravity: bool = True


ENEMY_SPECS: dict[EnemyKind, EnemySpec] = {
    EnemyKind.PATROL: EnemySpec(28, 40, health=50, damage=10, speed=80, chase_speed=150, detection_range=180),
    EnemyKind.SHOOTER: EnemySpec(
        28, 48, health=40, damage=10, speed=0, chase_speed=0, detection_range=300,
        attack_cooldown=2.0, projectile_speed=250,
    ),
    EnemyKind.FLYING: EnemySpec(
        32, 24, health=30, damage=10, speed=100, chase_speed=120, detection_range=250, gravity=False,
    ),
    EnemyKind.BOSS: EnemySpec(
        96, 120, health=1000, damage=40, speed=240, chase_speed=240, detection_range=2000, gravity=False,
    ),
}

PATROL_FLIP_TIME = 2.0
FLY_SINE_AMPLITUDE = 40.0
FLY_SINE_FREQUENCY = 2.0
MINION_HEALTH_FACTOR = 0.6


class Enemy(Body):
    def __init__(self, kind: EnemyKind | str, x: float, y: float,
                 multipliers: dict | None = None, rng: random.Random | None = None):
        self.kind = EnemyKind(kind)
        self.spec = ENEMY_SPECS[self.kind]
        super().__init__(x, y, self.spec.width, self.spec.height)

        self.uid = next(_uids)
        self.rng = rng or random.Random()
        mult = multipliers or settings.difficulty(settings.DEFAULT_DIFFICULTY)
        self.damage_multiplier = mult["enemy_damage"]

        self.max_health = self.spec.health * mult["enemy_health"]
        self.health = self.max_health
        self.damage = self.spec.damage * mult["enemy_damage"]
        self.speed = self.spec.speed * mult["enemy_speed"]
        self.chase_speed = self.spec.chase_speed * mult["enemy_speed"]

        self.life = LifeState.ALIVE
        self.death_timer = 0.0
        self.scored = False          # set by the loop once the kill is rewarded

        self.state = "patrol"        # patrol / chase / attack / idle, for the renderer
        self.facing = 1
        self.attack_cooldown = 0.0
        self.damage_flash = 0.0
        self.anim_time = 0.0

        # patrol
        self.patrol_dir = 1
        self.patrol_timer = 0.0

        # flying
        self.base_y = float(y)
        self.sine_offset = self.rng.random() * math.tau
        self.fly_dir = 1 if self.rng.random() > 0.5 else -1

        self.boss = BossBrain(self) if self.kind is EnemyKind.BOSS else None

    # --------------------------
    # Health
    # --------------------------

    @property
    def alive(self) -> bool:
        return self.life is LifeState.ALIVE

    @property
    def is_fully_dead(self) -> bool:
        return self.life is LifeState.DEAD

    def take_damage(self, amount: float) -> float:
        """Returns the damage actually taken (0 while dying or shielded)."""
        if not self.alive:
            return 0.0
        if self.boss is not None and self.boss.invulnerable:
            return 0.0

        self.health -= amount
        self.damage_flash = 0.1
        if self.health <= 0:
            self.life = LifeState.DYING
            self.death_timer = settings.ENEMY_DEATH_DURATION
            self.vel.update(0, 0)
        return amount

    # --------------------------
    # Helpers
    # --------------------------

    def distance_to(self, player) -> float:
        return self.center.distance_to(player.center)

    def face(self, player) -> int:
        self.facing = 1 if player.pos.x > self.pos.x else -1
        return self.facing

    # --------------------------
    # Update
    # --------------------------

    def update(self, dt: float, tilemap, player, projectiles: list, spawned: list) -> None:
        """
        Advance one tick. New projectiles go into projectiles, summoned
        enemies into spawned (merged by the loop after the enemy pass).
        """
        if self.life is LifeState.DYING:
            self.death_timer -= dt
            if self.death_timer <= 0:
                self.life = LifeState.DEAD
            return
        if self.life is LifeState.DEAD:
            return

        self.anim_time += dt
        if self.damage_flash > 0:
            self.damage_flash = max(0.0, self.damage_flash - dt)
        if self.attack_cooldown > 0:
            self.attack_cooldown -= dt

        _BEHAVIOURS[self.kind](self, dt, tilemap, player, projectiles, spawned)

        # fell out of the world: gone, no reward
        if self.pos.y > tilemap.pixel_height + 200:
            self.life = LifeState.DEAD
            self.scored = True


# --------------------------
# Behaviours
# --------------------------

def _walk(enemy: Enemy, dt: float, tilemap) -> bool:
    """Gravity + per-axis move. Returns True if a wall stopped us."""
    if enemy.spec.gravity:
        enemy.apply_gravity(dt)
    hit_wall = enemy.move_x(enemy.vel.x * dt, tilemap)
    enemy.move_y(enemy.vel.y * dt, tilemap)
    if not enemy.on_ground and enemy.probe_ground(tilemap):
        enemy.on_ground = True
    return hit_wall


def _patrol(enemy: Enemy, dt, tilemap, player, projectiles, spawned) -> None:
    if player.alive and enemy.distance_to(player) < enemy.spec.detection_range:
        enemy.state = "chase"
        enemy.vel.x = enemy.chase_speed * enemy.face(player)
    else:
        enemy.state = "patrol"
        enemy.patrol_timer += dt
        if enemy.patrol_timer >= PATROL_FLIP_TIME:
            enemy.patrol_timer = 0.0
            enemy.patrol_dir *= -1
        enemy.vel.x = enemy.speed * enemy.patrol_dir
        enemy.facing = enemy.patrol_dir

    if _walk(enemy, dt, tilemap) and enemy.state == "patrol":
        enemy.patrol_dir *= -1
        enemy.patrol_timer = 0.0


def _shooter(enemy: Enemy, dt, tilemap, player, projectiles, spawned) -> None:
    enemy.vel.x = 0.0
    if not player.alive:
        enemy.state = "idle"
    elif enemy.distance_to(player) < enemy.spec.detection_range:
        enemy.state = "attack"
        direction = enemy.face(player)
        if enemy.attack_cooldown <= 0:
            muzzle = pygame.Vector2(
                enemy.pos.x + (enemy.width if direction > 0 else 0),
                enemy.pos.y + enemy.height / 2 - 2,
            )
            aim = player.center - muzzle
            if aim.length_squared() > 0:
                aim.scale_to_length(enemy.spec.projectile_speed)
                projectiles.append(enemy_shot(muzzle, aim, settings.ENEMY_PROJECTILE_DAMAGE))
            enemy.attack_cooldown = enemy.spec.attack_cooldown
    else:
        enemy.state = "idle"

    _walk(enemy, dt, tilemap)


def _flying(enemy: Enemy, dt, tilemap, player, projectiles, spawned) -> None:
    if player.alive and enemy.distance_to(player) < enemy.spec.detection_range:
        enemy.state = "chase"
        enemy.face(player)
        to_player = player.center - enemy.center
        if to_player.length_squared() > 0:
            enemy.vel = to_player.normalize() * enemy.chase_speed
        else:
            enemy.vel.update(0, 0)
    else:
        enemy.state = "patrol"
        enemy.vel.x = enemy.speed * enemy.fly_dir
        enemy.vel.y = 0.0
        enemy.pos.y = enemy.base_y + math.sin(
            enemy.anim_time * FLY_SINE_FREQUENCY + enemy.sine_offset
        ) * FLY_SINE_AMPLITUDE
        enemy.facing = enemy.fly_dir

    if enemy.move_x(enemy.vel.x * dt, tilemap):
        enemy.fly_dir *= -1
    enemy.move_y(enemy.vel.y * dt, tilemap)


def _boss(enemy: Enemy, dt, tilemap, player, projectiles, spawned) -> None:
    enemy.boss.update(dt, tilemap, player, projectiles, spawned)


_BEHAVIOURS = {
    EnemyKind.PATROL: _patrol,
    EnemyKind.SHOOTER: _shooter,
    EnemyKind.FLYING: _flying,
    EnemyKind.BOSS: _boss,
}


# --------------------------
# Boss
# --------------------------

class BossAttack(Enum):
    IDLE = "idle"
    FIREBALL_BARRAGE = "fireball_barrage"
    SPIRAL_SHOT = "spiral_shot"
    GROUND_POUND = "ground_pound"
    LASER_SWEEP = "laser_sweep"
    TELEPORT_STRIKE = "teleport_strike"
    SUMMON_MINIONS = "summon_minions"
    SHOCKWAVE = "shockwave"


PHASE_ATTACKS = {
    1: [BossAttack.FIREBALL_BARRAGE, BossAttack.GROUND_POUND, BossAttack.SPIRAL_SHOT],
    2: [BossAttack.FIREBALL_BARRAGE, BossAttack.SPIRAL_SHOT, BossAttack.LASER_SWEEP,
        BossAttack.TELEPORT_STRIKE, BossAttack.GROUND_POUND],
    3: [BossAttack.FIREBALL_BARRAGE, BossAttack.SPIRAL_SHOT, BossAttack.LASER_SWEEP,
        BossAttack.TELEPORT_STRIKE, BossAttack.SUMMON_MINIONS, BossAttack.SHOCKWAVE,
        BossAttack.GROUND_POUND],
}

PHASE_THRESHOLDS = (0.66, 0.33)
PHASE_SPEEDS = {1: 240.0, 2: 280.0, 3: 340.0}
PHASE_TRANSITION_TIME = 1.2
ENRAGE_DAMAGE_FACTOR = 1.5
HOVER_AMPLITUDE = 8.0
POUND_RISE = 120.0
POUND_RISE_TIME = 0.6
POUND_FALL_SPEED = 1000.0
VELOCITY_DAMPING = 0.9


class BossBrain:
    """Phase / attack-pattern state for the boss."""

    def __init__(self, enemy: Enemy):
        self.enemy = enemy
        self.phase = 1
        self.invulnerable = False
        self.invulnerable_timer = 0.0
        self.enraged = False

        self.attack = BossAttack.IDLE
        self.last_attack: BossAttack | None = None
        self.attack_timer = 0.0
        self.attack_cooldown = 1.0
        self.sub_timer = 0.0
        self.hover_time = 0.0
        self.fresh_attack = False
        self.speed_factor = enemy.speed / PHASE_SPEEDS[1]

        self.shots_left = 0
        self.spiral_angle = 0.0
        self.summons_left = 0
        self.pounding = False
        self.grounded = False
        self.laser_angle = 0.0
        self.shockwave_radius = 0.0
        self.teleported = False

        # screen shake requested this tick, drained by the loop
        self.pending_shake = 0.0

    @property
    def move_speed(self) -> float:
        return PHASE_SPEEDS[self.phase] * self.speed_factor

    def take_shake(self) -> float:
        shake, self.pending_shake = self.pending_shake, 0.0
        return shake

    # --------------------------
    # Update
    # --------------------------

    def update(self, dt: float, tilemap, player, projectiles: list, spawned: list) -> None:
        boss = self.enemy
        self.hover_time += dt

        if self.invulnerable:
            self.invulnerable_timer -= dt
            if self.invulnerable_timer <= 0:
                self.invulnerable = False

        if player.alive:
            self._think(dt, tilemap, player, projectiles, spawned)

        boss.move_x(boss.vel.x * dt, tilemap)
        if self.grounded or self.pounding:
            boss.pos.y += boss.vel.y * dt
        else:
            boss.pos.y = boss.base_y + math.sin(self.hover_time * 2) * HOVER_AMPLITUDE

        damping = friction_factor(VELOCITY_DAMPING, dt)
        boss.vel.x *= damping
        if not self.pounding:
            boss.vel.y *= damping

    def _think(self, dt, tilemap, player, projectiles, spawned) -> None:
        boss = self.enemy
        ratio = boss.health / boss.max_health
        if ratio <= PHASE_THRESHOLDS[1] and self.phase < 3:
            self._enter_phase(3)
        elif ratio <= PHASE_THRESHOLDS[0] and self.phase < 2:
            self._enter_phase(2)

        self.attack_timer += dt
        self.attack_cooldown -= dt
        boss.face(player)
        boss.state = self.attack.value

        handler = {
            BossAttack.IDLE: self._idle,
            BossAttack.FIREBALL_BARRAGE: self._fireball_barrage,
            BossAttack.SPIRAL_SHOT: self._spiral_shot,
            BossAttack.GROUND_POUND: self._ground_pound,
            BossAttack.LASER_SWEEP: self._laser_sweep,
            BossAttack.TELEPORT_STRIKE: self._teleport_strike,
            BossAttack.SUMMON_MINIONS: self._summon_minions,
            BossAttack.SHOCKWAVE: self._shockwave,
        }[self.attack]
        starting, self.fresh_attack = self.fresh_attack, False
        handler(dt, player, projectiles, spawned, starting)

        if self.attack is BossAttack.IDLE and self.attack_cooldown <= 0:
            self._choose_attack()

    def _enter_phase(self, phase: int) -> None:
        self.phase = phase
        self.invulnerable = True
        self.invulnerable_timer = PHASE_TRANSITION_TIME
        self.attack = BossAttack.IDLE
        self.attack_timer = 0.0
        self.attack_cooldown = 0.5
        self.pounding = False
        self.grounded = False
        self.pending_shake = max(self.pending_shake, 20.0)
        if phase == 3 and not self.enraged:
            self.enraged = True
            self.enemy.damage *= ENRAGE_DAMAGE_FACTOR

    def _choose_attack(self) -> None:
        options = PHASE_ATTACKS[self.phase]
        choice = self.enemy.rng.choice(options)
        while choice is self.last_attack and len(options) > 1:
            choice = self.enemy.rng.choice(options)
        self.last_attack = choice
        self.attack = choice
        self.attack_timer = 0.0
        self.sub_timer = 0.0
        self.fresh_attack = True

    def _finish(self, cooldown: float) -> None:
        self.attack = BossAttack.IDLE
        self.attack_timer = 0.0
        self.attack_cooldown = cooldown

    def _shot(self, projectiles, origin, angle, speed, base_damage, color, size=None) -> None:
        vel = pygame.Vector2(math.cos(angle), math.sin(angle)) * speed
        damage = base_damage * self.enemy.damage_multiplier
        projectiles.append(enemy_shot(origin, vel, damage, color=color, size=size))

    # --------------------------
    # Attack patterns
    # --------------------------

    def _idle(self, dt, player, projectiles, spawned, starting) -> None:
        boss = self.enemy
        dx = player.pos.x - boss.pos.x
        if abs(dx) > 100:
            boss.vel.x = math.copysign(self.move_speed * 0.8, dx)

    def _fireball_barrage(self, dt, player, projectiles, spawned, starting) -> None:
        boss = self.enemy
        if starting:
            self.shots_left = {1: 6, 2: 10, 3: 16}[self.phase]
            boss.vel.x = 0.0

        if self.shots_left > 0 and self.sub_timer <= 0:
            origin = pygame.Vector2(boss.center.x, boss.pos.y + 30)
            aim = math.atan2(player.pos.y - origin.y, player.pos.x - origin.x)
            spread = (boss.rng.random() - 0.5) * 0.4
            speed = 350 + boss.rng.random() * 150
            self._shot(projectiles, origin, aim + spread, speed, 25, (255, 68, 0))
            self.shots_left -= 1
            self.sub_timer = 0.1 if self.phase == 3 else 0.18

        self.sub_timer -= dt
        if self.shots_left <= 0 and self.sub_timer <= -0.2:
            self._finish(0.2)

    def _spiral_shot(self, dt, player, projectiles, spawned, starting) -> None:
        boss = self.enemy
        if starting:
            self.spiral_angle = 0.0
            self.shots_left = 40 if self.phase == 3 else 25
            boss.vel.x = 0.0

        if self.shots_left > 0 and self.sub_timer <= 0:
            for i in range(3):
                angle = self.spiral_angle + i * math.tau / 3
                self._shot(projectiles, boss.center, angle, 250, 18, (255, 0, 255))
            self.spiral_angle += 0.4
            self.shots_left -= 1
            self.sub_timer = 0.06

        self.sub_timer -= dt
        if self.shots_left <= 0:
            self._finish(0.3)

    def _ground_pound(self, dt, player, projectiles, spawned, starting) -> None:
        boss = self.enemy
        if starting:
            self.pounding = False
            self.grounded = True
            boss.vel.update(0, 0)

        if not self.pounding:
            if self.attack_timer < POUND_RISE_TIME:
                boss.pos.y = boss.base_y - (self.attack_timer / POUND_RISE_TIME) * POUND_RISE
            else:
                boss.vel.y = POUND_FALL_SPEED
                self.pounding = True
        elif boss.pos.y >= boss.base_y:
            boss.pos.y = boss.base_y
            boss.vel.y = 0.0
            self.pounding = False
            self.grounded = False
            self.pending_shake = max(self.pending_shake, 18.0)
            rings = 12 if self.phase == 3 else 8
            origin = pygame.Vector2(boss.center.x, boss.bottom)
            for i in range(rings):
                self._shot(projectiles, origin, i / rings * math.tau, 250, 30, (255, 170, 0))
            self._finish(0.4)

    def _laser_sweep(self, dt, player, projectiles, spawned, starting) -> None:
        boss = self.enemy
        if starting:
            boss.vel.x = 0.0
        if self.attack_timer < 1.5:
            # charging
            return
        if self.attack_timer < 2.5:
            progress = (self.attack_timer - 1.2) / 1.3
            self.laser_angle = -0.6 + progress * 1.2
            if self.sub_timer <= 0:
                origin = pygame.Vector2(
                    boss.pos.x + (boss.width if boss.facing > 0 else 0), boss.pos.y + 30
                )
                angle = self.laser_angle if boss.facing > 0 else math.pi - self.laser_angle
                self._shot(projectiles, origin, angle, 700, 22, (0, 255, 255), size=(10, 10))
                self.sub_timer = 0.04
            self.sub_timer -= dt
        else:
            self._finish(0.4)

    def _teleport_strike(self, dt, player, projectiles, spawned, starting) -> None:
        boss = self.enemy
        if starting:
            self.teleported = False
        if self.attack_timer > 0.3 and not self.teleported:
            self.teleported = True
            boss.pos.x = player.pos.x + (-150 if player.facing > 0 else 150)
            boss.vel.x = 0.0
            boss.face(player)
        if self.attack_timer > 0.7:
            self._finish(0.3)

    def _summon_minions(self, dt, player, projectiles, spawned, starting) -> None:
        boss = self.enemy
        if starting:
            self.summons_left = 5 if self.phase == 3 else 4
            boss.vel.x = 0.0

        if self.summons_left > 0 and self.sub_timer <= 0:
            x = boss.pos.x + (boss.rng.random() - 0.5) * 300
            kind = boss.rng.choice([EnemyKind.PATROL, EnemyKind.SHOOTER])
            minion = Enemy(kind, x, boss.pos.y, rng=boss.rng, multipliers={
                "enemy_health": MINION_HEALTH_FACTOR,
                "enemy_damage": boss.damage_multiplier,
                "enemy_speed": self.speed_factor,
            })
            spawned.append(minion)
            self.pending_shake = max(self.pending_shake, 8.0)
            self.summons_left -= 1
            self.sub_timer = 0.5

        self.sub_timer -= dt
        if self.summons_left <= 0 and self.sub_timer <= -0.3:
            self._finish(0.8)

    def _shockwave(self, dt, player, projectiles, spawned, starting) -> None:
        boss = self.enemy
        if starting:
            self.shockwave_radius = 0.0
        self.shockwave_radius += 500 * dt

        if self.sub_timer <= 0:
            count = 24 if self.phase == 3 else 20
            c = boss.center
            for i in range(count):
                angle = i / count * math.tau
                origin = pygame.Vector2(
                    c.x + math.cos(angle) * self.shockwave_radius,
                    c.y + math.sin(angle) * self.shockwave_radius,
                )
                self._shot(projectiles, origin, angle, 200, 16, (255, 0, 0))
            self.sub_timer = 0.25
        self.sub_timer -= dt

        if self.attack_timer >= 1.2:
            self.shockwave_radius = 0.0
            self._finish(0.4)
