# simulation.py
# One tick of the game: step(state, raw_dt, controls).
#
# Order matters and is fixed:
#   dt clamp -> menu / pause gating -> screen shake -> level manager ->
#   [player -> camera -> enemies -> death sweep -> dead enemy removal ->
#    pickups -> checkpoints -> projectiles -> player shots vs enemies ->
#    enemy shots vs player -> contact damage -> explosions ->
#    dead projectile removal -> particles -> timed events] -> coins
#
# The bracketed block is skipped while paused or mid-transition. Kills are
# scored before the dead are removed, and contact damage still sees this
# tick's enemy list. Lists are only ever filtered into new lists after a
# pass, never edited while being walked.

from __future__ import annotations
import logging
import math

from . import settings
from .collision import aabb_overlap, overlapping
from .enemies import EnemyKind
from .events import (
    CheckpointActivated, EnemyKilled, Explosion, GameOver, PickupCollected,
    PlayerDied, PlayerHurt, ShotFired, Victory,
)
from .physics import clamp_frame_dt
from .pickup import PickupKind
from .player import Player
from .state import GamePhase, SimulationState
from .weapon import WEAPONS

logger = logging.getLogger(__name__)

KILL_SHAKE = (4.0, 0.15)
BOSS_KILL_SHAKE = (20.0, 1.0)
BOSS_ATTACK_SHAKE_TIME = 0.3
HURT_SHAKE = (5.0, 0.2)
ROCKET_JUMP_SHAKE = (6.0, 0.2)


def step(state: SimulationState, raw_dt: float, controls) -> float:
    """Advance the simulation by one frame. Returns the dt actually used."""
    dt = clamp_frame_dt(raw_dt)
    if dt == 0.0:
        # empty, negative or NaN frame: latched input waits for a real one
        return dt
    state.clock += dt
    state.events = []

    # Menu / end screens: only Enter does anything
    if state.phase is GamePhase.MENU:
        if controls.consume_enter():
            start_game(state)
        return dt
    if state.phase in (GamePhase.GAME_OVER, GamePhase.VICTORY):
        if controls.consume_enter():
            restart_game(state)
        return dt

    # Enter means nothing mid-game; drop it so it cannot leak into the next screen
    controls.consume_enter()

    if controls.consume_pause() and state.started:
        state.paused = not state.paused
        logger.debug("Paused" if state.paused else "Resumed")

    if controls.consume_menu_return() and state.paused and state.started:
        return_to_menu(state)
        controls.clear()
        return dt

    _handle_quick_save(state, controls)

    state.shake.update(dt)
    state.level_manager.update(dt, state)

    if state.started and not state.paused and not state.level_manager.transitioning \
            and state.tilemap is not None:
        _update_gameplay(state, dt, controls)

    # coins animate even while paused
    state.coins.update(dt)
    return dt


# --------------------------
# Gameplay block
# --------------------------

def _update_gameplay(state: SimulationState, dt: float, controls) -> None:
    player = state.player
    tilemap = state.tilemap
    was_alive = player.alive
    damage_before = player.stats.damage_taken

    # Player
    player.update(dt, controls, tilemap, state.projectiles, state.rng)
    if player.fired is not None:
        state.events.append(ShotFired(player.fired.value))
    if player.rocket_jumped:
        state.particles.emit_explosion(player.center.x, player.bottom)
        state.shake.shake(*ROCKET_JUMP_SHAKE)
    if player.jumped:
        state.particles.emit_dust(player.center.x, player.bottom)
    if player.reached_exit:
        _reach_exit(state)

    state.camera.follow(player, dt)

    # Enemies; anything they summon joins after the pass
    spawned = []
    for enemy in state.enemies:
        enemy.update(dt, tilemap, player, state.projectiles, spawned)
        if enemy.boss is not None:
            shake = enemy.boss.take_shake()
            if shake > 0:
                state.shake.shake(shake, BOSS_ATTACK_SHAKE_TIME)
    if spawned:
        state.enemies = state.enemies + spawned

    # Death sweep, then removal
    for enemy in state.enemies:
        if not enemy.alive and not enemy.scored:
            _score_kill(state, enemy)
    state.enemies = [e for e in state.enemies if not e.is_fully_dead]

    state.achievements.update(dt)

    # Pickups
    for pickup in state.pickups:
        pickup.update(dt)
        if player.alive and aabb_overlap(player, pickup) and pickup.collect(player):
            _on_pickup(state, pickup)
    state.pickups = [p for p in state.pickups if not p.collected]

    # Checkpoints (stay in the world once activated)
    for checkpoint in state.checkpoints:
        checkpoint.update(dt)
        if player.alive and aabb_overlap(player, checkpoint) and checkpoint.activate(player):
            state.events.append(CheckpointActivated(checkpoint.x, checkpoint.y))
            logger.debug("Checkpoint at (%.0f, %.0f)", checkpoint.x, checkpoint.y)

    # Projectiles
    for projectile in state.projectiles:
        projectile.update(dt, tilemap)

    _player_shots_vs_enemies(state)
    _enemy_shots_vs_player(state)
    _contact_damage(state)

    for projectile in state.projectiles:
        if projectile.pending_explosion:
            projectile.pending_explosion = False
            _explode(state, projectile)
    state.projectiles = [p for p in state.projectiles if not p.dead]

    state.particles.update(dt)
    state.timers.advance(dt, state)

    # Damage / death bookkeeping for everything that hurt the player this tick
    taken = player.stats.damage_taken - damage_before
    if taken > 0:
        state.coins.on_damage_taken(taken)
        state.achievements.on_player_damaged()
        state.events.append(PlayerHurt(taken))
    if was_alive and not player.alive:
        _on_player_death(state)
    if player.out_of_lives and state.phase is GamePhase.PLAYING:
        _game_over(state)


def _player_shots_vs_enemies(state: SimulationState) -> None:
    player = state.player
    live = [e for e in state.enemies if e.alive]
    state.broad_phase.rebuild(live)

    for projectile in state.projectiles:
        if projectile.dead or not projectile.from_player:
            continue

        hits = overlapping(projectile, live, state.broad_phase)
        projectile.forget_contacts({e.uid for e in hits})
        for enemy in hits:
            if not enemy.alive or not projectile.register_hit(enemy.uid):
                continue
            player.stats.damage_dealt += enemy.take_damage(projectile.damage)
            c = projectile.center
            state.particles.emit_hit(c.x, c.y)
            if projectile.dead:
                break


def _enemy_shots_vs_player(state: SimulationState) -> None:
    player = state.player
    for projectile in state.projectiles:
        if projectile.dead or projectile.from_player:
            continue
        if not player.alive or not aabb_overlap(projectile, player):
            continue
        if projectile.register_hit(player.uid):
            player.take_damage(projectile.damage)
            c = projectile.center
            state.particles.emit_hit(c.x, c.y)


def _contact_damage(state: SimulationState) -> None:
    player = state.player
    if not player.alive or player.invulnerable > 0:
        return

    for enemy in state.enemies:
        if not enemy.alive or not aabb_overlap(player, enemy):
            continue
        # only the first enemy touching us this tick hurts
        player.take_damage(enemy.damage)
        player.vel.x = -settings.CONTACT_KNOCKBACK_X if enemy.pos.x > player.pos.x else settings.CONTACT_KNOCKBACK_X
        player.vel.y = -settings.CONTACT_KNOCKBACK_Y
        break


def _explode(state: SimulationState, projectile) -> None:
    """Area damage at the projectile's point of death, falling off linearly to the edge."""
    c = projectile.center
    radius = projectile.explosion_radius
    state.particles.emit_explosion(c.x, c.y, projectile.color)
    state.shake.shake(radius / 10, 0.2)
    state.events.append(Explosion(c.x, c.y, radius))
    if radius <= 0:
        return

    if projectile.from_player:
        for enemy in state.enemies:
            if not enemy.alive:
                continue
            dist = c.distance_to(enemy.center)
            if dist < radius:
                state.player.stats.damage_dealt += enemy.take_damage(projectile.damage * (1 - dist / radius))
    else:
        player = state.player
        if player.alive:
            dist = c.distance_to(player.center)
            if dist < radius:
                player.take_damage(projectile.damage * (1 - dist / radius))


# --------------------------
# Consequences
# --------------------------

def _score_kill(state: SimulationState, enemy) -> None:
    enemy.scored = True
    points = math.floor(settings.SCORE_PER_KILL * state.multipliers["score"])
    state.score += points

    c = enemy.center
    state.shake.shake(*KILL_SHAKE)
    state.particles.emit_blood(c.x, c.y)
    coins = state.coins.on_enemy_kill(enemy.kind, c.x, c.y)
    state.achievements.on_enemy_killed(state.player)
    state.events.append(EnemyKilled(enemy.kind.value, c.x, c.y, points, coins))

    if enemy.kind is EnemyKind.BOSS:
        logger.info("Boss defeated")
        state.achievements.on_boss_killed()
        state.shake.shake(*BOSS_KILL_SHAKE)
        state.particles.emit_explosion(c.x, c.y)
        _schedule_victory(state, settings.VICTORY_DELAY)


def _on_pickup(state: SimulationState, pickup) -> None:
    player = state.player
    if pickup.kind is PickupKind.COIN:
        state.coins.on_coin_pickup(pickup.x, pickup.y)
    else:
        state.score += math.floor(settings.SCORE_PER_PICKUP * state.multipliers["score"])
    player.stats.pickups_collected += 1
    state.achievements.on_pickup(player)
    state.events.append(PickupCollected(pickup.kind.value))


def _on_player_death(state: SimulationState) -> None:
    player = state.player
    state.achievements.on_player_death()
    state.particles.emit_blood(player.center.x, player.center.y)
    state.shake.shake(*HURT_SHAKE)
    state.events.append(PlayerDied(player.lives))
    logger.info("Player died, %d lives left", player.lives)


def _reach_exit(state: SimulationState) -> None:
    manager = state.level_manager
    if manager.transitioning or state.victory_pending:
        return
    if manager.has_next_level:
        manager.next_level()
    else:
        # last level: walking out is the win
        state.achievements.on_level_complete(manager.current_index, state.player, state.difficulty)
        _schedule_victory(state, 0.0)


def _schedule_victory(state: SimulationState, delay: float) -> None:
    if state.victory_pending:
        return
    state.victory_pending = True
    state.timers.schedule(delay, _victory, "victory")


def _victory(state: SimulationState) -> None:
    if state.phase is not GamePhase.PLAYING:
        return
    state.score += settings.VICTORY_BONUS
    state.phase = GamePhase.VICTORY
    state.events.append(Victory(state.score))
    logger.info("Victory! Final score %d", state.score)


def _game_over(state: SimulationState) -> None:
    state.phase = GamePhase.GAME_OVER
    state.paused = False
    state.events.append(GameOver(state.score))
    logger.info("Game over on level %d with %d points", state.level_index, state.score)


# --------------------------
# Run lifecycle
# --------------------------

def _reset_run(state: SimulationState) -> bool:
    state.score = 0
    state.paused = False
    state.victory_pending = False
    state.timers.clear()
    state.shake.reset()
    state.player.full_reset()
    state.player.damage_multiplier = state.multipliers["player_damage"]
    return state.level_manager.load_level(0, state)


def start_game(state: SimulationState) -> bool:
    state.phase = GamePhase.PLAYING
    state.started = True
    logger.info("New game on %s", state.difficulty)
    return _reset_run(state)


def restart_game(state: SimulationState) -> bool:
    """Record the finished run (locally, then to the leaderboard) and start over."""
    level = state.level_index
    coins = state.coins.balance
    if state.high_scores.add(state.score, level, coins):
        logger.info("Score %d entered the local high score table", state.score)

    client = state.score_client
    if client is not None and state.score > 0:
        client.submit_score_async(state.score, level, coins, callback=_log_submission)

    return start_game(state)


def _log_submission(result) -> None:
    if result.ok and result.new_high_score:
        logger.info("New personal best on the leaderboard")
    elif not result.ok:
        logger.info("Score kept locally only (%s)", result.error)


def return_to_menu(state: SimulationState) -> None:
    state.phase = GamePhase.MENU
    state.started = False
    state.score = 0
    state.paused = False
    state.victory_pending = False
    state.timers.clear()
    state.shake.reset()
    state.player.full_reset()
    state.level_manager.load_level(0, state)
    logger.info("Returned to menu")


# --------------------------
# Quick save / load
# --------------------------

def _handle_quick_save(state: SimulationState, controls) -> None:
    save = controls.consume_save()
    load = controls.consume_load()
    if state.save_game is None or state.level_manager.transitioning:
        return
    if save and state.player.alive:
        state.save_game.save(state)
    if load:
        load_saved_game(state)


def load_saved_game(state: SimulationState) -> bool:
    data = state.save_game.load() if state.save_game is not None else None
    if data is None:
        logger.info("No saved game to load")
        return False

    # Check every field before touching the live run
    try:
        index = int(data.get("level", 0))
        score = int(data.get("score", 0))
        loadout = data.get("player") or {}
        Player(0, 0).apply_loadout(loadout)
    except (ValueError, TypeError, KeyError, AttributeError) as e:
        logger.warning("Save file is corrupt, ignoring it: %s", e)
        return False
    if not state.level_manager.can_load(index):
        logger.warning("Save file points at level %d, which cannot be loaded", index)
        return False

    difficulty = data.get("difficulty", state.difficulty)
    if difficulty in settings.DIFFICULTY_SETTINGS:
        state.difficulty = difficulty
    state.player.full_reset()
    state.player.damage_multiplier = state.multipliers["player_damage"]
    state.victory_pending = False
    state.timers.clear()
    state.level_manager.load_level(index, state)

    state.player.apply_loadout(loadout)
    state.score = score
    state.phase = GamePhase.PLAYING
    state.started = True
    state.paused = False
    logger.info("Loaded save: level %d, score %d", state.level_index, state.score)
    return True


def current_weapon_ammo(player) -> int | None:
    """HUD helper: rounds left for the equipped weapon, None when unlimited."""
    if WEAPONS[player.current_weapon].unlimited:
        return None
    return player.ammo[player.current_weapon]
