# level_manager.py
# Owns the level list and the live TileMap, spawns each level's entities
# and runs the fade between levels.
#
# Transition: IDLE -> FADING_OUT -> LOADING -> FADING_IN -> IDLE.
# The next level is loaded at the midpoint; gameplay is suspended for the
# whole window while the renderer keeps drawing the fade.

from __future__ import annotations
import logging
from enum import Enum

from . import settings
from .enemies import Enemy
from .events import LevelComplete, LevelLoaded
from .level import Level, LevelFormatError
from .pickup import Checkpoint, Pickup
from .tilemap import TileMap
from .utils import clamp

logger = logging.getLogger(__name__)


class TransitionPhase(Enum):
    IDLE = "idle"
    FADING_OUT = "fading_out"
    LOADING = "loading"
    FADING_IN = "fading_in"


class LevelManager:
    def __init__(self, levels: list[Level], transition_duration: float = settings.TRANSITION_DURATION):
        # our own list: the editor appends to it without touching the caller's
        self.levels = list(levels)
        self.current_index = 0
        self.tilemap: TileMap | None = None

        self.transition_duration = transition_duration
        self.transition_timer = 0.0
        self.phase = TransitionPhase.IDLE

    # --------------------------
    # Levels
    # --------------------------

    @property
    def level_count(self) -> int:
        return len(self.levels)

    @property
    def current_level(self) -> Level | None:
        if 0 <= self.current_index < len(self.levels):
            return self.levels[self.current_index]
        return None

    @property
    def has_next_level(self) -> bool:
        return self.current_index + 1 < len(self.levels)

    def add_level(self, level: Level) -> int:
        self.levels.append(level)
        return len(self.levels) - 1

    def replace_level(self, index: int, level: Level) -> bool:
        if not 0 <= index < len(self.levels):
            logger.warning("Cannot replace level %d: only %d levels", index, len(self.levels))
            return False
        self.levels[index] = level
        return True

    def load_level(self, index: int, state) -> bool:
        """
        Make level `index` current and respawn everything in it.

        Out-of-range indices and malformed levels are logged and leave the
        current level untouched.
        """
        if not 0 <= index < len(self.levels):
            logger.warning("Level index %d out of range (0..%d), staying on level %d",
                           index, len(self.levels) - 1, self.current_index)
            return False

        level = self.levels[index]
        try:
            level.validate()
            tilemap = TileMap(level)
        except LevelFormatError as e:
            logger.error("Cannot load level %d: %s", index, e)
            return False

        self.current_index = index
        self.tilemap = tilemap
        tile = settings.TILE_SIZE

        player = state.player
        player.clear_checkpoint()
        player.reset(level.player_start.x * tile, level.player_start.y * tile)

        state.camera.set_bounds(tilemap.pixel_width, tilemap.pixel_height)
        state.camera.snap_to(player)

        state.clear_entities()
        mult = state.multipliers
        state.enemies = [Enemy(s.type, s.x * tile, s.y * tile, mult, rng=state.rng) for s in level.enemies]
        state.pickups = [Pickup(s.x * tile, s.y * tile, s.type) for s in level.pickups]
        state.checkpoints = [Checkpoint(c.x * tile, c.y * tile) for c in level.checkpoints]

        state.coins.reset_level_damage()
        state.achievements.on_level_start()
        state.events.append(LevelLoaded(index, level.name))
        logger.info("Loaded level %d: %s (%d enemies, %d pickups)",
                    index, level.name, len(state.enemies), len(state.pickups))
        return True

    # --------------------------
    # Transitions
    # --------------------------

    @property
    def transitioning(self) -> bool:
        return self.phase is not TransitionPhase.IDLE

    def next_level(self) -> bool:
        """Start the fade to the next level. Ignored mid-transition."""
        if self.transitioning:
            return False
        self.phase = TransitionPhase.FADING_OUT
        self.transition_timer = self.transition_duration
        return True

    def update(self, dt: float, state) -> bool:
        """Advance the fade. Returns True on the tick the next level was loaded."""
        if not self.transitioning:
            return False

        self.transition_timer -= dt
        loaded = False

        if self.phase is TransitionPhase.FADING_OUT and self.transition_timer <= self.transition_duration / 2:
            self.phase = TransitionPhase.LOADING
            loaded = self._complete_level(state)
            self.phase = TransitionPhase.FADING_IN

        if self.transition_timer <= 0:
            self.phase = TransitionPhase.IDLE
            self.transition_timer = 0.0
        return loaded

    def can_load(self, index: int) -> bool:
        if not 0 <= index < len(self.levels):
            return False
        try:
            self.levels[index].validate()
        except LevelFormatError:
            return False
        return True

    def _complete_level(self, state) -> bool:
        finished = self.current_index
        if not self.can_load(finished + 1):
            # load_level logs the reason; the player goes back to the start
            # so standing on the exit does not queue the same fade every tick
            self.load_level(finished + 1, state)
            self._back_to_start(state.player)
            return False

        # rewards read this level's damage / time, which loading resets
        if state.started:
            state.score += settings.LEVEL_COMPLETE_BONUS
            bonus, perfect = state.coins.on_level_complete()
            state.achievements.on_level_complete(finished, state.player, state.difficulty)
            state.events.append(LevelComplete(finished, bonus, perfect))
        return self.load_level(finished + 1, state)

    def _back_to_start(self, player) -> None:
        start = self.levels[self.current_index].player_start
        player.pos.update(start.x * settings.TILE_SIZE, start.y * settings.TILE_SIZE)
        player.vel.update(0, 0)
        player.reached_exit = False

    @property
    def fade_alpha(self) -> float:
        """0 (clear) .. 1 (black) overlay for the renderer."""
        if not self.transitioning:
            return 0.0
        half = self.transition_duration / 2
        if half <= 0:
            return 0.0
        if self.phase is TransitionPhase.FADING_OUT:
            alpha = (self.transition_duration - self.transition_timer) / half
        else:
            alpha = self.transition_timer / half
        return clamp(alpha, 0.0, 1.0)
