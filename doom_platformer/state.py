# state.py
# Everything one run of the simulation owns, in one place.
#
# The loop (simulation.step) and the level manager take this by reference;
# there are no module-level entity lists. The renderer only reads it.

from __future__ import annotations
import random
from dataclasses import dataclass, field
from enum import Enum

from . import settings
from .api import ScoreClient
from .camera import Camera
from .collision import BruteForcePhase
from .effects import ParticleSystem, ScreenShake
from .events import GameEvent, TimedEventQueue
from .level_manager import LevelManager
from .player import Player
from .progress import AchievementSystem, CoinSystem, HighScoreTable, SaveGame
from .utils import data_path


class GamePhase(Enum):
    MENU = "menu"
    PLAYING = "playing"
    GAME_OVER = "game_over"
    VICTORY = "victory"


@dataclass
class SimulationState:
    level_manager: LevelManager
    player: Player = field(default_factory=Player)
    camera: Camera = field(default_factory=Camera)
    difficulty: str = settings.DEFAULT_DIFFICULTY
    seed: int | None = None

    phase: GamePhase = GamePhase.MENU
    started: bool = False
    paused: bool = False
    score: int = 0
    clock: float = 0.0
    victory_pending: bool = False

    enemies: list = field(default_factory=list)
    projectiles: list = field(default_factory=list)
    pickups: list = field(default_factory=list)
    checkpoints: list = field(default_factory=list)
    # swap for a SpatialHashGrid on crowded levels
    broad_phase: object = field(default_factory=BruteForcePhase)

    rng: random.Random = field(init=False)
    particles: ParticleSystem = field(init=False)
    shake: ScreenShake = field(init=False)
    timers: TimedEventQueue = field(default_factory=TimedEventQueue)
    # presentation events of the last step, for sound / HUD hooks
    events: list[GameEvent] = field(default_factory=list)

    coins: CoinSystem = field(default_factory=CoinSystem)
    achievements: AchievementSystem = field(default_factory=AchievementSystem)
    high_scores: HighScoreTable = field(default_factory=HighScoreTable)
    score_client: ScoreClient | None = None
    save_game: SaveGame | None = None

    def __post_init__(self):
        self.rng = random.Random(self.seed)
        self.particles = ParticleSystem(self.rng)
        self.shake = ScreenShake(self.rng)
        self.player.damage_multiplier = self.multipliers["player_damage"]

    @property
    def multipliers(self) -> dict:
        return settings.difficulty(self.difficulty)

    @property
    def tilemap(self):
        return self.level_manager.tilemap

    @property
    def level_index(self) -> int:
        return self.level_manager.current_index

    @property
    def playing(self) -> bool:
        return self.phase is GamePhase.PLAYING

    def clear_entities(self) -> None:
        self.enemies = []
        self.projectiles = []
        self.pickups = []
        self.checkpoints = []
        self.particles.clear()


def new_state(levels, difficulty: str = settings.DEFAULT_DIFFICULTY, seed: int | None = None,
              persistent: bool = False) -> SimulationState:
    """
    Build a state in the menu with level 0 loaded behind it.

    With persistent=True coins, achievements, high scores and the quick-save
    slot live in JSON files under settings.DATA_DIR, and scores are offered
    to the leaderboard client.
    """
    kwargs = {}
    if persistent:
        kwargs = dict(
            coins=CoinSystem(data_path("coins.json")),
            achievements=AchievementSystem(data_path("achievements.json")),
            high_scores=HighScoreTable(data_path(settings.HIGH_SCORE_FILE)),
            score_client=ScoreClient(),
            save_game=SaveGame(data_path(settings.SAVE_FILE)),
        )

    state = SimulationState(level_manager=LevelManager(levels), difficulty=difficulty, seed=seed, **kwargs)
    state.level_manager.load_level(0, state)
    return state
