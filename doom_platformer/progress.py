# progress.py
# Everything that outlives a single frame's gameplay: coins, achievements,
# the local high-score table and the quick-save slot.
#
# Persistence is optional: pass a path to keep state in a JSON file under
# the data directory, or None to keep it in memory (tests, editor playtests).

from __future__ import annotations
import logging
import time
from dataclasses import dataclass
from enum import Enum

from . import settings
from .enemies import EnemyKind
from .utils import load_json, save_json
from .weapon import WeaponKind

logger = logging.getLogger(__name__)


# --------------------------
# Coins
# --------------------------

COIN_REWARDS = {
    EnemyKind.PATROL: 5,
    EnemyKind.SHOOTER: 10,
    EnemyKind.FLYING: 15,
    EnemyKind.BOSS: 50,
}

# (kills in the chain window, multiplier), highest first
CHAIN_STEPS = ((5, 5), (3, 3), (2, 2))


@dataclass
class CoinPopup:
    amount: int
    x: float
    y: float
    timer: float = 1.2
    rise: float = 0.0


class CoinSystem:
    def __init__(self, path: str | None = None):
        self.path = path
        self.balance = 0
        self.total_earned = 0
        self.chain_count = 0
        self.chain_timer = 0.0
        self.level_damage_taken = 0.0
        self.popups: list[CoinPopup] = []
        self.load()

    def load(self) -> None:
        if self.path is None:
            return
        data = load_json(self.path, default={}) or {}
        self.balance = int(data.get("balance", 0))
        self.total_earned = int(data.get("totalEarned", 0))

    def save(self) -> None:
        if self.path is not None:
            save_json(self.path, {"balance": self.balance, "totalEarned": self.total_earned})

    def earn(self, amount: int, x: float = 0.0, y: float = 0.0) -> int:
        self.balance += amount
        self.total_earned += amount
        self.popups.append(CoinPopup(amount, x, y))
        self.save()
        return amount

    def spend(self, amount: int) -> bool:
        if self.balance < amount:
            return False
        self.balance -= amount
        self.save()
        return True

    @property
    def chain_multiplier(self) -> int:
        for count, mult in CHAIN_STEPS:
            if self.chain_count >= count:
                return mult
        return 1

    def on_enemy_kill(self, kind: EnemyKind, x: float = 0.0, y: float = 0.0) -> int:
        self.chain_count += 1
        self.chain_timer = settings.COIN_CHAIN_WINDOW
        return self.earn(COIN_REWARDS.get(kind, 5) * self.chain_multiplier, x, y)

    def on_coin_pickup(self, x: float = 0.0, y: float = 0.0) -> int:
        return self.earn(settings.COIN_PICKUP_VALUE, x, y)

    def on_damage_taken(self, amount: float) -> None:
        self.level_damage_taken += amount

    def reset_level_damage(self) -> None:
        self.level_damage_taken = 0.0

    def on_level_complete(self) -> tuple[int, bool]:
        perfect = self.level_damage_taken == 0
        bonus = settings.COIN_LEVEL_BONUS + (settings.COIN_PERFECT_BONUS if perfect else 0)
        self.earn(bonus)
        self.level_damage_taken = 0.0
        return bonus, perfect

    def update(self, dt: float) -> None:
        """Chain window and popups. Ticks even while the game is paused."""
        if self.chain_timer > 0:
            self.chain_timer -= dt
            if self.chain_timer <= 0:
                self.chain_count = 0
        for popup in self.popups:
            popup.timer -= dt
            popup.rise -= 50 * dt
        self.popups = [p for p in self.popups if p.timer > 0]


# --------------------------
# Achievements
# --------------------------

class Achievement(str, Enum):
    FIRST_BLOOD = "firstBlood"
    MASSACRE = "massacre"
    SURVIVOR = "survivor"
    SPEEDRUNNER = "speedrunner"
    COLLECTOR = "collector"
    BOSS_SLAYER = "bossSlayer"
    PERFECTIONIST = "perfectionist"
    WEAPON_MASTER = "weaponMaster"
    HARD_MODE = "hardMode"
    UNTOUCHABLE = "untouchable"


ACHIEVEMENT_INFO = {
    Achievement.FIRST_BLOOD: ("First Blood", "Kill your first enemy"),
    Achievement.MASSACRE: ("Massacre", "Kill 50 enemies"),
    Achievement.SURVIVOR: ("Survivor", "Complete a level without dying"),
    Achievement.SPEEDRUNNER: ("Speed Demon", "Complete level 1 in under 60 seconds"),
    Achievement.COLLECTOR: ("Collector", "Collect 20 pickups"),
    Achievement.BOSS_SLAYER: ("Boss Slayer", "Defeat a boss"),
    Achievement.PERFECTIONIST: ("Perfectionist", "Complete a level with full health"),
    Achievement.WEAPON_MASTER: ("Weapon Master", "Unlock all weapons"),
    Achievement.HARD_MODE: ("Hardcore", "Complete level 1 on hard difficulty"),
    Achievement.UNTOUCHABLE: ("Untouchable", "Kill 10 enemies without taking damage"),
}

MASSACRE_KILLS = 50
COLLECTOR_PICKUPS = 20
UNTOUCHABLE_STREAK = 10
SPEEDRUN_SECONDS = 60.0
NOTIFICATION_TIME = 3.0


@dataclass
class Notification:
    achievement: Achievement
    timer: float = NOTIFICATION_TIME

    @property
    def title(self) -> str:
        return ACHIEVEMENT_INFO[self.achievement][0]


class AchievementSystem:
    def __init__(self, path: str | None = None):
        self.path = path
        self.unlocked: dict[Achievement, float] = {}
        self.notifications: list[Notification] = []
        self.kill_streak = 0
        self.level_time = 0.0
        self.level_deaths = 0
        self.load()

    def load(self) -> None:
        if self.path is None:
            return
        data = load_json(self.path, default={}) or {}
        for key, value in data.items():
            try:
                self.unlocked[Achievement(key)] = float(value.get("unlockedAt", 0)) if isinstance(value, dict) else 0.0
            except ValueError:
                logger.warning("Ignoring unknown achievement %r in %s", key, self.path)

    def save(self) -> None:
        if self.path is not None:
            save_json(self.path, {a.value: {"unlockedAt": t} for a, t in self.unlocked.items()})

    def is_unlocked(self, achievement: Achievement) -> bool:
        return achievement in self.unlocked

    def unlock(self, achievement: Achievement) -> bool:
        """Unlock once. Returns False if it was already unlocked."""
        if achievement in self.unlocked:
            return False
        self.unlocked[achievement] = time.time()
        self.notifications.append(Notification(achievement))
        logger.info("Achievement unlocked: %s", ACHIEVEMENT_INFO[achievement][0])
        self.save()
        return True

    def check(self, player) -> None:
        stats = player.stats
        if stats.enemies_killed >= 1:
            self.unlock(Achievement.FIRST_BLOOD)
        if stats.enemies_killed >= MASSACRE_KILLS:
            self.unlock(Achievement.MASSACRE)
        if stats.pickups_collected >= COLLECTOR_PICKUPS:
            self.unlock(Achievement.COLLECTOR)
        if player.owned >= set(WeaponKind):
            self.unlock(Achievement.WEAPON_MASTER)
        if self.kill_streak >= UNTOUCHABLE_STREAK:
            self.unlock(Achievement.UNTOUCHABLE)

    def on_enemy_killed(self, player) -> None:
        self.kill_streak += 1
        player.stats.enemies_killed += 1
        self.check(player)

    def on_pickup(self, player) -> None:
        self.check(player)

    def on_player_damaged(self) -> None:
        self.kill_streak = 0

    def on_player_death(self) -> None:
        self.level_deaths += 1
        self.kill_streak = 0

    def on_boss_killed(self) -> None:
        self.unlock(Achievement.BOSS_SLAYER)

    def on_level_start(self) -> None:
        self.level_time = 0.0
        self.level_deaths = 0

    def on_level_complete(self, level_index: int, player, difficulty: str) -> None:
        if self.level_deaths == 0:
            self.unlock(Achievement.SURVIVOR)
        if player.health >= player.max_health:
            self.unlock(Achievement.PERFECTIONIST)
        if level_index == 0 and self.level_time < SPEEDRUN_SECONDS:
            self.unlock(Achievement.SPEEDRUNNER)
        if level_index == 0 and difficulty == "hard":
            self.unlock(Achievement.HARD_MODE)
        player.stats.levels_completed += 1

    def update(self, dt: float) -> None:
        self.level_time += dt
        for n in self.notifications:
            n.timer -= dt
        self.notifications = [n for n in self.notifications if n.timer > 0]


# --------------------------
# High scores
# --------------------------

class HighScoreTable:
    """Top scores kept in a local JSON file, best first."""

    def __init__(self, path: str | None = None, limit: int = settings.HIGH_SCORE_LIMIT):
        self.path = path
        self.limit = limit
        self._memory: list[dict] = []

    def scores(self) -> list[dict]:
        if self.path is None:
            return list(self._memory)
        data = load_json(self.path, default=[])
        if not isinstance(data, list):
            logger.warning("High score file %s is not a list, ignoring it", self.path)
            return []
        return [s for s in data if isinstance(s, dict) and "score" in s]

    def add(self, score: int, level: int, coins: int = 0) -> bool:
        """Record a finished run. Returns True if it made the table."""
        entries = self.scores()
        entry = {"score": int(score), "level": int(level), "coins": int(coins), "date": time.time()}
        entries.append(entry)
        entries.sort(key=lambda s: s["score"], reverse=True)
        del entries[self.limit:]

        if self.path is None:
            self._memory = entries
        else:
            save_json(self.path, entries)
        return entry in entries

    def best(self) -> int:
        entries = self.scores()
        return entries[0]["score"] if entries else 0


# --------------------------
# Quick save
# --------------------------

SAVE_VERSION = 1


class SaveGame:
    def __init__(self, path: str):
        self.path = path

    def save(self, state) -> bool:
        data = {
            "version": SAVE_VERSION,
            "timestamp": time.time(),
            "level": state.level_manager.current_index,
            "score": state.score,
            "difficulty": state.difficulty,
            "player": state.player.loadout(),
        }
        ok = save_json(self.path, data)
        if ok:
            logger.info("Game saved to %s", self.path)
        return ok

    def load(self) -> dict | None:
        data = load_json(self.path)
        if data is None:
            return None
        if not isinstance(data, dict) or data.get("version") != SAVE_VERSION:
            logger.warning("Save file %s has an unsupported format", self.path)
            return None
        return data

    def exists(self) -> bool:
        return self.load() is not None
