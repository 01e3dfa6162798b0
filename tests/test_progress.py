"""Tests for coins, achievements, high scores and the quick-save slot."""

import json

from doom_platformer import settings
from doom_platformer.enemies import EnemyKind
from doom_platformer.player import Player
from doom_platformer.progress import (
    Achievement, AchievementSystem, CoinSystem, HighScoreTable, SaveGame,
)

from conftest import ROOM, build_level


class TestCoins:
    """Coin rewards and the kill chain."""

    def test_kill_chain_multiplier(self):
        """Quick successive kills multiply the reward."""
        coins = CoinSystem()
        rewards = [coins.on_enemy_kill(EnemyKind.PATROL) for _ in range(3)]
        assert rewards == [5, 10, 15]
        assert coins.balance == 30

    def test_chain_expires(self):
        """The chain resets once its window passes."""
        coins = CoinSystem()
        coins.on_enemy_kill(EnemyKind.SHOOTER)
        coins.update(settings.COIN_CHAIN_WINDOW + 0.1)
        assert coins.chain_count == 0
        assert coins.on_enemy_kill(EnemyKind.SHOOTER) == 10

    def test_level_bonus(self):
        """Perfect levels earn an extra bonus."""
        coins = CoinSystem()
        assert coins.on_level_complete() == (75, True)
        coins.on_damage_taken(10)
        assert coins.on_level_complete() == (50, False)
        assert coins.balance == 125

    def test_spend(self):
        """Spending needs enough balance."""
        coins = CoinSystem()
        coins.on_coin_pickup()
        assert not coins.spend(20)
        assert coins.spend(10)
        assert coins.balance == 0

    def test_persisted(self, tmp_path):
        """The balance survives a restart."""
        path = str(tmp_path / "coins.json")
        CoinSystem(path).on_coin_pickup()
        reloaded = CoinSystem(path)
        assert reloaded.balance == 10
        assert reloaded.total_earned == 10


class TestAchievements:
    """Unlocking achievements."""

    def test_first_blood_unlocks_once(self):
        """An achievement unlocks and notifies only once."""
        achievements = AchievementSystem()
        player = Player()
        achievements.on_enemy_killed(player)
        achievements.on_enemy_killed(player)
        assert achievements.is_unlocked(Achievement.FIRST_BLOOD)
        assert len(achievements.notifications) == 1

    def test_damage_breaks_streak(self):
        """Taking damage resets the kill streak."""
        achievements = AchievementSystem()
        player = Player()
        for _ in range(5):
            achievements.on_enemy_killed(player)
        achievements.on_player_damaged()
        assert achievements.kill_streak == 0

    def test_level_complete_checks(self):
        """A fast, clean first level unlocks the level achievements."""
        achievements = AchievementSystem()
        achievements.on_level_start()
        achievements.on_level_complete(0, Player(), "hard")
        for achievement in (Achievement.SURVIVOR, Achievement.PERFECTIONIST,
                            Achievement.SPEEDRUNNER, Achievement.HARD_MODE):
            assert achievements.is_unlocked(achievement)

    def test_persisted(self, tmp_path):
        """Unlocked achievements are saved and reloaded."""
        path = str(tmp_path / "achievements.json")
        AchievementSystem(path).unlock(Achievement.BOSS_SLAYER)
        assert AchievementSystem(path).is_unlocked(Achievement.BOSS_SLAYER)

    def test_unknown_entries_ignored(self, tmp_path):
        """Unknown keys in the file are skipped."""
        path = tmp_path / "achievements.json"
        path.write_text(json.dumps({"nonsense": {"unlockedAt": 1}, "firstBlood": {"unlockedAt": 2}}))
        achievements = AchievementSystem(str(path))
        assert achievements.is_unlocked(Achievement.FIRST_BLOOD)
        assert len(achievements.unlocked) == 1


class TestHighScores:
    """The local high score table."""

    def test_keeps_best_scores(self):
        """Only the top scores are kept, best first."""
        table = HighScoreTable(limit=3)
        for score in [100, 500, 300, 200]:
            table.add(score, 0)
        assert [s["score"] for s in table.scores()] == [500, 300, 200]
        assert not table.add(50, 0)
        assert table.best() == 500

    def test_file_backed(self, tmp_path):
        """Scores written to a file are read back."""
        path = str(tmp_path / "scores.json")
        HighScoreTable(path).add(1234, 2, coins=40)
        entry = HighScoreTable(path).scores()[0]
        assert (entry["score"], entry["level"], entry["coins"]) == (1234, 2, 40)

    def test_corrupt_file(self, tmp_path):
        """A damaged file reads as an empty table."""
        path = tmp_path / "scores.json"
        path.write_text("{oops")
        assert HighScoreTable(str(path)).best() == 0


class TestSaveGame:
    """The quick-save slot."""

    def test_save_and_load(self, tmp_path, make_state):
        """A saved run records level, score and loadout."""
        state = make_state([build_level(ROOM)])
        state.score = 700
        slot = SaveGame(str(tmp_path / "save.json"))
        assert not slot.exists()
        assert slot.save(state)
        data = slot.load()
        assert data["level"] == 0
        assert data["score"] == 700
        assert data["difficulty"] == "normal"

    def test_wrong_version(self, tmp_path):
        """Saves from another format version are refused."""
        path = tmp_path / "save.json"
        path.write_text(json.dumps({"version": 99}))
        assert SaveGame(str(path)).load() is None
