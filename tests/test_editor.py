"""Tests for the level editor model."""

from doom_platformer.editor import EditorTool, LevelEditor
from doom_platformer.enemies import EnemyKind
from doom_platformer.level import GridPoint, Spawn
from doom_platformer.pickup import PickupKind
from doom_platformer.state import GamePhase
from doom_platformer.tilemap import Tile

from conftest import ROOM, build_level


class TestGrid:
    """Painting and placing."""

    def test_new_grid_has_border(self):
        """A fresh level is an empty room with solid walls."""
        editor = LevelEditor(10, 6)
        assert all(t is Tile.SOLID for t in editor.tiles[0])
        assert all(t is Tile.SOLID for t in editor.tiles[5])
        assert editor.tiles[3][0] is Tile.SOLID and editor.tiles[3][9] is Tile.SOLID
        assert editor.tiles[3][4] is Tile.EMPTY
        assert editor.player_start == GridPoint(2, 4)

    def test_paint_tile(self):
        """The tile tool paints the selected tile."""
        editor = LevelEditor(10, 6)
        editor.select_tile(Tile.SPIKES)
        assert editor.apply_at(4, 3)
        assert editor.tiles[3][4] is Tile.SPIKES

    def test_off_grid_ignored(self):
        """Clicks outside the grid change nothing."""
        editor = LevelEditor(10, 6)
        assert not editor.apply_at(10, 2)
        assert not editor.apply_at(-1, 2)

    def test_enemy_replaces_cell(self):
        """One entity per cell: a new placement replaces the old one."""
        editor = LevelEditor(10, 6)
        editor.select_pickup(PickupKind.ARMOR)
        editor.apply_at(4, 3)
        editor.select_enemy(EnemyKind.FLYING)
        editor.apply_at(4, 3)
        editor.apply_at(4, 3)
        assert editor.enemies == [Spawn("flying", 4, 3)]
        assert editor.pickups == []

    def test_checkpoints_deduplicated(self):
        """Placing a checkpoint twice in a cell keeps one."""
        editor = LevelEditor(10, 6)
        editor.select_tool(EditorTool.CHECKPOINT)
        editor.apply_at(5, 2)
        editor.apply_at(5, 2)
        assert editor.checkpoints == [GridPoint(5, 2)]

    def test_erase(self):
        """Erasing clears the tile and anything placed there."""
        editor = LevelEditor(10, 6)
        editor.select_enemy(EnemyKind.PATROL)
        editor.apply_at(0, 2)
        editor.select_tool(EditorTool.ERASE)
        editor.apply_at(0, 2)
        assert editor.tiles[2][0] is Tile.EMPTY
        assert editor.enemies == []

    def test_player_start(self):
        """The player tool moves the start point."""
        editor = LevelEditor(10, 6)
        editor.select_tool(EditorTool.PLAYER)
        editor.apply_at(7, 1)
        assert editor.player_start == GridPoint(7, 1)


class TestKeys:
    """Keyboard shortcuts."""

    def test_tile_keys(self):
        """Number keys pick tiles."""
        editor = LevelEditor()
        assert editor.handle_key("3")
        assert editor.tool is EditorTool.TILE
        assert editor.selected_tile is Tile.PLATFORM

    def test_tool_keys_and_cycle(self):
        """Letter keys pick tools; tab cycles the entity type."""
        editor = LevelEditor()
        editor.handle_key("e")
        assert editor.tool is EditorTool.ENEMY
        editor.handle_key("tab")
        assert editor.selected_enemy is EnemyKind.SHOOTER

    def test_unknown_key(self):
        """Unbound keys are reported as unused."""
        assert not LevelEditor().handle_key("q")

    def test_scroll_clamped(self):
        """Scrolling stays inside the level."""
        editor = LevelEditor(40, 15)
        editor.handle_key("left")
        assert editor.camera_x == 0
        for _ in range(50):
            editor.handle_key("right")
        assert editor.camera_x == (40 - 25) * 32

    def test_screen_to_tile_follows_scroll(self):
        """Screen positions map through the scroll offset."""
        editor = LevelEditor(40, 15)
        editor.scroll(1)
        assert editor.screen_to_tile(10, 40) == (2, 1)


class TestImportExport:
    """Round trips and playtesting."""

    def test_export_import(self):
        """An exported level imports back into an identical editor."""
        editor = LevelEditor(10, 6)
        editor.select_enemy(EnemyKind.SHOOTER)
        editor.apply_at(3, 4)
        text = editor.export_level()

        other = LevelEditor()
        assert other.import_level(text)
        assert other.to_level() == editor.to_level()

    def test_bad_import_keeps_grid(self):
        """A failed import leaves the current grid alone."""
        editor = LevelEditor(10, 6)
        before = editor.to_level()
        assert not editor.import_level("{broken")
        assert editor.to_level() == before

    def test_save_to_file(self, tmp_path):
        """Saving writes a level that imports back."""
        editor = LevelEditor(10, 6)
        path = tmp_path / "levels" / "custom.json"
        assert editor.save(str(path))

        other = LevelEditor()
        assert other.import_level(path.read_text(encoding="utf-8"))
        assert other.to_level() == editor.to_level()

    def test_unwritable_save_returns_false(self, tmp_path):
        """A path that cannot be written is reported, not raised."""
        editor = LevelEditor(10, 6)
        assert not editor.save(str(tmp_path))

    def test_playtest(self, make_state):
        """Playtesting appends the level and starts playing it."""
        state = make_state([build_level(ROOM)], started=False)
        editor = LevelEditor(12, 6)
        editor.active = True
        assert editor.test_level(state.level_manager, state)
        assert state.level_manager.level_count == 2
        assert state.level_index == 1
        assert state.phase is GamePhase.PLAYING
        assert state.started
        assert not editor.active
