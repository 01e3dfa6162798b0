"""Tests for the level format: validation, export and import."""

import json

import pytest

from doom_platformer.level import GridPoint, Level, LevelFormatError, export_level, import_level, load_levels
from doom_platformer.level_data import LEVELS
from doom_platformer.tilemap import Tile, TileMap

from conftest import build_level


class TestValidation:
    """Level consistency checks."""

    def test_campaign_levels_are_valid(self):
        """Every built-in level validates and builds a tilemap."""
        assert len(LEVELS) == 4
        for level in LEVELS:
            level.validate()
            assert TileMap(level).pixel_width == level.width * 32

    def test_short_row(self):
        """A row of the wrong length is rejected."""
        level = build_level(["111", "10", "111"])
        with pytest.raises(LevelFormatError):
            level.validate()

    def test_row_count(self):
        """The number of rows must match the height."""
        level = build_level(["111", "101"])
        level.height = 3
        with pytest.raises(LevelFormatError):
            level.validate()

    def test_bad_tile_code(self):
        """Only known tile codes are allowed."""
        with pytest.raises(LevelFormatError):
            build_level(["111", "1x1", "111"]).validate()

    def test_unknown_enemy(self):
        """Enemy spawns must name a known enemy kind."""
        with pytest.raises(LevelFormatError):
            build_level(["111", "101", "111"], enemies=[("dragon", 1, 1)]).validate()

    @pytest.mark.parametrize("start", [(-1, 1), (3, 1), (1, 3), (1, -2)])
    def test_player_start_outside_grid(self, start):
        """The player must start inside the grid."""
        with pytest.raises(LevelFormatError):
            build_level(["111", "101", "111"], start=start).validate()

    def test_player_start_on_edge(self):
        """The last row and column are still inside."""
        build_level(["111", "101", "111"], start=(2, 2)).validate()

    def test_unknown_pickup(self):
        """Pickup spawns must name a known pickup kind."""
        with pytest.raises(LevelFormatError):
            build_level(["111", "101", "111"], pickups=[("cake", 1, 1)]).validate()


class TestExportImport:
    """JSON export and import."""

    def test_small_grid_round_trip(self):
        """A 3x3 room exports and imports unchanged."""
        level = Level("BOX", 3, 3, GridPoint(1, 1), ["111", "101", "111"])
        restored = import_level(export_level(level))
        assert restored == level
        assert TileMap(restored).tile_at(1, 1) is Tile.EMPTY

    def test_export_uses_camel_case_start(self):
        """Exported JSON names the start point playerStart."""
        raw = json.loads(export_level(build_level(["111", "101", "111"], start=(1, 1))))
        assert raw["playerStart"] == {"x": 1, "y": 1}
        assert raw["data"] == ["111", "101", "111"]

    def test_import_rejects_garbage(self):
        """Non-JSON, non-object and incomplete input raise LevelFormatError."""
        for text in ["not json", "[1, 2]", '{"width": 3}', '{"width": "x", "height": 1, "data": []}']:
            with pytest.raises(LevelFormatError):
                import_level(text)

    def test_import_validates(self):
        """Imported levels are validated."""
        raw = json.loads(export_level(build_level(["111", "101", "111"])))
        raw["data"][1] = "1091"
        with pytest.raises(LevelFormatError):
            import_level(json.dumps(raw))

    def test_load_levels_file(self, tmp_path):
        """A file may hold one level or a list of levels."""
        level = build_level(["111", "101", "111"], start=(1, 1))
        single = tmp_path / "one.json"
        single.write_text(export_level(level))
        many = tmp_path / "many.json"
        many.write_text(json.dumps([level.to_dict(), level.to_dict()]))
        assert load_levels(str(single)) == [level]
        assert len(load_levels(str(many))) == 2
