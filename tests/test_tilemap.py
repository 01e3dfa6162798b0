"""Tests for tile lookups and one-way platform solidity."""

from doom_platformer.tilemap import Tile, TileMap

from conftest import build_level

ROWS = [
    "00000",
    "00000",
    "22222",
    "00050",
    "11111",
]


def _tilemap():
    return TileMap(build_level(ROWS, start=(0, 0)))


class TestTileLookup:
    """Tile queries by grid and pixel coordinates."""

    def test_tile_at_inside(self):
        """Grid lookups return the parsed tile."""
        tilemap = _tilemap()
        assert tilemap.tile_at(0, 4) is Tile.SOLID
        assert tilemap.tile_at(2, 2) is Tile.PLATFORM
        assert tilemap.tile_at(3, 3) is Tile.EXIT

    def test_tile_at_out_of_bounds_is_empty(self):
        """Anything off the grid reads as empty."""
        tilemap = _tilemap()
        for tx, ty in [(-1, 0), (0, -1), (5, 0), (0, 5), (100, 100), (-50, 2)]:
            assert tilemap.tile_at(tx, ty) is Tile.EMPTY

    def test_tile_at_pixel_floors(self):
        """Pixel lookups floor to the containing tile."""
        tilemap = _tilemap()
        assert tilemap.tile_at_pixel(31.9, 4 * 32) is Tile.SOLID
        assert tilemap.tile_at_pixel(-0.5, 4 * 32) is Tile.EMPTY

    def test_pixel_size(self):
        """Pixel dimensions follow the grid."""
        tilemap = _tilemap()
        assert tilemap.pixel_width == 5 * 32
        assert tilemap.pixel_height == 5 * 32

    def test_set_tile(self):
        """Tiles can be replaced in bounds only."""
        tilemap = _tilemap()
        assert tilemap.set_tile(1, 1, Tile.SOLID)
        assert tilemap.tile_at(1, 1) is Tile.SOLID
        assert not tilemap.set_tile(9, 9, Tile.SOLID)
        assert tilemap.to_rows()[1] == "01000"

    def test_tiles_overlapping(self):
        """A box reports every tile it touches."""
        tilemap = _tilemap()
        cells = {(tx, ty) for tx, ty, _ in tilemap.tiles_overlapping(10, 70, 30, 30)}
        assert cells == {(0, 2), (1, 2), (0, 3), (1, 3)}


class TestSolidity:
    """Solid tiles always block; platforms only from above."""

    def test_solid_always_blocks(self):
        """Solid tiles block regardless of the previous bottom."""
        tilemap = _tilemap()
        assert tilemap.is_solid_at(10, 4 * 32 + 1)
        assert tilemap.is_solid_at(10, 4 * 32 + 1, prev_bottom=500)

    def test_platform_blocks_from_above(self):
        """A platform blocks a body that was above its top."""
        tilemap = _tilemap()
        top = 2 * 32
        assert tilemap.is_solid_at(10, top + 2, prev_bottom=top)
        assert tilemap.is_solid_at(10, top + 2, prev_bottom=top - 5)

    def test_platform_passes_from_below(self):
        """A platform does not block a body coming from below."""
        tilemap = _tilemap()
        top = 2 * 32
        assert not tilemap.is_solid_at(10, top + 2, prev_bottom=top + 10)
        assert not tilemap.is_solid_at(10, top + 2)

    def test_empty_and_exit_never_block(self):
        """Empty and exit tiles are passable."""
        tilemap = _tilemap()
        assert not tilemap.is_solid_at(10, 10, prev_bottom=0)
        assert not tilemap.is_solid_at(3 * 32 + 5, 3 * 32 + 5, prev_bottom=0)

    def test_tile_predicates(self):
        """Per-kind predicates match the grid."""
        tilemap = _tilemap()
        assert tilemap.is_solid(0, 4)
        assert tilemap.is_platform(1, 2)
        assert tilemap.is_exit(3, 3)
        assert not tilemap.is_spikes(3, 3)
        assert not tilemap.is_solid(-1, 4)
