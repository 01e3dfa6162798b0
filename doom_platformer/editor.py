# editor.py
# Level editor model: a tile grid plus entity placements that can be
# exported, imported and dropped straight into the level manager for a
# playtest. No drawing here; tools/level_editor.py is the pygame front-end.

from __future__ import annotations
import logging
from enum import Enum

from . import settings
from .enemies import EnemyKind
from .level import GridPoint, Level, LevelFormatError, Spawn, export_level, import_level
from .pickup import PickupKind
from .state import GamePhase
from .tilemap import Tile
from .utils import save_json

logger = logging.getLogger(__name__)

DEFAULT_WIDTH = 40
DEFAULT_HEIGHT = 15
VISIBLE_COLUMNS = 25
SCROLL_TILES = 2
CUSTOM_NAME = "CUSTOM LEVEL"


class EditorTool(Enum):
    TILE = "tile"
    ENEMY = "enemy"
    PICKUP = "pickup"
    CHECKPOINT = "checkpoint"
    PLAYER = "player"
    ERASE = "erase"


# key name -> (tool, tile)  for the tile keys, (tool, None) for the rest
KEY_BINDINGS: dict[str, tuple[EditorTool, Tile | None]] = {
    "1": (EditorTool.TILE, Tile.EMPTY),
    "2": (EditorTool.TILE, Tile.SOLID),
    "3": (EditorTool.TILE, Tile.PLATFORM),
    "4": (EditorTool.TILE, Tile.SPIKES),
    "5": (EditorTool.TILE, Tile.EXIT),
    "6": (EditorTool.TILE, Tile.BACKGROUND),
    "e": (EditorTool.ENEMY, None),
    "p": (EditorTool.PICKUP, None),
    "c": (EditorTool.CHECKPOINT, None),
    "s": (EditorTool.PLAYER, None),
    "x": (EditorTool.ERASE, None),
}


class LevelEditor:
    def __init__(self, width: int = DEFAULT_WIDTH, height: int = DEFAULT_HEIGHT):
        self.active = False
        self.name = CUSTOM_NAME
        self.tool = EditorTool.TILE
        self.selected_tile = Tile.SOLID
        self.selected_enemy = EnemyKind.PATROL
        self.selected_pickup = PickupKind.HEALTH
        self.camera_x = 0
        self.new_grid(width, height)

    def new_grid(self, width: int, height: int) -> None:
        """Empty room with a solid border."""
        self.width = width
        self.height = height
        self.tiles = [
            [Tile.SOLID if x in (0, width - 1) or y in (0, height - 1) else Tile.EMPTY for x in range(width)]
            for y in range(height)
        ]
        self.enemies: list[Spawn] = []
        self.pickups: list[Spawn] = []
        self.checkpoints: list[GridPoint] = []
        self.player_start = GridPoint(2, min(11, height - 2))
        self.camera_x = 0

    # --------------------------
    # Selection
    # --------------------------

    def select_tool(self, tool: EditorTool) -> None:
        self.tool = EditorTool(tool)

    def select_tile(self, tile: Tile) -> None:
        self.selected_tile = Tile(tile)
        self.tool = EditorTool.TILE

    def select_enemy(self, kind: EnemyKind) -> None:
        self.selected_enemy = EnemyKind(kind)
        self.tool = EditorTool.ENEMY

    def select_pickup(self, kind: PickupKind) -> None:
        self.selected_pickup = PickupKind(kind)
        self.tool = EditorTool.PICKUP

    def cycle_option(self, step: int = 1) -> None:
        """Next / previous enemy or pickup type, for whichever tool is active."""
        if self.tool is EditorTool.ENEMY:
            kinds = list(EnemyKind)
            self.selected_enemy = kinds[(kinds.index(self.selected_enemy) + step) % len(kinds)]
        elif self.tool is EditorTool.PICKUP:
            kinds = list(PickupKind)
            self.selected_pickup = kinds[(kinds.index(self.selected_pickup) + step) % len(kinds)]

    # --------------------------
    # Editing
    # --------------------------

    def in_bounds(self, tx: int, ty: int) -> bool:
        return 0 <= tx < self.width and 0 <= ty < self.height

    def screen_to_tile(self, sx: float, sy: float) -> tuple[int, int]:
        return int((sx + self.camera_x) // settings.TILE_SIZE), int(sy // settings.TILE_SIZE)

    def apply_at(self, tx: int, ty: int) -> bool:
        """Use the current tool on cell (tx, ty). Off-grid clicks are ignored."""
        if not self.in_bounds(tx, ty):
            return False

        if self.tool is EditorTool.TILE:
            self.tiles[ty][tx] = self.selected_tile
        elif self.tool is EditorTool.ENEMY:
            self._clear_cell(tx, ty, tiles=False)
            self.enemies.append(Spawn(self.selected_enemy.value, tx, ty))
        elif self.tool is EditorTool.PICKUP:
            self._clear_cell(tx, ty, tiles=False)
            self.pickups.append(Spawn(self.selected_pickup.value, tx, ty))
        elif self.tool is EditorTool.CHECKPOINT:
            self.checkpoints = [c for c in self.checkpoints if (c.x, c.y) != (tx, ty)]
            self.checkpoints.append(GridPoint(tx, ty))
        elif self.tool is EditorTool.PLAYER:
            self.player_start = GridPoint(tx, ty)
        elif self.tool is EditorTool.ERASE:
            self._clear_cell(tx, ty, tiles=True)
        return True

    def _clear_cell(self, tx: int, ty: int, tiles: bool) -> None:
        if tiles:
            self.tiles[ty][tx] = Tile.EMPTY
            self.checkpoints = [c for c in self.checkpoints if (c.x, c.y) != (tx, ty)]
        self.enemies = [e for e in self.enemies if (e.x, e.y) != (tx, ty)]
        self.pickups = [p for p in self.pickups if (p.x, p.y) != (tx, ty)]

    def scroll(self, direction: int) -> None:
        max_x = max(0, (self.width - VISIBLE_COLUMNS) * settings.TILE_SIZE)
        self.camera_x += direction * settings.TILE_SIZE * SCROLL_TILES
        self.camera_x = max(0, min(self.camera_x, max_x))

    def handle_key(self, key: str, level_manager=None, state=None) -> bool:
        """Apply an editor key. Returns True if the key meant something here."""
        if key in KEY_BINDINGS:
            tool, tile = KEY_BINDINGS[key]
            if tile is not None:
                self.select_tile(tile)
            else:
                self.select_tool(tool)
        elif key == "left":
            self.scroll(-1)
        elif key == "right":
            self.scroll(1)
        elif key == "tab":
            self.cycle_option(1)
        elif key == "t" and level_manager is not None and state is not None:
            self.test_level(level_manager, state)
        elif key == "escape":
            self.active = not self.active
        else:
            return False
        return True

    # --------------------------
    # Import / export
    # --------------------------

    def to_level(self) -> Level:
        return Level(
            name=self.name,
            width=self.width,
            height=self.height,
            player_start=self.player_start,
            data=["".join(str(int(t)) for t in row) for row in self.tiles],
            enemies=list(self.enemies),
            pickups=list(self.pickups),
            checkpoints=list(self.checkpoints),
        )

    def export_level(self) -> str:
        return export_level(self.to_level())

    def save(self, path: str) -> bool:
        """Write the level as JSON. Logs and returns False when the file cannot be written."""
        if not save_json(path, self.to_level().to_dict()):
            return False
        logger.info("Level exported to %s", path)
        return True

    def load(self, level: Level) -> None:
        self.name = level.name
        self.width = level.width
        self.height = level.height
        self.player_start = level.player_start
        self.tiles = [[Tile(int(ch)) for ch in row] for row in level.data]
        self.enemies = list(level.enemies)
        self.pickups = list(level.pickups)
        self.checkpoints = list(level.checkpoints)
        self.camera_x = 0

    def import_level(self, text: str) -> bool:
        """Replace the grid with an exported level. On bad input nothing changes."""
        try:
            level = import_level(text)
        except LevelFormatError as e:
            logger.error("Failed to import level: %s", e)
            return False
        self.load(level)
        logger.info("Imported level %r (%dx%d)", level.name, level.width, level.height)
        return True

    def test_level(self, level_manager, state) -> bool:
        """Append the level being edited and start playing it."""
        level = self.to_level()
        try:
            level.validate()
        except LevelFormatError as e:
            logger.error("Cannot playtest: %s", e)
            return False

        index = level_manager.add_level(level)
        if not level_manager.load_level(index, state):
            return False

        self.active = False
        state.phase = GamePhase.PLAYING
        state.started = True
        state.paused = False
        logger.info("Playtesting %r as level %d", level.name, index)
        return True
