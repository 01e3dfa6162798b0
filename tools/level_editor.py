# tools/level_editor.py
#
# Stand-alone level editor for the DOOM platformer (Pygame-CE).
# - Opens a JSON level file (or starts a bordered 40x15 room)
# - Paints tiles, places enemies / pickups / checkpoints / player start
# - Saves back in the same JSON format the game loads with --levels
#
# usage: python tools/level_editor.py [level.json] [--index N]

from __future__ import annotations
import argparse
import logging
import os
import sys
from dataclasses import dataclass

import pygame

PROJECT_ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

from doom_platformer import settings  # noqa: E402
from doom_platformer.editor import EditorTool, LevelEditor  # noqa: E402
from doom_platformer.enemies import EnemyKind  # noqa: E402
from doom_platformer.level import LevelFormatError, load_levels  # noqa: E402
from doom_platformer.tilemap import Tile  # noqa: E402

logger = logging.getLogger("level_editor")

DEFAULT_LEVEL_PATH = os.path.join(PROJECT_ROOT, "custom_level.json")
TILE_SIZE = settings.TILE_SIZE

TILE_COLORS = {
    Tile.EMPTY: (17, 17, 17),
    Tile.SOLID: (68, 34, 34),
    Tile.PLATFORM: (68, 68, 102),
    Tile.SPIKES: (136, 34, 34),
    Tile.BACKGROUND: (34, 20, 20),
    Tile.EXIT: (34, 102, 34),
}
ENEMY_LETTERS = {kind: kind.value[0].upper() for kind in EnemyKind}


# ----------------------------
# Helper functions
# ----------------------------

def load_level_file(editor: LevelEditor, path: str, index: int = 0) -> bool:
    """Load level `index` of a JSON level file into the editor."""
    if not os.path.exists(path):
        logger.info("%s does not exist yet, starting a new level", path)
        return False
    try:
        levels = load_levels(path)
    except (OSError, LevelFormatError) as e:
        logger.error("Could not load %s: %s", path, e)
        return False
    if not 0 <= index < len(levels):
        logger.error("%s has %d levels, no index %d", path, len(levels), index)
        return False
    editor.load(levels[index])
    return True


@dataclass
class UIState:
    show_grid: bool = True
    show_help: bool = True
    message: str = ""


# ----------------------------
# Main editor
# ----------------------------

def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Level editor")
    parser.add_argument("path", nargs="?", default=DEFAULT_LEVEL_PATH)
    parser.add_argument("--index", type=int, default=0, help="which level of a multi-level file to edit")
    args = parser.parse_args(argv)
    logging.basicConfig(level=settings.LOG_LEVEL.upper())

    editor = LevelEditor()
    editor.active = True
    load_level_file(editor, args.path, args.index)

    pygame.init()
    pygame.display.set_caption(f"Level Editor - {os.path.basename(args.path)}")
    screen = pygame.display.set_mode((settings.WINDOW_WIDTH, settings.WINDOW_HEIGHT))
    clock = pygame.time.Clock()
    font = pygame.font.SysFont("consolas", 16)
    font_big = pygame.font.SysFont("consolas", 20, bold=True)

    ui = UIState()

    def draw_canvas():
        screen.fill((0, 0, 0))

        for ty in range(editor.height):
            for tx in range(editor.width):
                sx = tx * TILE_SIZE - editor.camera_x
                sy = ty * TILE_SIZE
                if sx < -TILE_SIZE or sx > settings.WINDOW_WIDTH:
                    continue
                pygame.draw.rect(screen, TILE_COLORS[editor.tiles[ty][tx]], (sx, sy, TILE_SIZE - 1, TILE_SIZE - 1))
                if ui.show_grid:
                    pygame.draw.rect(screen, (51, 51, 51), (sx, sy, TILE_SIZE, TILE_SIZE), 1)

        for spawn in editor.enemies:
            sx = spawn.x * TILE_SIZE - editor.camera_x + 8
            sy = spawn.y * TILE_SIZE + 8
            pygame.draw.rect(screen, (255, 68, 68), (sx, sy, 16, 16))
            screen.blit(font.render(ENEMY_LETTERS[EnemyKind(spawn.type)], True, (255, 255, 255)), (sx + 3, sy))

        for spawn in editor.pickups:
            center = (spawn.x * TILE_SIZE - editor.camera_x + 16, spawn.y * TILE_SIZE + 16)
            pygame.draw.circle(screen, (68, 255, 68), center, 8)

        for cp in editor.checkpoints:
            pygame.draw.rect(screen, (255, 255, 68), (cp.x * TILE_SIZE - editor.camera_x + 12, cp.y * TILE_SIZE, 8, 32))

        start = editor.player_start
        pygame.draw.rect(screen, (68, 68, 255),
                         (start.x * TILE_SIZE - editor.camera_x + 4, start.y * TILE_SIZE + 4, 24, 24))

    def draw_status():
        screen.blit(font_big.render("LEVEL EDITOR", True, (240, 240, 240)), (10, 8))

        option = ""
        if editor.tool is EditorTool.ENEMY:
            option = f" ({editor.selected_enemy.value})"
        elif editor.tool is EditorTool.PICKUP:
            option = f" ({editor.selected_pickup.value})"
        status = f"Tool: {editor.tool.value.upper()}{option}   Tile: {editor.selected_tile.name}"
        screen.blit(font.render(status, True, (230, 230, 230)), (10, 34))
        if ui.message:
            screen.blit(font.render(ui.message, True, (255, 215, 0)), (10, 54))

        if ui.show_help:
            help_lines = [
                "1-6: tiles  E: enemy  P: pickup  C: checkpoint  S: player  X: erase  TAB: type",
                "LMB: apply  RMB: erase  Arrows: scroll  Ctrl+S: save  R: reload  G: grid  H: help",
            ]
            y = settings.WINDOW_HEIGHT - 40
            for line in help_lines:
                screen.blit(font.render(line, True, (210, 210, 210)), (10, y))
                y += 18

    running = True
    while running:
        clock.tick(60)

        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                running = False

            if event.type == pygame.KEYDOWN:
                mods = pygame.key.get_mods()

                if event.key == pygame.K_ESCAPE:
                    running = False
                elif event.key == pygame.K_s and (mods & pygame.KMOD_CTRL):
                    if editor.save(args.path):
                        ui.message = f"Saved {os.path.basename(args.path)}"
                    else:
                        ui.message = "Save failed, see log"
                elif event.key == pygame.K_r:
                    if load_level_file(editor, args.path, args.index):
                        ui.message = f"Reloaded {os.path.basename(args.path)}"
                elif event.key == pygame.K_g:
                    ui.show_grid = not ui.show_grid
                elif event.key == pygame.K_h:
                    ui.show_help = not ui.show_help
                else:
                    editor.handle_key(pygame.key.name(event.key))

            # entities are placed once per click
            if event.type == pygame.MOUSEBUTTONDOWN and event.button == 1 \
                    and editor.tool not in (EditorTool.TILE, EditorTool.ERASE):
                editor.apply_at(*editor.screen_to_tile(*event.pos))

        # tiles paint while the mouse is held, RMB always erases
        buttons = pygame.mouse.get_pressed(3)
        tx, ty = editor.screen_to_tile(*pygame.mouse.get_pos())
        if buttons[2]:
            tool = editor.tool
            editor.select_tool(EditorTool.ERASE)
            editor.apply_at(tx, ty)
            editor.select_tool(tool)
        elif buttons[0] and editor.tool in (EditorTool.TILE, EditorTool.ERASE):
            editor.apply_at(tx, ty)

        draw_canvas()
        draw_status()
        pygame.display.flip()

    pygame.quit()
    return 0


if __name__ == "__main__":
    sys.exit(main())
