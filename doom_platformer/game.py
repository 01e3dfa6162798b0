# game.py
# The Game class owns the window, the clock and the frame loop:
# events -> simulation.step -> draw, once per frame.
#
# Everything here reads SimulationState; nothing here changes gameplay.
# Art is plain rectangles and text so the game runs without an asset pack.

from __future__ import annotations
import logging

import pygame

from . import settings
from .controls import KeyboardControls
from .editor import EditorTool, LevelEditor
from .enemies import EnemyKind
from .pickup import PickupKind
from .simulation import current_weapon_ammo, step
from .state import GamePhase, new_state
from .tilemap import Tile
from .utils import data_path

logger = logging.getLogger(__name__)

BACKGROUND = (20, 8, 8)
TILE_COLORS = {
    Tile.SOLID: (68, 34, 34),
    Tile.PLATFORM: (68, 68, 102),
    Tile.SPIKES: (136, 34, 34),
    Tile.BACKGROUND: (34, 20, 20),
    Tile.EXIT: (34, 102, 34),
}
ENEMY_COLORS = {
    EnemyKind.PATROL: (170, 85, 40),
    EnemyKind.SHOOTER: (120, 120, 60),
    EnemyKind.FLYING: (200, 60, 60),
    EnemyKind.BOSS: (150, 20, 90),
}
PICKUP_COLORS = {
    PickupKind.HEALTH: (68, 255, 68),
    PickupKind.ARMOR: (68, 68, 255),
    PickupKind.AMMO: (255, 204, 0),
    PickupKind.INVINCIBILITY: (255, 255, 255),
    PickupKind.COIN: (255, 215, 0),
}
WEAPON_PICKUP_COLOR = (255, 136, 0)
PLAYER_COLOR = (60, 140, 60)
TEXT_COLOR = (240, 240, 240)
BLOOD_RED = (139, 0, 0)

EDITOR_TOGGLE_KEY = pygame.K_F2


class Game:
    def __init__(self, levels, difficulty: str = settings.DEFAULT_DIFFICULTY):
        pygame.init()

        self.window = pygame.display.set_mode((settings.WINDOW_WIDTH, settings.WINDOW_HEIGHT))
        pygame.display.set_caption(settings.WINDOW_TITLE)

        self.clock = pygame.time.Clock()
        self.font = pygame.font.SysFont("consolas", 18)
        self.small_font = pygame.font.SysFont("consolas", 13)
        self.big_font = pygame.font.SysFont("consolas", 44, bold=True)

        self.controls = KeyboardControls()
        self.state = new_state(levels, difficulty=difficulty, persistent=True)
        self.editor = LevelEditor()
        self.running = True

    # ------------------ Main loop ------------------
    def run(self) -> None:
        while self.running:
            dt = self.clock.tick(settings.FPS) / 1000.0

            self.handle_events()
            self.update(dt)
            self.draw()

        pygame.quit()

    # ------------------ Events ------------------
    def handle_events(self) -> None:
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                self.running = False
                continue

            if event.type == pygame.KEYDOWN and event.key == EDITOR_TOGGLE_KEY:
                self.toggle_editor()
                continue

            if self.editor.active:
                self.handle_editor_event(event)
            else:
                self.controls.handle_event(event)

    def toggle_editor(self) -> None:
        self.editor.active = not self.editor.active
        if self.editor.active and self.state.started:
            self.state.paused = True
        self.controls.clear()

    def handle_editor_event(self, event: pygame.event.Event) -> None:
        if event.type == pygame.KEYDOWN:
            mods = pygame.key.get_mods()
            if event.key == pygame.K_s and mods & pygame.KMOD_CTRL:
                self.editor.save(data_path("custom_level.json"))
                return
            self.editor.handle_key(pygame.key.name(event.key), self.state.level_manager, self.state)

        elif event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
            self.editor.apply_at(*self.editor.screen_to_tile(*event.pos))

    # ------------------ Update ------------------
    def update(self, dt: float) -> None:
        if self.editor.active:
            return
        try:
            step(self.state, dt, self.controls)
        except Exception:
            # a bad frame is dropped, the game keeps running
            logger.exception("Simulation step failed; skipping frame")

    # ------------------ Draw ------------------
    def draw(self) -> None:
        state = self.state
        self.window.fill(BACKGROUND)

        if self.editor.active:
            self.draw_editor()
            pygame.display.flip()
            return

        if state.phase is GamePhase.MENU:
            self.draw_center_text("DOOM PLATFORMER", y=170, big=True, color=BLOOD_RED)
            self.draw_center_text("Press ENTER to start", y=260)
            self.draw_center_text("A/D move, W jump, J fire, 1-6 weapons, P pause", y=300)
            self.draw_center_text(f"Difficulty: {state.difficulty}   Best: {state.high_scores.best()}", y=340)
            self.draw_center_text("F2 level editor", y=380)
            pygame.display.flip()
            return

        self.draw_tiles()
        self.draw_entities()
        self.draw_ui()

        alpha = state.level_manager.fade_alpha
        if alpha > 0:
            self.draw_overlay(int(alpha * 255))
            level = state.level_manager.current_level
            if alpha > 0.5 and level is not None:
                self.draw_center_text(level.name, y=settings.WINDOW_HEIGHT // 2, color=BLOOD_RED)

        if state.paused:
            self.draw_overlay(160)
            self.draw_center_text("PAUSED", y=200, big=True)
            self.draw_center_text("P resume   M menu   F5 save   F9 load", y=270)
        elif state.phase is GamePhase.GAME_OVER:
            self.draw_overlay(160)
            self.draw_center_text("GAME OVER", y=200, big=True, color=BLOOD_RED)
            self.draw_center_text(f"Score: {state.score}   Press ENTER to restart", y=270)
        elif state.phase is GamePhase.VICTORY:
            self.draw_overlay(160)
            self.draw_center_text("VICTORY", y=200, big=True)
            self.draw_center_text(f"Score: {state.score}   Press ENTER to play again", y=270)

        pygame.display.flip()

    def to_screen(self, x: float, y: float) -> pygame.Vector2:
        return self.state.camera.world_to_screen(x, y, self.state.shake.offset)

    def screen_rect(self, rect) -> pygame.FRect:
        return pygame.FRect(self.to_screen(rect.x, rect.y), rect.size)

    def draw_tiles(self) -> None:
        tilemap = self.state.tilemap
        ox, oy = self.state.camera.pos
        if tilemap is None:
            return
        size = settings.TILE_SIZE
        first_x = max(0, int(ox // size))
        first_y = max(0, int(oy // size))
        last_x = min(tilemap.width, int((ox + settings.WINDOW_WIDTH) // size) + 2)
        last_y = min(tilemap.height, int((oy + settings.WINDOW_HEIGHT) // size) + 2)

        for ty in range(first_y, last_y):
            for tx in range(first_x, last_x):
                color = TILE_COLORS.get(tilemap.tiles[ty][tx])
                if color is None:
                    continue
                rect = pygame.FRect(self.to_screen(tx * size, ty * size), (size, size))
                if tilemap.tiles[ty][tx] == Tile.PLATFORM:
                    rect.height = size // 4
                pygame.draw.rect(self.window, color, rect)

    def draw_entities(self) -> None:
        state = self.state

        for pickup in state.pickups:
            color = WEAPON_PICKUP_COLOR if pickup.kind.weapon is not None else PICKUP_COLORS[pickup.kind]
            top_left = self.to_screen(pickup.x, pickup.y + pickup.bob)
            pygame.draw.rect(self.window, color, pygame.FRect(top_left, (pickup.w, pickup.h)))

        for cp in state.checkpoints:
            color = (255, 255, 68) if cp.activated else (120, 120, 40)
            pygame.draw.rect(self.window, color, pygame.FRect(self.to_screen(cp.x + cp.w / 2 - 3, cp.y), (6, cp.h)))

        for enemy in state.enemies:
            color = (255, 255, 255) if enemy.damage_flash > 0 else ENEMY_COLORS[enemy.kind]
            if not enemy.alive:
                color = BLOOD_RED
            pygame.draw.rect(self.window, color, self.screen_rect(enemy.rect))

        player = state.player
        if player.alive and (player.invulnerable <= 0 or int(player.invulnerable * 20) % 2 == 0):
            color = (255, 255, 255) if player.invincibility > 0 else PLAYER_COLOR
            pygame.draw.rect(self.window, color, self.screen_rect(player.rect))

        for projectile in state.projectiles:
            pygame.draw.rect(self.window, projectile.color, self.screen_rect(projectile.rect))

        for p in state.particles.particles:
            size = max(1, int(p.size * p.alpha))
            pygame.draw.rect(self.window, p.color, pygame.FRect(self.to_screen(p.pos.x, p.pos.y), (size, size)))

    # ------------------ UI helpers ------------------
    def draw_ui(self) -> None:
        state = self.state
        player = state.player

        self.draw_bar(20, 20, player.health / player.max_health, (204, 0, 0), f"HP {int(player.health)}")
        self.draw_bar(20, 46, player.armor / player.max_armor, (68, 68, 255), f"AR {int(player.armor)}")

        ammo = current_weapon_ammo(player)
        weapon = player.current_weapon.value.upper() + ("" if ammo is None else f" {ammo}")
        lines = [weapon, f"SCORE {state.score}", f"LIVES {player.lives}", f"COINS {state.coins.balance}"]
        for i, line in enumerate(lines):
            self.window.blit(self.font.render(line, True, TEXT_COLOR), (settings.WINDOW_WIDTH - 170, 16 + i * 20))

        for enemy in state.enemies:
            if enemy.kind is EnemyKind.BOSS and enemy.alive:
                self.draw_bar(settings.WINDOW_WIDTH // 2 - 150, settings.WINDOW_HEIGHT - 30,
                              enemy.health / enemy.max_health, (150, 20, 90), "BOSS", width=300)

        for i, note in enumerate(state.achievements.notifications):
            self.draw_center_text(f"ACHIEVEMENT: {note.title}", y=90 + i * 24, color=(255, 215, 0))

    def draw_bar(self, x: int, y: int, ratio: float, color, label: str, width: int = 200) -> None:
        ratio = max(0.0, min(1.0, ratio))
        pygame.draw.rect(self.window, (50, 50, 50), (x, y, width, 18))
        pygame.draw.rect(self.window, color, (x, y, int(width * ratio), 18))
        self.window.blit(self.small_font.render(label, True, TEXT_COLOR), (x + 4, y + 2))

    def draw_editor(self) -> None:
        editor = self.editor
        size = settings.TILE_SIZE
        for ty in range(editor.height):
            for tx in range(editor.width):
                sx = tx * size - editor.camera_x
                if sx < -size or sx > settings.WINDOW_WIDTH:
                    continue
                color = TILE_COLORS.get(editor.tiles[ty][tx], (17, 17, 17))
                pygame.draw.rect(self.window, color, (sx, ty * size, size - 1, size - 1))

        for spawn in editor.enemies:
            color = ENEMY_COLORS[EnemyKind(spawn.type)]
            pygame.draw.rect(self.window, color, (spawn.x * size - editor.camera_x + 8, spawn.y * size + 8, 16, 16))
        for spawn in editor.pickups:
            center = (spawn.x * size - editor.camera_x + size // 2, spawn.y * size + size // 2)
            pygame.draw.circle(self.window, (68, 255, 68), center, 8)
        for cp in editor.checkpoints:
            pygame.draw.rect(self.window, (255, 255, 68), (cp.x * size - editor.camera_x + 12, cp.y * size, 8, 32))
        start = editor.player_start
        pygame.draw.rect(self.window, (68, 68, 255), (start.x * size - editor.camera_x + 4, start.y * size + 4, 24, 24))

        option = ""
        if editor.tool is EditorTool.ENEMY:
            option = editor.selected_enemy.value
        elif editor.tool is EditorTool.PICKUP:
            option = editor.selected_pickup.value
        status = f"LEVEL EDITOR   tool: {editor.tool.value} {option}   tile: {editor.selected_tile.name}"
        self.window.blit(self.font.render(status, True, TEXT_COLOR), (10, 8))
        help_text = "1-6 tiles  E enemy  P pickup  C checkpoint  S start  X erase  TAB type  T test  Ctrl+S export  F2 close"
        self.window.blit(self.small_font.render(help_text, True, TEXT_COLOR), (10, settings.WINDOW_HEIGHT - 20))

    def draw_center_text(self, text: str, y: int, big: bool = False, color=TEXT_COLOR) -> None:
        f = self.big_font if big else self.font
        surf = f.render(text, True, color)
        rect = surf.get_rect(center=(settings.WINDOW_WIDTH // 2, y))
        self.window.blit(surf, rect)

    def draw_overlay(self, alpha: int = 160) -> None:
        overlay = pygame.Surface((settings.WINDOW_WIDTH, settings.WINDOW_HEIGHT), pygame.SRCALPHA)
        overlay.fill((0, 0, 0, alpha))
        self.window.blit(overlay, (0, 0))
