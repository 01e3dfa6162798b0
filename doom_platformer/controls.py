# controls.py
# Input state the simulation reads.
#
# Held keys are plain booleans. Presses that must fire exactly once (jump,
# fire, pause, menu return, enter, weapon switch) are latched here and
# cleared by the consume_* call that reads them.

from __future__ import annotations

import pygame


class Controls:
    def __init__(self):
        self.left = False
        self.right = False
        self.jump = False
        self.up = False
        self.down = False
        self.fire = False

        self.jump_pressed = False
        self.fire_pressed = False
        self.pause_pressed = False
        self.menu_return_pressed = False
        self.enter_pressed = False
        self.save_pressed = False
        self.load_pressed = False
        self.weapon_switch = 0      # 1-6 slot, -1 previous, -2 next

    # --------------------------
    # Feeding (tests and the keyboard adapter)
    # --------------------------

    def press_jump(self) -> None:
        if not self.jump:
            self.jump_pressed = True
        self.jump = True

    def release_jump(self) -> None:
        self.jump = False

    def press_fire(self) -> None:
        if not self.fire:
            self.fire_pressed = True
        self.fire = True

    def release_fire(self) -> None:
        self.fire = False

    # --------------------------
    # One-shots
    # --------------------------

    def _consume(self, name: str):
        value = getattr(self, name)
        setattr(self, name, type(value)())
        return value

    def consume_jump(self) -> bool:
        return self._consume("jump_pressed")

    def consume_fire(self) -> bool:
        return self._consume("fire_pressed")

    def consume_pause(self) -> bool:
        return self._consume("pause_pressed")

    def consume_menu_return(self) -> bool:
        return self._consume("menu_return_pressed")

    def consume_enter(self) -> bool:
        return self._consume("enter_pressed")

    def consume_save(self) -> bool:
        return self._consume("save_pressed")

    def consume_load(self) -> bool:
        return self._consume("load_pressed")

    def consume_weapon_switch(self) -> int:
        return self._consume("weapon_switch")

    def clear(self) -> None:
        """Drop everything, held or latched (used when returning to the menu)."""
        self.__init__()


_WEAPON_KEYS = {
    pygame.K_1: 1, pygame.K_2: 2, pygame.K_3: 3,
    pygame.K_4: 4, pygame.K_5: 5, pygame.K_6: 6,
    pygame.K_q: -1, pygame.K_e: -2,
}
_FIRE_KEYS = (pygame.K_j, pygame.K_z, pygame.K_LCTRL, pygame.K_RCTRL)


class KeyboardControls(Controls):
    """Maps pygame key events onto Controls."""

    def handle_event(self, event: pygame.event.Event) -> None:
        if event.type == pygame.KEYDOWN:
            self._key_down(event.key)
        elif event.type == pygame.KEYUP:
            self._key_up(event.key)

    def _key_down(self, key: int) -> None:
        if key in (pygame.K_LEFT, pygame.K_a):
            self.left = True
        elif key in (pygame.K_RIGHT, pygame.K_d):
            self.right = True
        elif key == pygame.K_w:
            self.up = True
            self.press_jump()
        elif key == pygame.K_UP:
            self.up = True
            # up arrow aims while firing, otherwise jumps
            if not self.fire:
                self.press_jump()
        elif key in (pygame.K_DOWN, pygame.K_s):
            self.down = True
        elif key == pygame.K_SPACE:
            self.press_jump()
            self.enter_pressed = True
        elif key in _FIRE_KEYS:
            self.press_fire()
        elif key in (pygame.K_ESCAPE, pygame.K_p):
            self.pause_pressed = True
        elif key == pygame.K_m:
            self.menu_return_pressed = True
        elif key in (pygame.K_RETURN, pygame.K_KP_ENTER):
            self.enter_pressed = True
        elif key == pygame.K_F5:
            self.save_pressed = True
        elif key == pygame.K_F9:
            self.load_pressed = True
        elif key in _WEAPON_KEYS:
            self.weapon_switch = _WEAPON_KEYS[key]

    def _key_up(self, key: int) -> None:
        if key in (pygame.K_LEFT, pygame.K_a):
            self.left = False
        elif key in (pygame.K_RIGHT, pygame.K_d):
            self.right = False
        elif key == pygame.K_w:
            self.up = False
            self.release_jump()
        elif key == pygame.K_UP:
            self.up = False
            self.release_jump()
        elif key in (pygame.K_DOWN, pygame.K_s):
            self.down = False
        elif key == pygame.K_SPACE:
            self.release_jump()
        elif key in _FIRE_KEYS:
            self.release_fire()
