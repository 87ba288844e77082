"""Gamepad button state driven by a keyboard snapshot."""

from dataclasses import dataclass
from enum import IntEnum
from typing import Any, List, Optional, Tuple

PLAYER_COUNT = 4
INPUTDEVICE_COUNT = 16

SCANCODE_RIGHT = 79
SCANCODE_LEFT = 80
SCANCODE_DOWN = 81
SCANCODE_UP = 82


class InputButtons(IntEnum):
    UP = 0
    DOWN = 1
    LEFT = 2
    RIGHT = 3
    A = 4
    B = 5
    X = 6
    Y = 7
    START = 8
    SELECT = 9
    ANY = 10


INPUT_MAX = len(InputButtons)


@dataclass
class InputButton:
    """The press/hold state of one button and the keys mapped to it."""

    press: bool = False
    hold: bool = False
    key_mapping: int = 0
    pad_mapping: int = 0

    def set_held(self) -> None:
        self.press = not self.hold
        self.hold = True

    def set_released(self) -> None:
        self.press = False
        self.hold = False

    @property
    def down(self) -> bool:
        return self.press or self.hold


def _is_key_down(key_state: Any, code: int) -> bool:
    try:
        return bool(key_state[code])
    except (IndexError, KeyError):
        return False


class InputState:
    """All buttons of the console plus the mouse position."""

    def __init__(self) -> None:
        self.buttons: List[InputButton] = [InputButton() for _ in range(INPUT_MAX)]
        self.buttons[InputButtons.UP].key_mapping = SCANCODE_UP
        self.buttons[InputButtons.DOWN].key_mapping = SCANCODE_DOWN
        self.buttons[InputButtons.LEFT].key_mapping = SCANCODE_LEFT
        self.buttons[InputButtons.RIGHT].key_mapping = SCANCODE_RIGHT
        self.mouse_x = 0
        self.mouse_y = 0

    def process(self, key_state: Any, mouse: Optional[Tuple[float, float]] = None) -> None:
        """Update buttons from a scancode-indexed key snapshot and the mouse position."""
        any_button = self.buttons[InputButtons.ANY]
        for button in self.buttons[: InputButtons.ANY]:
            if _is_key_down(key_state, button.key_mapping):
                button.set_held()
                if not any_button.hold:
                    any_button.set_held()
            else:
                button.set_released()

        if mouse is not None:
            self.mouse_x, self.mouse_y = int(mouse[0]), int(mouse[1])

    def clear(self) -> None:
        """Release every button."""
        for button in self.buttons:
            button.set_released()

    def is_button_down(self, button: InputButtons) -> bool:
        return self.buttons[button].hold

    def is_button_pressed(self, button: InputButtons) -> bool:
        return self.buttons[button].press