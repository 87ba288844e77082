"""Shared value types and screen constants of the console."""

from dataclasses import dataclass
from enum import IntEnum

SCREEN_XSIZE = 320
SCREEN_YSIZE = 240

DEBUG_XSIZE = 128
SCREEN_XSIZE_WIDE = int((16.0 / 9.0) * 240)

REFRESH_RATE = 60


def _check_byte(name: str, value: int) -> None:
    if not 0 <= value <= 0xFF:
        raise ValueError(f"{name} must be in 0..255, got {value}")


@dataclass
class Color:
    """An 8-bit-per-channel RGBA colour."""

    r: int
    g: int
    b: int
    a: int

    def __post_init__(self) -> None:
        for name in ("r", "g", "b", "a"):
            _check_byte(name, getattr(self, name))


@dataclass
class Vector2:
    """A pair of integer coordinates."""

    x: int = 0
    y: int = 0


class EmulatorState(IntEnum):
    """The mode the emulator main loop is in."""

    MAINGAME = 0
    EXITGAME = 1
    PAUSE = 2
    WAIT = 3