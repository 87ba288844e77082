"""Small numeric helpers used throughout the engine."""

import math
import sys
from enum import Enum

PI = 3.1415927
TAU = PI * 2.0
RIGHT = 0.0
LEFT = PI
UP = PI / -2
DOWN = PI / 2


class Endian(Enum):
    """Byte order of a serialised number."""

    LITTLE = "little"
    BIG = "big"


def to_fixed(x: int) -> int:
    """Convert an integer to 16.16 fixed point."""
    return x << 16


def from_fixed(x: int) -> int:
    """Convert a 16.16 fixed point value back to an integer."""
    return x >> 16


def mod(x: float, m: float) -> float:
    """Remainder of x / m with the quotient truncated toward zero."""
    return x - int(x / m) * m


def sign(x):
    """Return -1, 0 or 1 according to the sign of x, keeping its type."""
    return type(x)(0 if x == 0 else (-1 if x < 0 else 1))


def clamp(value, lo, hi):
    """Limit value to the range lo..hi."""
    if value < lo:
        return lo
    if value > hi:
        return hi
    return value


def repeat(value: float, length: float) -> float:
    """Wrap value into the range 0..length."""
    return clamp(value - math.floor(value / length) * length, 0.0, length)


def approach(t: float, target: float, delta: float) -> float:
    """Move t toward target by at most delta."""
    return min(t + delta, target) if t < target else max(t - delta, target)


def map_range(t: float, old_min: float, old_max: float, new_min: float, new_max: float) -> float:
    """Linearly map t from one range onto another."""
    return new_min + ((t - old_min) / (old_max - old_min)) * (new_max - new_min)


def clamped_map(t: float, old_min: float, old_max: float, new_min: float, new_max: float) -> float:
    """Map t onto the new range after clamping it to the old one."""
    return map_range(clamp(t, old_min, old_max), old_min, old_max, new_min, new_max)


def lerp(a: float, b: float, t: float) -> float:
    """Linear interpolation between a and b."""
    return a + (b - a) * t


def angle_diff(radians_a: float, radians_b: float) -> float:
    """Signed difference between two angles."""
    return mod((radians_b - radians_a) + PI, TAU) - PI


def angle_lerp(radians_a: float, radians_b: float, p: float) -> float:
    """Interpolate between two angles along the shortest arc."""
    shortest = mod(mod(radians_b - radians_a, TAU) + (TAU + PI), TAU) - PI
    return radians_a + mod(shortest * p, TAU)


def swap_endian(value: int, size: int) -> int:
    """Reverse the byte order of an unsigned integer of `size` bytes."""
    if size <= 0:
        raise ValueError("size must be positive")
    return int.from_bytes(value.to_bytes(size, "little"), "big")


def is_big_endian() -> bool:
    return sys.byteorder == "big"


def is_little_endian() -> bool:
    return sys.byteorder == "little"


def is_endian(endian: Endian) -> bool:
    """Whether the host uses the given byte order."""
    return (endian is Endian.LITTLE and is_little_endian()) or (
        endian is Endian.BIG and is_big_endian()
    )


def round_to_interval(a: float, interval: float) -> float:
    """Round a toward zero onto a multiple of interval."""
    return a - math.fmod(a, interval)