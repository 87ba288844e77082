import math
import sys

import pytest

from soulcast import mathx
from soulcast.mathx import Endian


@pytest.mark.parametrize("x,m", [(7.5, 2.0), (-7.5, 2.0), (10.0, 3.0), (-1.0, 4.0)])
def test_mod_truncates_like_fmod(x, m):
    assert mathx.mod(x, m) == pytest.approx(math.fmod(x, m))


def test_sign_keeps_type():
    assert mathx.sign(-5) == -1
    assert mathx.sign(0) == 0
    assert mathx.sign(2.5) == 1.0
    assert isinstance(mathx.sign(2.5), float)


def test_clamp_bounds():
    assert mathx.clamp(-4, 0, 10) == 0
    assert mathx.clamp(40, 0, 10) == 10
    assert mathx.clamp(4, 0, 10) == 4


@pytest.mark.parametrize("value", [-13.0, -0.5, 0.0, 3.25, 17.0])
def test_repeat_stays_in_range(value):
    r = mathx.repeat(value, 4.0)
    assert 0.0 <= r <= 4.0
    assert mathx.repeat(value + 4.0, 4.0) == pytest.approx(r)


def test_approach_never_overshoots():
    assert mathx.approach(0.0, 10.0, 3.0) == 3.0
    assert mathx.approach(9.0, 10.0, 3.0) == 10.0
    assert mathx.approach(12.0, 10.0, 5.0) == 10.0


def test_map_range_endpoints():
    assert mathx.map_range(2.0, 2.0, 6.0, -1.0, 1.0) == pytest.approx(-1.0)
    assert mathx.map_range(6.0, 2.0, 6.0, -1.0, 1.0) == pytest.approx(1.0)


def test_clamped_map_limits_input():
    assert mathx.clamped_map(100.0, 0.0, 1.0, 5.0, 9.0) == pytest.approx(9.0)
    assert mathx.clamped_map(-100.0, 0.0, 1.0, 5.0, 9.0) == pytest.approx(5.0)


def test_lerp_endpoints():
    assert mathx.lerp(-1.0, 1.0, 0.0) == -1.0
    assert mathx.lerp(-1.0, 1.0, 1.0) == 1.0


def test_angle_diff_same_and_full_turn():
    assert mathx.angle_diff(1.0, 1.0) == pytest.approx(0.0, abs=1e-6)
    assert mathx.angle_diff(0.0, mathx.TAU) == pytest.approx(0.0, abs=1e-6)


def test_angle_lerp_start():
    assert mathx.angle_lerp(0.7, 2.1, 0.0) == pytest.approx(0.7)


def test_swap_endian_known_value_and_round_trip():
    assert mathx.swap_endian(0x12345678, 4) == 0x78563412
    assert mathx.swap_endian(mathx.swap_endian(0xBEEF, 2), 2) == 0xBEEF


def test_swap_endian_rejects_bad_size():
    with pytest.raises(ValueError):
        mathx.swap_endian(1, 0)


def test_endianness_matches_host():
    assert mathx.is_little_endian() == (sys.byteorder == "little")
    assert mathx.is_big_endian() != mathx.is_little_endian()
    assert mathx.is_endian(Endian.LITTLE) == mathx.is_little_endian()
    assert mathx.is_endian(Endian.BIG) == mathx.is_big_endian()


def test_round_to_interval_is_multiple():
    r = mathx.round_to_interval(10.7, 0.5)
    assert r <= 10.7
    assert math.fmod(r, 0.5) == pytest.approx(0.0, abs=1e-9)


def test_fixed_point_round_trip():
    assert mathx.from_fixed(mathx.to_fixed(123)) == 123