import random

import pytest

from games.titans.engine.dice import chance, rng_for, roll_between
from games.titans.engine.rules import cap_charge, cap_hp, clamp, hit_chance, round_half_up, stamina_gain


@pytest.mark.parametrize("value, expected", [(2.5, 3), (2.4999, 2), (-2.5, -2), (-2.6, -3), (0.5, 1), (7, 7)])
def test_round_half_up(value, expected):
    assert round_half_up(value) == expected


def test_hit_chance_is_clamped():
    assert hit_chance(0, 0) == pytest.approx(0.8)
    assert hit_chance(10, 0) == pytest.approx(0.9)
    assert hit_chance(100, 0) == 0.95
    assert hit_chance(0, 100) == 0.05


def test_stamina_gain_scales_and_caps():
    assert stamina_gain(20, 0) == 20
    assert stamina_gain(20, 50) == 30
    assert stamina_gain(10, 5) == 11      # 10.5 rounds up
    assert stamina_gain(40, 500) == 100


def test_caps():
    assert clamp(5, 0, 3) == 3
    assert cap_charge(-4) == 0
    assert cap_charge(130) == 100
    assert cap_charge(49.5) == 50
    assert cap_hp(150, 120) == 120
    assert cap_hp(-10, 120) == 0


def test_rng_for_is_deterministic_per_seed_and_round():
    a = [rng_for(42, 3).random() for _ in range(3)]
    b = [rng_for(42, 3).random() for _ in range(3)]
    assert a == b
    assert rng_for(42, 3).random() != rng_for(42, 4).random()


def test_roll_between_and_chance_use_a_single_roll():
    r = random.Random(1)
    for _ in range(200):
        assert 1.5 <= roll_between(1.5, 2.0, r) < 2.0
    assert chance(1.0, r) is True
    assert chance(0.0, r) is False
