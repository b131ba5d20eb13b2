import pytest

from games.titans.engine.progression import (
    award_battle_xp,
    compute_battle_xp,
    level_up,
    stat_increase,
    xp_to_next,
)
from support import ScriptedRandom, make_titan


def test_xp_curve():
    assert xp_to_next(1) == 100
    assert xp_to_next(3) == 132
    assert xp_to_next(10) > xp_to_next(9)


@pytest.mark.parametrize(
    "own, opp, won, defeated, expected",
    [
        (1, 1, True, False, 50),
        (1, 1, True, True, 55),
        (1, 1, False, False, 20),
        (1, 1, False, True, 20),
        (1, 6, True, False, 75),
        (1, 20, True, False, 100),
        (20, 1, True, False, 25),
        (5, 1, False, False, 12),
    ],
)
def test_battle_xp(own, opp, won, defeated, expected):
    assert compute_battle_xp(own, opp, won, defeated) == expected


@pytest.mark.parametrize("roll, expected", [(0.05, 0), (0.1, 1), (0.39, 1), (0.4, 2), (0.79, 2), (0.8, 3), (0.99, 3)])
def test_stat_increase_buckets(roll, expected):
    assert stat_increase(ScriptedRandom([roll])) == expected


def test_level_up_rolls_every_stat_and_respects_caps():
    titan = make_titan("t", "p", hp=100, attack=10, accuracy=100, evasion=59, critical_chance=50)
    level_up(titan, ScriptedRandom([0.9] * 8))
    assert titan.level == 2
    assert (titan.stats.hp, titan.stats.attack, titan.stats.defense) == (103, 13, 8)
    assert titan.stats.accuracy == 100
    assert titan.stats.evasion == 60
    assert titan.stats.critical_chance == 50


def test_award_carries_leftover_xp():
    titan = make_titan("t", "p")
    titan.xp = 60
    gained = award_battle_xp(titan, make_titan("o", "q"), won=True, defeated=True, r=ScriptedRandom([], default=0.0))
    assert gained == 1
    assert titan.level == 2
    assert titan.xp == 15
    assert titan.stats.attack == 10, "0.0 rolls grow nothing"


def test_award_without_level_up():
    titan = make_titan("t", "p")
    assert award_battle_xp(titan, make_titan("o", "q"), won=False, defeated=False) == 0
    assert titan.xp == 20 and titan.level == 1
