# games/titans/engine/progression.py
import math
import random
from typing import Optional

from ..content.balance import CAPS
from .models import Titan
from .rules import clamp, round_half_up


def xp_to_next(level: int) -> int:
    return int(math.floor(100 * 1.15 ** (level - 1)))


def compute_battle_xp(own_level: int, opp_level: int, won: bool, defeated: bool) -> int:
    """
    XP for one finished game. Beating a higher-level titan pays more (up to 2x),
    a lower-level one less (down to 0.5x). A win by knockout gets a further 10%.
    """
    base = 50 if won else 20
    multiplier = clamp(1 + 0.1 * (opp_level - own_level), 0.5, 2.0)
    xp = round_half_up(base * multiplier)
    if won and defeated:
        xp = round_half_up(xp * 1.1)
    return xp


def stat_increase(r: random.Random) -> int:
    roll = r.random()
    if roll < 0.1:
        return 0
    if roll < 0.4:
        return 1
    if roll < 0.8:
        return 2
    return 3


_CAPPED_STATS = {
    "accuracy": "acc_max",
    "evasion": "eva_max",
    "critical_chance": "crit_max",
}


def level_up(titan: Titan, r: random.Random) -> None:
    titan.level += 1
    for stat in ("hp", "attack", "defense", "speed", "stamina", "accuracy", "evasion", "critical_chance"):
        value = getattr(titan.stats, stat) + stat_increase(r)
        cap_key = _CAPPED_STATS.get(stat)
        if cap_key:
            value = min(value, CAPS[cap_key])
        setattr(titan.stats, stat, value)


def award_battle_xp(
    titan: Titan,
    opponent: Titan,
    won: bool,
    defeated: bool,
    r: Optional[random.Random] = None,
) -> int:
    """Adds the game's XP to a roster titan and applies level-ups. Returns levels gained."""
    r = r or random.Random()
    titan.xp += compute_battle_xp(titan.level, opponent.level, won, defeated)
    gained = 0
    while titan.xp >= xp_to_next(titan.level):
        titan.xp -= xp_to_next(titan.level)
        level_up(titan, r)
        gained += 1
    return gained
