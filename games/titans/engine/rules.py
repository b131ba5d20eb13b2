# games/titans/engine/rules.py
import math
from typing import Union

from ..content.balance import CAPS, DEFAULTS

Number = Union[int, float]


def clamp(x: Number, lo: Number, hi: Number) -> Number:
    return max(lo, min(hi, x))


def round_half_up(x: float) -> int:
    # .5 always goes up, so 2.5 -> 3 and -2.5 -> -2
    return int(math.floor(x + 0.5))


def hit_chance(acc: Number, eva: Number) -> float:
    return clamp(DEFAULTS["base_hit_chance"] + (acc - eva) / 100, CAPS["hit_min"], CAPS["hit_max"])


def stamina_gain(base: int, stamina: Number) -> int:
    """Charge gain scaled by stamina, never more than a full bar."""
    return min(DEFAULTS["charge_max"], round_half_up(base * (1 + stamina / 100)))


def cap_charge(value: Number) -> int:
    return int(clamp(round_half_up(value), 0, DEFAULTS["charge_max"]))


def cap_hp(value: Number, hp_max: Number) -> int:
    return int(clamp(round_half_up(value), 0, round_half_up(hp_max)))
