# games/titans/engine/effects.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Tuple

from .models import Titan
from .rules import cap_charge, cap_hp, round_half_up


@dataclass
class AbilityContext:
    """
    Everything an ability effect may touch for one cast.
    The four records and the log are the round's own objects; effects mutate them in place.
    """
    attacker_id: str            # titan ids
    defender_id: str
    attacker: Titan
    defender: Titan
    hp: Dict[str, int]
    charge: Dict[str, int]
    shields: Dict[str, int]
    modifiers: Dict[str, float]
    log: List[str]


def absorb(shields: Dict[str, int], titan: Titan, damage: int, log: List[str]) -> int:
    """Run damage through the titan's shield pool. Returns what gets past it."""
    shield = shields.get(titan.id, 0)
    if shield <= 0 or damage <= 0:
        return damage
    absorbed = min(shield, damage)
    shields[titan.id] = max(0, round_half_up(shield - absorbed))
    log.append(f"{titan.name}'s shield absorbs {absorbed} damage.")
    return max(0, round_half_up(damage - absorbed))


def take_damage(hp: Dict[str, int], titan: Titan, damage: int) -> Tuple[int, int]:
    before = round_half_up(hp.get(titan.id, titan.stats.hp))
    after = cap_hp(before - damage, titan.stats.hp)
    hp[titan.id] = after
    return before, after


def heal(hp: Dict[str, int], titan: Titan, amount: int) -> Tuple[int, int]:
    before = round_half_up(hp.get(titan.id, titan.stats.hp))
    after = min(round_half_up(titan.stats.hp), round_half_up(before + amount))
    hp[titan.id] = after
    return before, after


def add_charge(charge: Dict[str, int], titan_id: str, amount: int) -> Tuple[int, int]:
    before = round_half_up(charge.get(titan_id, 0))
    after = cap_charge(before + amount)
    charge[titan_id] = after
    return before, after


def add_shield(shields: Dict[str, int], titan_id: str, amount: int) -> Tuple[int, int]:
    before = round_half_up(shields.get(titan_id, 0))
    after = round_half_up(before + amount)
    shields[titan_id] = after
    return before, after


def scale_modifier(modifiers: Dict[str, float], titan_id: str, factor: float) -> float:
    value = max(0.0, modifiers.get(titan_id, 1.0) * factor)
    modifiers[titan_id] = value
    return value


def strike(ctx: AbilityContext, damage: int) -> Tuple[int, int, int]:
    """Shield-then-HP damage against the defender. Returns (dealt, hp_before, hp_after)."""
    dealt = absorb(ctx.shields, ctx.defender, round_half_up(damage), ctx.log)
    before, after = take_damage(ctx.hp, ctx.defender, dealt)
    return dealt, before, after
