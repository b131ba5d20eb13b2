# games/titans/content/abilities.py
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Optional

from ..engine.effects import (
    AbilityContext,
    add_charge,
    add_shield,
    heal,
    scale_modifier,
    strike,
)
from ..engine.models import Ability, Titan
from ..engine.rules import round_half_up, stamina_gain
from .balance import DEFAULTS, UNPRICED_ABILITY_COST


def _attack_damage(multiplier: float, label: str):
    def effect(ctx: AbilityContext) -> None:
        dealt, before, after = strike(ctx, round_half_up(ctx.attacker.stats.attack * multiplier))
        ctx.log.append(
            f"{ctx.attacker.name} uses {label} dealing {dealt} damage ({before} -> {after})."
        )
    return effect


def _self_heal(amount: int, label: str):
    def effect(ctx: AbilityContext) -> None:
        before, after = heal(ctx.hp, ctx.attacker, amount)
        ctx.log.append(f"{ctx.attacker.name} uses {label} and heals {after - before} HP ({before} -> {after}).")
    return effect


def _drain(ctx: AbilityContext) -> None:
    dealt, def_before, def_after = strike(ctx, round_half_up(ctx.attacker.stats.attack * 0.75))
    atk_before, atk_after = heal(ctx.hp, ctx.attacker, dealt)
    ctx.log.append(
        f"{ctx.attacker.name} uses Drain dealing {dealt} damage and healing {atk_after - atk_before} HP "
        f"({def_before} -> {def_after}; self {atk_before} -> {atk_after})."
    )


def _fortify(ctx: AbilityContext) -> None:
    before, after = heal(ctx.hp, ctx.attacker, 10)
    add_shield(ctx.shields, ctx.attacker_id, 10)
    ctx.log.append(
        f"{ctx.attacker.name} uses Fortify: heals {after - before} HP and gains +10 temporary defense "
        f"(HP {before} -> {after})."
    )


def _quick_charge(ctx: AbilityContext) -> None:
    gain = stamina_gain(DEFAULTS["quick_charge_gain"], ctx.attacker.stats.stamina)
    before, after = add_charge(ctx.charge, ctx.attacker_id, gain)
    ctx.log.append(f"{ctx.attacker.name} uses Quick Charge and gains {after - before}% charge (now {after}%).")


def _barrier(ctx: AbilityContext) -> None:
    before, after = add_shield(ctx.shields, ctx.attacker_id, 30)
    ctx.log.append(f"{ctx.attacker.name} creates a Barrier absorbing 30 damage (shield {before} -> {after}).")


def _shock(ctx: AbilityContext) -> None:
    dealt, before, after = strike(ctx, 10)
    scale_modifier(ctx.modifiers, ctx.defender_id, 0.75)
    ctx.log.append(
        f"{ctx.attacker.name} uses Shock dealing {dealt} damage and reducing {ctx.defender.name}'s Speed "
        f"by 25% for this round (HP {before} -> {after})."
    )


def _weaken(ctx: AbilityContext) -> None:
    scale_modifier(ctx.modifiers, ctx.defender_id, 0.8)
    ctx.log.append(f"{ctx.defender.name} is weakened: defense reduced by 20% for this round.")


_CATALOG = [
    Ability(
        id="drain",
        name="Drain",
        description="Deal Attack * 0.75 damage and heal caster by same amount.",
        cost=35,
        is_damage_ability=True,
        scales_with_attack=True,
        effect=_drain,
    ),
    Ability(
        id="focused_strike",
        name="Focused Strike",
        description="Deal Attack * 1.5 damage.",
        cost=25,
        is_damage_ability=True,
        scales_with_attack=True,
        effect=_attack_damage(1.5, "Focused Strike"),
    ),
    Ability(
        id="overdrive",
        name="Overdrive",
        description="Deal Attack * 2.5 damage.",
        cost=50,
        is_damage_ability=True,
        scales_with_attack=True,
        effect=_attack_damage(2.5, "Overdrive"),
    ),
    Ability(
        id="shock",
        name="Shock",
        description="Deal 10 fixed damage and reduce opponent Speed by 25% for this round.",
        cost=30,
        is_damage_ability=True,
        scales_with_attack=False,
        effect=_shock,
    ),
    Ability(
        id="heal_small",
        name="Cleansing Light",
        description="Heal self 25 HP.",
        cost=20,
        is_damage_ability=False,
        scales_with_attack=False,
        effect=_self_heal(25, "Cleansing Light"),
    ),
    Ability(
        id="heal_big",
        name="Vital Surge",
        description="Heal self 50 HP.",
        cost=40,
        is_damage_ability=False,
        scales_with_attack=False,
        effect=_self_heal(50, "Vital Surge"),
    ),
    Ability(
        id="fortify",
        name="Fortify",
        description="Heal 10 and add +10 temporary defense for this round (a small shield).",
        cost=20,
        is_damage_ability=False,
        scales_with_attack=False,
        effect=_fortify,
    ),
    Ability(
        id="quick_charge",
        name="Quick Charge",
        description="Add +40 charge to caster, scaled by Stamina (capped 100).",
        cost=5,
        is_damage_ability=False,
        scales_with_attack=False,
        effect=_quick_charge,
    ),
    Ability(
        id="shield",
        name="Barrier",
        description="Create a shield that absorbs 30 damage for this round.",
        cost=30,
        is_damage_ability=False,
        scales_with_attack=False,
        effect=_barrier,
    ),
    Ability(
        id="weaken",
        name="Weaken",
        description="Reduce opponent defense by 20% for this round.",
        cost=25,
        is_damage_ability=False,
        scales_with_attack=False,
        effect=_weaken,
    ),
]

ABILITIES: Mapping[str, Ability] = MappingProxyType({a.id: a for a in _CATALOG})


def get_ability(ability_id: Optional[str]) -> Optional[Ability]:
    if not ability_id:
        return None
    return ABILITIES.get(ability_id)


def ability_cost(ability_id: Optional[str]) -> int:
    ability = get_ability(ability_id)
    if ability is None:
        return UNPRICED_ABILITY_COST
    return ability.cost


def ability_meta(titan: Titan) -> List[Dict[str, Any]]:
    """Client-facing projection of the abilities a titan owns; unknown ids are left out."""
    return [ABILITIES[aid].meta() for aid in titan.abilities if aid in ABILITIES]


def catalog_meta() -> List[Dict[str, Any]]:
    return [a.meta() for a in ABILITIES.values()]
