# games/titans/engine/resolver.py
import dataclasses
import logging
import random
from typing import Dict, List, Mapping, Optional

from .models import (
    Ability,
    ActionKind,
    Game,
    GameAction,
    GameState,
    Outcome,
    RoundAction,
    RoundResult,
    Titan,
)
from .dice import rng_for, roll_between, uniform, chance
from .rules import hit_chance, stamina_gain, round_half_up, cap_charge, cap_hp
from .effects import AbilityContext, absorb, add_charge, take_damage
from ..content.abilities import ABILITIES
from ..content.balance import DEFAULTS

logger = logging.getLogger("titans.engine.resolver")


def turn_order(game: Game, r: random.Random) -> List[str]:
    """Higher Speed * roll acts first; ties keep participant order."""
    rolls = {}
    for player_id in game.players:
        titan = game.titan_for(player_id)
        speed = titan.stats.speed if titan else 0
        rolls[player_id] = speed * uniform(r)
    return sorted(game.players, key=lambda pid: rolls[pid], reverse=True)


def resolve_round(
    game: Game,
    actions: Dict[str, GameAction],
    hp: Dict[str, int],
    charge: Dict[str, int],
    r: Optional[random.Random] = None,
    catalog: Optional[Mapping[str, Ability]] = None,
) -> RoundResult:
    """
    Resolves every committed action of the current round in speed order.
    Mutates hp/charge (titan id -> value) and game.state / round_number / winner in place.
    Shields and debuff modifiers only live for this call.
    """
    r = r or rng_for(game.seed, game.round_number)
    catalog = ABILITIES if catalog is None else catalog
    resolved_round = game.round_number

    log: List[str] = []
    sequence: List[RoundAction] = []
    shields: Dict[str, int] = {}
    modifiers: Dict[str, float] = {}

    for player_id in game.players:
        titan = game.titan_for(player_id)
        hp.setdefault(titan.id, titan.stats.hp)
        charge.setdefault(titan.id, 0)
        act = actions.get(player_id)
        if act:
            log.append(f"{titan.name} chooses to {act.kind.value}.")

    def target_for(actor_id: str, act: GameAction) -> Optional[str]:
        if act.target_id and act.target_id != actor_id and act.target_id in game.players:
            return act.target_id
        others = game.opponents_of(actor_id)
        return others[0] if others else None

    def award_defend(defender: Titan, defender_action: Optional[GameAction]) -> None:
        if not defender_action or defender_action.kind != ActionKind.DEFEND:
            return
        _, after = add_charge(charge, defender.id, DEFAULTS["defend_charge_gain"])
        log.append(f"{defender.name} defended and charges special by +{DEFAULTS['defend_charge_gain']} (now {after}%).")

    def rolls_hit(attacker: Titan, defender: Titan) -> bool:
        return uniform(r) <= hit_chance(attacker.stats.accuracy, defender.stats.evasion)

    def rolls_crit(attacker: Titan) -> bool:
        is_crit = chance(attacker.stats.critical_chance / 100, r)
        if is_crit:
            log.append(f"{attacker.name} lands a critical hit!")
        return is_crit

    def finish(winner_id: str, defender: Titan, step: RoundAction) -> None:
        game.state = GameState.FINISHED
        game.winner = winner_id
        step.result = Outcome.DEATH
        winner_name = game.usernames.get(winner_id, winner_id)
        log.append(f"{defender.name} is defeated. {winner_name} wins.")

    def resolve_attack(attacker: Titan, defender: Titan, defender_action: Optional[GameAction], step: RoundAction) -> None:
        if not rolls_hit(attacker, defender):
            log.append(f"{defender.name} evades the attack by {attacker.name}.")
            award_defend(defender, defender_action)
            step.result = Outcome.MISS
            return

        is_crit = rolls_crit(attacker)
        attack_value = attacker.stats.attack * (1 + uniform(r))
        defense = defender.stats.defense
        if defender_action and defender_action.kind == ActionKind.DEFEND:
            defense *= roll_between(DEFAULTS["defend_mult_min"], DEFAULTS["defend_mult_max"], r)
        raw = max(0.0, attack_value - defense)
        if is_crit:
            raw *= DEFAULTS["crit_multiplier"]

        damage = absorb(shields, defender, round_half_up(raw), log)
        before, after = take_damage(hp, defender, damage)
        step.result = Outcome.HIT if damage > 0 else Outcome.MISS

        award_defend(defender, defender_action)
        log.append(f"{attacker.name} deals {damage} damage to {defender.name} (HP: {before} -> {after}).")

        if damage > 0:
            gain = stamina_gain(DEFAULTS["attack_charge_gain"], attacker.stats.stamina)
            _, now = add_charge(charge, attacker.id, gain)
            log.append(f"{attacker.name} gains +{gain} charge from attacking (now {now}%).")

    def resolve_ability(attacker: Titan, defender: Titan, act: GameAction, step: RoundAction) -> None:
        if not act.ability_id:
            log.append(f"{attacker.name} attempted Ability but no ability id was provided.")
            step.result = Outcome.MISS
            return
        ability = catalog.get(act.ability_id)
        if ability is None:
            log.append(f"{attacker.name} attempted Ability but ability data is missing for id={act.ability_id}.")
            step.result = Outcome.MISS
            return
        if act.ability_id not in attacker.abilities:
            log.append(f"{attacker.name} attempted {ability.name} but does not know it.")
            step.result = Outcome.MISS
            return

        current = charge.get(attacker.id, 0)
        if current < ability.cost:
            log.append(f"{attacker.name} attempted {ability.name} but has insufficient charge ({current}/{ability.cost}).")
            step.result = Outcome.MISS
            return
        charge[attacker.id] = max(0, round_half_up(current - ability.cost))

        caster = attacker
        if ability.is_damage_ability:
            if not rolls_hit(attacker, defender):
                # the cost stays spent
                log.append(f"{defender.name} evades {attacker.name}'s {ability.name}.")
                step.result = Outcome.MISS
                return
            if rolls_crit(attacker) and ability.scales_with_attack:
                boosted = dataclasses.replace(
                    attacker.stats, attack=attacker.stats.attack * DEFAULTS["crit_attack_boost"]
                )
                caster = dataclasses.replace(attacker, stats=boosted)

        ctx = AbilityContext(
            attacker_id=attacker.id,
            defender_id=defender.id,
            attacker=caster,
            defender=defender,
            hp=hp,
            charge=charge,
            shields=shields,
            modifiers=modifiers,
            log=log,
        )
        try:
            ability.apply(ctx)
            step.result = Outcome.HIT
        except Exception:
            logger.exception("ability %s raised for titan %s in game %s", ability.id, attacker.id, game.id)
            log.append(f"{attacker.name} failed to use {ability.name}.")
            step.result = Outcome.MISS

    def resolve_rest(attacker: Titan) -> None:
        gain = stamina_gain(DEFAULTS["rest_charge_gain"], attacker.stats.stamina)
        _, now = add_charge(charge, attacker.id, gain)
        log.append(f"{attacker.name} rests and charges special by +{gain} (now {now}%).")

    for actor_id in turn_order(game, r):
        if game.state == GameState.FINISHED:
            break
        act = actions.get(actor_id)
        if not act:
            continue
        target_id = target_for(actor_id, act)
        if target_id is None:
            continue
        attacker = game.titan_for(actor_id)
        defender = game.titan_for(target_id)
        if hp.get(attacker.id, 0) <= 0 or hp.get(defender.id, 0) <= 0:
            continue

        targeted = act.kind in (ActionKind.ATTACK, ActionKind.ABILITY)
        step = RoundAction(
            actor_id=actor_id,
            action=act.kind,
            target_id=target_id if targeted else None,
            ability_id=act.ability_id if act.kind == ActionKind.ABILITY else None,
        )

        if act.kind == ActionKind.ATTACK:
            resolve_attack(attacker, defender, actions.get(target_id), step)
        elif act.kind == ActionKind.ABILITY:
            resolve_ability(attacker, defender, act, step)
        elif act.kind == ActionKind.REST:
            resolve_rest(attacker)
        # Defend pays off when the opponent attacks

        if targeted and hp.get(defender.id, 0) <= 0:
            finish(actor_id, defender, step)
        sequence.append(step)

    for player_id in game.players:
        titan = game.titan_for(player_id)
        charge[titan.id] = cap_charge(charge.get(titan.id, 0))
        hp[titan.id] = cap_hp(hp.get(titan.id, 0), titan.stats.hp)

    if game.state != GameState.FINISHED:
        game.state = GameState.BATTLE
        game.round_number += 1

    logger.debug(
        "game %s round %s resolved: %s actions, state=%s",
        game.id, resolved_round, len(sequence), game.state.value,
    )
    return RoundResult(
        round_number=resolved_round,
        round_sequence=sequence,
        round_log=log,
        modifiers=dict(modifiers),
    )
