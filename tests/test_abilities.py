import pytest

from games.titans.content.abilities import ABILITIES, ability_cost, ability_meta, catalog_meta, get_ability
from games.titans.content.balance import UNPRICED_ABILITY_COST
from games.titans.engine.effects import AbilityContext
from support import make_titan

EXPECTED = {
    "drain": (35, True, True),
    "focused_strike": (25, True, True),
    "overdrive": (50, True, True),
    "shock": (30, True, False),
    "heal_small": (20, False, False),
    "heal_big": (40, False, False),
    "fortify": (20, False, False),
    "quick_charge": (5, False, False),
    "shield": (30, False, False),
    "weaken": (25, False, False),
}


def context(attacker, defender, hp=None, charge=None):
    return AbilityContext(
        attacker_id=attacker.id,
        defender_id=defender.id,
        attacker=attacker,
        defender=defender,
        hp=hp if hp is not None else {attacker.id: attacker.stats.hp, defender.id: defender.stats.hp},
        charge=charge if charge is not None else {attacker.id: 0, defender.id: 0},
        shields={},
        modifiers={},
        log=[],
    )


def test_catalog_matches_table():
    assert set(ABILITIES) == set(EXPECTED)
    for ability_id, (cost, is_damage, scales) in EXPECTED.items():
        ability = ABILITIES[ability_id]
        assert ability.id == ability_id
        assert (ability.cost, ability.is_damage_ability, ability.scales_with_attack) == (cost, is_damage, scales)


def test_catalog_is_read_only():
    with pytest.raises(TypeError):
        ABILITIES["new"] = ABILITIES["drain"]


def test_cost_lookup_falls_back_for_unknown_ids():
    assert ability_cost("overdrive") == 50
    assert ability_cost("does_not_exist") == UNPRICED_ABILITY_COST
    assert ability_cost(None) == UNPRICED_ABILITY_COST
    assert get_ability("") is None


def test_meta_projection_skips_unknown_ids():
    titan = make_titan("t", "p", abilities=["drain", "bogus", "shield"])
    assert [m["id"] for m in ability_meta(titan)] == ["drain", "shield"]
    assert "effect" not in ability_meta(titan)[0]
    assert len(catalog_meta()) == len(ABILITIES)


def test_focused_strike_and_overdrive_scale_with_attack():
    a, d = make_titan("a", "p1", attack=13), make_titan("d", "p2")
    ctx = context(a, d)
    ABILITIES["focused_strike"].apply(ctx)
    assert ctx.hp["d"] == 100 - 20        # 19.5 rounds up
    ABILITIES["overdrive"].apply(ctx)
    assert ctx.hp["d"] == 80 - 33         # 32.5 rounds up


def test_drain_heals_by_damage_dealt_up_to_max():
    a, d = make_titan("a", "p1", attack=20), make_titan("d", "p2")
    ctx = context(a, d, hp={"a": 95, "d": 100})
    ABILITIES["drain"].apply(ctx)
    assert ctx.hp == {"a": 100, "d": 85}
    assert "healing 5 HP" in ctx.log[-1]


def test_heals_cap_at_max_hp():
    a, d = make_titan("a", "p1"), make_titan("d", "p2")
    ctx = context(a, d, hp={"a": 40, "d": 100})
    ABILITIES["heal_big"].apply(ctx)
    assert ctx.hp["a"] == 90
    ABILITIES["heal_small"].apply(ctx)
    assert ctx.hp["a"] == 100


def test_fortify_heals_and_shields():
    a, d = make_titan("a", "p1"), make_titan("d", "p2")
    ctx = context(a, d, hp={"a": 50, "d": 100})
    ABILITIES["fortify"].apply(ctx)
    assert ctx.hp["a"] == 60
    assert ctx.shields == {"a": 10}


def test_barrier_stacks_and_absorbs_ability_damage():
    a, d = make_titan("a", "p1"), make_titan("d", "p2", attack=20)
    ctx = context(a, d)
    ABILITIES["shield"].apply(ctx)
    ABILITIES["shield"].apply(ctx)
    assert ctx.shields == {"a": 60}

    # the defender now casts into the shielded titan
    reverse = context(d, a, hp=ctx.hp, charge=ctx.charge)
    reverse.shields = ctx.shields
    ABILITIES["overdrive"].apply(reverse)   # 50 damage
    assert ctx.shields == {"a": 10}
    assert ctx.hp["a"] == 100


def test_quick_charge_scales_with_stamina():
    a, d = make_titan("a", "p1", stamina=50), make_titan("d", "p2")
    ctx = context(a, d, charge={"a": 10, "d": 0})
    ABILITIES["quick_charge"].apply(ctx)
    assert ctx.charge["a"] == 70


def test_debuffs_multiply_into_modifier_pool():
    a, d = make_titan("a", "p1"), make_titan("d", "p2")
    ctx = context(a, d)
    ABILITIES["weaken"].apply(ctx)
    ABILITIES["shock"].apply(ctx)
    assert ctx.modifiers["d"] == pytest.approx(0.6)
    assert ctx.hp["d"] == 90
