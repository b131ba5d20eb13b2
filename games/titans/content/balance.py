# games/titans/content/balance.py
DEFAULTS = {
    "charge_max": 100,
    "base_hit_chance": 0.8,
    "crit_multiplier": 1.5,
    "crit_attack_boost": 1.5,
    "defend_mult_min": 1.5,
    "defend_mult_max": 2.0,
    "defend_charge_gain": 20,
    "attack_charge_gain": 10,
    "rest_charge_gain": 20,
    "quick_charge_gain": 40,
}

CAPS = {
    "hit_min": 0.05,
    "hit_max": 0.95,
    "acc_max": 100,
    "eva_max": 60,
    "crit_max": 50,
}

# Cost assumed for an ability id the catalog does not know. Such an ability
# can never be cast, and 100 keeps it unaffordable in client projections too.
UNPRICED_ABILITY_COST = 100

MAX_ABILITIES_PER_TITAN = 2
