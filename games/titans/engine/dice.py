# games/titans/engine/dice.py
import random


def rng_for(seed: int, round_number: int) -> random.Random:
    # deterministic per game seed + round
    return random.Random(f"{seed}:{round_number}")


def uniform(r: random.Random) -> float:
    """A roll in [0, 1)."""
    return r.random()


def roll_between(lo: float, hi: float, r: random.Random) -> float:
    # [lo, hi) from a single uniform roll so scripted rngs only need random()
    return lo + (hi - lo) * r.random()


def chance(probability: float, r: random.Random) -> bool:
    return r.random() < probability
