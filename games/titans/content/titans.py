# games/titans/content/titans.py
import random
from typing import Dict, Optional, Tuple

from ..engine.models import Stats, Titan
from .abilities import ABILITIES
from .balance import MAX_ABILITIES_PER_TITAN

TITAN_NAMES = ["Atlas", "Hyperion", "Prometheus", "Cronus", "Oceanus", "Theia", "Rhea", "Themis"]

# inclusive ranges
TITAN_STAT_RANGES: Dict[str, Tuple[int, int]] = {
    "hp": (80, 120),
    "attack": (10, 20),
    "defense": (5, 10),
    "speed": (5, 10),
    "stamina": (5, 10),
    "accuracy": (0, 20),
    "evasion": (0, 15),
    "critical_chance": (5, 15),
}


def new_titan_id(r: random.Random) -> str:
    return "titan_" + "".join(r.choice("0123456789abcdef") for _ in range(8))


def generate_titan(
    owner_id: str,
    r: Optional[random.Random] = None,
    max_abilities: int = MAX_ABILITIES_PER_TITAN,
) -> Titan:
    """Rolls a fresh titan: random name, stats from TITAN_STAT_RANGES, 0..max_abilities distinct abilities."""
    r = r or random.Random()
    stats = Stats(**{stat: r.randint(lo, hi) for stat, (lo, hi) in TITAN_STAT_RANGES.items()})
    pool = sorted(ABILITIES.keys())
    count = r.randint(0, min(max_abilities, len(pool)))
    return Titan(
        id=new_titan_id(r),
        name=r.choice(TITAN_NAMES),
        owner_id=owner_id,
        stats=stats,
        abilities=r.sample(pool, count),
    )
