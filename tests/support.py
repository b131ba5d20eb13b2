"""Shared builders for the titans test suites (plain helpers, no pytest dependency)."""

from __future__ import annotations

from typing import Any, Dict, Iterable, Optional, Sequence

from games.titans.engine.manager import GameManager
from games.titans.engine.models import Game, GameAction, RoundResult, Stats, Titan
from games.titans.engine.resolver import resolve_round


class ScriptedRandom:
    """Stands in for random.Random: random() hands out queued values in order."""

    def __init__(self, values: Sequence[float], default: Optional[float] = None):
        self.values = list(values)
        self.default = default
        self.calls = 0

    def random(self) -> float:
        self.calls += 1
        if self.values:
            return self.values.pop(0)
        if self.default is None:
            raise AssertionError(f"scripted rng exhausted after {self.calls - 1} rolls")
        return self.default


def make_titan(
    titan_id: str,
    owner_id: str,
    name: Optional[str] = None,
    abilities: Iterable[str] = (),
    **stats: int,
) -> Titan:
    base = {
        "hp": 100,
        "attack": 10,
        "defense": 5,
        "speed": 10,
        "stamina": 0,
        "accuracy": 0,
        "evasion": 0,
        "critical_chance": 0,
    }
    base.update(stats)
    return Titan(id=titan_id, name=name or titan_id.title(), owner_id=owner_id, stats=Stats(**base), abilities=list(abilities))


def make_duel(p1: Titan, p2: Titan, seed: int = 123) -> Game:
    """A bare Game for driving the resolver directly, records seeded at full HP / zero charge."""
    return Game(
        id="duel-test",
        players=[p1.owner_id, p2.owner_id],
        titans={p1.owner_id: p1, p2.owner_id: p2},
        usernames={p1.owner_id: p1.owner_id, p2.owner_id: p2.owner_id},
        seed=seed,
        hp={p1.id: p1.stats.hp, p2.id: p2.stats.hp},
        charge={p1.id: 0, p2.id: 0},
    )


def resolve(game: Game, actions: Dict[str, Any], rolls: Sequence[float], catalog=None) -> RoundResult:
    """Resolve one round straight on the game's records with a scripted rng."""
    parsed = {pid: GameAction.from_payload(payload) for pid, payload in actions.items()}
    return resolve_round(game, parsed, game.hp, game.charge, ScriptedRandom(rolls), catalog=catalog)


def managed_duel(p1: Titan, p2: Titan, seed: int = 123):
    manager = GameManager()
    game = manager.create_game(
        [{"id": p1.owner_id, "username": p1.owner_id}, {"id": p2.owner_id, "username": p2.owner_id}],
        {p1.owner_id: p1, p2.owner_id: p2},
        seed=seed,
    )
    return manager, game


def outcomes(result: RoundResult):
    return [(step.actor_id, step.action.value, step.result.value if step.result else None) for step in result.round_sequence]


def assert_record_invariants(game: Game) -> None:
    for titan in game.titans.values():
        hp = game.hp[titan.id]
        charge = game.charge[titan.id]
        assert isinstance(hp, int) and 0 <= hp <= titan.stats.hp, f"hp out of range for {titan.id}: {hp}"
        assert isinstance(charge, int) and 0 <= charge <= 100, f"charge out of range for {titan.id}: {charge}"
