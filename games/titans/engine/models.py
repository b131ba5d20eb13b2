# games/titans/engine/models.py
from dataclasses import dataclass, field, asdict
from enum import Enum
from typing import Any, Callable, Dict, List, Optional

STAT_WIRE_NAMES = {
    "hp": "HP",
    "attack": "Attack",
    "defense": "Defense",
    "speed": "Speed",
    "stamina": "Stamina",
    "accuracy": "Accuracy",
    "evasion": "Evasion",
    "critical_chance": "CriticalChance",
}


class GameState(str, Enum):
    PRE_BATTLE = "PreBattle"
    BATTLE = "Battle"
    FINISHED = "Finished"


class ActionKind(str, Enum):
    ATTACK = "Attack"
    DEFEND = "Defend"
    REST = "Rest"
    ABILITY = "Ability"


class Outcome(str, Enum):
    HIT = "Hit"
    MISS = "Miss"
    DEATH = "Death"


@dataclass
class Stats:
    hp: int
    attack: int
    defense: int
    speed: int
    stamina: int
    accuracy: int = 0
    evasion: int = 0
    critical_chance: int = 0

    def to_dict(self) -> Dict[str, int]:
        return {STAT_WIRE_NAMES[k]: v for k, v in asdict(self).items()}


@dataclass
class Titan:
    id: str
    name: str
    owner_id: str
    stats: Stats
    abilities: List[str] = field(default_factory=list)   # ability ids, in order
    level: int = 1
    xp: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "owner_id": self.owner_id,
            "stats": self.stats.to_dict(),
            "abilities": list(self.abilities),
            "level": self.level,
            "xp": self.xp,
        }


@dataclass(frozen=True)
class Ability:
    id: str
    name: str
    description: str
    cost: int
    is_damage_ability: bool
    scales_with_attack: bool
    effect: Callable[[Any], None] = field(repr=False, compare=False)

    def apply(self, ctx) -> None:
        self.effect(ctx)

    def meta(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "cost": self.cost,
            "is_damage_ability": self.is_damage_ability,
            "scales_with_attack": self.scales_with_attack,
        }


def _first(payload: Dict[str, Any], *keys: str) -> Optional[Any]:
    for key in keys:
        value = payload.get(key)
        if value not in (None, ""):
            return value
    return None


@dataclass(frozen=True)
class GameAction:
    kind: ActionKind
    target_id: Optional[str] = None
    ability_id: Optional[str] = None

    @classmethod
    def from_payload(cls, payload: Any) -> "GameAction":
        """
        Accepts {"type": "Attack", "target_id": ...}, {"type": "Ability", "ability_id": ...}
        and the camelCase / nested "payload" variants clients send.
        Raises ValueError for anything without a known action type.
        """
        if isinstance(payload, GameAction):
            return payload
        if not isinstance(payload, dict):
            raise ValueError(f"action must be an object, got {type(payload).__name__}")
        raw_kind = _first(payload, "type", "kind", "action")
        try:
            kind = ActionKind(str(raw_kind).strip().capitalize())
        except ValueError:
            raise ValueError(f"unknown action type {raw_kind!r}") from None
        inner = payload.get("payload")
        fields = dict(inner) if isinstance(inner, dict) else {}
        fields.update({k: v for k, v in payload.items() if k != "payload"})
        target_id = _first(fields, "target_id", "targetId")
        ability_id = _first(fields, "ability_id", "abilityId")
        return cls(
            kind=kind,
            target_id=str(target_id) if target_id is not None else None,
            ability_id=str(ability_id) if ability_id is not None and kind == ActionKind.ABILITY else None,
        )


@dataclass
class RoundAction:
    actor_id: str
    action: ActionKind
    target_id: Optional[str] = None
    ability_id: Optional[str] = None
    result: Optional[Outcome] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "actor_id": self.actor_id,
            "action": self.action.value,
            "target_id": self.target_id,
            "ability_id": self.ability_id,
            "result": self.result.value if self.result else None,
        }


@dataclass
class RoundResult:
    round_number: int
    round_sequence: List[RoundAction] = field(default_factory=list)
    round_log: List[str] = field(default_factory=list)
    modifiers: Dict[str, float] = field(default_factory=dict)   # round-scoped debuffs, display only

    def to_dict(self) -> Dict[str, Any]:
        return {
            "round_number": self.round_number,
            "round_sequence": [a.to_dict() for a in self.round_sequence],
            "round_log": list(self.round_log),
            "modifiers": dict(self.modifiers),
        }


@dataclass
class Game:
    id: str
    players: List[str]                        # participant player ids, in join order
    titans: Dict[str, Titan]                  # player id -> titan (a copy, stats frozen for the game)
    usernames: Dict[str, str] = field(default_factory=dict)
    state: GameState = GameState.PRE_BATTLE
    round_number: int = 1
    seed: int = 0                             # for deterministic dice
    hp: Dict[str, int] = field(default_factory=dict)        # titan id -> current hp
    charge: Dict[str, int] = field(default_factory=dict)    # titan id -> current charge
    locked_in: Dict[str, bool] = field(default_factory=dict)
    ability_meta: Dict[str, List[Dict[str, Any]]] = field(default_factory=dict)
    winner: Optional[str] = None
    log: List[str] = field(default_factory=list)
    last_result: Optional[RoundResult] = None

    def titan_for(self, player_id: str) -> Optional[Titan]:
        return self.titans.get(player_id)

    def opponents_of(self, player_id: str) -> List[str]:
        return [p for p in self.players if p != player_id]

    @property
    def finished(self) -> bool:
        return self.state == GameState.FINISHED
