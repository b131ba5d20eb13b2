# games/titans/engine/manager.py
import copy
import logging
import random
import threading
import uuid
from typing import Any, Callable, Dict, List, Optional, Tuple, Union

from .models import Game, GameAction, GameState, RoundResult, Titan
from .resolver import resolve_round
from ..content.abilities import ability_meta

logger = logging.getLogger("titans.engine.manager")

SubmitResult = Tuple[Optional[Game], Optional[RoundResult]]


_seed_rng = random.SystemRandom()


def fresh_seed() -> int:
    # OS entropy, so games created in the same instant still roll different dice
    return _seed_rng.getrandbits(32)


class GameManager:
    """Owns live games, their pending actions and their HP/charge records."""

    def __init__(self, seed_source: Optional[Callable[[], int]] = None) -> None:
        self._games: Dict[str, Game] = {}
        self._pending: Dict[str, Dict[str, GameAction]] = {}
        self._registry_lock = threading.Lock()
        self._locks: Dict[str, threading.Lock] = {}   # per-game, independent games never contend
        self._seed_source = seed_source or fresh_seed

    def _get_lock(self, game_id: str) -> Optional[threading.Lock]:
        with self._registry_lock:
            return self._locks.get(game_id)

    def create_game(
        self,
        participants: List[Dict[str, str]],
        titans: Dict[str, Titan],
        seed: Optional[int] = None,
    ) -> Game:
        players = [p["id"] for p in participants]
        if len(players) < 2:
            raise ValueError("a game needs at least two participants")
        missing = [pid for pid in players if pid not in titans]
        if missing:
            raise ValueError(f"no titan assigned for participant(s): {', '.join(missing)}")

        # the game keeps its own copies so roster changes never leak into a running fight
        game_titans = {pid: copy.deepcopy(titans[pid]) for pid in players}
        game = Game(
            id=str(uuid.uuid4()),
            players=players,
            titans=game_titans,
            usernames={p["id"]: p.get("username", p["id"]) for p in participants},
            seed=self._seed_source() if seed is None else seed,
            hp={t.id: t.stats.hp for t in game_titans.values()},
            charge={t.id: 0 for t in game_titans.values()},
            locked_in={pid: False for pid in players},
            ability_meta={t.id: ability_meta(t) for t in game_titans.values()},
        )
        with self._registry_lock:
            self._games[game.id] = game
            self._pending[game.id] = {}
            self._locks[game.id] = threading.Lock()
        logger.info("game %s created for players %s", game.id, ", ".join(players))
        return game

    def get_game(self, game_id: str) -> Optional[Game]:
        with self._registry_lock:
            return self._games.get(game_id)

    def get_game_by_participant(self, player_id: str) -> Optional[Game]:
        with self._registry_lock:
            games = list(self._games.values())
        # a player may have finished games lying around; prefer the live one
        for game in games:
            if player_id in game.players and not game.finished:
                return game
        for game in games:
            if player_id in game.players:
                return game
        return None

    def pending_players(self, game_id: str) -> List[str]:
        lock = self._get_lock(game_id)
        if lock is None:
            return []
        with lock:
            return list(self._pending.get(game_id, {}).keys())

    def submit_action(self, game_id: str, player_id: str, action: Union[GameAction, Dict[str, Any]]) -> SubmitResult:
        """
        Stores a player's action for the current round and resolves the round
        once every participant has committed. Returns (game, round_result);
        round_result is None unless this submission triggered resolution.
        Bad submissions are dropped and the game comes back unchanged.
        """
        game = self.get_game(game_id)
        lock = self._get_lock(game_id)
        if game is None or lock is None:
            logger.info("action dropped: unknown game %s (player %s)", game_id, player_id)
            return None, None

        with lock:
            if player_id not in game.players:
                logger.info("action dropped: %s is not in game %s", player_id, game_id)
                return game, None
            if game.finished:
                logger.info("action dropped: game %s already finished (player %s)", game_id, player_id)
                return game, None
            try:
                parsed = GameAction.from_payload(action)
            except ValueError as exc:
                logger.info("action dropped: malformed action from %s in game %s: %s", player_id, game_id, exc)
                return game, None

            logger.info("player %s in game %s used action: %s", player_id, game_id, parsed.kind.value)
            pending = self._pending.setdefault(game_id, {})
            pending[player_id] = parsed
            game.locked_in[player_id] = True
            if game.state == GameState.PRE_BATTLE:
                game.state = GameState.BATTLE

            if not all(pid in pending for pid in game.players):
                return game, None
            return game, self._resolve_locked(game, pending)

    def _resolve_locked(self, game: Game, pending: Dict[str, GameAction]) -> Optional[RoundResult]:
        hp = dict(game.hp)
        charge = dict(game.charge)
        state, round_number, winner = game.state, game.round_number, game.winner
        try:
            result = resolve_round(game, dict(pending), hp, charge)
        except Exception:
            logger.exception("round %s of game %s failed to resolve", round_number, game.id)
            game.state, game.round_number, game.winner = state, round_number, winner
            result = None
        else:
            game.hp = hp
            game.charge = charge
            game.last_result = result
            game.log.extend(result.round_log)
            if game.finished:
                logger.info("game %s finished on round %s, winner %s", game.id, result.round_number, game.winner)
        pending.clear()
        game.locked_in = {pid: False for pid in game.players}
        return result

    def forfeit(self, game_id: str, player_id: str) -> Optional[Game]:
        """A participant leaves: the game ends and the remaining participant wins. No-op once finished."""
        game = self.get_game(game_id)
        lock = self._get_lock(game_id)
        if game is None or lock is None or player_id not in game.players:
            return None
        with lock:
            if game.finished:
                return game
            remaining = game.opponents_of(player_id)
            game.state = GameState.FINISHED
            game.winner = remaining[0] if len(remaining) == 1 else None
            self._pending.get(game_id, {}).clear()
            game.locked_in = {pid: False for pid in game.players}
            name = game.usernames.get(player_id, player_id)
            game.log.append(f"{name} forfeits the game.")
            logger.info("game %s forfeited by %s", game_id, player_id)
            return game

    def remove_game(self, game_id: str) -> None:
        with self._registry_lock:
            self._games.pop(game_id, None)
            self._pending.pop(game_id, None)
            self._locks.pop(game_id, None)
