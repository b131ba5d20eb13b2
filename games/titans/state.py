# games/titans/state.py
import random
import uuid
from dataclasses import dataclass
from typing import Dict, List, Optional

from .content.titans import generate_titan
from .engine.manager import GameManager
from .engine.models import Game, Titan
from .engine.progression import award_battle_xp


@dataclass
class Player:
    id: str
    username: str
    sid: str


class ServerState:
    """Per-app bookkeeping around the game manager: who is connected, their titans, the pairing queue."""

    def __init__(self, manager: Optional[GameManager] = None, max_abilities: int = 2, rng: Optional[random.Random] = None):
        self.manager = manager or GameManager()
        self.max_abilities = max_abilities
        self.rng = rng or random.Random()
        self.queue: List[str] = []                  # player ids
        self.players: Dict[str, Player] = {}        # player id -> player
        self.sid_to_player: Dict[str, str] = {}
        self.titans: Dict[str, Titan] = {}          # player id -> roster titan

    def register(self, sid: str, username: str) -> Player:
        existing = self.player_for_sid(sid)
        if existing:
            return existing
        player = Player(id=uuid.uuid4().hex, username=username or "Anonymous", sid=sid)
        self.players[player.id] = player
        self.sid_to_player[sid] = player.id
        self.titans[player.id] = generate_titan(player.id, self.rng, self.max_abilities)
        return player

    def player_for_sid(self, sid: str) -> Optional[Player]:
        player_id = self.sid_to_player.get(sid)
        if not player_id:
            return None
        return self.players.get(player_id)

    def titan_for(self, player_id: str) -> Optional[Titan]:
        return self.titans.get(player_id)

    def enqueue(self, player_id: str) -> None:
        if player_id not in self.queue:
            self.queue.append(player_id)

    def dequeue(self, player_id: str) -> None:
        if player_id in self.queue:
            self.queue.remove(player_id)

    def pop_pair(self) -> Optional[List[Player]]:
        if len(self.queue) < 2:
            return None
        return [self.players[self.queue.pop(0)], self.players[self.queue.pop(0)]]

    def create_game(self, pair: List[Player], seed: Optional[int] = None) -> Game:
        participants = [{"id": p.id, "username": p.username} for p in pair]
        titans = {p.id: self.titans[p.id] for p in pair}
        return self.manager.create_game(participants, titans, seed=seed)

    def award_xp(self, game: Game) -> Dict[str, int]:
        """Feeds a finished game's outcome into the roster titans. Returns levels gained per player."""
        gained: Dict[str, int] = {}
        if not game.finished:
            return gained
        for player_id in game.players:
            titan = self.titans.get(player_id)
            opponents = game.opponents_of(player_id)
            if titan is None or not opponents:
                continue
            opponent = game.titan_for(opponents[0])
            won = game.winner == player_id
            defeated = won and game.hp.get(opponent.id, 0) <= 0
            gained[player_id] = award_battle_xp(titan, opponent, won, defeated, self.rng)
        return gained

    def disconnect(self, sid: str) -> Optional[Game]:
        """Drops the socket's player; forfeits their running game, if any."""
        player_id = self.sid_to_player.pop(sid, None)
        if not player_id:
            return None
        self.dequeue(player_id)
        self.players.pop(player_id, None)
        self.titans.pop(player_id, None)
        game = self.manager.get_game_by_participant(player_id)
        if game is None or game.finished:
            return None
        return self.manager.forfeit(game.id, player_id)
