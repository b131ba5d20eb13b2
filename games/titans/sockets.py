# games/titans/sockets.py
import logging

from flask import request
from flask_socketio import emit, join_room, leave_room

from .state import ServerState
from .content.abilities import ability_cost
from .engine.models import Game, GameAction

logger = logging.getLogger("titans.sockets")


def snapshot(game: Game, log_tail: int = 30) -> dict:
    """
    UI-friendly game state. Identical for every participant so both clients
    render the same thing.
    """
    def pack(player_id):
        titan = game.titan_for(player_id)
        if not titan:
            return None
        current_charge = game.charge.get(titan.id, 0)
        return {
            "player_id": player_id,
            "username": game.usernames.get(player_id, player_id),
            "titan": titan.to_dict(),
            "hp": game.hp.get(titan.id, 0),
            "hp_max": titan.stats.hp,
            "charge": current_charge,
            "abilities": [
                {**meta, "affordable": current_charge >= ability_cost(meta["id"])}
                for meta in game.ability_meta.get(titan.id, [])
            ],
            "locked_in": game.locked_in.get(player_id, False),
        }

    return {
        "game_id": game.id,
        "state": game.state.value,
        "round_number": game.round_number,
        "players": [pack(pid) for pid in game.players],
        "winner": game.winner,
        "log": game.log[-log_tail:] if log_tail else [],
        "log_length": len(game.log),
    }


def register_titans_socket_handlers(socketio, server_state: ServerState, log_tail: int = 30):
    def broadcast_game_over(game: Game):
        gained = server_state.award_xp(game)
        socketio.emit("titans_game_over", {
            "game_id": game.id,
            "winner": game.winner,
            "levels_gained": gained,
            "titans": {pid: t.to_dict() for pid, t in server_state.titans.items() if pid in game.players},
        }, to=game.id)

    @socketio.on("titans_auth")
    def titans_auth(payload=None):
        username = ""
        if isinstance(payload, dict):
            username = str(payload.get("username", "")).strip()
        player = server_state.register(request.sid, username)
        titan = server_state.titan_for(player.id)
        emit("titans_auth_response", {
            "player_id": player.id,
            "username": player.username,
            "titans": [titan.to_dict()] if titan else [],
        })
        logger.info("user %s authenticated as %s", player.username, player.id)

    @socketio.on("titans_queue")
    def titans_queue(payload=None):
        player = server_state.player_for_sid(request.sid)
        if not player:
            emit("titans_system", "Log in first.")
            return
        live = server_state.manager.get_game_by_participant(player.id)
        if live and not live.finished:
            emit("titans_system", "Already in a game.")
            return
        server_state.enqueue(player.id)
        emit("titans_system", "Queued for a match...")

        pair = server_state.pop_pair()
        if not pair:
            return
        game = server_state.create_game(pair)
        for p in pair:
            join_room(game.id, sid=p.sid)
        socketio.emit("titans_system", "Match found. Choose your action.", to=game.id)
        socketio.emit("titans_game_start", snapshot(game, log_tail), to=game.id)

    @socketio.on("titans_action")
    def titans_action(payload=None):
        player = server_state.player_for_sid(request.sid)
        if not player:
            emit("titans_system", "Log in first.")
            return
        game_id = payload.get("game_id") if isinstance(payload, dict) else None
        if not game_id:
            live = server_state.manager.get_game_by_participant(player.id)
            game_id = live.id if live else None
        if not game_id:
            emit("titans_system", "Not in a game.")
            return

        try:
            action = GameAction.from_payload(payload)
        except ValueError as exc:
            logger.info("malformed action from %s: %s", player.id, exc)
            emit("titans_system", "Action not accepted.")
            return

        manager = server_state.manager
        game, result = manager.submit_action(game_id, player.id, action)
        if game is None:
            emit("titans_system", "Not in a game.")
            return
        # accepted actions either resolved the round or sit in the pending buffer
        if result is None and player.id not in manager.pending_players(game.id):
            emit("titans_system", "Action not accepted.")
        else:
            emit("titans_system", "Action received.")

        socketio.emit("titans_game_update", snapshot(game, log_tail), to=game.id)
        if result is not None:
            socketio.emit("titans_round_complete", result.to_dict(), to=game.id)
            if game.finished:
                socketio.emit("titans_system", "Game over.", to=game.id)
                broadcast_game_over(game)
                server_state.manager.remove_game(game.id)

    @socketio.on("disconnect")
    def titans_disconnect(*args):
        sid = request.sid
        game = server_state.disconnect(sid)
        if not game:
            return
        leave_room(game.id, sid=sid)
        socketio.emit("titans_system", "Opponent disconnected. Game ended.", to=game.id)
        socketio.emit("titans_game_update", snapshot(game, log_tail), to=game.id)
        broadcast_game_over(game)
        server_state.manager.remove_game(game.id)
