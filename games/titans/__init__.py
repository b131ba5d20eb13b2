# games/titans/__init__.py
from .routes import titans_bp
from .sockets import register_titans_socket_handlers
from .state import ServerState
from .engine.manager import GameManager


def init_titans(app, socketio) -> ServerState:
    seed = app.config.get("TITANS_SEED")
    manager = GameManager(seed_source=(lambda: int(seed)) if seed is not None else None)
    server_state = ServerState(manager, max_abilities=int(app.config.get("TITANS_MAX_ABILITIES", 2)))
    app.extensions["titans"] = server_state
    app.register_blueprint(titans_bp)
    register_titans_socket_handlers(socketio, server_state, log_tail=int(app.config.get("TITANS_LOG_TAIL", 30)))
    return server_state
