# games/titans/server.py
import logging
from typing import Any, Dict, Optional, Tuple

from flask import Flask
from flask_socketio import SocketIO

from . import init_titans
from .config import configure_logging, load_config

logger = logging.getLogger("titans.server")


def create_app(overrides: Optional[Dict[str, Any]] = None) -> Tuple[Flask, SocketIO]:
    app = Flask(__name__)
    load_config(app, overrides)
    configure_logging(app.config["TITANS_LOG_LEVEL"])
    socketio = SocketIO(app, cors_allowed_origins="*")
    init_titans(app, socketio)
    return app, socketio


def main() -> None:
    app, socketio = create_app()
    host, port = app.config["TITANS_HOST"], int(app.config["TITANS_PORT"])
    logger.info("server starting on %s:%s", host, port)
    socketio.run(app, host=host, port=port, allow_unsafe_werkzeug=True)


if __name__ == "__main__":
    main()
