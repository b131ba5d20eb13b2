# games/titans/config.py
import logging.config
from typing import Any, Dict, Optional

from .content.balance import MAX_ABILITIES_PER_TITAN

# Every key can be overridden from the environment with a FLASK_ prefix,
# e.g. FLASK_TITANS_PORT=5001 or FLASK_TITANS_SEED=42.
DEFAULT_CONFIG: Dict[str, Any] = {
    "SECRET_KEY": "dev",
    "TITANS_HOST": "0.0.0.0",
    "TITANS_PORT": 4000,
    "TITANS_LOG_LEVEL": "INFO",
    "TITANS_LOG_TAIL": 30,
    "TITANS_MAX_ABILITIES": MAX_ABILITIES_PER_TITAN,
    "TITANS_SEED": None,   # fixed seed for reproducible games; None = fresh random seed per game
}


def load_config(app, overrides: Optional[Dict[str, Any]] = None) -> None:
    app.config.from_mapping(DEFAULT_CONFIG)
    app.config.from_prefixed_env()
    if overrides:
        app.config.from_mapping(overrides)


def configure_logging(level: str = "INFO") -> None:
    logging.config.dictConfig({
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "default": {"format": "[%(asctime)s] %(levelname)s in %(name)s: %(message)s"},
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "stream": "ext://sys.stderr",
                "formatter": "default",
            },
        },
        "loggers": {
            "titans": {"level": str(level).upper(), "handlers": ["console"], "propagate": False},
        },
    })
