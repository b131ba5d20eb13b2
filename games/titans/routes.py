# games/titans/routes.py
from flask import Blueprint, jsonify

from .content.abilities import catalog_meta

titans_bp = Blueprint("titans", __name__, url_prefix="/titans")


@titans_bp.route("/health")
def health():
    return jsonify({"status": 200})


@titans_bp.route("/abilities")
def abilities():
    return jsonify(catalog_meta())
