from __future__ import annotations

from flask import Blueprint, jsonify, request

from ..extensions import get_service

bp = Blueprint("words", __name__)

MAX_COUNT = 10


@bp.get("/words")
def get_words():
    try:
        count = int(request.args.get("count", "3"))
    except ValueError:
        count = 3
    count = max(1, min(count, MAX_COUNT))

    return jsonify({"words": get_service().words.sample(count)})
