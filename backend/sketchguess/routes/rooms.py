from __future__ import annotations

from flask import Blueprint, jsonify

from ..extensions import get_service

bp = Blueprint("rooms", __name__)


@bp.get("/rooms/<code>")
def get_room(code: str):
    service = get_service()
    with service.store.lock:
        room = service.store.get(code)
        if not room:
            return jsonify({"error": "room_not_found"}), 404

        drawer = room.drawer
        # Never expose the secret word over HTTP.
        return jsonify({
            "roomCode": room.code,
            "players": room.player_list(),
            "drawer": drawer.name if drawer else None,
            "hint": room.hint_text(),
            "timeLeft": room.time_left,
            "roundActive": room.round_active,
            "strokeCount": len(room.strokes),
        })
