from __future__ import annotations

import logging
import re
from typing import Any

from flask import request
from flask_socketio import SocketIO, emit, join_room, leave_room

from . import events
from ..game.errors import RoomNotFound
from ..game.models import Stroke
from ..game.service import GameService
from ..game.store import normalize_code


logger = logging.getLogger(__name__)

MAX_CHAT_LENGTH = 300
MAX_STROKES = 5000


def _validate_name(name: str) -> bool:
    n = (name or "").strip()
    if not n:
        return False
    if len(n) > 16:
        return False
    # Avoid obvious HTML/script injection.
    if "<" in n or ">" in n:
        return False
    # No control characters.
    for ch in n:
        if ord(ch) < 32:
            return False
    return True


def _validate_code(code: str) -> bool:
    return bool(re.fullmatch(r"[A-Z0-9]{1,12}", code))


def _payload(data: Any) -> dict:
    return data if isinstance(data, dict) else {}


def register_socketio_handlers(socketio: SocketIO, service: GameService, min_players: int = 2) -> None:
    def _reject(error: str) -> dict:
        message = events.ERROR_TEXT.get(error, error).format(min_players=min_players)
        emit(events.ERROR_MESSAGE, {"error": error, "message": message})
        return {"ok": False, "error": error}

    def _current_code() -> str | None:
        room = service.store.room_of(request.sid)
        return room.code if room else None

    def _member_code(payload: dict, *keys: str) -> str | None:
        """Room code from the payload (or the sender's room) if the sender is in it."""
        code = None
        for key in keys:
            if payload.get(key):
                code = normalize_code(str(payload[key]))
                break
        current = _current_code()
        code = code or current
        if not code or code != current:
            return None
        return code

    def _leave_current(except_code: str | None = None) -> None:
        code = _current_code()
        if code and code != except_code:
            leave_room(code)
            service.leave(request.sid)

    def _send_sync(code: str, snapshot: dict) -> None:
        emit(events.GAME_STATE, snapshot)
        emit(events.SYNC_STROKES, service.sync_snapshot(code))
        emit(events.CHAT_SYNC, service.chat_history(code))

    @socketio.on("connect")
    def on_connect(auth=None):
        logger.info("[connect] sid=%s addr=%s", request.sid, request.remote_addr)

    @socketio.on(events.CREATE_ROOM)
    def create_room(data):
        payload = _payload(data)
        name = str(payload.get("name", "")).strip()
        code = normalize_code(str(payload.get("roomCode") or ""))

        if not _validate_name(name) or (code and not _validate_code(code)):
            return _reject("invalid_payload")

        _leave_current(except_code=code or None)
        code = code or service.store.generate_code()

        join_room(code)
        room, snapshot = service.create_room(request.sid, name, code=code)
        _send_sync(room.code, snapshot)
        return {"ok": True, "roomCode": room.code}

    @socketio.on(events.JOIN_ROOM)
    def join_room_event(data):
        payload = _payload(data)
        name = str(payload.get("name", "")).strip()
        code = normalize_code(str(payload.get("roomCode") or ""))

        if not code or not _validate_code(code) or not _validate_name(name):
            return _reject("invalid_payload")

        if service.store.get(code) is None:
            return _reject(RoomNotFound.code)

        _leave_current(except_code=code)
        join_room(code)
        try:
            snapshot = service.join(code, request.sid, name)
        except RoomNotFound as exc:
            leave_room(code)
            return _reject(exc.code)

        _send_sync(code, snapshot)
        return {"ok": True, "roomCode": code}

    @socketio.on(events.LEAVE_ROOM)
    def leave_room_event(data=None):
        _leave_current()
        return {"ok": True}

    @socketio.on(events.START_GAME)
    def start_game(data):
        code = _member_code(_payload(data), "roomCode")
        if not code:
            return _reject("not_in_room")

        room = service.store.get(code)
        if room is None:
            return _reject(RoomNotFound.code)
        if len(room.players) < min_players:
            return _reject("not_enough_players")

        service.start_game(code)
        return {"ok": True}

    @socketio.on(events.CHOOSE_WORD)
    def choose_word(data):
        payload = _payload(data)
        word = payload.get("word")
        if not isinstance(word, str) or not word.strip():
            return _reject("invalid_payload")

        code = _member_code(payload, "roomCode")
        if not code:
            return _reject("not_in_room")

        if not service.choose_word(code, request.sid, word):
            return _reject("choose_not_allowed")
        return {"ok": True}

    @socketio.on(events.DRAW)
    def draw(data):
        code = _current_code()
        if not code:
            return
        try:
            stroke = Stroke.from_dict(data)
        except ValueError:
            return _reject("invalid_payload")
        service.append_stroke(code, request.sid, stroke)

    @socketio.on(events.UNDO_STROKE)
    def undo_stroke(data=None):
        code = _current_code()
        if not code:
            return

        strokes = None
        if data is not None:
            if not isinstance(data, list) or len(data) > MAX_STROKES:
                return _reject("invalid_payload")
            try:
                strokes = [Stroke.from_dict(item) for item in data]
            except ValueError:
                return _reject("invalid_payload")

        service.undo(code, request.sid, strokes)

    @socketio.on(events.CLEAR_CANVAS)
    def clear_canvas(data=None):
        code = _current_code()
        if not code:
            return
        service.clear(code, request.sid)

    @socketio.on(events.CHAT_MESSAGE)
    def chat_message(data):
        payload = _payload(data)
        text = payload.get("text")
        if not isinstance(text, str) or not text.strip() or len(text) > MAX_CHAT_LENGTH:
            return

        # The sender name in the payload is ignored; messages are attributed
        # to the connection's player.
        code = _member_code(payload, "room", "roomCode")
        if not code:
            return _reject("not_in_room")

        service.submit_message(code, request.sid, text)

    @socketio.on("disconnect")
    def on_disconnect(reason=None):
        logger.info("[disconnect] sid=%s reason=%s", request.sid, reason)
        service.leave(request.sid)
