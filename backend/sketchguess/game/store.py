from __future__ import annotations

import logging
import random
import string
from dataclasses import dataclass
from threading import RLock

from .errors import RoomNotFound
from .models import Player, Room


logger = logging.getLogger(__name__)

CODE_ALPHABET = string.ascii_uppercase + string.digits
CODE_LENGTH = 4


def normalize_code(code: str | None) -> str:
    return (code or "").strip().upper()


@dataclass
class Departure:
    """What happened to a room when a player left it."""

    room: Room
    player: Player
    was_drawer: bool
    destroyed: bool


class RoomStore:
    """Process-scoped registry of rooms keyed by room code.

    Owns the lock every engine operation runs under, so room mutations stay
    consistent under the threading async mode as well as eventlet.
    """

    def __init__(self, rng: random.Random | None = None) -> None:
        self.lock = RLock()
        self._rooms: dict[str, Room] = {}
        self._sid_rooms: dict[str, str] = {}
        self._rng = rng or random.Random()

    def __len__(self) -> int:
        with self.lock:
            return len(self._rooms)

    def __contains__(self, code: object) -> bool:
        with self.lock:
            return isinstance(code, str) and normalize_code(code) in self._rooms

    def get(self, code: str | None) -> Room | None:
        with self.lock:
            return self._rooms.get(normalize_code(code))

    def require(self, code: str | None) -> Room:
        room = self.get(code)
        if room is None:
            raise RoomNotFound(normalize_code(code))
        return room

    def room_of(self, sid: str) -> Room | None:
        with self.lock:
            code = self._sid_rooms.get(sid)
            return self._rooms.get(code) if code else None

    def generate_code(self) -> str:
        with self.lock:
            while True:
                code = "".join(self._rng.choices(CODE_ALPHABET, k=CODE_LENGTH))
                if code not in self._rooms:
                    return code

    def create_room(self, sid: str, name: str, code: str | None = None) -> tuple[Room, dict]:
        """Create a room (or join it when the code is already taken).

        Returns the room and the joining player's state snapshot.
        """
        with self.lock:
            code = normalize_code(code) or self.generate_code()
            if code not in self._rooms:
                self._rooms[code] = Room(code=code)
                logger.info("[room-create] room=%s sid=%s", code, sid)
            return self._rooms[code], self.join(code, sid, name)

    def join(self, code: str, sid: str, name: str) -> dict:
        with self.lock:
            room = self.require(code)

            current = self._sid_rooms.get(sid)
            if current and current != room.code:
                self.leave(sid)

            player = room.players.get(sid)
            if player is None:
                room.players[sid] = Player(id=sid, name=name)
                room.turn_order.append(sid)
            else:
                player.name = name
            self._sid_rooms[sid] = room.code

            logger.info("[room-join] room=%s sid=%s name=%s players=%d", room.code, sid, name, len(room.players))
            return self.snapshot(room, viewer_sid=sid)

    def leave(self, sid: str) -> Departure | None:
        with self.lock:
            code = self._sid_rooms.pop(sid, None)
            room = self._rooms.get(code) if code else None
            if room is None or sid not in room.players:
                return None

            player = room.players.pop(sid)
            was_drawer = room.drawer_id == sid

            idx = room.turn_order.index(sid)
            room.turn_order.pop(idx)
            # Keep the pointer on the same drawer; if the drawer left, the
            # next advance lands on whoever followed them.
            if idx < room.drawer_index or was_drawer:
                room.drawer_index -= 1
            if was_drawer:
                room.drawer_id = None

            room.guessed.discard(sid)

            destroyed = not room.players
            if destroyed:
                self._destroy(room)

            logger.info(
                "[room-leave] room=%s sid=%s drawer=%s destroyed=%s", room.code, sid, was_drawer, destroyed
            )
            return Departure(room=room, player=player, was_drawer=was_drawer, destroyed=destroyed)

    def _destroy(self, room: Room) -> None:
        room.cancel_timer()
        room.cancel_next_turn()
        self._rooms.pop(room.code, None)

    def teardown(self) -> None:
        with self.lock:
            for room in list(self._rooms.values()):
                self._destroy(room)
            self._sid_rooms.clear()

    def snapshot(self, room: Room, viewer_sid: str | None = None) -> dict:
        """Full game state for a (re)joining client."""
        with self.lock:
            drawer = room.drawer
            state = {
                "roomCode": room.code,
                "players": room.player_list(),
                "drawer": drawer.name if drawer else None,
                "hint": room.hint_text(),
                "timer": room.time_left if room.round_active else None,
                "currentWord": None,
            }
            if viewer_sid is not None and viewer_sid == room.drawer_id:
                state["currentWord"] = room.word
            return state
