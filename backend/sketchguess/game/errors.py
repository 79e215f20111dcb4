from __future__ import annotations


class GameError(Exception):
    """Base class for errors reported back to the requesting client."""

    code = "game_error"


class RoomNotFound(GameError):
    code = "room_not_found"

    def __init__(self, room_code: str) -> None:
        super().__init__(f"room {room_code!r} not found")
        self.room_code = room_code
