from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Protocol


HINT_BLANK = "_"


class TaskHandle(Protocol):
    def cancel(self) -> None: ...


@dataclass
class Player:
    id: str
    name: str
    score: int = 0

    def to_public(self) -> dict:
        return {"id": self.id, "name": self.name, "score": self.score}


@dataclass(frozen=True)
class Stroke:
    x1: float
    y1: float
    x2: float
    y2: float
    color: str
    size: float

    @classmethod
    def from_dict(cls, data: Any) -> Stroke:
        """Build a stroke from a client payload, raising ValueError when malformed."""
        if not isinstance(data, dict):
            raise ValueError("stroke must be an object")

        coords = []
        for key in ("x1", "y1", "x2", "y2"):
            value = data.get(key)
            # bool is an int subclass; reject it explicitly.
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                raise ValueError(f"stroke.{key} must be a number")
            coords.append(value)

        color = data.get("color")
        if not isinstance(color, str) or not color.strip() or len(color) > 32:
            raise ValueError("stroke.color must be a short string")

        size = data.get("size")
        if isinstance(size, bool) or not isinstance(size, (int, float)) or size <= 0:
            raise ValueError("stroke.size must be a positive number")

        return cls(*coords, color=color, size=size)

    def to_dict(self) -> dict:
        return {
            "x1": self.x1,
            "y1": self.y1,
            "x2": self.x2,
            "y2": self.y2,
            "color": self.color,
            "size": self.size,
        }


@dataclass
class Room:
    code: str
    players: dict[str, Player] = field(default_factory=dict)
    turn_order: list[str] = field(default_factory=list)
    drawer_index: int = -1
    drawer_id: str | None = None
    word: str | None = None
    word_choices: list[str] = field(default_factory=list)
    guessed: set[str] = field(default_factory=set)
    strokes: list[Stroke] = field(default_factory=list)
    hint: list[str] = field(default_factory=list)
    time_left: int | None = None
    timer: TaskHandle | None = None
    next_turn: TaskHandle | None = None
    chat_history: list[dict] = field(default_factory=list)

    @property
    def round_active(self) -> bool:
        return self.word is not None

    @property
    def drawer(self) -> Player | None:
        if self.drawer_id is None:
            return None
        return self.players.get(self.drawer_id)

    def hint_text(self) -> str:
        return "".join(self.hint)

    def player_list(self) -> list[dict]:
        return [self.players[pid].to_public() for pid in self.turn_order if pid in self.players]

    def cancel_timer(self) -> bool:
        """Cancel the active round timer. Returns True if one was running."""
        if self.timer is None:
            return False
        self.timer.cancel()
        self.timer = None
        return True

    def cancel_next_turn(self) -> None:
        if self.next_turn is not None:
            self.next_turn.cancel()
            self.next_turn = None
