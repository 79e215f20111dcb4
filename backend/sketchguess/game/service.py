from __future__ import annotations

import logging
import random
from typing import Any, Callable, Protocol

from . import hints, scoring
from .models import Room, Stroke, TaskHandle
from .store import Departure, RoomStore, normalize_code
from .words import WordBank


logger = logging.getLogger(__name__)

SYSTEM_SENDER = "SYSTEM"


class Emitter(Protocol):
    def emit(self, event: str, *args: Any, to: str | None = None, skip_sid: str | None = None) -> None: ...


class Scheduler(Protocol):
    def every(self, interval: float, fn: Callable[[], None], name: str = ...) -> TaskHandle: ...

    def later(self, delay: float, fn: Callable[[], None], name: str = ...) -> TaskHandle: ...


class GameService:
    """Room engine: turns, round timer and hints, guesses and the stroke log.

    Every public operation takes the store lock, mutates one room and
    broadcasts the result through ``emitter`` (the ``SocketIO`` instance in
    production). Operations on unknown rooms are no-ops.
    """

    def __init__(
        self,
        store: RoomStore,
        emitter: Emitter,
        scheduler: Scheduler,
        word_bank: WordBank | None = None,
        *,
        round_duration: int = 60,
        hint_interval: int = 15,
        tick_interval: float = 1,
        round_over_delay: float = 3,
        word_choices: int = 3,
        min_players: int = 2,
        chat_history_limit: int = 150,
        rng: random.Random | None = None,
    ) -> None:
        self.store = store
        self.words = word_bank or WordBank()
        self.round_duration = round_duration
        self.hint_interval = hint_interval
        self.tick_interval = tick_interval
        self.round_over_delay = round_over_delay
        self.word_choices = word_choices
        self.min_players = min_players
        self.chat_history_limit = chat_history_limit
        self._emitter = emitter
        self._scheduler = scheduler
        self._rng = rng or random.Random()

    @property
    def _lock(self):
        return self.store.lock

    def _emit(self, event: str, data: Any = None, *, to: str, skip_sid: str | None = None) -> None:
        args = () if data is None else (data,)
        self._emitter.emit(event, *args, to=to, skip_sid=skip_sid)

    # ---- rooms ----

    def create_room(self, sid: str, name: str, code: str | None = None) -> tuple[Room, dict]:
        with self._lock:
            code = normalize_code(code) or self.store.generate_code()
            self._leave_other_room(sid, code)
            room, snapshot = self.store.create_room(sid, name, code=code)
            self._broadcast_players(room)
            return room, snapshot

    def join(self, code: str, sid: str, name: str) -> dict:
        """Add a player; raises RoomNotFound for unknown codes."""
        with self._lock:
            room = self.store.require(code)
            self._leave_other_room(sid, room.code)
            snapshot = self.store.join(room.code, sid, name)
            self._broadcast_players(room)
            return snapshot

    def _leave_other_room(self, sid: str, code: str) -> None:
        # A connection lives in one room; moving goes through the full leave path.
        current = self.store.room_of(sid)
        if current is not None and current.code != code:
            self.leave(sid)

    def leave(self, sid: str) -> Departure | None:
        with self._lock:
            departure = self.store.leave(sid)
            if departure is None or departure.destroyed:
                return departure

            room = departure.room
            logger.info("[player-left] room=%s name=%s players=%d", room.code, departure.player.name, len(room.players))
            self._broadcast_players(room)

            in_game = room.drawer_id is not None or room.next_turn is not None or departure.was_drawer
            if len(room.players) < self.min_players and in_game:
                self._stop_game(room, f"Not enough players to continue. The word was {self._reveal(room)}")
            elif departure.was_drawer:
                if room.round_active:
                    self._end_round(room, f"The drawer left! The word was {self._reveal(room)}")
                else:
                    self._schedule_next_turn(room)
            elif room.round_active:
                self._check_round_end(room)
            return departure

    def sync_snapshot(self, code: str) -> list[dict]:
        with self._lock:
            room = self.store.get(code)
            if room is None:
                return []
            return [s.to_dict() for s in room.strokes]

    def _broadcast_players(self, room: Room) -> None:
        self._emit("updatePlayers", room.player_list(), to=room.code)

    # ---- turns ----

    def start_game(self, code: str) -> None:
        with self._lock:
            room = self.store.get(code)
            if room is None:
                return
            logger.info("[game-start] room=%s players=%d", room.code, len(room.players))
            room.drawer_index = -1
            self.advance_turn(room.code)

    def advance_turn(self, code: str) -> None:
        with self._lock:
            room = self.store.get(code)
            if room is None or not room.turn_order:
                return

            room.cancel_timer()
            room.cancel_next_turn()
            room.strokes = []
            room.hint = []
            room.guessed = set()
            room.word = None
            room.time_left = None

            room.drawer_index = (room.drawer_index + 1) % len(room.turn_order)
            room.drawer_id = room.turn_order[room.drawer_index]
            room.word_choices = self.words.sample(self.word_choices)

            drawer = room.players[room.drawer_id]
            logger.info("[turn] room=%s drawer=%s index=%d", room.code, drawer.name, room.drawer_index)

            self._emit("clearCanvas", to=room.code)
            self._emit("wordOptions", list(room.word_choices), to=room.drawer_id)
            self._emit("drawerSelected", drawer.name, to=room.code)

    def _schedule_next_turn(self, room: Room) -> None:
        room.cancel_next_turn()

        def _advance() -> None:
            with self._lock:
                # Stale guard: the room may have been destroyed (or replaced
                # under the same code) while we were waiting.
                if self.store.get(room.code) is not room or room.next_turn is not handle:
                    return
                room.next_turn = None
                self.advance_turn(room.code)

        handle = self._scheduler.later(self.round_over_delay, _advance, name=f"next-turn:{room.code}")
        room.next_turn = handle

    def _stop_game(self, room: Room, message: str) -> None:
        was_active = room.round_active
        word = room.word
        room.cancel_timer()
        room.cancel_next_turn()
        room.drawer_id = None
        room.drawer_index = -1
        room.word = None
        room.word_choices = []
        room.guessed = set()
        room.hint = []
        room.time_left = None
        logger.info("[game-stop] room=%s players=%d", room.code, len(room.players))
        if was_active:
            self._emit("roundOver", {"message": message, "correctWord": word}, to=room.code)

    # ---- rounds ----

    def choose_word(self, code: str, sid: str, word: str) -> bool:
        """Drawer picks one of the offered words; False when not allowed."""
        with self._lock:
            room = self.store.get(code)
            if room is None or sid != room.drawer_id or room.round_active:
                return False
            choice = scoring.normalize_guess(word)
            if not choice or (room.word_choices and choice not in room.word_choices):
                return False
            self.start_round(room.code, choice)
            return True

    def start_round(self, code: str, word: str) -> None:
        with self._lock:
            room = self.store.get(code)
            if room is None or room.drawer_id is None:
                return

            # At most one timer per room.
            room.cancel_timer()
            room.cancel_next_turn()

            room.word = word.strip().lower()
            room.word_choices = []
            room.guessed = set()
            room.hint = hints.blank_hint(room.word)
            room.time_left = self.round_duration

            self._emit("wordChosen", "A word has been chosen!", to=room.code)
            self._emit("yourWord", room.word, to=room.drawer_id)
            self._emit("hintUpdate", room.hint_text(), to=room.code)
            self._emit("timerUpdate", room.time_left, to=room.code)

            def _tick() -> None:
                self._tick(room, handle)

            handle = self._scheduler.every(self.tick_interval, _tick, name=f"round-timer:{room.code}")
            room.timer = handle
            logger.info("[timer-set] room=%s duration=%ss word_len=%d", room.code, self.round_duration, len(room.word))

    def _tick(self, room: Room, handle: TaskHandle) -> None:
        with self._lock:
            if self.store.get(room.code) is not room or room.timer is not handle or not room.round_active:
                handle.cancel()
                return

            room.time_left -= 1
            if room.time_left > 0 and room.time_left % self.hint_interval == 0:
                hints.reveal_letter(room.word, room.hint, rng=self._rng)
                self._emit("hintUpdate", room.hint_text(), to=room.code)

            self._emit("timerUpdate", room.time_left, to=room.code)

            if room.time_left <= 0:
                self._end_round(room, f"Time's up! The word was {self._reveal(room)}")

    def _end_round(self, room: Room, message: str) -> bool:
        """Single terminal path for timeout, full guess and drawer departure."""
        if not room.round_active:
            return False

        room.cancel_timer()
        word = room.word
        room.word = None
        room.time_left = None

        logger.info("[round-over] room=%s word=%s guessed=%d", room.code, word, len(room.guessed))
        self._emit("roundOver", {"message": message, "correctWord": word}, to=room.code)
        self._schedule_next_turn(room)
        return True

    @staticmethod
    def _reveal(room: Room) -> str:
        return f'"{(room.word or "").upper()}"'

    # ---- guesses ----

    def submit_message(self, code: str, sid: str, text: str) -> None:
        with self._lock:
            room = self.store.get(code)
            if room is None or sid not in room.players:
                return
            player = room.players[sid]

            if not room.round_active:
                self._chat(room, player.name, text)
                return

            if sid in room.guessed:
                return

            guess = scoring.normalize_guess(text)
            if sid == room.drawer_id:
                if room.word in guess:
                    self._emit(
                        "chatMessage",
                        {"sender": SYSTEM_SENDER, "text": "You can't reveal the word in chat!"},
                        to=sid,
                    )
                    return
                self._chat(room, player.name, text)
                return

            if guess != room.word:
                self._chat(room, player.name, text)
                return

            room.guessed.add(sid)
            points = scoring.points_for_position(len(room.guessed))
            player.score += points
            drawer = room.drawer
            if drawer is not None:
                drawer.score += scoring.DRAWER_POINTS

            logger.info("[guess] room=%s player=%s position=%d points=%d", room.code, player.name, len(room.guessed), points)
            self._chat(room, SYSTEM_SENDER, f"{player.name} guessed the word! (+{points})")
            self._emit("updateScores", room.player_list(), to=room.code)
            self._check_round_end(room)

    def _check_round_end(self, room: Room) -> bool:
        if not room.round_active:
            return False
        if not scoring.round_complete(len(room.guessed), len(room.players)):
            return False
        return self._end_round(room, f"Everyone guessed it! The word was {self._reveal(room)}")

    def _chat(self, room: Room, sender: str, text: str) -> None:
        msg = {"sender": sender, "text": text}
        room.chat_history.append(msg)
        if len(room.chat_history) > self.chat_history_limit:
            room.chat_history = room.chat_history[-self.chat_history_limit:]
        self._emit("chatMessage", msg, to=room.code)

    def chat_history(self, code: str) -> list[dict]:
        with self._lock:
            room = self.store.get(code)
            return list(room.chat_history) if room else []

    # ---- strokes ----

    @staticmethod
    def _can_draw(room: Room, sid: str) -> bool:
        return sid in room.players and (room.drawer_id is None or room.drawer_id == sid)

    def append_stroke(self, code: str, sid: str, stroke: Stroke) -> bool:
        with self._lock:
            room = self.store.get(code)
            if room is None or not self._can_draw(room, sid):
                return False
            room.strokes.append(stroke)
            self._emit("draw", stroke.to_dict(), to=room.code, skip_sid=sid)
            return True

    def undo(self, code: str, sid: str, strokes: list[Stroke] | None = None) -> bool:
        """Replace the log with the client's truncated copy, or pop the last stroke."""
        with self._lock:
            room = self.store.get(code)
            if room is None or not self._can_draw(room, sid):
                return False
            if strokes is None:
                if room.strokes:
                    room.strokes.pop()
            else:
                room.strokes = list(strokes)
            self._emit("undoStroke", [s.to_dict() for s in room.strokes], to=room.code)
            return True

    def clear(self, code: str, sid: str) -> bool:
        with self._lock:
            room = self.store.get(code)
            if room is None or not self._can_draw(room, sid):
                return False
            room.strokes = []
            self._emit("clearCanvas", to=room.code)
            return True
