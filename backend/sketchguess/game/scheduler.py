from __future__ import annotations

import logging
from typing import Callable

from flask_socketio import SocketIO


logger = logging.getLogger(__name__)


class BackgroundTask:
    """Cancellable handle for a task started on the Socket.IO async backend.

    Cancellation is cooperative: the task checks the flag after every sleep,
    so a cancelled task never runs its callback again.
    """

    def __init__(self, name: str) -> None:
        self.name = name
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True


class SocketIOScheduler:
    """Runs timers via ``socketio.start_background_task`` / ``socketio.sleep``.

    Both helpers follow the configured async mode (eventlet green threads or
    plain threads), so timers never block the event loop.
    """

    def __init__(self, socketio: SocketIO) -> None:
        self._socketio = socketio

    def every(self, interval: float, fn: Callable[[], None], name: str = "periodic") -> BackgroundTask:
        handle = BackgroundTask(name)

        def _runner() -> None:
            while True:
                self._socketio.sleep(interval)
                if handle.cancelled:
                    return
                try:
                    fn()
                except Exception:
                    # Keep ticking; the room still owns this handle.
                    logger.exception("[task-error] task=%s", name)

        self._socketio.start_background_task(_runner)
        return handle

    def later(self, delay: float, fn: Callable[[], None], name: str = "delayed") -> BackgroundTask:
        handle = BackgroundTask(name)

        def _runner() -> None:
            self._socketio.sleep(delay)
            if handle.cancelled:
                return
            handle.cancelled = True
            try:
                fn()
            except Exception:
                logger.exception("[task-error] task=%s", name)

        self._socketio.start_background_task(_runner)
        return handle
