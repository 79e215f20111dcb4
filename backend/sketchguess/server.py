from __future__ import annotations

import logging
import os
import sys
from pathlib import Path

from flask import Flask, send_from_directory
from flask_cors import CORS
from flask_socketio import SocketIO
from werkzeug.middleware.proxy_fix import ProxyFix

from .config import Config
from .extensions import EXTENSION_KEY
from .game.scheduler import SocketIOScheduler
from .game.service import GameService, Scheduler
from .game.store import RoomStore
from .game.words import WordBank
from .routes.health import bp as health_bp
from .routes.rooms import bp as rooms_bp
from .routes.words import bp as words_bp
from .realtime.handlers import register_socketio_handlers


def _async_mode(app: Flask) -> str:
    configured = str(app.config.get("SOCKETIO_ASYNC_MODE") or os.environ.get("SOCKETIO_ASYNC_MODE", "")).strip()
    if configured:
        return configured
    # Default choice:
    # - Windows: threading (eventlet has known compatibility issues on newer Python)
    # - Python >= 3.13: threading (safer default)
    # - Otherwise: eventlet
    if sys.platform.startswith("win") or sys.version_info >= (3, 13):
        return "threading"
    return "eventlet"


def create_app(config_class=Config, scheduler: Scheduler | None = None) -> tuple[Flask, SocketIO]:
    dist_dir = Path(__file__).resolve().parents[2] / "frontend" / "dist"

    static_folder = str(dist_dir) if dist_dir.exists() else None
    static_url_path = "/" if dist_dir.exists() else None

    app = Flask(
        __name__,
        static_folder=static_folder,
        static_url_path=static_url_path,
    )
    app.config.from_object(config_class)
    logging.getLogger("sketchguess").setLevel(app.config.get("LOG_LEVEL", "INFO"))

    if app.config.get("TRUST_PROXY_HEADERS", False):
        app.wsgi_app = ProxyFix(app.wsgi_app, x_for=1, x_proto=1, x_host=1, x_port=1)

    cors_origins = app.config.get("CORS_ORIGINS", "*")
    CORS(app, resources={r"/api/*": {"origins": cors_origins}})

    socketio = SocketIO(
        app,
        cors_allowed_origins=cors_origins,
        async_mode=_async_mode(app),
    )

    service = GameService(
        RoomStore(),
        socketio,
        scheduler or SocketIOScheduler(socketio),
        WordBank(app.config.get("WORDS") or None),
        round_duration=app.config["ROUND_DURATION_SEC"],
        hint_interval=app.config["HINT_INTERVAL_SEC"],
        tick_interval=app.config["TICK_INTERVAL_SEC"],
        round_over_delay=app.config["ROUND_OVER_DELAY_SEC"],
        word_choices=app.config["WORD_CHOICES_COUNT"],
        min_players=app.config["MIN_PLAYERS"],
        chat_history_limit=app.config["CHAT_HISTORY_LIMIT"],
    )
    app.extensions[EXTENSION_KEY] = service

    app.register_blueprint(health_bp, url_prefix="/api")
    app.register_blueprint(rooms_bp, url_prefix="/api")
    app.register_blueprint(words_bp, url_prefix="/api")

    register_socketio_handlers(socketio, service, min_players=app.config["MIN_PLAYERS"])

    if dist_dir.exists():
        @app.get("/")
        def index():
            return send_from_directory(dist_dir, "index.html")

        @app.get("/<path:path>")
        def static_proxy(path: str):
            file_path = dist_dir / path
            if file_path.exists() and file_path.is_file():
                return send_from_directory(dist_dir, path)
            return send_from_directory(dist_dir, "index.html")

    return app, socketio
