from __future__ import annotations

import logging
import random
from typing import Any, Mapping

from flask import Flask, jsonify
from flask_cors import CORS
from werkzeug.exceptions import HTTPException
from werkzeug.middleware.proxy_fix import ProxyFix

from .config import Config
from .errors import BackendFailure, UnsupportedAction
from .game.service import RoomService
from .routes.health import bp as health_bp
from .routes.state import bp as state_bp
from .store.base import StateStore
from .store.factory import create_store

logger = logging.getLogger(__name__)

# Older clients still post to the serverless function path.
LEGACY_PREFIX = "/.netlify/functions"


def create_app(
    config: Mapping[str, Any] | None = None,
    store: StateStore | None = None,
    rng: random.Random | None = None,
) -> Flask:
    app = Flask(__name__)
    app.config.from_object(Config)
    if config:
        app.config.update(config)

    if app.config.get("TRUST_PROXY_HEADERS", False):
        app.wsgi_app = ProxyFix(app.wsgi_app, x_for=1, x_proto=1, x_host=1, x_port=1)

    cors_origins = app.config.get("CORS_ORIGINS", "*")
    CORS(
        app,
        resources={
            r"/api/*": {"origins": cors_origins},
            LEGACY_PREFIX + "/*": {"origins": cors_origins},
        },
    )

    if store is None:
        store = create_store(app.config)
    app.extensions["bingodraw"] = RoomService(
        store,
        default_room=app.config.get("DEFAULT_ROOM", "demo"),
        rng=rng,
    )

    app.register_blueprint(health_bp, url_prefix="/api")
    app.register_blueprint(state_bp, url_prefix="/api")
    app.register_blueprint(state_bp, url_prefix=LEGACY_PREFIX, name="legacy_state")

    register_error_handlers(app)

    return app


def register_error_handlers(app: Flask) -> None:
    @app.errorhandler(UnsupportedAction)
    def unsupported_action(exc: UnsupportedAction):
        return jsonify({"ok": False, "error": "unsupported_action", "action": exc.action}), 400

    @app.errorhandler(BackendFailure)
    def backend_failure(exc: BackendFailure):
        logger.error("%s", exc)
        return jsonify({"ok": False, "error": "backend_failure"}), 500

    @app.errorhandler(HTTPException)
    def http_error(exc: HTTPException):
        error = (exc.name or "error").lower().replace(" ", "_")
        return jsonify({"ok": False, "error": error}), exc.code or 500

    @app.errorhandler(Exception)
    def internal_error(exc: Exception):
        logger.exception("Unhandled error")
        return jsonify({"ok": False, "error": "internal_error"}), 500
