from __future__ import annotations

from flask import Blueprint, current_app, jsonify

bp = Blueprint("health", __name__)


@bp.get("/health")
def health():
    service = current_app.extensions["bingodraw"]
    return jsonify({"status": "ok", "backend": service.store.name})
