from __future__ import annotations

from flask import Blueprint, current_app, jsonify, request

from ..game.service import RoomService

bp = Blueprint("state", __name__)


def _service() -> RoomService:
    return current_app.extensions["bingodraw"]


@bp.get("/state")
def get_state():
    service = _service()
    room = service.room_key(request.args.get("room"))
    # Unknown rooms read as null; only actions create them.
    return jsonify({"ok": True, "state": service.get_state(room)})


@bp.post("/state")
def post_state():
    service = _service()
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        data = {}

    room = service.room_key(data.get("room"))
    params = {k: v for k, v in data.items() if k not in ("room", "action")}

    state = service.apply_action(room, data.get("action"), params)
    return jsonify({"ok": True, "state": state})
