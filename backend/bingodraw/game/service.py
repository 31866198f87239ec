from __future__ import annotations

import logging
import random
from typing import Any, Mapping

from ..store.base import StateStore
from . import engine
from .models import RoomState, normalize

logger = logging.getLogger(__name__)

DEFAULT_ROOM = "demo"


class RoomService:
    """Loads a room's state, runs one transition on it and stores the result.

    Every call is a full read, compute and write of the room document; nothing
    is written when the transition raises.
    """

    def __init__(
        self,
        store: StateStore,
        default_room: str = DEFAULT_ROOM,
        rng: random.Random | None = None,
    ) -> None:
        self.store = store
        self.default_room = default_room or DEFAULT_ROOM
        self.rng = rng

    def room_key(self, raw: Any) -> str:
        if raw is None:
            return self.default_room
        return str(raw).strip() or self.default_room

    def get_state(self, room: str) -> dict[str, Any] | None:
        data = self.store.load(room)
        if data is None:
            return None
        return normalize(data)

    def load(self, room: str) -> RoomState | None:
        data = self.store.load(room)
        if data is None:
            return None
        return RoomState.from_dict(data)

    def apply_action(self, room: str, action: Any, params: Mapping[str, Any] | None = None) -> dict[str, Any]:
        current = self.load(room)
        new_state = engine.apply(current, action, params, rng=self.rng)

        payload = new_state.to_dict()
        self.store.save(room, payload)

        logger.info("Room %s: %s", room, action)
        previous = len(current.winners) if current is not None and action != "generate" else 0
        for winner in new_state.winners[previous:]:
            logger.info("Room %s: cell %s (%s) won %r", room, winner.number, winner.name, winner.prize)
        return payload
