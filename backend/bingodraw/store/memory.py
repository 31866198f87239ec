from __future__ import annotations

import copy
from threading import RLock
from typing import Any

from .base import StateStore


class MemoryStore(StateStore):
    """Process-local fallback used when no durable backend is configured."""

    name = "memory"

    def __init__(self) -> None:
        self._lock = RLock()
        self._rooms: dict[str, dict[str, Any]] = {}

    def load(self, room: str) -> dict[str, Any] | None:
        with self._lock:
            state = self._rooms.get(room)
            return copy.deepcopy(state) if state is not None else None

    def save(self, room: str, state: dict[str, Any]) -> None:
        with self._lock:
            self._rooms[room] = copy.deepcopy(state)

    def delete(self, room: str) -> bool:
        with self._lock:
            if room in self._rooms:
                del self._rooms[room]
                return True
            return False
