from __future__ import annotations

import json
import logging
from typing import Any

import redis

from ..errors import BackendFailure
from .base import StateStore

logger = logging.getLogger(__name__)


def room_state_key(prefix: str, room: str) -> str:
    return f"{prefix}:room:{room}:state"


class RedisStore(StateStore):
    name = "redis"

    def __init__(self, client: redis.Redis, key_prefix: str = "bingo") -> None:
        self.client = client
        self.key_prefix = key_prefix

    @classmethod
    def from_url(cls, url: str, key_prefix: str = "bingo") -> RedisStore:
        return cls(redis.Redis.from_url(url, decode_responses=True), key_prefix=key_prefix)

    def load(self, room: str) -> dict[str, Any] | None:
        key = room_state_key(self.key_prefix, room)
        try:
            raw = self.client.get(key)
        except redis.RedisError as exc:
            logger.exception("Failed to read redis key %s", key)
            raise BackendFailure("read", room, str(exc)) from exc

        if raw is None:
            return None

        try:
            data = json.loads(raw)
        except ValueError as exc:
            raise BackendFailure("read", room, "stored state is not valid JSON") from exc
        if not isinstance(data, dict):
            raise BackendFailure("read", room, "stored state is not a JSON object")
        return data

    def save(self, room: str, state: dict[str, Any]) -> None:
        key = room_state_key(self.key_prefix, room)
        try:
            self.client.set(key, json.dumps(state, ensure_ascii=False))
        except redis.RedisError as exc:
            logger.exception("Failed to write redis key %s", key)
            raise BackendFailure("write", room, str(exc)) from exc
