from __future__ import annotations

import logging
from typing import Any, Mapping

from .base import StateStore
from .memory import MemoryStore

logger = logging.getLogger(__name__)


def create_store(config: Mapping[str, Any]) -> StateStore:
    """Pick the persistence backend: SQL, then Redis, then in-memory."""
    database_url = config.get("DATABASE_URL", "")
    if database_url:
        from .sql import SqlStore

        logger.info("Using SQL state store")
        return SqlStore.from_url(database_url)

    redis_url = config.get("REDIS_URL", "")
    if redis_url:
        from .redis_store import RedisStore

        logger.info("Using redis state store")
        return RedisStore.from_url(redis_url, key_prefix=config.get("REDIS_KEY_PREFIX", "bingo"))

    logger.info("No durable backend configured, keeping room state in memory")
    return MemoryStore()
