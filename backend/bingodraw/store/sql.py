from __future__ import annotations

import json
import logging
from typing import Any

from sqlalchemy import JSON, Column, MetaData, Table, Text, create_engine, insert, select, update
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError

from ..errors import BackendFailure
from .base import StateStore

logger = logging.getLogger(__name__)

metadata = MetaData()

states = Table(
    "states",
    metadata,
    Column("room", Text, primary_key=True),
    Column("state", JSON, nullable=False),
)


def _engine_url(url: str) -> str:
    # Hosted Postgres providers hand out the scheme SQLAlchemy dropped.
    if url.startswith("postgres://"):
        return "postgresql://" + url[len("postgres://"):]
    return url


class SqlStore(StateStore):
    name = "sql"

    def __init__(self, engine: Engine) -> None:
        self.engine = engine
        self._table_ready = False

    @classmethod
    def from_url(cls, url: str) -> SqlStore:
        url = _engine_url(url)
        # SQLite connections are shared across Flask worker threads.
        engine = create_engine(
            url,
            connect_args={"check_same_thread": False} if url.startswith("sqlite") else {},
            pool_pre_ping=True,
        )
        return cls(engine)

    def ensure_table(self) -> None:
        if self._table_ready:
            return
        metadata.create_all(self.engine)
        self._table_ready = True

    def load(self, room: str) -> dict[str, Any] | None:
        try:
            self.ensure_table()
            with self.engine.connect() as conn:
                row = conn.execute(select(states.c.state).where(states.c.room == room)).first()
        except SQLAlchemyError as exc:
            logger.exception("Failed to read state for room %s", room)
            raise BackendFailure("read", room, str(exc)) from exc

        if row is None:
            return None

        value = row[0]
        if isinstance(value, str):
            try:
                value = json.loads(value)
            except ValueError as exc:
                raise BackendFailure("read", room, "stored state is not valid JSON") from exc
        if not isinstance(value, dict):
            raise BackendFailure("read", room, "stored state is not a JSON object")
        return value

    def save(self, room: str, state: dict[str, Any]) -> None:
        try:
            self.ensure_table()
            with self.engine.begin() as conn:
                result = conn.execute(update(states).where(states.c.room == room).values(state=state))
                if result.rowcount == 0:
                    conn.execute(insert(states).values(room=room, state=state))
        except SQLAlchemyError as exc:
            logger.exception("Failed to write state for room %s", room)
            raise BackendFailure("write", room, str(exc)) from exc
